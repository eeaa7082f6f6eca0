from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Protocol

from .model import LifecycleEvent

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    def publish(self, event: LifecycleEvent) -> None:
        raise NotImplementedError


class LoggingNotificationSink:
    """Default sink: records the event in the application log."""

    def __init__(self, logger_name: str = "vacation_system.notifications"):
        self._logger = logging.getLogger(logger_name)

    def publish(self, event: LifecycleEvent) -> None:
        self._logger.info(
            "%s request=%s user=%s %s->%s by=%s",
            event.kind.value,
            event.request_id,
            event.user_id,
            event.old_status.value if event.old_status else "-",
            event.new_status.value,
            event.actioned_by,
        )


class NotificationDispatcher:
    """Fans events out to sinks after the state change has been committed.

    Delivery is fire-and-forget: a failing sink is logged and never reaches the caller.
    """

    def __init__(self, sinks: Optional[Iterable[NotificationSink]] = None):
        self._sinks: List[NotificationSink] = list(sinks) if sinks is not None else [LoggingNotificationSink()]

    def subscribe(self, sink: NotificationSink) -> None:
        self._sinks.append(sink)

    def publish(self, event: LifecycleEvent) -> None:
        for sink in self._sinks:
            try:
                sink.publish(event)
            except Exception:
                logger.exception("Notification sink %r failed for request %s", sink, event.request_id)
