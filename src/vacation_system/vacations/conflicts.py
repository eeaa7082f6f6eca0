from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..core.enums import VacationStatus
from ..core.exceptions import SchedulingConflictError
from .model import VacationRequest
from .repository import VacationRepository

ACTIVE_STATUSES = (VacationStatus.PENDING, VacationStatus.APPROVED)


def _blocks(status: VacationStatus) -> bool:
    return status in ACTIVE_STATUSES


def find_conflict(existing: Iterable[VacationRequest], start_date: date, end_date: date) -> Optional[VacationRequest]:
    """First non-rejected request overlapping [start_date, end_date], if any."""
    for req in existing:
        if _blocks(req.status) and req.overlaps(start_date, end_date):
            return req
    return None


def ensure_no_conflict(existing: Iterable[VacationRequest], start_date: date, end_date: date) -> None:
    clash = find_conflict(existing, start_date, end_date)
    if clash is not None:
        raise SchedulingConflictError(
            f"You already have a {clash.status.value.lower()} vacation request "
            f"({clash.start_date.isoformat()} to {clash.end_date.isoformat()}) that overlaps these dates",
            request_id=clash.request_id,
            status=clash.status,
        )


class ConflictDetector:
    """Checks a candidate range against the acting user's own active requests."""

    def __init__(self, requests: VacationRepository):
        self._requests = requests

    def check(self, *, user_id: int, start_date: date, end_date: date) -> None:
        existing = self._requests.list_for_user(int(user_id), statuses=ACTIVE_STATUSES)
        ensure_no_conflict(existing, start_date, end_date)
