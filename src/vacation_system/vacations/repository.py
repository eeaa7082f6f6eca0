from __future__ import annotations

from datetime import date, datetime
from typing import ContextManager, Optional, Protocol, Sequence

from ..core.enums import VacationStatus
from ..users.model import UserAllowance
from .model import VacationRequest


class VacationTransaction(Protocol):
    """One atomic unit of work against the store.

    Reads lock their rows until the transaction ends. ``abort()`` ends it with a
    rollback; leaving the block normally commits; an exception rolls back.
    """

    def get_request_for_update(self, request_id: int) -> Optional[VacationRequest]:
        raise NotImplementedError

    def get_allowance_for_update(self, user_id: int) -> Optional[UserAllowance]:
        raise NotImplementedError

    def deduct_allowance(self, user_id: int, days: int) -> None:
        raise NotImplementedError

    def mark_actioned(
        self,
        *,
        request_id: int,
        status: VacationStatus,
        approved_by: int,
        notes: Optional[str],
        actioned_at: datetime,
    ) -> int:
        """Compare-and-set on ``status = PENDING``. Returns the affected row count."""

        raise NotImplementedError

    def abort(self) -> None:
        raise NotImplementedError


class VacationRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        notes: Optional[str],
        requested_at: datetime,
    ) -> int:
        raise NotImplementedError

    def get(self, request_id: int) -> Optional[VacationRequest]:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, statuses: Optional[Sequence[VacationStatus]] = None) -> Sequence[VacationRequest]:
        """Requests of one user, newest ``start_date`` first."""

        raise NotImplementedError

    def list_pending(self, *, user_ids: Optional[Sequence[int]] = None, limit: int = 500) -> Sequence[VacationRequest]:
        """Oldest pending requests first, optionally restricted to ``user_ids``."""

        raise NotImplementedError

    def transaction(self) -> ContextManager[VacationTransaction]:
        raise NotImplementedError
