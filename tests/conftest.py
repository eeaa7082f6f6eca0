from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Callable, Dict, List, Optional

import pytest

from vacation_system.core.enums import VacationStatus
from vacation_system.users.model import UserAllowance
from vacation_system.vacations.events import NotificationDispatcher
from vacation_system.vacations.model import LifecycleEvent, VacationRequest
from vacation_system.vacations.service import VacationService

FIXED_NOW = datetime(2024, 6, 1, 9, 0, 0, tzinfo=timezone.utc)


class InMemoryTransaction:
    def __init__(self, store: "InMemoryVacationStore"):
        self._store = store
        self._requests: Dict[int, VacationRequest] = {}
        self._allowances: Dict[int, UserAllowance] = {}
        self.aborted = False

    def _request(self, request_id: int) -> Optional[VacationRequest]:
        return self._requests.get(request_id) or self._store.requests.get(request_id)

    def get_request_for_update(self, request_id: int) -> Optional[VacationRequest]:
        req = self._request(int(request_id))
        if self._store.after_read is not None:
            self._store.after_read(int(request_id))
        return req

    def get_allowance_for_update(self, user_id: int) -> Optional[UserAllowance]:
        return self._allowances.get(user_id) or self._store.allowances.get(int(user_id))

    def deduct_allowance(self, user_id: int, days: int) -> None:
        current = self.get_allowance_for_update(user_id)
        self._allowances[user_id] = replace(
            current, vacation_days_current_year=current.vacation_days_current_year - int(days)
        )

    def mark_actioned(self, *, request_id, status, approved_by, notes, actioned_at) -> int:
        # Checks the committed row, like the SQL WHERE clause would.
        committed = self._store.requests.get(int(request_id))
        if committed is None or committed.status != VacationStatus.PENDING:
            return 0
        self._requests[int(request_id)] = replace(
            committed, status=status, approved_by=approved_by, notes=notes, actioned_at=actioned_at
        )
        return 1

    def abort(self) -> None:
        self.aborted = True

    def apply(self) -> None:
        self._store.requests.update(self._requests)
        self._store.allowances.update(self._allowances)


class InMemoryVacationStore:
    """Fake for both the vacation repository and the allowance lookup port."""

    def __init__(self):
        self._lock = threading.RLock()
        self._next_id = 1
        self.requests: Dict[int, VacationRequest] = {}
        self.allowances: Dict[int, UserAllowance] = {}
        self.after_read: Optional[Callable[[int], None]] = None
        self.commits = 0
        self.rollbacks = 0

    def add_user(self, user_id: int, days: int, username: str = "") -> None:
        self.allowances[user_id] = UserAllowance(
            user_id=user_id, username=username or f"user{user_id}", vacation_days_current_year=days
        )

    def add_request(self, *, user_id: int, start_date: date, end_date: date, status=VacationStatus.PENDING) -> int:
        rid = self.create(user_id=user_id, start_date=start_date, end_date=end_date, notes=None, requested_at=FIXED_NOW)
        self.requests[rid] = replace(self.requests[rid], status=status)
        return rid

    def days_left(self, user_id: int) -> int:
        return self.allowances[user_id].vacation_days_current_year

    # AllowanceRepository
    def get_allowance(self, user_id: int) -> Optional[UserAllowance]:
        return self.allowances.get(int(user_id))

    # VacationRepository
    def create(self, *, user_id, start_date, end_date, notes, requested_at) -> int:
        with self._lock:
            rid = self._next_id
            self._next_id += 1
            self.requests[rid] = VacationRequest(
                request_id=rid,
                user_id=int(user_id),
                start_date=start_date,
                end_date=end_date,
                status=VacationStatus.PENDING,
                requested_at=requested_at,
                notes=notes,
            )
            return rid

    def get(self, request_id: int) -> Optional[VacationRequest]:
        return self.requests.get(int(request_id))

    def list_for_user(self, user_id: int, *, statuses=None) -> List[VacationRequest]:
        items = [
            r
            for r in self.requests.values()
            if r.user_id == int(user_id) and (not statuses or r.status in statuses)
        ]
        items.sort(key=lambda r: (r.start_date, r.request_id), reverse=True)
        return items

    def list_pending(self, *, user_ids=None, limit: int = 500) -> List[VacationRequest]:
        items = [
            r
            for r in self.requests.values()
            if r.status == VacationStatus.PENDING and (user_ids is None or r.user_id in user_ids)
        ]
        items.sort(key=lambda r: (r.requested_at, r.request_id))
        return items[:limit]

    @contextmanager
    def transaction(self):
        with self._lock:
            tx = InMemoryTransaction(self)
            try:
                yield tx
            except Exception:
                self.rollbacks += 1
                raise
            if tx.aborted:
                self.rollbacks += 1
            else:
                tx.apply()
                self.commits += 1


class RecordingSink:
    def __init__(self):
        self.events: List[LifecycleEvent] = []

    def publish(self, event: LifecycleEvent) -> None:
        self.events.append(event)


@pytest.fixture
def store() -> InMemoryVacationStore:
    return InMemoryVacationStore()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def service(store, sink) -> VacationService:
    return VacationService(store, store, notifier=NotificationDispatcher([sink]), clock=lambda: FIXED_NOW)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW
