from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, List, Optional, Sequence, Union

from ..calendars.working_days import count_working_days
from ..common.datetime_utils import utc_now, year_bounds
from ..common.validators import normalize_notes, require_date_range
from ..core.constants import DEFAULT_ADMIN_LIST_LIMIT
from ..core.enums import ActionOutcome, VacationStatus
from ..core.exceptions import (
    AuthorizationError,
    DataIntegrityError,
    InsufficientBalanceError,
    InvalidRangeError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from ..users.repository import AllowanceRepository
from .balance import BalanceTracker
from .conflicts import ConflictDetector
from .events import NotificationDispatcher
from .model import ActionResult, BalanceSummary, LifecycleEvent, VacationRequest
from .repository import VacationRepository

logger = logging.getLogger(__name__)


def _parse_target(value: Union[VacationStatus, str]) -> VacationStatus:
    try:
        return VacationStatus.parse(value)
    except DataIntegrityError:
        raise ValidationError(f"Unknown target status {value!r}") from None


class VacationService:
    """Request lifecycle: creation by employees, approval/rejection by admins.

    Holds no request state between calls. Every admin action re-reads the row
    inside its own store transaction and flips it with a compare-and-set
    update, so two admins racing on one request cannot both deduct days.
    """

    def __init__(
        self,
        requests: VacationRepository,
        users: AllowanceRepository,
        *,
        notifier: Optional[NotificationDispatcher] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._requests = requests
        self._balance = BalanceTracker(requests, users)
        self._conflicts = ConflictDetector(requests)
        self._notifier = notifier or NotificationDispatcher()
        self._clock = clock

    @property
    def balance(self) -> BalanceTracker:
        return self._balance

    def create_request(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        notes: Optional[str] = None,
    ) -> int:
        require_date_range(start_date, end_date)
        notes = normalize_notes(notes)

        # The balance check bounds the span walked by count_working_days.
        self._balance.ensure_can_request(user_id=int(user_id), start_date=start_date, end_date=end_date)
        if count_working_days(start_date, end_date) <= 0:
            raise InvalidRangeError("The requested period contains no working days")
        self._conflicts.check(user_id=int(user_id), start_date=start_date, end_date=end_date)

        now = self._clock()
        request_id = self._requests.create(
            user_id=int(user_id),
            start_date=start_date,
            end_date=end_date,
            notes=notes,
            requested_at=now,
        )
        logger.info("Vacation request %s created for user %s (%s to %s)", request_id, user_id, start_date, end_date)

        self._notifier.publish(
            LifecycleEvent(
                request_id=request_id,
                user_id=int(user_id),
                old_status=None,
                new_status=VacationStatus.PENDING,
                actioned_by=None,
                occurred_at=now,
                start_date=start_date,
                end_date=end_date,
            )
        )
        return request_id

    def action_request(
        self,
        *,
        request_id: int,
        admin_id: int,
        target_status: Union[VacationStatus, str],
        admin_notes: Optional[str] = None,
        is_admin: bool,
    ) -> ActionResult:
        if not is_admin:
            raise AuthorizationError("Only administrators can action vacation requests")

        target = _parse_target(target_status)
        if target == VacationStatus.PENDING:
            raise InvalidTransitionError("Admin action cannot set status to PENDING; approve or reject instead")
        admin_notes = normalize_notes(admin_notes, "Admin notes")

        now = self._clock()
        days_deducted = 0
        current: Optional[VacationRequest] = None
        actioned: Optional[VacationRequest] = None

        with self._requests.transaction() as tx:
            current = tx.get_request_for_update(int(request_id))
            if current is None:
                raise NotFoundError(f"Vacation request {request_id} not found")

            if current.status != VacationStatus.PENDING:
                tx.abort()
            else:
                if target == VacationStatus.APPROVED:
                    days_deducted = self._deduct(tx, current)

                notes = admin_notes if admin_notes is not None else current.notes
                affected = tx.mark_actioned(
                    request_id=current.request_id,
                    status=target,
                    approved_by=int(admin_id),
                    notes=notes,
                    actioned_at=now,
                )
                if affected == 1:
                    actioned = replace(current, status=target, approved_by=int(admin_id), actioned_at=now, notes=notes)
                else:
                    tx.abort()

        if actioned is None:
            logger.info("Vacation request %s already actioned; admin %s made no changes", request_id, admin_id)
            latest = self._requests.get(int(request_id)) or current
            return ActionResult(outcome=ActionOutcome.ALREADY_ACTIONED, request=latest)

        logger.info(
            "Vacation request %s %s by admin %s (%s days deducted)",
            request_id,
            target.value.lower(),
            admin_id,
            days_deducted,
        )
        event = LifecycleEvent(
            request_id=actioned.request_id,
            user_id=actioned.user_id,
            old_status=VacationStatus.PENDING,
            new_status=target,
            actioned_by=int(admin_id),
            occurred_at=now,
            start_date=actioned.start_date,
            end_date=actioned.end_date,
        )
        self._notifier.publish(event)
        return ActionResult(outcome=ActionOutcome.ACTIONED, request=actioned, event=event, days_deducted=days_deducted)

    @staticmethod
    def _deduct(tx, request: VacationRequest) -> int:
        days = request.calendar_days
        allowance = tx.get_allowance_for_update(request.user_id)
        if allowance is None:
            raise NotFoundError(f"User {request.user_id} not found")

        remaining = allowance.vacation_days_current_year
        if days > remaining:
            raise InsufficientBalanceError(
                f"Not enough vacation days to approve. Available: {remaining}, requested: {days}.",
                available=remaining,
                requested=days,
            )
        tx.deduct_allowance(request.user_id, days)
        return days

    def approve_request(self, *, request_id: int, admin_id: int, admin_notes: Optional[str] = None, is_admin: bool) -> ActionResult:
        return self.action_request(
            request_id=request_id,
            admin_id=admin_id,
            target_status=VacationStatus.APPROVED,
            admin_notes=admin_notes,
            is_admin=is_admin,
        )

    def reject_request(self, *, request_id: int, admin_id: int, admin_notes: Optional[str] = None, is_admin: bool) -> ActionResult:
        return self.action_request(
            request_id=request_id,
            admin_id=admin_id,
            target_status=VacationStatus.REJECTED,
            admin_notes=admin_notes,
            is_admin=is_admin,
        )

    def get_requests_for_user(self, *, user_id: int, year: Optional[int] = None) -> List[VacationRequest]:
        requests = list(self._requests.list_for_user(int(user_id)))
        if year is None:
            return requests
        year_bounds(year)
        return [r for r in requests if r.intersects_year(int(year))]

    def get_remaining_balance(self, *, user_id: int, year: Optional[int] = None) -> BalanceSummary:
        if year is None:
            year = self._clock().year
        year_bounds(year)
        return self._balance.summary(int(user_id), int(year))

    def get_request(self, *, request_id: int, user_id: int, is_admin: bool) -> VacationRequest:
        req = self._requests.get(int(request_id))
        if req is None:
            raise NotFoundError(f"Vacation request {request_id} not found")
        if not is_admin and req.user_id != int(user_id):
            raise AuthorizationError("You cannot view this vacation request")
        return req

    def list_pending_requests(
        self,
        *,
        is_admin: bool,
        user_ids: Optional[Sequence[int]] = None,
        limit: int = DEFAULT_ADMIN_LIST_LIMIT,
    ) -> List[VacationRequest]:
        if not is_admin:
            raise AuthorizationError("Only administrators can list pending requests")
        ids = None if user_ids is None else [int(u) for u in user_ids]
        return list(self._requests.list_pending(user_ids=ids, limit=int(limit)))
