from __future__ import annotations

import logging
from datetime import date

from ..common.datetime_utils import inclusive_days
from ..core.enums import VacationStatus
from ..core.exceptions import InsufficientBalanceError, NotFoundError
from ..users.model import UserAllowance
from ..users.repository import AllowanceRepository
from .model import BalanceSummary
from .repository import VacationRepository

logger = logging.getLogger(__name__)


class BalanceTracker:
    """Consumed/remaining allowance of a user for one calendar year.

    Day counts are plain inclusive calendar days. A request spanning New Year
    only contributes the days that fall inside the year being asked about.

    The stored allowance is already net of approvals (approval deducts from it),
    so a year's total allocation is ``allowance + approved days of that year``.
    """

    def __init__(self, requests: VacationRepository, users: AllowanceRepository):
        self._requests = requests
        self._users = users

    def _allowance(self, user_id: int) -> UserAllowance:
        allowance = self._users.get_allowance(int(user_id))
        if allowance is None:
            raise NotFoundError(f"User {user_id} not found")
        return allowance

    def _days_for_year(self, user_id: int, year: int, status: VacationStatus) -> int:
        requests = self._requests.list_for_user(int(user_id), statuses=(status,))
        return sum(r.days_in_year(year) for r in requests if r.status == status)

    def approved_days_for_year(self, user_id: int, year: int) -> int:
        return self._days_for_year(user_id, year, VacationStatus.APPROVED)

    def pending_days_for_year(self, user_id: int, year: int) -> int:
        return self._days_for_year(user_id, year, VacationStatus.PENDING)

    def total_allocated_days(self, user_id: int, year: int) -> int:
        return self._allowance(user_id).vacation_days_current_year + self.approved_days_for_year(user_id, year)

    def summary(self, user_id: int, year: int) -> BalanceSummary:
        allowance = self._allowance(user_id)
        approved = self.approved_days_for_year(user_id, year)
        return BalanceSummary(
            user_id=int(user_id),
            year=int(year),
            total_allocated_days=allowance.vacation_days_current_year + approved,
            approved_days_taken=approved,
            pending_days_requested=self.pending_days_for_year(user_id, year),
        )

    def ensure_can_request(self, *, user_id: int, start_date: date, end_date: date) -> None:
        year = start_date.year
        allowance = self._allowance(user_id)
        approved = self.approved_days_for_year(user_id, year)
        remaining = allowance.vacation_days_current_year
        total = remaining + approved
        requested = inclusive_days(start_date, end_date)

        if approved + requested > total:
            logger.info(
                "User %s lacks balance: remaining=%s requested=%s approved=%s", user_id, remaining, requested, approved
            )
            raise InsufficientBalanceError(
                f"Not enough vacation days. Available: {remaining}, requested: {requested}, already approved: {approved}.",
                available=remaining,
                requested=requested,
                already_approved=approved,
            )
