from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import clamp_to_year, inclusive_days
from ..core.enums import ActionOutcome, NotificationType, VacationStatus


@dataclass(frozen=True)
class VacationRequest:
    request_id: int
    user_id: int
    start_date: date
    end_date: date
    status: VacationStatus
    requested_at: datetime
    notes: Optional[str] = None
    approved_by: Optional[int] = None
    actioned_at: Optional[datetime] = None

    @property
    def calendar_days(self) -> int:
        return inclusive_days(self.start_date, self.end_date)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def days_in_year(self, year: int) -> int:
        """Calendar days of this request that fall inside ``year``."""
        clamped = clamp_to_year(self.start_date, self.end_date, year)
        if clamped is None:
            return 0
        return inclusive_days(*clamped)

    def intersects_year(self, year: int) -> bool:
        return self.start_date.year <= year <= self.end_date.year

    def overlaps(self, start_date: date, end_date: date) -> bool:
        return self.start_date <= end_date and self.end_date >= start_date

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "user_id": self.user_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "status": self.status.value,
            "notes": self.notes,
            "requested_at": self.requested_at.isoformat() if self.requested_at else None,
            "approved_by": self.approved_by,
            "actioned_at": self.actioned_at.isoformat() if self.actioned_at else None,
            "calendar_days": self.calendar_days,
        }


@dataclass(frozen=True)
class BalanceSummary:
    user_id: int
    year: int
    total_allocated_days: int
    approved_days_taken: int
    pending_days_requested: int

    @property
    def remaining_days(self) -> int:
        return self.total_allocated_days - self.approved_days_taken

    @property
    def available_after_pending(self) -> int:
        return self.remaining_days - self.pending_days_requested

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "year": self.year,
            "total_allocated_days": self.total_allocated_days,
            "approved_days_taken": self.approved_days_taken,
            "pending_days_requested": self.pending_days_requested,
            "remaining_days": self.remaining_days,
            "available_after_pending": self.available_after_pending,
        }


@dataclass(frozen=True)
class LifecycleEvent:
    """What the notification collaborator receives after a state change."""

    request_id: int
    user_id: int
    old_status: Optional[VacationStatus]
    new_status: VacationStatus
    actioned_by: Optional[int]
    occurred_at: datetime
    start_date: date
    end_date: date

    @property
    def kind(self) -> NotificationType:
        return NotificationType.for_status(self.new_status)

    def to_dict(self) -> dict:
        return {
            "type": self.kind.value,
            "request_id": self.request_id,
            "user_id": self.user_id,
            "old_status": self.old_status.value if self.old_status else None,
            "new_status": self.new_status.value,
            "actioned_by": self.actioned_by,
            "occurred_at": self.occurred_at.isoformat(),
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
        }


@dataclass(frozen=True)
class ActionResult:
    outcome: ActionOutcome
    request: VacationRequest
    event: Optional[LifecycleEvent] = None
    days_deducted: int = 0

    @property
    def changed(self) -> bool:
        return self.outcome == ActionOutcome.ACTIONED
