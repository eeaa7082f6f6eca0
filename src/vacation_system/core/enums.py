from __future__ import annotations

from enum import Enum

from .exceptions import DataIntegrityError


class VacationStatus(str, Enum):
    """Approval flow state of a vacation request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

    @classmethod
    def parse(cls, raw: object) -> "VacationStatus":
        """Map a persisted token to a status.

        Unknown tokens are corrupt data and raise instead of falling back to PENDING.
        """

        if isinstance(raw, cls):
            return raw
        token = str(raw or "").strip().upper()
        try:
            return cls(token)
        except ValueError:
            raise DataIntegrityError(f"Unknown vacation status {raw!r}") from None

    @property
    def is_terminal(self) -> bool:
        return self in (VacationStatus.APPROVED, VacationStatus.REJECTED)


class ActionOutcome(str, Enum):
    ACTIONED = "ACTIONED"
    ALREADY_ACTIONED = "ALREADY_ACTIONED"


class NotificationType(str, Enum):
    VACATION_REQUESTED = "VACATION_REQUESTED"
    VACATION_APPROVED = "VACATION_APPROVED"
    VACATION_REJECTED = "VACATION_REJECTED"

    @classmethod
    def for_status(cls, status: VacationStatus) -> "NotificationType":
        if status == VacationStatus.PENDING:
            return cls.VACATION_REQUESTED
        if status == VacationStatus.APPROVED:
            return cls.VACATION_APPROVED
        if status == VacationStatus.REJECTED:
            return cls.VACATION_REJECTED
        raise DataIntegrityError(f"No notification type for {status!r}")
