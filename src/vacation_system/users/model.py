from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UserAllowance:
    """Read view onto the externally owned user entity.

    Only the vacation allowance matters here; registration and passwords live elsewhere.
    """

    user_id: int
    username: str
    vacation_days_current_year: int = 0
