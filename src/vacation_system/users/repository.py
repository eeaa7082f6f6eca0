from __future__ import annotations

from typing import Optional, Protocol

from .model import UserAllowance


class AllowanceRepository(Protocol):
    """Lookup port for user allowances.

    Services depend on this interface, so tests can pass an in-memory fake.
    """

    def get_allowance(self, user_id: int) -> Optional[UserAllowance]:
        raise NotImplementedError
