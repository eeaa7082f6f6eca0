from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import UserAllowance
from .repository import AllowanceRepository


def row_to_allowance(row: dict) -> UserAllowance:
    return UserAllowance(
        user_id=int(row["id"]),
        username=row.get("username") or "",
        vacation_days_current_year=int(row.get("vacation_days_current_year") or 0),
    )


class MySQLUserRepository(AllowanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_allowance(self, user_id: int) -> Optional[UserAllowance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, username, vacation_days_current_year
                FROM users
                WHERE id=%s
                """,
                (int(user_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return row_to_allowance(row)
