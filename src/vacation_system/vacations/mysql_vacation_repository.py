from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime
from typing import Iterator, Optional, Sequence

from ..core.enums import VacationStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import TransactionScope, db_cursor, db_transaction, fetchall, fetchone, in_clause
from ..users.model import UserAllowance
from ..users.mysql_user_repository import row_to_allowance
from .model import VacationRequest
from .repository import VacationRepository, VacationTransaction

SELECT_COLUMNS = """
    SELECT id, user_id, start_date, end_date, status, notes,
           requested_at, approved_by, actioned_at
    FROM vacation_requests
"""


def row_to_request(r: dict) -> VacationRequest:
    return VacationRequest(
        request_id=int(r["id"]),
        user_id=int(r["user_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        status=VacationStatus.parse(r["status"]),
        requested_at=r["requested_at"],
        notes=r.get("notes"),
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        actioned_at=r.get("actioned_at"),
    )


class MySQLVacationTransaction(VacationTransaction):
    def __init__(self, scope: TransactionScope):
        self._scope = scope

    def get_request_for_update(self, request_id: int) -> Optional[VacationRequest]:
        cur = self._scope.cur
        cur.execute(SELECT_COLUMNS + " WHERE id=%s FOR UPDATE", (int(request_id),))
        r = fetchone(cur)
        return row_to_request(r) if r else None

    def get_allowance_for_update(self, user_id: int) -> Optional[UserAllowance]:
        cur = self._scope.cur
        cur.execute(
            """
            SELECT id, username, vacation_days_current_year
            FROM users
            WHERE id=%s
            FOR UPDATE
            """,
            (int(user_id),),
        )
        r = fetchone(cur)
        return row_to_allowance(r) if r else None

    def deduct_allowance(self, user_id: int, days: int) -> None:
        self._scope.cur.execute(
            """
            UPDATE users
            SET vacation_days_current_year = vacation_days_current_year - %s
            WHERE id=%s
            """,
            (int(days), int(user_id)),
        )

    def mark_actioned(
        self,
        *,
        request_id: int,
        status: VacationStatus,
        approved_by: int,
        notes: Optional[str],
        actioned_at: datetime,
    ) -> int:
        cur = self._scope.cur
        cur.execute(
            """
            UPDATE vacation_requests
            SET status=%s, approved_by=%s, actioned_at=%s, notes=%s
            WHERE id=%s AND status=%s
            """,
            (
                status.value,
                int(approved_by),
                actioned_at,
                notes,
                int(request_id),
                VacationStatus.PENDING.value,
            ),
        )
        return int(cur.rowcount)

    def abort(self) -> None:
        self._scope.abort()


class MySQLVacationRepository(VacationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        notes: Optional[str],
        requested_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO vacation_requests(user_id, start_date, end_date, status, notes, requested_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), start_date, end_date, VacationStatus.PENDING.value, notes, requested_at),
            )
            return int(cur.lastrowid)

    def get(self, request_id: int) -> Optional[VacationRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(SELECT_COLUMNS + " WHERE id=%s", (int(request_id),))
            r = fetchone(cur)
            return row_to_request(r) if r else None

    def list_for_user(self, user_id: int, *, statuses: Optional[Sequence[VacationStatus]] = None) -> Sequence[VacationRequest]:
        clauses = ["user_id=%s"]
        params: list[object] = [int(user_id)]

        if statuses:
            clauses.append("status IN (" + ",".join(["%s"] * len(statuses)) + ")")
            params.extend(s.value for s in statuses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                SELECT_COLUMNS + f" WHERE {' AND '.join(clauses)} ORDER BY start_date DESC, id DESC",
                tuple(params),
            )
            return [row_to_request(r) for r in fetchall(cur)]

    def list_pending(self, *, user_ids: Optional[Sequence[int]] = None, limit: int = 500) -> Sequence[VacationRequest]:
        clauses = ["status=%s"]
        params: list[object] = [VacationStatus.PENDING.value]

        if user_ids is not None:
            if not user_ids:
                return []
            placeholders, ids = in_clause(user_ids)
            clauses.append(f"user_id IN ({placeholders})")
            params.extend(ids)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                SELECT_COLUMNS + f" WHERE {' AND '.join(clauses)} ORDER BY requested_at ASC, id ASC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [row_to_request(r) for r in fetchall(cur)]

    @contextmanager
    def transaction(self) -> Iterator[VacationTransaction]:
        with db_transaction(self._conn_factory) as scope:
            yield MySQLVacationTransaction(scope)
