from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

import mysql.connector

from ..core.constants import ER_LOCK_DEADLOCK, ER_LOCK_WAIT_TIMEOUT
from ..core.exceptions import TransientError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

TRANSIENT_ERRNOS = frozenset({ER_LOCK_WAIT_TIMEOUT, ER_LOCK_DEADLOCK})


def is_transient(exc: BaseException) -> bool:
    return isinstance(exc, mysql.connector.Error) and getattr(exc, "errno", None) in TRANSIENT_ERRNOS


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception as exc:
        conn.rollback()
        if is_transient(exc):
            logger.warning("Transient database error: %s", exc)
            raise TransientError("The database is busy, please retry") from exc
        raise
    finally:
        conn.close()


class TransactionScope:
    """Handle given to the body of a ``db_transaction`` block.

    Calling ``abort()`` makes the block end with a rollback instead of a commit.
    """

    def __init__(self, conn, cur):
        self.conn = conn
        self.cur = cur
        self.aborted = False

    def abort(self) -> None:
        self.aborted = True


@contextmanager
def db_transaction(conn_factory: DatabaseConnection) -> Iterator[TransactionScope]:
    conn = conn_factory.connect()
    try:
        conn.start_transaction()
        cur = conn.cursor(dictionary=True)
        scope = TransactionScope(conn, cur)
        try:
            yield scope
            if scope.aborted:
                conn.rollback()
            else:
                conn.commit()
        finally:
            cur.close()
    except Exception as exc:
        conn.rollback()
        if is_transient(exc):
            logger.warning("Transaction rolled back on transient error: %s", exc)
            raise TransientError("The database is busy, please retry") from exc
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def in_clause(values) -> Tuple[str, tuple]:
    """Placeholders and params for a parameterised ``IN (...)`` list."""
    params = tuple(int(v) for v in values)
    return ",".join(["%s"] * len(params)), params
