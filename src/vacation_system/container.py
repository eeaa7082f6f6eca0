from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .database.connection import DBConfig, DatabaseConnection
from .users.mysql_user_repository import MySQLUserRepository
from .vacations.events import NotificationDispatcher, NotificationSink
from .vacations.mysql_vacation_repository import MySQLVacationRepository
from .vacations.service import VacationService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: MySQLUserRepository
    vacations_repo: MySQLVacationRepository

    notifier: NotificationDispatcher
    vacation_service: VacationService


def build_container(
    *,
    db_config: dict,
    lock_wait_timeout: int = 10,
    sinks: Optional[Iterable[NotificationSink]] = None,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        lock_wait_timeout=int(lock_wait_timeout),
    )
    conn = DatabaseConnection.get_instance(config)

    users_repo = MySQLUserRepository(conn)
    vacations_repo = MySQLVacationRepository(conn)

    notifier = NotificationDispatcher(sinks)
    vacation_service = VacationService(vacations_repo, users_repo, notifier=notifier)

    return Container(
        conn=conn,
        users_repo=users_repo,
        vacations_repo=vacations_repo,
        notifier=notifier,
        vacation_service=vacation_service,
    )
