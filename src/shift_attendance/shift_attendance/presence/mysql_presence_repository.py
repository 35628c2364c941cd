from __future__ import annotations

from datetime import date, datetime
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .repository import PresenceRepository


class MySQLPresenceRepository(PresenceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, *, employee_id: int, detection_time: datetime, detection_date: date) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO presence_detections(employee_id, detection_time, date) VALUES(%s,%s,%s)",
                (int(employee_id), detection_time, detection_date),
            )

    def list_detection_times(self, *, employee_id: int, detection_date: date, since: datetime) -> Sequence[datetime]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT detection_time
                FROM presence_detections
                WHERE employee_id=%s AND date=%s AND detection_time >= %s
                ORDER BY detection_time DESC
                """,
                (int(employee_id), detection_date, since),
            )
            return [r["detection_time"] for r in fetchall(cur)]

    def delete_before(self, cutoff: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM presence_detections WHERE date < %s", (cutoff,))
            return int(cur.rowcount or 0)
