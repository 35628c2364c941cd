from __future__ import annotations

from datetime import time
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import parse_time_of_day
from ..core.constants import (
    DEFAULT_PRESENCE_COUNT,
    DEFAULT_PRESENCE_TIME_SECONDS,
    DEFAULT_PRESENCE_WINDOW_SECONDS,
)
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Shift
from .repository import ShiftRepository

_COLUMNS = """
    id, name, employee_type, start_time, end_time, grace_before, grace_after,
    presence_time, presence_count, presence_window
"""


def _to_shift(r: Dict[str, Any]) -> Shift:
    # Zero/NULL presence thresholds fall back to the defaults.
    return Shift(
        shift_id=int(r["id"]),
        shift_name=r["name"],
        employee_type=r["employee_type"],
        start_time=parse_time_of_day(r["start_time"]),
        end_time=parse_time_of_day(r["end_time"]),
        grace_before_minutes=int(r.get("grace_before") or 0),
        grace_after_minutes=int(r.get("grace_after") or 0),
        presence_time_seconds=int(r.get("presence_time") or DEFAULT_PRESENCE_TIME_SECONDS),
        presence_count=int(r.get("presence_count") or DEFAULT_PRESENCE_COUNT),
        presence_window_seconds=int(r.get("presence_window") or DEFAULT_PRESENCE_WINDOW_SECONDS),
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_employee_type(self, employee_type: str) -> Sequence[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM shift_settings
                WHERE employee_type=%s
                ORDER BY start_time ASC, id ASC
                """,
                (employee_type,),
            )
            return [_to_shift(r) for r in fetchall(cur)]

    def list_employee_types(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT DISTINCT employee_type FROM shift_settings ORDER BY employee_type")
            return [r["employee_type"] for r in fetchall(cur)]

    def list_all(self) -> Sequence[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM shift_settings ORDER BY created_at DESC, id DESC")
            return [_to_shift(r) for r in fetchall(cur)]

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM shift_settings WHERE id=%s", (int(shift_id),))
            r = fetchone(cur)
            return _to_shift(r) if r else None

    def create(
        self,
        *,
        shift_name: str,
        employee_type: str,
        start_time: time,
        end_time: time,
        grace_before_minutes: int,
        grace_after_minutes: int,
        presence_time_seconds: int,
        presence_count: int,
        presence_window_seconds: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO shift_settings(
                    name, employee_type, start_time, end_time, grace_before, grace_after,
                    presence_time, presence_count, presence_window
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    shift_name,
                    employee_type,
                    start_time,
                    end_time,
                    grace_before_minutes,
                    grace_after_minutes,
                    presence_time_seconds,
                    presence_count,
                    presence_window_seconds,
                ),
            )
            return int(cur.lastrowid)

    def update(self, shift: Shift) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE shift_settings
                SET name=%s, employee_type=%s, start_time=%s, end_time=%s,
                    grace_before=%s, grace_after=%s,
                    presence_time=%s, presence_count=%s, presence_window=%s
                WHERE id=%s
                """,
                (
                    shift.shift_name,
                    shift.employee_type,
                    shift.start_time,
                    shift.end_time,
                    shift.grace_before_minutes,
                    shift.grace_after_minutes,
                    shift.presence_time_seconds,
                    shift.presence_count,
                    shift.presence_window_seconds,
                    int(shift.shift_id),
                ),
            )
            # MySQL reports 0 affected rows when nothing changed, so check existence separately.
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM shift_settings WHERE id=%s", (int(shift.shift_id),))
            return fetchone(cur) is not None

    def delete(self, shift_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM shift_settings WHERE id=%s", (int(shift_id),))
            return cur.rowcount > 0
