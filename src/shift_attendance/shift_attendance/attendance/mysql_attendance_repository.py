from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, as_optional_float, db_cursor, fetchall, fetchone
from .metrics import AttendanceMetrics
from .model import AttendanceRecord, AttendanceReportRow, OpenAttendanceRow
from .repository import AttendanceRepository

_RECORD_COLUMNS = """
    ar.attendance_id, ar.employee_id, ar.attendance_date, ar.in_time, ar.out_time,
    ar.delay_by_minutes, ar.extra_time_minutes, ar.total_working_hours_decimal,
    ar.ot_hours_decimal, ar.location_in, ar.location_out,
    ar.is_edited, ar.edit_remark, ar.edited_at
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        attendance_date=r["attendance_date"],
        in_time=r.get("in_time"),
        out_time=r.get("out_time"),
        delay_by_minutes=int(r.get("delay_by_minutes") or 0),
        extra_time_minutes=int(r.get("extra_time_minutes") or 0),
        total_working_hours_decimal=as_float(r.get("total_working_hours_decimal")),
        ot_hours_decimal=as_optional_float(r.get("ot_hours_decimal")),
        location_in=r.get("location_in"),
        location_out=r.get("location_out"),
        is_edited=bool(r.get("is_edited")),
        edit_remark=r.get("edit_remark"),
        edited_at=r.get("edited_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records ar WHERE ar.attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def find_open_record(self, employee_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records ar
                WHERE ar.employee_id=%s AND ar.attendance_date=%s
                  AND ar.in_time IS NOT NULL AND ar.out_time IS NULL
                ORDER BY ar.in_time DESC
                LIMIT 1
                """,
                (int(employee_id), attendance_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def count_completed(self, employee_id: int, attendance_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS completed
                FROM attendance_records
                WHERE employee_id=%s AND attendance_date=%s AND out_time IS NOT NULL
                """,
                (int(employee_id), attendance_date),
            )
            r = fetchone(cur)
            return int(r["completed"]) if r else 0

    def list_for_employee_and_date(self, employee_id: int, attendance_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records ar
                WHERE ar.employee_id=%s AND ar.attendance_date=%s
                ORDER BY ar.attendance_id ASC
                """,
                (int(employee_id), attendance_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def insert_check_in(
        self,
        *,
        employee_id: int,
        attendance_date: date,
        in_time: datetime,
        location_in: Optional[str],
        delay_by_minutes: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(employee_id, attendance_date, in_time, location_in, delay_by_minutes)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(employee_id), attendance_date, in_time, location_in, int(delay_by_minutes)),
            )
            return int(cur.lastrowid)

    def close_if_open(
        self,
        *,
        attendance_id: int,
        out_time: datetime,
        location_out: Optional[str],
        metrics: AttendanceMetrics,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET out_time=%s, location_out=%s, delay_by_minutes=%s,
                    extra_time_minutes=%s, total_working_hours_decimal=%s
                WHERE attendance_id=%s AND out_time IS NULL
                """,
                (
                    out_time,
                    location_out,
                    metrics.delay_by_minutes,
                    metrics.extra_time_minutes,
                    metrics.total_working_hours_decimal,
                    int(attendance_id),
                ),
            )
            return cur.rowcount > 0

    def admin_update_record(
        self,
        *,
        attendance_id: int,
        in_time: Optional[datetime],
        out_time: Optional[datetime],
        delay_by_minutes: int,
        extra_time_minutes: int,
        total_working_hours_decimal: float,
        ot_hours_decimal: Optional[float],
        edit_remark: Optional[str],
        edited_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET in_time=%s, out_time=%s, delay_by_minutes=%s, extra_time_minutes=%s,
                    total_working_hours_decimal=%s, ot_hours_decimal=%s,
                    is_edited=1, edit_remark=%s, edited_at=%s
                WHERE attendance_id=%s
                """,
                (
                    in_time,
                    out_time,
                    int(delay_by_minutes),
                    int(extra_time_minutes),
                    total_working_hours_decimal,
                    ot_hours_decimal,
                    edit_remark,
                    edited_at,
                    int(attendance_id),
                ),
            )
            return cur.rowcount > 0

    def insert_absence_marker(self, *, employee_id: int, attendance_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(employee_id, attendance_date, in_time, out_time)
                VALUES(%s,%s,NULL,NULL)
                """,
                (int(employee_id), attendance_date),
            )
            return int(cur.lastrowid)

    def list_open_records(self) -> Sequence[OpenAttendanceRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT ar.attendance_id, ar.employee_id, ar.attendance_date, ar.in_time, ar.ot_hours_decimal,
                       d.employee_name, d.employee_type
                FROM attendance_records ar
                JOIN employee_details d ON d.employee_id = ar.employee_id
                WHERE ar.out_time IS NULL AND ar.in_time IS NOT NULL
                ORDER BY ar.in_time ASC
                """
            )
            return [
                OpenAttendanceRow(
                    attendance_id=int(r["attendance_id"]),
                    employee_id=int(r["employee_id"]),
                    employee_name=r["employee_name"],
                    employee_type=r["employee_type"],
                    attendance_date=r["attendance_date"],
                    in_time=r["in_time"],
                    ot_hours_decimal=as_optional_float(r.get("ot_hours_decimal")),
                )
                for r in fetchall(cur)
            ]

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_type: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["ar.attendance_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if employee_type:
            clauses.append("d.employee_type=%s")
            params.append(employee_type)
        if search:
            clauses.append("(d.employee_name LIKE %s OR d.employee_code LIKE %s)")
            params.extend([f"%{search}%", f"%{search}%"])

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS},
                       d.employee_name, d.employee_type, d.employee_code, d.organization_name
                FROM attendance_records ar
                JOIN employee_details d ON d.employee_id = ar.employee_id
                WHERE {where}
                ORDER BY ar.attendance_date DESC, d.employee_name ASC, ar.in_time ASC
                """,
                tuple(params),
            )
            return [
                AttendanceReportRow(
                    record=_to_record(r),
                    employee_name=r["employee_name"],
                    employee_type=r["employee_type"],
                    employee_code=r.get("employee_code"),
                    organization_name=r.get("organization_name"),
                )
                for r in fetchall(cur)
            ]
