from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Optional, Protocol, Sequence

from .model import AttendanceRecord, AttendanceReportRow, OpenAttendanceRow

if TYPE_CHECKING:
    from .metrics import AttendanceMetrics


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_open_record(self, employee_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        """Latest record of the day with a check-in but no check-out."""

        raise NotImplementedError

    def count_completed(self, employee_id: int, attendance_date: date) -> int:
        raise NotImplementedError

    def list_for_employee_and_date(self, employee_id: int, attendance_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def insert_check_in(
        self,
        *,
        employee_id: int,
        attendance_date: date,
        in_time: datetime,
        location_in: Optional[str],
        delay_by_minutes: int,
    ) -> int:
        raise NotImplementedError

    def close_if_open(
        self,
        *,
        attendance_id: int,
        out_time: datetime,
        location_out: Optional[str],
        metrics: "AttendanceMetrics",
    ) -> bool:
        """Set check-out and metrics only while the record is still open.

        Returns False when somebody else closed it first.
        """

        raise NotImplementedError

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
        raise NotImplementedError

    def insert_absence_marker(self, *, employee_id: int, attendance_date: date) -> int:
        raise NotImplementedError

    def list_open_records(self) -> Sequence[OpenAttendanceRow]:
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_type: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
