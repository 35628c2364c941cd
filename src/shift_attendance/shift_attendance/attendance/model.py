from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one punch pair of an employee on a given day.

    A record with neither check-in nor check-out is an absence marker; a
    check-in without check-out is an open shift. ``ot_hours_decimal`` is only
    ever set by an administrator and overrides calculated overtime.
    """

    attendance_id: int
    employee_id: int
    attendance_date: date
    in_time: Optional[datetime]
    out_time: Optional[datetime]
    delay_by_minutes: int = 0
    extra_time_minutes: int = 0
    total_working_hours_decimal: float = 0.0
    ot_hours_decimal: Optional[float] = None
    location_in: Optional[str] = None
    location_out: Optional[str] = None
    is_edited: bool = False
    edit_remark: Optional[str] = None
    edited_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.in_time is not None and self.out_time is None

    @property
    def is_absence_marker(self) -> bool:
        return self.in_time is None and self.out_time is None

    @property
    def manual_ot_hours(self) -> float:
        return float(self.ot_hours_decimal or 0)


@dataclass(frozen=True)
class OpenAttendanceRow:
    """Read-model for the auto-checkout sweep (record joined with employee type)."""

    attendance_id: int
    employee_id: int
    employee_name: str
    employee_type: str
    attendance_date: date
    in_time: datetime
    ot_hours_decimal: Optional[float] = None

    @property
    def manual_ot_hours(self) -> float:
        return float(self.ot_hours_decimal or 0)


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reporting (record joined with employee details)."""

    record: AttendanceRecord
    employee_name: str
    employee_type: str
    employee_code: Optional[str] = None
    organization_name: Optional[str] = None
