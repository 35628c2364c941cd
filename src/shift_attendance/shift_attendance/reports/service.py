from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from ..attendance.metrics import MetricsCalculator
from ..attendance.model import AttendanceReportRow
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import round_half_up
from ..core.constants import UNKNOWN_SHIFT_NAME
from ..core.exceptions import ValidationError
from ..shifts.catalog import ShiftCatalog
from ..shifts.matcher import detect_shift_for_time


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


def _fmt(value: Optional[datetime], pattern: str = "%H:%M:%S") -> Optional[str]:
    return value.strftime(pattern) if value else None


class AttendanceReportService:
    """Detailed attendance report with hours re-derived from the current shift settings."""

    def __init__(self, attendance: AttendanceRepository, catalog: ShiftCatalog, calculator: MetricsCalculator):
        self._attendance = attendance
        self._catalog = catalog
        self._calculator = calculator

    def build_detailed_report(
        self,
        start: date,
        end: date,
        employee_type: Optional[str] = None,
        search: Optional[str] = None,
    ) -> ReportData:
        if end < start:
            raise ValidationError("endDate must not be before startDate.")

        query_rows = list(
            self._attendance.get_report_rows(start_date=start, end_date=end, employee_type=employee_type, search=search)
        )

        # check-in times of closed records, per employee and day
        closed_in_times: Dict[Tuple[int, date], List[datetime]] = defaultdict(list)
        for r in query_rows:
            rec = r.record
            if rec.in_time and rec.out_time:
                closed_in_times[(rec.employee_id, rec.attendance_date)].append(rec.in_time)

        summary_map: dict[int, dict] = {}
        out_rows: list[dict] = []

        for r in query_rows:
            row = self._build_row(r, closed_in_times)
            out_rows.append(row)

            s = summary_map.get(r.record.employee_id)
            if not s:
                s = {
                    "employee_id": r.record.employee_id,
                    "employee_name": r.employee_name,
                    "employee_type": r.employee_type,
                    "days_present": set(),
                    "total_hours": 0.0,
                    "ot_hours": 0.0,
                }
                summary_map[r.record.employee_id] = s
            if r.record.in_time:
                s["days_present"].add(r.record.attendance_date)
            s["total_hours"] += row["total_hours"] or 0.0
            s["ot_hours"] += row["ot_hours"] or 0.0

        summary = []
        for s in summary_map.values():
            summary.append(
                {
                    "employee_id": s["employee_id"],
                    "employee_name": s["employee_name"],
                    "employee_type": s["employee_type"],
                    "days_present": len(s["days_present"]),
                    "total_hours": round_half_up(s["total_hours"], 2),
                    "ot_hours": round_half_up(s["ot_hours"], 2),
                }
            )
        summary.sort(key=lambda x: x["employee_name"])
        return ReportData(rows=out_rows, summary=summary)

    def _build_row(self, r: AttendanceReportRow, closed_in_times: Dict[Tuple[int, date], List[datetime]]) -> dict:
        rec = r.record
        row = {
            "attendance_id": rec.attendance_id,
            "employee_id": rec.employee_id,
            "employee_name": r.employee_name,
            "employee_code": r.employee_code,
            "employee_type": r.employee_type,
            "organization_name": r.organization_name,
            "attendance_date": rec.attendance_date.isoformat(),
            "in_time": _fmt(rec.in_time),
            "out_time": _fmt(rec.out_time),
            "location_in": rec.location_in,
            "location_out": rec.location_out,
            "shift_name": UNKNOWN_SHIFT_NAME,
            "delay_by_minutes": rec.delay_by_minutes,
            "extra_time_minutes": rec.extra_time_minutes,
            "regular_shift_hours": 0.0,
            "early_checkout_minutes": 0,
            "total_hours": rec.total_working_hours_decimal,
            "ot_hours": rec.manual_ot_hours,
            "is_ot": False,
            "is_edited": rec.is_edited,
            "edit_remark": rec.edit_remark,
        }

        if rec.in_time:
            shifts = self._catalog.get_shifts(r.employee_type)
            match = detect_shift_for_time(rec.in_time, shifts)
            if match:
                row["shift_name"] = match.shift.shift_name
            earlier = closed_in_times.get((rec.employee_id, rec.attendance_date), [])
            row["is_ot"] = any(t < rec.in_time for t in earlier)

        if not rec.in_time or not rec.out_time:
            return row

        metrics = self._calculator.compute_metrics(rec.in_time, rec.out_time, r.employee_type, row["is_ot"])
        hours = self._calculator.shift_hours(
            rec.in_time,
            rec.out_time,
            r.employee_type,
            is_ot_context=row["is_ot"],
            manual_ot_hours=rec.manual_ot_hours,
        )
        row["delay_by_minutes"] = metrics.delay_by_minutes
        row["extra_time_minutes"] = metrics.extra_time_minutes
        if hours is None:
            return row

        row["regular_shift_hours"] = hours.regular_shift_hours
        row["early_checkout_minutes"] = hours.early_checkout_minutes
        row["total_hours"] = hours.total_working_hours_decimal
        row["ot_hours"] = hours.ot_hours_decimal
        return row
