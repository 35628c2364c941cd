from datetime import date, datetime

import pytest

from src.shift_attendance.shift_attendance.attendance.metrics import StandardMetricsCalculator
from src.shift_attendance.shift_attendance.core.exceptions import ValidationError
from src.shift_attendance.shift_attendance.reports.service import AttendanceReportService
from src.shift_attendance.shift_attendance.shifts.catalog import ShiftCatalog

DAY = date(2025, 3, 3)


@pytest.fixture
def report_service(attendance, shifts):
    catalog = ShiftCatalog(shifts)
    return AttendanceReportService(attendance, catalog, StandardMetricsCalculator(catalog))


@pytest.fixture
def populated(attendance):
    attendance.add(
        employee_id=1, attendance_date=DAY, in_time=datetime(2025, 3, 3, 9, 0), out_time=datetime(2025, 3, 3, 17, 45)
    )
    attendance.add(
        employee_id=1,
        attendance_date=DAY,
        in_time=datetime(2025, 3, 3, 18, 0),
        out_time=datetime(2025, 3, 3, 20, 0),
        ot_hours_decimal=1.0,
    )
    attendance.add(employee_id=2, attendance_date=DAY, in_time=None, out_time=None)
    attendance.add(employee_id=3, attendance_date=DAY, in_time=datetime(2025, 3, 3, 22, 0), out_time=None)
    return attendance


def _by_id(rows):
    return {r["attendance_id"]: r for r in rows}


def test_rows_are_recomputed_from_shift_settings(report_service, populated):
    data = report_service.build_detailed_report(DAY, DAY)
    rows = _by_id(data.rows)

    first = rows[1]
    assert first["shift_name"] == "Day"
    assert first["is_ot"] is False
    assert first["regular_shift_hours"] == 8.0
    assert first["extra_time_minutes"] == 45
    assert first["ot_hours"] == 0.75
    assert first["total_hours"] == 8.75

    second = rows[2]
    assert second["is_ot"] is True
    # manual overtime: worked hours + manual, whatever auto calculation says
    assert second["ot_hours"] == 1.0
    assert second["total_hours"] == 3.0


def test_markers_and_open_records_pass_through(report_service, populated):
    rows = _by_id(report_service.build_detailed_report(DAY, DAY).rows)

    marker = rows[3]
    assert marker["in_time"] is None
    assert marker["shift_name"] == "Unknown Shift"
    assert marker["total_hours"] == 0.0

    open_row = rows[4]
    assert open_row["shift_name"] == "Night"
    assert open_row["out_time"] is None
    assert open_row["is_ot"] is False


def test_summary_per_employee(report_service, populated):
    summary = {s["employee_id"]: s for s in report_service.build_detailed_report(DAY, DAY).summary}

    assert summary[1]["days_present"] == 1
    assert summary[1]["total_hours"] == 11.75
    assert summary[1]["ot_hours"] == 1.75
    assert summary[2]["days_present"] == 0


def test_filters_and_range_validation(report_service, populated):
    guards = report_service.build_detailed_report(DAY, DAY, employee_type="guard").rows
    assert [r["employee_name"] for r in guards] == ["Noor"]

    searched = report_service.build_detailed_report(DAY, DAY, search="rav").rows
    assert [r["employee_name"] for r in searched] == ["Ravi"]

    assert report_service.build_detailed_report(date(2025, 3, 4), date(2025, 3, 5)).rows == []
    with pytest.raises(ValidationError):
        report_service.build_detailed_report(date(2025, 3, 5), date(2025, 3, 4))
