from datetime import date, datetime

from src.shift_attendance.shift_attendance.attendance.metrics import StandardMetricsCalculator
from src.shift_attendance.shift_attendance.attendance.service import AttendanceService
from src.shift_attendance.shift_attendance.attendance.strategies.deadline import FixedHoursDeadlineStrategy
from src.shift_attendance.shift_attendance.background.auto_checkout import AutoCheckoutSweeper
from src.shift_attendance.shift_attendance.presence.service import PresenceService
from src.shift_attendance.shift_attendance.shifts.catalog import ShiftCatalog

from conftest import FixedClock

DAY = date(2025, 3, 3)


def _sweeper(attendance, shifts, now, **kwargs):
    catalog = ShiftCatalog(shifts)
    return AutoCheckoutSweeper(attendance, catalog, StandardMetricsCalculator(catalog), clock=FixedClock(now), **kwargs)


def test_overdue_record_is_closed_at_deadline_once(attendance, shifts):
    rec = attendance.add(employee_id=1, attendance_date=DAY, in_time=datetime(2025, 3, 3, 9, 5), out_time=None)
    sweeper = _sweeper(attendance, shifts, datetime(2025, 3, 3, 19, 0))

    assert sweeper.sweep_overdue_checkouts() == 1
    closed = attendance.get_by_id(rec.attendance_id)
    assert closed.out_time == datetime(2025, 3, 3, 17, 30)
    assert closed.location_out == "Auto Checkout"
    assert closed.delay_by_minutes == 5
    assert closed.extra_time_minutes == 30
    assert closed.total_working_hours_decimal == 8.42

    assert sweeper.sweep_overdue_checkouts() == 0
    assert attendance.get_by_id(rec.attendance_id) == closed
    assert attendance.close_calls == 1


def test_record_before_deadline_is_left_open(attendance, shifts):
    rec = attendance.add(employee_id=1, attendance_date=DAY, in_time=datetime(2025, 3, 3, 9, 0), out_time=None)
    sweeper = _sweeper(attendance, shifts, datetime(2025, 3, 3, 17, 29))

    assert sweeper.sweep_overdue_checkouts() == 0
    assert attendance.get_by_id(rec.attendance_id).is_open


def test_overnight_deadline_falls_on_next_day(attendance, shifts):
    rec = attendance.add(employee_id=3, attendance_date=DAY, in_time=datetime(2025, 3, 3, 22, 0), out_time=None)

    assert _sweeper(attendance, shifts, datetime(2025, 3, 4, 5, 0)).sweep_overdue_checkouts() == 0
    assert _sweeper(attendance, shifts, datetime(2025, 3, 4, 6, 0)).sweep_overdue_checkouts() == 1
    assert attendance.get_by_id(rec.attendance_id).out_time == datetime(2025, 3, 4, 6, 0)


def test_fixed_hours_policy(attendance, shifts):
    rec = attendance.add(employee_id=1, attendance_date=DAY, in_time=datetime(2025, 3, 3, 9, 0), out_time=None)
    deadline = FixedHoursDeadlineStrategy(4)

    assert _sweeper(attendance, shifts, datetime(2025, 3, 3, 20, 0), deadline=deadline).sweep_overdue_checkouts() == 0
    assert _sweeper(attendance, shifts, datetime(2025, 3, 3, 21, 0), deadline=deadline).sweep_overdue_checkouts() == 1
    closed = attendance.get_by_id(rec.attendance_id)
    assert closed.out_time == datetime(2025, 3, 3, 21, 0)
    assert closed.location_out == "Auto Checkout (4h grace)"


def test_failure_on_one_record_does_not_stop_the_sweep(attendance, shifts, monkeypatch):
    attendance.add(employee_id=1, attendance_date=DAY, in_time=datetime(2025, 3, 3, 9, 0), out_time=None)
    attendance.add(employee_id=2, attendance_date=DAY, in_time=datetime(2025, 3, 3, 9, 0), out_time=None)
    original = attendance.close_if_open

    def flaky(**kwargs):
        if kwargs["attendance_id"] == 1:
            raise RuntimeError("deadlock")
        return original(**kwargs)

    monkeypatch.setattr(attendance, "close_if_open", flaky)
    assert _sweeper(attendance, shifts, datetime(2025, 3, 3, 19, 0)).sweep_overdue_checkouts() == 1
    assert attendance.get_by_id(1).is_open
    assert not attendance.get_by_id(2).is_open


def test_manual_overtime_is_kept_when_auto_checked_out(attendance, employees, shifts, presence):
    catalog = ShiftCatalog(shifts)
    clock = FixedClock(datetime(2025, 3, 3, 12, 0))
    service = AttendanceService(
        attendance,
        employees,
        catalog,
        StandardMetricsCalculator(catalog),
        PresenceService(presence, clock=clock),
        clock=clock,
    )
    rec = service.mark(1, "2025-03-03T09:00:00", "2025-03-03")
    service.edit_record(rec.attendance_id, ot_hours=2)

    assert _sweeper(attendance, shifts, datetime(2025, 3, 3, 23, 0)).sweep_overdue_checkouts() == 1
    closed = attendance.get_by_id(rec.attendance_id)
    assert closed.out_time == datetime(2025, 3, 3, 17, 30)
    assert closed.ot_hours_decimal == 2.0
    assert closed.total_working_hours_decimal == 10.5
