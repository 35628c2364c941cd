from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from typing import Optional

import pytest

from src.shift_attendance.shift_attendance.attendance.model import (
    AttendanceRecord,
    AttendanceReportRow,
    OpenAttendanceRow,
)
from src.shift_attendance.shift_attendance.employees.model import Employee
from src.shift_attendance.shift_attendance.shifts.model import Shift


class InMemoryShifts:
    def __init__(self, shifts: list[Shift]):
        self.shifts = {s.shift_id: s for s in shifts}
        self.fail = False

    def list_for_employee_type(self, employee_type: str):
        if self.fail:
            raise RuntimeError("shift store down")
        return [s for s in self.shifts.values() if s.employee_type == employee_type]

    def list_employee_types(self):
        return sorted({s.employee_type for s in self.shifts.values()})

    def list_all(self):
        return list(self.shifts.values())

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        return self.shifts.get(shift_id)

    def create(self, **fields) -> int:
        shift_id = max(self.shifts, default=0) + 1
        self.shifts[shift_id] = Shift(shift_id=shift_id, **fields)
        return shift_id

    def update(self, shift: Shift) -> bool:
        if shift.shift_id not in self.shifts:
            return False
        self.shifts[shift.shift_id] = shift
        return True

    def delete(self, shift_id: int) -> bool:
        return self.shifts.pop(shift_id, None) is not None


@dataclass
class InMemoryEmployees:
    employees: dict[int, Employee]

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.employees.get(employee_id)

    def list_by_type(self, employee_type: str):
        return [e for e in self.employees.values() if e.employee_type == employee_type]


class InMemoryAttendance:
    def __init__(self, employees: InMemoryEmployees):
        self.records: dict[int, AttendanceRecord] = {}
        self._employees = employees
        self._id = 0
        self.close_calls = 0

    def add(self, **fields) -> AttendanceRecord:
        self._id += 1
        rec = AttendanceRecord(attendance_id=self._id, **fields)
        self.records[rec.attendance_id] = rec
        return rec

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.records.get(attendance_id)

    def find_open_record(self, employee_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        open_records = [
            r
            for r in self.records.values()
            if r.employee_id == employee_id and r.attendance_date == attendance_date and r.is_open
        ]
        open_records.sort(key=lambda r: r.in_time, reverse=True)
        return open_records[0] if open_records else None

    def count_completed(self, employee_id: int, attendance_date: date) -> int:
        return sum(
            1
            for r in self.records.values()
            if r.employee_id == employee_id
            and r.attendance_date == attendance_date
            and r.in_time is not None
            and r.out_time is not None
        )

    def list_for_employee_and_date(self, employee_id: int, attendance_date: date):
        return [r for r in self.records.values() if r.employee_id == employee_id and r.attendance_date == attendance_date]

    def insert_check_in(self, *, employee_id, attendance_date, in_time, location_in, delay_by_minutes) -> int:
        rec = self.add(
            employee_id=employee_id,
            attendance_date=attendance_date,
            in_time=in_time,
            out_time=None,
            location_in=location_in,
            delay_by_minutes=delay_by_minutes,
        )
        return rec.attendance_id

    def close_if_open(self, *, attendance_id, out_time, location_out, metrics) -> bool:
        self.close_calls += 1
        rec = self.records.get(attendance_id)
        if rec is None or rec.out_time is not None:
            return False
        self.records[attendance_id] = replace(
            rec,
            out_time=out_time,
            location_out=location_out,
            delay_by_minutes=metrics.delay_by_minutes,
            extra_time_minutes=metrics.extra_time_minutes,
            total_working_hours_decimal=metrics.total_working_hours_decimal,
        )
        return True

    def admin_update_record(
        self,
        *,
        attendance_id,
        in_time,
        out_time,
        delay_by_minutes,
        extra_time_minutes,
        total_working_hours_decimal,
        ot_hours_decimal,
        edit_remark,
        edited_at,
    ) -> bool:
        rec = self.records.get(attendance_id)
        if rec is None:
            return False
        self.records[attendance_id] = replace(
            rec,
            in_time=in_time,
            out_time=out_time,
            delay_by_minutes=delay_by_minutes,
            extra_time_minutes=extra_time_minutes,
            total_working_hours_decimal=total_working_hours_decimal,
            ot_hours_decimal=ot_hours_decimal,
            is_edited=True,
            edit_remark=edit_remark,
            edited_at=edited_at,
        )
        return True

    def insert_absence_marker(self, *, employee_id: int, attendance_date: date) -> int:
        return self.add(employee_id=employee_id, attendance_date=attendance_date, in_time=None, out_time=None).attendance_id

    def list_open_records(self):
        rows = []
        for r in self.records.values():
            if not r.is_open:
                continue
            emp = self._employees.get_by_id(r.employee_id)
            rows.append(
                OpenAttendanceRow(
                    attendance_id=r.attendance_id,
                    employee_id=r.employee_id,
                    employee_name=emp.employee_name,
                    employee_type=emp.employee_type,
                    attendance_date=r.attendance_date,
                    in_time=r.in_time,
                    ot_hours_decimal=r.ot_hours_decimal,
                )
            )
        return rows

    def get_report_rows(self, *, start_date, end_date, employee_type=None, search=None):
        rows = []
        for r in sorted(self.records.values(), key=lambda r: (r.attendance_date, r.in_time or datetime.min)):
            emp = self._employees.get_by_id(r.employee_id)
            if not (start_date <= r.attendance_date <= end_date):
                continue
            if employee_type and emp.employee_type != employee_type:
                continue
            if search and search.lower() not in emp.employee_name.lower():
                continue
            rows.append(
                AttendanceReportRow(
                    record=r,
                    employee_name=emp.employee_name,
                    employee_type=emp.employee_type,
                    employee_code=emp.employee_code,
                    organization_name=emp.organization_name,
                )
            )
        return rows


@dataclass
class InMemoryPresence:
    detections: list[tuple[int, datetime, date]] = field(default_factory=list)
    fail: bool = False

    def add(self, *, employee_id: int, detection_time: datetime, detection_date: date) -> None:
        if self.fail:
            raise RuntimeError("presence store down")
        self.detections.append((employee_id, detection_time, detection_date))

    def list_detection_times(self, *, employee_id: int, detection_date: date, since: datetime):
        if self.fail:
            raise RuntimeError("presence store down")
        times = [t for (e, t, d) in self.detections if e == employee_id and d == detection_date and t >= since]
        return sorted(times, reverse=True)

    def delete_before(self, cutoff: date) -> int:
        before = len(self.detections)
        self.detections = [x for x in self.detections if x[2] >= cutoff]
        return before - len(self.detections)


class RecordingPublisher:
    def __init__(self, fail: bool = False):
        self.events = []
        self.fail = fail

    def publish(self, event) -> None:
        if self.fail:
            raise RuntimeError("broker down")
        self.events.append(event)


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def day_shift() -> Shift:
    return Shift(
        shift_id=1,
        shift_name="Day",
        employee_type="staff",
        start_time=time(9, 0),
        end_time=time(17, 0),
        grace_before_minutes=15,
        grace_after_minutes=30,
    )


@pytest.fixture
def night_shift() -> Shift:
    return Shift(
        shift_id=2,
        shift_name="Night",
        employee_type="guard",
        start_time=time(22, 0),
        end_time=time(6, 0),
    )


@pytest.fixture
def employees() -> InMemoryEmployees:
    return InMemoryEmployees(
        {
            1: Employee(employee_id=1, employee_name="Asha", employee_type="staff", email="asha@example.com"),
            2: Employee(employee_id=2, employee_name="Ravi", employee_type="staff"),
            3: Employee(employee_id=3, employee_name="Noor", employee_type="guard"),
            4: Employee(employee_id=4, employee_name="Omar", employee_type="intern"),
        }
    )


@pytest.fixture
def shifts(day_shift, night_shift) -> InMemoryShifts:
    return InMemoryShifts([day_shift, night_shift])


@pytest.fixture
def attendance(employees) -> InMemoryAttendance:
    return InMemoryAttendance(employees)


@pytest.fixture
def presence() -> InMemoryPresence:
    return InMemoryPresence()


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def fixed_clock():
    return FixedClock
