"""Insert absence markers once a shift is over."""
from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Callable

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_utc
from ..employees.repository import EmployeeRepository
from ..shifts.catalog import ShiftCatalog
from ..shifts.matcher import build_shift_end_time
from ..shifts.model import Shift

logger = logging.getLogger(__name__)


class AbsenceMarker:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        catalog: ShiftCatalog,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._attendance = attendance
        self._employees = employees
        self._catalog = catalog
        self._clock = clock

    def mark_absences_for_today(self) -> int:
        now = self._clock()
        today = now.date()
        midnight = datetime.combine(today, time(0, 0))
        marked = 0

        for employee_type in self._catalog.employee_types():
            for shift in self._catalog.get_shifts(employee_type):
                if now < build_shift_end_time(midnight, shift):
                    continue
                try:
                    marked += self.mark_absent_for_shift(employee_type, shift, today)
                except Exception:
                    logger.exception("Absence marking failed for %s / %s", employee_type, shift.shift_name)
        return marked

    def mark_absent_for_shift(self, employee_type: str, shift: Shift, today: date) -> int:
        marked = 0
        for employee in self._employees.list_by_type(employee_type):
            records = list(self._attendance.list_for_employee_and_date(employee.employee_id, today))

            if not records:
                self._attendance.insert_absence_marker(employee_id=employee.employee_id, attendance_date=today)
                marked += 1
                logger.info("Marked %s absent for %s (%s)", employee.employee_name, today, shift.shift_name)
                continue

            if any(r.in_time is not None for r in records):
                if any(r.is_open for r in records):
                    logger.debug("%s has an open record on %s, left for auto checkout", employee.employee_name, today)
                continue

            if any(r.is_absence_marker for r in records):
                continue

            self._attendance.insert_absence_marker(employee_id=employee.employee_id, attendance_date=today)
            marked += 1
            logger.info("Marked %s absent for %s (%s)", employee.employee_name, today, shift.shift_name)
        return marked
