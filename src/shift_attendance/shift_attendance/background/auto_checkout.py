"""Close attendance records whose check-out never came."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from ..attendance.metrics import MetricsCalculator, with_manual_ot
from ..attendance.repository import AttendanceRepository
from ..attendance.strategies.base import DeadlineStrategy
from ..attendance.strategies.deadline import GraceAfterDeadlineStrategy
from ..common.datetime_utils import now_local
from ..shifts.catalog import ShiftCatalog
from ..shifts.matcher import detect_shift_for_time

logger = logging.getLogger(__name__)


class AutoCheckoutSweeper:
    def __init__(
        self,
        attendance: AttendanceRepository,
        catalog: ShiftCatalog,
        calculator: MetricsCalculator,
        *,
        deadline: DeadlineStrategy | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._catalog = catalog
        self._calculator = calculator
        self._deadline = deadline or GraceAfterDeadlineStrategy()
        self._clock = clock

    def sweep_overdue_checkouts(self) -> int:
        """Close every open record past its deadline, checking out at the deadline itself.

        Safe to run repeatedly: only records whose check-out is still empty are
        touched. Returns how many records this run closed.
        """

        now = self._clock()
        closed = 0
        for row in self._attendance.list_open_records():
            try:
                shifts = self._catalog.get_shifts(row.employee_type)
                match = detect_shift_for_time(row.in_time, shifts)
                if match is None:
                    logger.warning("No shifts for %s, leaving record %s open", row.employee_type, row.attendance_id)
                    continue

                deadline = self._deadline.deadline(in_time=row.in_time, shift=match.shift)
                if now < deadline:
                    continue

                metrics = self._calculator.compute_metrics(row.in_time, deadline, row.employee_type, False)
                metrics = with_manual_ot(metrics, row.manual_ot_hours)
                if self._attendance.close_if_open(
                    attendance_id=row.attendance_id,
                    out_time=deadline,
                    location_out=self._deadline.location_out,
                    metrics=metrics,
                ):
                    closed += 1
                    logger.info(
                        "Auto checked out %s (record %s) at %s",
                        row.employee_name,
                        row.attendance_id,
                        deadline.isoformat(),
                    )
            except Exception:
                logger.exception("Auto checkout failed for record %s", row.attendance_id)
        return closed
