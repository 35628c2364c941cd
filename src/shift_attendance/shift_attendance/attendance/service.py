from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Optional

from ..common.datetime_utils import now_local, parse_iso_date, parse_timestamp
from ..core.constants import UNKNOWN_SHIFT_NAME
from ..core.enums import PunchStatus
from ..core.exceptions import ConfigurationMissing, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..notifications.events import AttendanceEvent, EventPublisher
from ..presence.model import PresenceThresholds
from ..presence.service import PresenceService
from ..shifts.catalog import ShiftCatalog
from ..shifts.matcher import detect_shift_for_time
from .factory import AttendanceStrategyFactory
from .metrics import AttendanceMetrics, MetricsCalculator, delay_at_check_in, with_manual_ot
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PunchResult:
    status: PunchStatus
    attendance_id: int
    employee_id: int
    employee_name: str
    attendance_date: date
    in_time: datetime
    out_time: Optional[datetime]
    shift_name: str
    delay_by_minutes: int = 0
    total_hours: float = 0.0
    ot_hours: float = 0.0
    is_ot: bool = False
    message: str = ""

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "attendance_id": self.attendance_id,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "attendance_date": self.attendance_date.isoformat(),
            "in_time": self.in_time.isoformat(),
            "out_time": self.out_time.isoformat() if self.out_time else None,
            "shift_name": self.shift_name,
            "delay_by_minutes": self.delay_by_minutes,
            "total_hours": self.total_hours,
            "ot_hours": self.ot_hours,
            "is_ot": self.is_ot,
            "message": self.message,
        }


class AttendanceService:
    """Punch write path: one call decides check-in vs check-out for an identified employee."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        catalog: ShiftCatalog,
        calculator: MetricsCalculator,
        presence: PresenceService,
        publisher: Optional[EventPublisher] = None,
        *,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
        enforce_presence: bool = False,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._employees = employees
        self._catalog = catalog
        self._calculator = calculator
        self._presence = presence
        self._publisher = publisher
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._enforce_presence = bool(enforce_presence)
        self._clock = clock

    def compute_metrics(self, check_in: Any, check_out: Any, employee_type: str, is_ot_context: bool = False) -> AttendanceMetrics:
        return self._calculator.compute_metrics(check_in, check_out, employee_type, is_ot_context)

    def mark(
        self,
        employee_id: int,
        timestamp: Any = None,
        attendance_date: Any = None,
        location: Optional[str] = None,
    ) -> PunchResult:
        at = parse_timestamp(timestamp) if timestamp is not None else self._clock()
        if at is None:
            raise ValidationError("Invalid timestamp.")
        if attendance_date is None:
            day = at.date()
        elif isinstance(attendance_date, date):
            day = attendance_date
        else:
            try:
                day = parse_iso_date(str(attendance_date))
            except ValueError:
                raise ValidationError("date must be YYYY-MM-DD.") from None

        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found.")

        shifts = self._catalog.get_shifts(employee.employee_type)
        if not shifts:
            raise ConfigurationMissing("No shift settings found for your employee type.")

        open_record = self._attendance.find_open_record(employee.employee_id, day)
        if open_record is not None:
            return self._check_out(employee, open_record, at=at, location=location, shifts=shifts)
        return self._check_in(employee, at=at, day=day, location=location, shifts=shifts)

    def _check_in(self, employee: Employee, *, at: datetime, day: date, location: Optional[str], shifts) -> PunchResult:
        strategy = self._factory.for_punch_window()
        match = strategy.resolve_check_in(at=at, shifts=shifts)
        if match is None:
            raise ValidationError("Check-in not within any shift window.")
        shift = match.shift

        self._presence.record_detection(employee.employee_id, at, day)
        if self._enforce_presence:
            thresholds = PresenceThresholds(
                presence_time_seconds=shift.presence_time_seconds,
                presence_count=shift.presence_count,
                presence_window_seconds=shift.presence_window_seconds,
            )
            if not self._presence.is_presence_satisfied(employee.employee_id, day, thresholds):
                raise ValidationError(
                    "Presence requirement not met: need {count} detections or {seconds}s of presence "
                    "within {window}s.".format(
                        count=thresholds.presence_count,
                        seconds=thresholds.presence_time_seconds,
                        window=thresholds.presence_window_seconds,
                    )
                )

        delay = max(0, delay_at_check_in(at, shift))
        attendance_id = self._attendance.insert_check_in(
            employee_id=employee.employee_id,
            attendance_date=day,
            in_time=at,
            location_in=location,
            delay_by_minutes=delay,
        )
        is_ot = self._attendance.count_completed(employee.employee_id, day) > 0
        logger.info("Employee %s checked in at %s (%s)", employee.employee_id, at.isoformat(), shift.shift_name)

        self._publish(
            AttendanceEvent(
                kind=PunchStatus.CHECKED_IN,
                employee_id=employee.employee_id,
                employee_name=employee.employee_name,
                attendance_date=day,
                in_time=at,
                employee_code=employee.employee_code,
                email=employee.email,
                phone_number=employee.phone_number,
                organization_name=employee.organization_name,
                shift_name=shift.shift_name,
                is_ot=is_ot,
            )
        )
        return PunchResult(
            status=PunchStatus.CHECKED_IN,
            attendance_id=attendance_id,
            employee_id=employee.employee_id,
            employee_name=employee.employee_name,
            attendance_date=day,
            in_time=at,
            out_time=None,
            shift_name=shift.shift_name,
            delay_by_minutes=delay,
            is_ot=is_ot,
            message=f"{'OT check-in' if is_ot else 'Check-in'} recorded for {employee.employee_name}.",
        )

    def _check_out(
        self,
        employee: Employee,
        record: AttendanceRecord,
        *,
        at: datetime,
        location: Optional[str],
        shifts,
    ) -> PunchResult:
        in_time = record.in_time
        if at <= in_time:
            raise ValidationError("Check-out time must be after check-in time.")

        match = detect_shift_for_time(in_time, shifts)
        shift_name = match.shift.shift_name if match else UNKNOWN_SHIFT_NAME
        if match and not self._factory.for_punch_window().accepts_check_out(at=at, in_time=in_time, shift=match.shift):
            raise ValidationError("Check-out not within the shift's check-out window.")

        is_ot = self._attendance.count_completed(employee.employee_id, record.attendance_date) > 0
        metrics = self._calculator.compute_metrics(in_time, at, employee.employee_type, is_ot)
        metrics = with_manual_ot(metrics, record.manual_ot_hours)

        closed = self._attendance.close_if_open(
            attendance_id=record.attendance_id,
            out_time=at,
            location_out=location,
            metrics=metrics,
        )
        if not closed:
            raise ValidationError("Attendance record already closed.")
        logger.info(
            "Employee %s checked out at %s (%.2fh, OT %.2fh)",
            employee.employee_id,
            at.isoformat(),
            metrics.total_working_hours_decimal,
            metrics.ot_hours_decimal,
        )

        self._publish(
            AttendanceEvent(
                kind=PunchStatus.CHECKED_OUT,
                employee_id=employee.employee_id,
                employee_name=employee.employee_name,
                attendance_date=record.attendance_date,
                in_time=in_time,
                out_time=at,
                employee_code=employee.employee_code,
                email=employee.email,
                phone_number=employee.phone_number,
                organization_name=employee.organization_name,
                shift_name=shift_name,
                total_hours=metrics.total_working_hours_decimal,
                ot_hours=metrics.ot_hours_decimal,
                is_ot=is_ot,
            )
        )
        return PunchResult(
            status=PunchStatus.CHECKED_OUT,
            attendance_id=record.attendance_id,
            employee_id=employee.employee_id,
            employee_name=employee.employee_name,
            attendance_date=record.attendance_date,
            in_time=in_time,
            out_time=at,
            shift_name=shift_name,
            delay_by_minutes=metrics.delay_by_minutes,
            total_hours=metrics.total_working_hours_decimal,
            ot_hours=metrics.ot_hours_decimal,
            is_ot=is_ot,
            message=f"{'OT check-out' if is_ot else 'Check-out'} recorded for {employee.employee_name}.",
        )

    def edit_record(
        self,
        attendance_id: int,
        in_time: Any = None,
        out_time: Any = None,
        ot_hours: Optional[float] = None,
        remark: Optional[str] = None,
    ) -> AttendanceRecord:
        """Administrative edit.

        ``ot_hours=None`` keeps the current manual OT, ``0`` clears it. Metrics are
        recomputed only when both timestamps are known.
        """

        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found.")
        employee = self._employees.get_by_id(record.employee_id)
        if not employee:
            raise NotFoundError("Employee not found.")

        new_in = parse_timestamp(in_time) if in_time not in (None, "") else record.in_time
        new_out = parse_timestamp(out_time) if out_time not in (None, "") else record.out_time
        if in_time not in (None, "") and new_in is None:
            raise ValidationError("Invalid check-in time.")
        if out_time not in (None, "") and new_out is None:
            raise ValidationError("Invalid check-out time.")
        if new_in and new_out and new_out <= new_in:
            raise ValidationError("Check-out time must be after check-in time.")

        if ot_hours is None:
            manual_ot = record.ot_hours_decimal
        else:
            try:
                manual_ot = float(ot_hours)
            except (TypeError, ValueError):
                raise ValidationError("ot_hours must be a number.") from None
            if manual_ot < 0:
                raise ValidationError("ot_hours must be >= 0.")
            manual_ot = manual_ot or None

        delay = record.delay_by_minutes
        extra = record.extra_time_minutes
        total = record.total_working_hours_decimal
        if new_in and new_out:
            metrics = self._calculator.compute_metrics(new_in, new_out, employee.employee_type)
            metrics = with_manual_ot(metrics, float(manual_ot or 0))
            delay = metrics.delay_by_minutes
            extra = metrics.extra_time_minutes
            total = metrics.total_working_hours_decimal

        updated = self._attendance.admin_update_record(
            attendance_id=record.attendance_id,
            in_time=new_in,
            out_time=new_out,
            delay_by_minutes=delay,
            extra_time_minutes=extra,
            total_working_hours_decimal=total,
            ot_hours_decimal=manual_ot,
            edit_remark=remark,
            edited_at=self._clock(),
        )
        if not updated:
            raise NotFoundError("Attendance record not found.")
        logger.info("Attendance record %s edited", record.attendance_id)
        return self._attendance.get_by_id(record.attendance_id)

    def _publish(self, event: AttendanceEvent) -> None:
        if not self._publisher:
            return
        try:
            self._publisher.publish(event)
        except Exception:
            logger.exception("Failed to publish %s event for employee %s", event.kind.value, event.employee_id)
