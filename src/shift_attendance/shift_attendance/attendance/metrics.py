"""Delay / extra time / worked hours / overtime for a check-in, check-out pair."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Any, Optional, Sequence, Tuple

from ..common.datetime_utils import hours_between, minutes_between, parse_timestamp, round_half_up
from ..core.constants import DEFAULT_MIN_OT_MINUTES
from ..shifts.catalog import ShiftCatalog
from ..shifts.matcher import build_shift_end_time, build_shift_start_time, detect_shift_for_time
from ..shifts.model import Shift


@dataclass(frozen=True)
class AttendanceMetrics:
    delay_by_minutes: int = 0
    extra_time_minutes: int = 0
    total_working_hours_decimal: float = 0.0
    ot_hours_decimal: float = 0.0


ZERO_METRICS = AttendanceMetrics()


@dataclass(frozen=True)
class ShiftHours:
    """Reporting view of a closed record against its shift."""

    regular_shift_hours: float
    early_checkout_minutes: int
    total_working_hours_decimal: float
    ot_hours_decimal: float


def calculate_metrics(
    in_time: datetime,
    out_time: datetime,
    shifts: Sequence[Shift],
    *,
    min_ot_minutes: int = DEFAULT_MIN_OT_MINUTES,
) -> AttendanceMetrics:
    """Pure computation on already-fetched shifts.

    Degrades to all-zero metrics when there are no shifts or the check-out is
    not strictly after the check-in.
    """

    if not shifts or in_time is None or out_time is None or out_time <= in_time:
        return ZERO_METRICS

    total_hours = max(0.0, hours_between(in_time, out_time))
    shift = detect_shift_for_time(in_time, shifts).shift

    shift_start = build_shift_start_time(in_time, shift)
    shift_end = build_shift_end_time(in_time, shift)

    delay = minutes_between(shift_start, in_time) if in_time > shift_start else 0
    extra = minutes_between(shift_end, out_time) if out_time > shift_end else 0

    # OT only counts once the grace-after is exceeded, but is measured from shift end.
    ot_hours = 0.0
    if out_time > shift_end + timedelta(minutes=shift.grace_after_minutes or 0):
        ot_minutes = minutes_between(shift_end, out_time)
        if ot_minutes >= min_ot_minutes:
            ot_hours = round_half_up(ot_minutes / 60, 2)

    return AttendanceMetrics(
        delay_by_minutes=max(0, delay),
        extra_time_minutes=max(0, extra),
        total_working_hours_decimal=total_hours,
        ot_hours_decimal=ot_hours,
    )


def delay_at_check_in(in_time: datetime, shift: Optional[Shift]) -> int:
    if shift is None:
        return 0
    shift_start = build_shift_start_time(in_time, shift)
    return minutes_between(shift_start, in_time) if in_time > shift_start else 0


def regular_shift_hours(in_time: datetime, out_time: datetime, shift: Shift) -> Tuple[float, int]:
    """Regular hours credited for the shift and minutes left early.

    Checking out at or after the shift end credits the full shift; an early
    check-out credits only the time from shift start to check-out.
    """

    shift_start = build_shift_start_time(in_time, shift)
    shift_end = build_shift_end_time(in_time, shift)
    if out_time >= shift_end:
        return max(0.0, hours_between(shift_start, shift_end)), 0
    return max(0.0, hours_between(shift_start, out_time)), minutes_between(out_time, shift_end)


def with_manual_ot(metrics: AttendanceMetrics, manual_ot_hours: float) -> AttendanceMetrics:
    """Stored total for a record carrying an administrator OT override: worked + manual."""

    if manual_ot_hours <= 0:
        return metrics
    return replace(
        metrics,
        total_working_hours_decimal=round_half_up(metrics.total_working_hours_decimal + manual_ot_hours, 2),
        ot_hours_decimal=manual_ot_hours,
    )


def final_hours(
    metrics: AttendanceMetrics,
    *,
    regular_hours: float,
    manual_ot_hours: float,
) -> Tuple[float, float]:
    """Reported ``(total_hours, ot_hours)``.

    Manual OT always wins: worked hours + manual OT. Otherwise auto OT adds to
    the regular shift hours, and without OT the worked hours stand as they are.
    """

    if manual_ot_hours > 0:
        return max(0.0, round_half_up(metrics.total_working_hours_decimal + manual_ot_hours, 2)), manual_ot_hours
    if metrics.ot_hours_decimal > 0:
        return max(0.0, round_half_up(regular_hours + metrics.ot_hours_decimal, 2)), metrics.ot_hours_decimal
    return metrics.total_working_hours_decimal, 0.0


class MetricsCalculator(ABC):
    """Calculator interface (Strategy Pattern for attendance metrics)."""

    @abstractmethod
    def compute_metrics(
        self,
        check_in: Any,
        check_out: Any,
        employee_type: str,
        is_ot_context: bool = False,
    ) -> AttendanceMetrics:
        raise NotImplementedError

    @abstractmethod
    def shift_hours(
        self,
        in_time: datetime,
        out_time: datetime,
        employee_type: str,
        *,
        is_ot_context: bool = False,
        manual_ot_hours: float = 0.0,
    ) -> Optional[ShiftHours]:
        raise NotImplementedError


class StandardMetricsCalculator(MetricsCalculator):
    """Shift-catalog backed calculator.

    ``is_ot_context`` marks a second (or later) punch pair of the day. It is
    carried for callers and reporting; the arithmetic is the same either way.
    """

    def __init__(self, catalog: ShiftCatalog, *, min_ot_minutes: int = DEFAULT_MIN_OT_MINUTES):
        self._catalog = catalog
        self._min_ot_minutes = int(min_ot_minutes)

    def compute_metrics(
        self,
        check_in: Any,
        check_out: Any,
        employee_type: str,
        is_ot_context: bool = False,
    ) -> AttendanceMetrics:
        in_time = parse_timestamp(check_in)
        out_time = parse_timestamp(check_out)
        if in_time is None or out_time is None or not employee_type:
            return ZERO_METRICS
        if out_time <= in_time:
            return ZERO_METRICS

        shifts = self._catalog.get_shifts(employee_type)
        return calculate_metrics(in_time, out_time, shifts, min_ot_minutes=self._min_ot_minutes)

    def shift_hours(
        self,
        in_time: datetime,
        out_time: datetime,
        employee_type: str,
        *,
        is_ot_context: bool = False,
        manual_ot_hours: float = 0.0,
    ) -> Optional[ShiftHours]:
        shifts = self._catalog.get_shifts(employee_type)
        if not shifts or out_time <= in_time:
            return None

        metrics = calculate_metrics(in_time, out_time, shifts, min_ot_minutes=self._min_ot_minutes)
        shift = detect_shift_for_time(in_time, shifts).shift
        regular, early_minutes = regular_shift_hours(in_time, out_time, shift)
        total, ot = final_hours(metrics, regular_hours=regular, manual_ot_hours=manual_ot_hours)
        return ShiftHours(
            regular_shift_hours=regular,
            early_checkout_minutes=max(0, early_minutes),
            total_working_hours_decimal=total,
            ot_hours_decimal=ot,
        )
