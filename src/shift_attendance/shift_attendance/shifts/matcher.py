"""Shift matching for punch timestamps.

All shift boundaries are anchored to the calendar date of the timestamp
passed in (for metrics that is always the check-in), never the check-out.
"""
from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Optional, Sequence

from ..core.constants import CHECK_OUT_WINDOW_MINUTES, DEFAULT_CHECK_IN_GRACE_MINUTES
from .model import Shift, ShiftMatch


def build_local_time(base: datetime, at: time) -> datetime:
    return base.replace(hour=at.hour, minute=at.minute, second=0, microsecond=0)


def build_shift_start_time(base: datetime, shift: Shift) -> datetime:
    return build_local_time(base, shift.start_time)


def build_shift_end_time(base: datetime, shift: Shift) -> datetime:
    """Shift end on ``base``'s date, pushed to the next day unless strictly after the start."""

    start = build_local_time(base, shift.start_time)
    end = build_local_time(base, shift.end_time)
    if end <= start:
        end += timedelta(days=1)
    return end


def get_shift_end_with_grace(base: datetime, shift: Shift) -> datetime:
    return build_shift_end_time(base, shift) + timedelta(minutes=shift.grace_after_minutes or 0)


def detect_shift_for_time(at: datetime, shifts: Sequence[Shift]) -> Optional[ShiftMatch]:
    """Containment match on time of day.

    Returns the first shift (catalog order) containing ``at``; overnight shifts
    contain anything from their start until midnight and from midnight until
    their end. Falls back to the first shift when nothing contains ``at``, so
    the only ``None`` result is an empty catalog.
    """

    if not shifts:
        return None

    minutes = at.hour * 60 + at.minute
    for index, shift in enumerate(shifts):
        if shift.is_overnight:
            contained = minutes >= shift.start_minutes or minutes <= shift.end_minutes
        else:
            contained = shift.start_minutes <= minutes <= shift.end_minutes
        if contained:
            return ShiftMatch(shift=shift, shift_index=index)

    return ShiftMatch(shift=shifts[0], shift_index=0)


def find_shift_for_punch_with_grace(at: datetime, shifts: Sequence[Shift]) -> Optional[ShiftMatch]:
    """First shift whose ``[start - grace_before, end + grace_after]`` window holds ``at``.

    Falls back to :func:`detect_shift_for_time`.
    """

    if not shifts:
        return None

    for index, shift in enumerate(shifts):
        earliest = build_shift_start_time(at, shift) - timedelta(minutes=shift.grace_before_minutes or 0)
        latest = get_shift_end_with_grace(at, shift)
        if earliest <= at <= latest:
            return ShiftMatch(shift=shift, shift_index=index)

    return detect_shift_for_time(at, shifts)


def is_within_check_in_window(at: datetime, shift: Optional[Shift]) -> bool:
    """Check-in allowed from ``start - grace_before`` (30 min when unset) through shift end."""

    if shift is None:
        return False
    grace = shift.grace_before_minutes or DEFAULT_CHECK_IN_GRACE_MINUTES
    earliest = build_shift_start_time(at, shift) - timedelta(minutes=grace)
    return earliest <= at <= build_shift_end_time(at, shift)


def is_within_check_out_window(at: datetime, shift: Optional[Shift], *, anchor: Optional[datetime] = None) -> bool:
    """Check-out allowed during the last 30 minutes of the shift, end inclusive.

    ``anchor`` (the check-in) fixes which calendar day the shift end falls on;
    without it the check-out itself is used.
    """

    if shift is None:
        return False
    end = build_shift_end_time(anchor or at, shift)
    return end - timedelta(minutes=CHECK_OUT_WINDOW_MINUTES) <= at <= end


def find_shift_by_check_in_window(at: datetime, shifts: Sequence[Shift]) -> Optional[ShiftMatch]:
    for index, shift in enumerate(shifts or ()):
        if is_within_check_in_window(at, shift):
            return ShiftMatch(shift=shift, shift_index=index)
    return None


def match_shift_for_punch(at: datetime, shifts: Sequence[Shift]) -> Optional[Shift]:
    match = find_shift_for_punch_with_grace(at, shifts)
    return match.shift if match else None
