from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ...shifts.matcher import (
    find_shift_by_check_in_window,
    find_shift_for_punch_with_grace,
    is_within_check_out_window,
)
from ...shifts.model import Shift, ShiftMatch
from .base import PunchWindowStrategy


class GracePunchStrategy(PunchWindowStrategy):
    """Grace-aware match for check-ins; check-outs are always accepted."""

    def resolve_check_in(self, *, at: datetime, shifts: Sequence[Shift]) -> Optional[ShiftMatch]:
        return find_shift_for_punch_with_grace(at, shifts)

    def accepts_check_out(self, *, at: datetime, in_time: datetime, shift: Shift) -> bool:
        return True


class WindowedPunchStrategy(PunchWindowStrategy):
    """Narrow windows: check-in from start minus grace-before, check-out in the last 30 minutes."""

    def resolve_check_in(self, *, at: datetime, shifts: Sequence[Shift]) -> Optional[ShiftMatch]:
        return find_shift_by_check_in_window(at, shifts)

    def accepts_check_out(self, *, at: datetime, in_time: datetime, shift: Shift) -> bool:
        return is_within_check_out_window(at, shift, anchor=in_time)
