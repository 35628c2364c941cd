from __future__ import annotations

from datetime import datetime, timedelta

from ...core.constants import AUTO_CHECKOUT_LOCATION, DEFAULT_AUTO_CHECKOUT_FIXED_HOURS
from ...shifts.matcher import build_shift_end_time, get_shift_end_with_grace
from ...shifts.model import Shift
from .base import DeadlineStrategy


class GraceAfterDeadlineStrategy(DeadlineStrategy):
    """Close at shift end plus the shift's own grace-after."""

    location_out = AUTO_CHECKOUT_LOCATION

    def deadline(self, *, in_time: datetime, shift: Shift) -> datetime:
        return get_shift_end_with_grace(in_time, shift)


class FixedHoursDeadlineStrategy(DeadlineStrategy):
    """Close a fixed number of hours after shift end, whatever the grace settings."""

    def __init__(self, hours: int = DEFAULT_AUTO_CHECKOUT_FIXED_HOURS):
        self.hours = int(hours)
        self.location_out = f"{AUTO_CHECKOUT_LOCATION} ({self.hours}h grace)"

    def deadline(self, *, in_time: datetime, shift: Shift) -> datetime:
        return build_shift_end_time(in_time, shift) + timedelta(hours=self.hours)
