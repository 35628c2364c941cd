from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..core.constants import (
    DEFAULT_PRESENCE_COUNT,
    DEFAULT_PRESENCE_TIME_SECONDS,
    DEFAULT_PRESENCE_WINDOW_SECONDS,
)


@dataclass(frozen=True)
class Shift:
    """Domain entity: a shift definition for one employee type.

    ``start_time``/``end_time`` are times of day; an end before the start
    means the shift crosses midnight.
    """

    shift_id: int
    shift_name: str
    employee_type: str
    start_time: time
    end_time: time
    grace_before_minutes: int = 0
    grace_after_minutes: int = 0
    presence_time_seconds: int = DEFAULT_PRESENCE_TIME_SECONDS
    presence_count: int = DEFAULT_PRESENCE_COUNT
    presence_window_seconds: int = DEFAULT_PRESENCE_WINDOW_SECONDS

    @property
    def start_minutes(self) -> int:
        return self.start_time.hour * 60 + self.start_time.minute

    @property
    def end_minutes(self) -> int:
        return self.end_time.hour * 60 + self.end_time.minute

    @property
    def is_overnight(self) -> bool:
        return self.end_minutes < self.start_minutes


@dataclass(frozen=True)
class ShiftMatch:
    """Result of shift matching: the shift and its position in the catalog."""

    shift: Shift
    shift_index: int
