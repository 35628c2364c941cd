from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Sequence

from ...shifts.model import Shift, ShiftMatch


class PunchWindowStrategy(ABC):
    """Strategy Pattern: decide whether a punch falls inside a shift window."""

    @abstractmethod
    def resolve_check_in(self, *, at: datetime, shifts: Sequence[Shift]) -> Optional[ShiftMatch]:
        """Shift a check-in belongs to, or None when it is outside every window."""

        raise NotImplementedError

    @abstractmethod
    def accepts_check_out(self, *, at: datetime, in_time: datetime, shift: Shift) -> bool:
        raise NotImplementedError


class DeadlineStrategy(ABC):
    """Strategy Pattern: when an open record gets closed by the sweeper."""

    location_out: str

    @abstractmethod
    def deadline(self, *, in_time: datetime, shift: Shift) -> datetime:
        raise NotImplementedError
