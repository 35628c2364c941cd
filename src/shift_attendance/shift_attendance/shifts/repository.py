from __future__ import annotations

from datetime import time
from typing import Optional, Protocol, Sequence

from .model import Shift


class ShiftRepository(Protocol):
    def list_for_employee_type(self, employee_type: str) -> Sequence[Shift]:
        """Shifts of one employee type, ordered by start time ascending."""

        raise NotImplementedError

    def list_employee_types(self) -> Sequence[str]:
        """Distinct employee types that have at least one shift."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Shift]:
        raise NotImplementedError

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        raise NotImplementedError

    def create(
        self,
        *,
        shift_name: str,
        employee_type: str,
        start_time: time,
        end_time: time,
        grace_before_minutes: int,
        grace_after_minutes: int,
        presence_time_seconds: int,
        presence_count: int,
        presence_window_seconds: int,
    ) -> int:
        raise NotImplementedError

    def update(self, shift: Shift) -> bool:
        raise NotImplementedError

    def delete(self, shift_id: int) -> bool:
        raise NotImplementedError
