from __future__ import annotations

from datetime import date, datetime
from typing import Protocol, Sequence


class PresenceRepository(Protocol):
    def add(self, *, employee_id: int, detection_time: datetime, detection_date: date) -> None:
        raise NotImplementedError

    def list_detection_times(self, *, employee_id: int, detection_date: date, since: datetime) -> Sequence[datetime]:
        """Detection times at or after ``since``, newest first."""

        raise NotImplementedError

    def delete_before(self, cutoff: date) -> int:
        raise NotImplementedError
