from __future__ import annotations

import logging
from typing import List, Sequence

from .model import Shift
from .repository import ShiftRepository

logger = logging.getLogger(__name__)


class ShiftCatalog:
    """Read-only view over configured shifts, grouped by employee type.

    An empty list means "no shift information available"; callers must check
    for it before trusting a match.
    """

    def __init__(self, shifts: ShiftRepository):
        self._shifts = shifts

    def get_shifts(self, employee_type: str) -> List[Shift]:
        if not employee_type:
            return []
        try:
            shifts = list(self._shifts.list_for_employee_type(employee_type))
        except Exception:
            logger.exception("Error fetching shifts for employee type %s", employee_type)
            return []
        return sorted(shifts, key=lambda s: s.start_minutes)

    def employee_types(self) -> Sequence[str]:
        return self._shifts.list_employee_types()
