from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_time_of_day
from ..common.validators import require_non_empty, require_non_negative_int, require_positive_int
from ..core.constants import (
    DEFAULT_PRESENCE_COUNT,
    DEFAULT_PRESENCE_TIME_SECONDS,
    DEFAULT_PRESENCE_WINDOW_SECONDS,
)
from ..core.exceptions import NotFoundError, ValidationError
from .model import Shift
from .repository import ShiftRepository


def _opt(data: Mapping[str, Any], key: str, default: Any) -> Any:
    value = data.get(key)
    return default if value in (None, "") else value


class ShiftService:
    """Shift administration. Times are parsed strictly here, unlike the lenient read path."""

    def __init__(self, shifts: ShiftRepository):
        self._shifts = shifts

    def list_shifts(self, employee_type: Optional[str] = None) -> Sequence[Shift]:
        if employee_type:
            return self._shifts.list_for_employee_type(employee_type)
        return self._shifts.list_all()

    def get(self, shift_id: int) -> Shift:
        shift = self._shifts.get_by_id(int(shift_id))
        if not shift:
            raise NotFoundError("Shift not found.")
        return shift

    def create(self, data: Mapping[str, Any]) -> Shift:
        start = parse_time_of_day(data.get("start_time"), strict=True)
        end = parse_time_of_day(data.get("end_time"), strict=True)
        if start == end:
            raise ValidationError("start_time and end_time must differ")

        shift_id = self._shifts.create(
            shift_name=require_non_empty(data.get("shift_name"), "shift_name"),
            employee_type=require_non_empty(data.get("employee_type"), "employee_type"),
            start_time=start,
            end_time=end,
            grace_before_minutes=require_non_negative_int(_opt(data, "grace_before", 0), "grace_before"),
            grace_after_minutes=require_non_negative_int(_opt(data, "grace_after", 0), "grace_after"),
            presence_time_seconds=require_positive_int(
                _opt(data, "presence_time", DEFAULT_PRESENCE_TIME_SECONDS), "presence_time"
            ),
            presence_count=require_positive_int(_opt(data, "presence_count", DEFAULT_PRESENCE_COUNT), "presence_count"),
            presence_window_seconds=require_positive_int(
                _opt(data, "presence_window", DEFAULT_PRESENCE_WINDOW_SECONDS), "presence_window"
            ),
        )
        return self.get(shift_id)

    def update(self, shift_id: int, data: Mapping[str, Any]) -> Shift:
        current = self.get(shift_id)

        changes: dict[str, Any] = {}
        if "shift_name" in data:
            changes["shift_name"] = require_non_empty(data.get("shift_name"), "shift_name")
        if "employee_type" in data:
            changes["employee_type"] = require_non_empty(data.get("employee_type"), "employee_type")
        if "start_time" in data:
            changes["start_time"] = parse_time_of_day(data.get("start_time"), strict=True)
        if "end_time" in data:
            changes["end_time"] = parse_time_of_day(data.get("end_time"), strict=True)
        if "grace_before" in data:
            changes["grace_before_minutes"] = require_non_negative_int(data.get("grace_before"), "grace_before")
        if "grace_after" in data:
            changes["grace_after_minutes"] = require_non_negative_int(data.get("grace_after"), "grace_after")
        if "presence_time" in data:
            changes["presence_time_seconds"] = require_positive_int(data.get("presence_time"), "presence_time")
        if "presence_count" in data:
            changes["presence_count"] = require_positive_int(data.get("presence_count"), "presence_count")
        if "presence_window" in data:
            changes["presence_window_seconds"] = require_positive_int(data.get("presence_window"), "presence_window")

        updated = replace(current, **changes)
        if updated.start_time == updated.end_time:
            raise ValidationError("start_time and end_time must differ")
        if not self._shifts.update(updated):
            raise NotFoundError("Shift not found.")
        return updated

    def delete(self, shift_id: int) -> None:
        if not self._shifts.delete(int(shift_id)):
            raise NotFoundError("Shift not found.")
