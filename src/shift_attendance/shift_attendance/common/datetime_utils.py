from __future__ import annotations

import math
import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional

from ..core.exceptions import ValidationError

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_NON_DIGITS = re.compile(r"\D")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time; the default clock for services."""
    return datetime.now()


def now_utc() -> datetime:
    """Current UTC time as a naive datetime (same shape as stored timestamps)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_time_of_day(value: Any, *, strict: bool = False) -> time:
    """Parse a shift time-of-day such as ``"09:00"``, ``"21:30:00"`` or ``"9:30 pm"``.

    AM/PM markers are case-insensitive; ``12 AM`` becomes 00 and any PM hour
    other than 12 gets 12 added. Anything unparsable or out of range becomes
    00:00, unless ``strict`` is set, in which case ``ValidationError`` is raised.
    """

    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    if isinstance(value, timedelta):
        total = int(value.total_seconds()) % 86400
        return time(total // 3600, (total % 3600) // 60)

    upper = str(value if value is not None else "").strip().upper()
    has_am = "AM" in upper
    has_pm = "PM" in upper
    parts = upper.replace("AM", "", 1).replace("PM", "", 1).strip().split(":")

    hour_match = _LEADING_INT.match(parts[0])
    minute_digits = _NON_DIGITS.sub("", parts[1]) if len(parts) > 1 else "0"
    if strict and (not hour_match or len(parts) < 2 or not minute_digits):
        raise ValidationError(f"Invalid time of day: {value!r}")

    hour = int(hour_match.group(1)) if hour_match else 0
    minute = int(minute_digits) if minute_digits else 0

    if has_am:
        if hour == 12:
            hour = 0
    elif has_pm:
        if hour != 12:
            hour += 12

    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        if strict:
            raise ValidationError(f"Invalid time of day: {value!r}")
        return time(0, 0)
    return time(hour, minute)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; returns None when it cannot be parsed.

    Offset-aware values are converted to local wall-clock time so they can be
    compared with the naive timestamps kept in the store.
    """

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def round_half_up(value: float, ndigits: int = 0) -> float:
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from ``start`` to ``end``, halves rounded up."""
    return int(round_half_up((end - start).total_seconds() / 60))


def hours_between(start: datetime, end: datetime) -> float:
    """Hours from ``start`` to ``end`` rounded to 2 decimals."""
    return round_half_up((end - start).total_seconds() / 3600, 2)
