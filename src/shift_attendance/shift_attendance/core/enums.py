from __future__ import annotations

from enum import Enum


class PunchStatus(str, Enum):
    """Outcome of a single punch on the mark endpoint."""

    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"


class PunchWindowPolicy(str, Enum):
    """Which rule decides whether a punch falls inside a shift window."""

    GRACE = "grace"
    WINDOWS = "windows"


class DeadlinePolicy(str, Enum):
    """Which rule decides when an open record is force-closed."""

    GRACE_AFTER = "grace_after"
    FIXED_HOURS = "fixed_hours"
