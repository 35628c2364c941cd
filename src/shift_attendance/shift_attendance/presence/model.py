from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import (
    DEFAULT_PRESENCE_COUNT,
    DEFAULT_PRESENCE_TIME_SECONDS,
    DEFAULT_PRESENCE_WINDOW_SECONDS,
)


@dataclass(frozen=True)
class PresenceThresholds:
    """Per-shift debounce settings: count of detections, span in seconds, lookback window."""

    presence_time_seconds: int = DEFAULT_PRESENCE_TIME_SECONDS
    presence_count: int = DEFAULT_PRESENCE_COUNT
    presence_window_seconds: int = DEFAULT_PRESENCE_WINDOW_SECONDS
