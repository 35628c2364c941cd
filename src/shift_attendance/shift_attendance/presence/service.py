"""Presence debouncing: a check-in must be backed by recent detections.

A single static frame satisfies neither the count rule nor the duration
rule, which is what makes this an anti-spoofing check.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_PRESENCE_RETENTION_DAYS
from .model import PresenceThresholds
from .repository import PresenceRepository

logger = logging.getLogger(__name__)


class PresenceService:
    def __init__(
        self,
        presence: PresenceRepository,
        *,
        retention_days: int = DEFAULT_PRESENCE_RETENTION_DAYS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._presence = presence
        self._retention_days = int(retention_days)
        self._clock = clock

    def record_detection(self, employee_id: int, detection_time: datetime, detection_date: date) -> None:
        """Store one detection sample. A store error is logged and never reaches the punch."""

        try:
            self._presence.add(employee_id=employee_id, detection_time=detection_time, detection_date=detection_date)
        except Exception:
            logger.exception("Error recording presence detection for employee %s", employee_id)

    def check_presence_requirement(
        self,
        employee_id: int,
        detection_date: date,
        presence_time_seconds: int,
        presence_count: int,
        presence_window_seconds: int,
    ) -> bool:
        """True when enough detections (count) or a long enough span (duration) fall in the window.

        Fails closed: a store error counts as "requirement not met".
        """

        since = self._clock() - timedelta(seconds=int(presence_window_seconds))
        try:
            times = list(
                self._presence.list_detection_times(employee_id=employee_id, detection_date=detection_date, since=since)
            )
        except Exception:
            logger.exception("Error checking presence requirement for employee %s", employee_id)
            return False

        if not times:
            return False
        if len(times) >= int(presence_count):
            return True
        if len(times) >= 2:
            span = (max(times) - min(times)).total_seconds()
            if span >= int(presence_time_seconds):
                return True
        return False

    def is_presence_satisfied(self, employee_id: int, detection_date: date, thresholds: PresenceThresholds) -> bool:
        return self.check_presence_requirement(
            employee_id,
            detection_date,
            thresholds.presence_time_seconds,
            thresholds.presence_count,
            thresholds.presence_window_seconds,
        )

    def clear_old_detections(self) -> int:
        cutoff = (self._clock() - timedelta(days=self._retention_days)).date()
        removed = self._presence.delete_before(cutoff)
        if removed:
            logger.info("Purged %d presence detections older than %s", removed, cutoff)
        return removed
