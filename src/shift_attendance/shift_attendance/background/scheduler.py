from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable

from apscheduler.schedulers.background import BackgroundScheduler

from ..core.constants import (
    DEFAULT_ABSENCE_MARK_INTERVAL_SECONDS,
    DEFAULT_AUTO_CHECKOUT_INTERVAL_SECONDS,
    INITIAL_ABSENCE_MARK_DELAY_SECONDS,
    SCHEDULER_MISFIRE_GRACE_SECONDS,
)

logger = logging.getLogger(__name__)

AUTO_CHECKOUT_JOB = "auto-checkout"
ABSENCE_MARKER_JOB = "absence-marker"
PRESENCE_PURGE_JOB = "presence-purge"


def logged_job(name: str, func: Callable[[], object]) -> Callable[[], None]:
    """Wrap ``func`` so a failing run is logged and the next run still happens."""

    def run() -> None:
        try:
            func()
        except Exception:
            logger.exception("Background task %s failed; will retry next cycle", name)

    return run


def _interval(settings, name: str, default: int) -> int:
    seconds = int(getattr(settings, name, default))
    if seconds <= 0:
        raise ValueError(f"{name} must be > 0")
    return seconds


def build_scheduler(container, settings) -> BackgroundScheduler:
    """Register the sweeps on a scheduler that is not started yet.

    Absence marking and the presence purge are separate jobs so one failing
    never skips the other. Both first run shortly after start, then hourly by
    default; auto checkout runs on its own interval.
    """

    auto_checkout_every = _interval(settings, "AUTO_CHECKOUT_INTERVAL_SECONDS", DEFAULT_AUTO_CHECKOUT_INTERVAL_SECONDS)
    absence_every = _interval(settings, "ABSENCE_MARK_INTERVAL_SECONDS", DEFAULT_ABSENCE_MARK_INTERVAL_SECONDS)
    first_run = datetime.now() + timedelta(seconds=INITIAL_ABSENCE_MARK_DELAY_SECONDS)

    scheduler = BackgroundScheduler(
        job_defaults={
            "coalesce": True,
            "max_instances": 1,
            "misfire_grace_time": SCHEDULER_MISFIRE_GRACE_SECONDS,
        }
    )
    scheduler.add_job(
        logged_job(AUTO_CHECKOUT_JOB, container.auto_checkout_sweeper.sweep_overdue_checkouts),
        "interval",
        seconds=auto_checkout_every,
        id=AUTO_CHECKOUT_JOB,
        name=AUTO_CHECKOUT_JOB,
    )
    scheduler.add_job(
        logged_job(ABSENCE_MARKER_JOB, container.absence_marker.mark_absences_for_today),
        "interval",
        seconds=absence_every,
        next_run_time=first_run,
        id=ABSENCE_MARKER_JOB,
        name=ABSENCE_MARKER_JOB,
    )
    scheduler.add_job(
        logged_job(PRESENCE_PURGE_JOB, container.presence_service.clear_old_detections),
        "interval",
        seconds=absence_every,
        next_run_time=first_run,
        id=PRESENCE_PURGE_JOB,
        name=PRESENCE_PURGE_JOB,
    )
    return scheduler
