from __future__ import annotations

import logging
import queue
import threading
from typing import Optional, Protocol

from .events import AttendanceEvent

logger = logging.getLogger(__name__)


class NotificationSender(Protocol):
    def send(self, event: AttendanceEvent) -> None:
        raise NotImplementedError


class LoggingNotificationSender(NotificationSender):
    """Default sender: writes the notification to the log instead of email/WhatsApp."""

    def send(self, event: AttendanceEvent) -> None:
        logger.info(
            "Notify %s (%s): %s on %s",
            event.employee_name,
            event.email or event.phone_number or "no contact",
            event.kind.value,
            event.attendance_date.isoformat(),
        )


class NotificationWorker:
    """Daemon thread draining attendance events into a sender.

    Delivery failures stay here; they never reach the punch path.
    """

    def __init__(self, events: "queue.Queue[AttendanceEvent]", sender: NotificationSender, *, poll_seconds: float = 1.0):
        self._events = events
        self._sender = sender
        self._poll_seconds = poll_seconds
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="notification-worker", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join(timeout)

    def process_one(self, timeout: Optional[float] = None) -> bool:
        """Deliver a single queued event. Returns False when the queue stayed empty."""

        try:
            event = self._events.get(timeout=timeout) if timeout else self._events.get_nowait()
        except queue.Empty:
            return False
        try:
            self._sender.send(event)
        except Exception:
            logger.exception("Notification delivery failed for employee %s (%s)", event.employee_id, event.kind.value)
        finally:
            self._events.task_done()
        return True

    def _run(self) -> None:
        while not self._stop.is_set():
            self.process_one(timeout=self._poll_seconds)
