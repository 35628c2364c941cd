from __future__ import annotations

import logging
import queue
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Protocol

from ..core.enums import PunchStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceEvent:
    """Emitted by the punch write path; consumed by the notification worker."""

    kind: PunchStatus
    employee_id: int
    employee_name: str
    attendance_date: date
    in_time: Optional[datetime]
    out_time: Optional[datetime] = None
    employee_code: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    organization_name: Optional[str] = None
    shift_name: Optional[str] = None
    total_hours: float = 0.0
    ot_hours: float = 0.0
    is_ot: bool = False


class EventPublisher(Protocol):
    def publish(self, event: AttendanceEvent) -> None:
        """Hand the event off. Must never raise into the caller."""

        raise NotImplementedError


class QueueEventPublisher(EventPublisher):
    """In-process hand-off to :class:`NotificationWorker` through a bounded queue."""

    def __init__(self, events: "queue.Queue[AttendanceEvent]"):
        self._events = events

    def publish(self, event: AttendanceEvent) -> None:
        try:
            self._events.put_nowait(event)
        except queue.Full:
            logger.warning("Notification queue full, dropping %s event for employee %s", event.kind.value, event.employee_id)
