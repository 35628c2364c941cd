from __future__ import annotations

import queue
from dataclasses import dataclass
from typing import Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.metrics import MetricsCalculator, StandardMetricsCalculator
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .background.absence_marker import AbsenceMarker
from .background.auto_checkout import AutoCheckoutSweeper
from .core.constants import (
    DEFAULT_AUTO_CHECKOUT_FIXED_HOURS,
    DEFAULT_MIN_OT_MINUTES,
    DEFAULT_PRESENCE_RETENTION_DAYS,
)
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .notifications.events import AttendanceEvent, QueueEventPublisher
from .notifications.worker import LoggingNotificationSender, NotificationWorker
from .presence.mysql_presence_repository import MySQLPresenceRepository
from .presence.service import PresenceService
from .reports.service import AttendanceReportService
from .shifts.catalog import ShiftCatalog
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.repository import ShiftRepository
from .shifts.service import ShiftService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    shifts_repo: ShiftRepository
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository

    catalog: ShiftCatalog
    calculator: MetricsCalculator
    presence_service: PresenceService
    attendance_service: AttendanceService
    report_service: AttendanceReportService
    shift_service: ShiftService
    auto_checkout_sweeper: AutoCheckoutSweeper
    absence_marker: AbsenceMarker
    notification_worker: Optional[NotificationWorker] = None


def assemble(
    *,
    shifts_repo: ShiftRepository,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    presence_service: PresenceService,
    strategy_factory: Optional[AttendanceStrategyFactory] = None,
    min_ot_minutes: int = DEFAULT_MIN_OT_MINUTES,
    enforce_presence: bool = False,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over already-built repositories (MySQL in production, fakes in tests)."""

    factory = strategy_factory or AttendanceStrategyFactory()
    catalog = ShiftCatalog(shifts_repo)
    calculator = StandardMetricsCalculator(catalog, min_ot_minutes=min_ot_minutes)

    events: "queue.Queue[AttendanceEvent]" = queue.Queue(maxsize=1000)
    publisher = QueueEventPublisher(events)
    worker = NotificationWorker(events, LoggingNotificationSender())

    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        catalog,
        calculator,
        presence_service,
        publisher,
        strategy_factory=factory,
        enforce_presence=enforce_presence,
    )

    return Container(
        conn=conn,
        shifts_repo=shifts_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        catalog=catalog,
        calculator=calculator,
        presence_service=presence_service,
        attendance_service=attendance_service,
        report_service=AttendanceReportService(attendance_repo, catalog, calculator),
        shift_service=ShiftService(shifts_repo),
        auto_checkout_sweeper=AutoCheckoutSweeper(
            attendance_repo, catalog, calculator, deadline=factory.for_deadline()
        ),
        absence_marker=AbsenceMarker(attendance_repo, employees_repo, catalog),
        notification_worker=worker,
    )


def build_container(settings) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))

    strategy_factory = AttendanceStrategyFactory.from_settings(
        punch_window_policy=getattr(settings, "PUNCH_WINDOW_POLICY", "grace"),
        deadline_policy=getattr(settings, "AUTO_CHECKOUT_POLICY", "grace_after"),
        fixed_hours=getattr(settings, "AUTO_CHECKOUT_FIXED_HOURS", DEFAULT_AUTO_CHECKOUT_FIXED_HOURS),
    )
    presence_service = PresenceService(
        MySQLPresenceRepository(conn),
        retention_days=getattr(settings, "PRESENCE_RETENTION_DAYS", DEFAULT_PRESENCE_RETENTION_DAYS),
    )

    return assemble(
        shifts_repo=MySQLShiftRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        presence_service=presence_service,
        strategy_factory=strategy_factory,
        min_ot_minutes=getattr(settings, "MIN_OT_MINUTES", DEFAULT_MIN_OT_MINUTES),
        enforce_presence=bool(getattr(settings, "ENFORCE_PRESENCE", False)),
        conn=conn,
    )
