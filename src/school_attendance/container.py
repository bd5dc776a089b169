from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.mysql_catalog_repository import (
    MySQLAttendanceStatusRepository,
    MySQLEnrollmentRepository,
    MySQLPermissionRepository,
)
from .attendance.service import AttendanceService
from .attendance.strategies.precedence_policy import PrecedenceDayStatusPolicy
from .calendar.mysql_calendar_repository import MySQLCalendarRepository
from .calendar.service import CalendarService
from .core.policy import AttendancePolicy
from .database.connection import DBConfig, DatabaseConnection
from .reports.calculator.standard_calculator import StandardRateCalculator
from .reports.service import AttendanceReportService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    policy: AttendancePolicy

    calendar_repo: MySQLCalendarRepository
    enrollments_repo: MySQLEnrollmentRepository
    attendance_repo: MySQLAttendanceRepository
    statuses_repo: MySQLAttendanceStatusRepository
    permissions_repo: MySQLPermissionRepository

    calendar_service: CalendarService
    attendance_service: AttendanceService
    report_service: AttendanceReportService


def build_container(*, db_config: dict, policy: AttendancePolicy | None = None) -> Container:
    policy = policy or AttendancePolicy()
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    calendar_repo = MySQLCalendarRepository(conn)
    enrollments_repo = MySQLEnrollmentRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    statuses_repo = MySQLAttendanceStatusRepository(conn)
    permissions_repo = MySQLPermissionRepository(conn)

    day_policy = PrecedenceDayStatusPolicy()
    calendar_service = CalendarService(calendar_repo, policy=policy)
    attendance_service = AttendanceService(
        attendance_repo,
        enrollments_repo,
        statuses_repo,
        permissions_repo,
        calendar_service,
        policy=day_policy,
    )
    report_service = AttendanceReportService(
        enrollments_repo,
        attendance_repo,
        statuses_repo,
        calendar_service,
        calculator=StandardRateCalculator(),
        policy=policy,
        day_policy=day_policy,
    )

    return Container(
        conn=conn,
        policy=policy,
        calendar_repo=calendar_repo,
        enrollments_repo=enrollments_repo,
        attendance_repo=attendance_repo,
        statuses_repo=statuses_repo,
        permissions_repo=permissions_repo,
        calendar_service=calendar_service,
        attendance_service=attendance_service,
        report_service=report_service,
    )
