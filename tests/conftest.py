from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timedelta
from typing import Optional

import pytest

from school_attendance.attendance.model import (
    AttendanceStatusDefinition,
    Enrollment,
    RoleAttendancePermission,
    StudentClassAttendance,
)
from school_attendance.attendance.service import AttendanceService
from school_attendance.calendar.model import AcademicCycle, AcademicWeek, Bimester, Holiday
from school_attendance.calendar.service import CalendarService
from school_attendance.core.enums import EnrollmentStatus, WeekType
from school_attendance.core.policy import AttendancePolicy
from school_attendance.reports.service import AttendanceReportService

INSTRUCTOR_ROLE = 10
VIEWER_ROLE = 20


@dataclass
class InMemoryCalendar:
    cycles: list[AcademicCycle]
    bimesters: list[Bimester]
    weeks: list[AcademicWeek] = field(default_factory=list)
    holidays: list[Holiday] = field(default_factory=list)

    def list_cycles(self):
        return list(self.cycles)

    def list_bimesters(self, cycle_id: int):
        return [b for b in self.bimesters if b.cycle_id == cycle_id]

    def get_bimester(self, bimester_id: int) -> Optional[Bimester]:
        return next((b for b in self.bimesters if b.bimester_id == bimester_id), None)

    def list_weeks(self, bimester_id: int):
        return [w for w in self.weeks if w.bimester_id == bimester_id]

    def get_week(self, week_id: int) -> Optional[AcademicWeek]:
        return next((w for w in self.weeks if w.week_id == week_id), None)

    def list_holidays(self, bimester_id: int):
        return [h for h in self.holidays if h.bimester_id == bimester_id]


@dataclass
class InMemoryEnrollments:
    enrollments: list[Enrollment]

    def list_for_section(self, *, section_id: int, cycle_id: int, active_only: bool = True):
        return [
            e
            for e in self.enrollments
            if e.section_id == section_id and e.cycle_id == cycle_id and (e.is_active or not active_only)
        ]

    def get_by_id(self, enrollment_id: int) -> Optional[Enrollment]:
        return next((e for e in self.enrollments if e.enrollment_id == enrollment_id), None)


class InMemoryAttendance:
    def __init__(self, records=()):
        self.records: dict[int, StudentClassAttendance] = {r.attendance_id: r for r in records}
        self._id = max(self.records, default=0)

    def add(self, enrollment_id: int, on_date: date, status: str, *, schedule_id: int = 1) -> int:
        self._id += 1
        self.records[self._id] = StudentClassAttendance(
            attendance_id=self._id,
            enrollment_id=enrollment_id,
            date=on_date,
            schedule_id=schedule_id,
            course_assignment_id=None,
            attendance_status_id=None,
            status=status,
        )
        return self._id

    def list_for_enrollments(self, *, enrollment_ids, start_date: date, end_date: date):
        ids = set(enrollment_ids)
        return [
            r
            for r in self.records.values()
            if r.enrollment_id in ids and start_date <= r.date <= end_date
        ]

    def get_by_id(self, attendance_id: int) -> Optional[StudentClassAttendance]:
        return self.records.get(attendance_id)

    def find_existing(self, *, enrollment_id: int, on_date: date, schedule_id: Optional[int]):
        for r in self.records.values():
            if r.enrollment_id == enrollment_id and r.date == on_date and r.schedule_id == schedule_id:
                return r
        return None

    def create(
        self,
        *,
        enrollment_id: int,
        on_date: date,
        schedule_id: Optional[int],
        course_assignment_id: Optional[int],
        attendance_status_id: int,
        status: str,
        arrival_time: Optional[time],
        notes: Optional[str],
        recorded_by: int,
    ) -> int:
        self._id += 1
        self.records[self._id] = StudentClassAttendance(
            attendance_id=self._id,
            enrollment_id=enrollment_id,
            date=on_date,
            schedule_id=schedule_id,
            course_assignment_id=course_assignment_id,
            attendance_status_id=attendance_status_id,
            status=status,
            arrival_time=arrival_time,
            notes=notes,
            recorded_by=recorded_by,
        )
        return self._id

    def update_status(
        self,
        *,
        attendance_id: int,
        attendance_status_id: int,
        status: str,
        notes: Optional[str],
        last_modified_by: int,
        last_modified_at: datetime,
        modification_reason: str,
    ) -> bool:
        record = self.records.get(attendance_id)
        if not record:
            return False
        self.records[attendance_id] = replace(
            record,
            attendance_status_id=attendance_status_id,
            status=status,
            notes=notes,
            last_modified_by=last_modified_by,
            last_modified_at=last_modified_at,
            modification_reason=modification_reason,
        )
        return True


@dataclass
class InMemoryStatuses:
    statuses: list[AttendanceStatusDefinition]

    def list_all(self):
        return list(self.statuses)


@dataclass
class InMemoryPermissions:
    permissions: list[RoleAttendancePermission]

    def list_for_role(self, role_id: int):
        return [p for p in self.permissions if p.role_id == role_id]


def _weeks(bimester_id: int, first_monday: date, count: int, *, first_id: int = 1) -> list[AcademicWeek]:
    out = []
    for n in range(1, count + 1):
        start = first_monday + timedelta(days=7 * (n - 1))
        out.append(
            AcademicWeek(
                week_id=first_id + n - 1,
                bimester_id=bimester_id,
                number=n,
                start_date=start,
                end_date=start + timedelta(days=4),
            )
        )
    return out


@pytest.fixture
def calendar_repo() -> InMemoryCalendar:
    """2025 cycle; bimester 1 is active with Monday-Friday weeks 1..10 (week 10 is a break)."""

    weeks = _weeks(1, date(2025, 1, 6), 10)
    weeks[-1] = replace(weeks[-1], week_type=WeekType.BREAK)
    return InMemoryCalendar(
        cycles=[AcademicCycle(1, "2025", date(2025, 1, 6), date(2025, 10, 31))],
        bimesters=[
            Bimester(1, 1, 1, date(2025, 1, 6), date(2025, 3, 14), is_active=True, weeks_count=10),
            Bimester(2, 1, 2, date(2025, 3, 17), date(2025, 5, 23)),
        ],
        weeks=weeks,
        holidays=[
            Holiday(1, 1, date(2025, 3, 5), "Founders' day"),
            Holiday(2, 1, date(2025, 3, 6), "Sports day", is_recovered=True),
        ],
    )


@pytest.fixture
def policy() -> AttendancePolicy:
    return AttendancePolicy()


@pytest.fixture
def calendar_service(calendar_repo, policy) -> CalendarService:
    return CalendarService(calendar_repo, policy=policy)


@pytest.fixture
def enrollments_repo() -> InMemoryEnrollments:
    return InMemoryEnrollments(
        [
            Enrollment(1, 101, 7, 1, student_name="Ana López"),
            Enrollment(2, 102, 7, 1, student_name="Bruno Díaz"),
            Enrollment(3, 103, 7, 1, status=EnrollmentStatus.INACTIVE, student_name="Carla Ruiz"),
        ]
    )


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def statuses_repo() -> InMemoryStatuses:
    return InMemoryStatuses(
        [
            AttendanceStatusDefinition(1, "P", "Presente", order=1),
            AttendanceStatusDefinition(2, "I", "Inasistencia", order=2),
            AttendanceStatusDefinition(3, "T", "Tardanza", order=3),
            AttendanceStatusDefinition(4, "IJ", "Inasistencia justificada", order=4),
            AttendanceStatusDefinition(5, "OLD", "Retired code", order=5, is_active=False),
        ]
    )


@pytest.fixture
def permissions_repo() -> InMemoryPermissions:
    return InMemoryPermissions(
        [
            RoleAttendancePermission(INSTRUCTOR_ROLE, 1, can_create=True, can_modify=True),
            RoleAttendancePermission(INSTRUCTOR_ROLE, 2, can_create=True),
            RoleAttendancePermission(INSTRUCTOR_ROLE, 3, can_create=True),
            RoleAttendancePermission(INSTRUCTOR_ROLE, 4, can_create=True, requires_notes=True),
            RoleAttendancePermission(INSTRUCTOR_ROLE, 5, can_create=True),
            RoleAttendancePermission(VIEWER_ROLE, 1),
        ]
    )


@pytest.fixture
def attendance_service(
    attendance_repo, enrollments_repo, statuses_repo, permissions_repo, calendar_service
) -> AttendanceService:
    return AttendanceService(attendance_repo, enrollments_repo, statuses_repo, permissions_repo, calendar_service)


@pytest.fixture
def report_service(enrollments_repo, attendance_repo, statuses_repo, calendar_service, policy) -> AttendanceReportService:
    return AttendanceReportService(enrollments_repo, attendance_repo, statuses_repo, calendar_service, policy=policy)

