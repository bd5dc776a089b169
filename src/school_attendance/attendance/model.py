from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Optional

from ..common.datetime_utils import format_iso_date
from ..core.enums import EnrollmentStatus, StatusRole


@dataclass(frozen=True)
class Enrollment:
    """Domain entity: a student's enrollment in a section for one cycle.

    Attendance attaches to the enrollment, not to the student directly.
    """

    enrollment_id: int
    student_id: int
    section_id: int
    cycle_id: int
    status: EnrollmentStatus = EnrollmentStatus.ACTIVE
    date_enrolled: Optional[date] = None
    student_name: str = ""

    @property
    def is_active(self) -> bool:
        return self.status == EnrollmentStatus.ACTIVE


@dataclass(frozen=True)
class StudentClassAttendance:
    """One student, one class period, one day. The atomic attendance fact."""

    attendance_id: int
    enrollment_id: int
    date: date
    schedule_id: Optional[int]
    course_assignment_id: Optional[int]
    attendance_status_id: Optional[int]
    status: str
    arrival_time: Optional[time] = None
    notes: Optional[str] = None
    recorded_by: Optional[int] = None
    last_modified_by: Optional[int] = None
    last_modified_at: Optional[datetime] = None
    modification_reason: Optional[str] = None
    # Filled by repository joins for display.
    recorded_by_name: Optional[str] = None
    last_modified_by_name: Optional[str] = None


@dataclass(frozen=True)
class AttendanceStatusDefinition:
    """Catalog row: an institution-defined attendance status."""

    status_id: int
    code: str
    name: str
    order: int = 0
    is_active: bool = True
    role: Optional[StatusRole] = None
    color_code: Optional[str] = None


@dataclass(frozen=True)
class RoleAttendancePermission:
    role_id: int
    attendance_status_id: int
    can_view: bool = True
    can_create: bool = False
    can_modify: bool = False
    can_delete: bool = False
    requires_notes: bool = False


@dataclass(frozen=True)
class ClassAttendanceDetail:
    """Per-class line kept alongside the day status."""

    attendance_id: int
    schedule_id: Optional[int]
    course_assignment_id: Optional[int]
    status_code: str
    status: StatusRole
    arrival_time: Optional[time]
    notes: Optional[str]
    recorded_by: Optional[int]
    recorded_by_name: Optional[str]
    last_modified_by: Optional[int]
    last_modified_by_name: Optional[str]
    last_modified_at: Optional[datetime]
    modification_reason: Optional[str]

    def to_dict(self) -> dict:
        return {
            "attendanceId": self.attendance_id,
            "scheduleId": self.schedule_id,
            "courseAssignmentId": self.course_assignment_id,
            "statusCode": self.status_code,
            "status": self.status.value,
            "arrivalTime": self.arrival_time.strftime("%H:%M") if self.arrival_time else None,
            "notes": self.notes,
            "recordedBy": self.recorded_by_name,
            "modifiedBy": self.last_modified_by_name,
            "modifiedAt": self.last_modified_at.isoformat() if self.last_modified_at else None,
            "modificationReason": self.modification_reason,
        }


@dataclass(frozen=True)
class DayAttendance:
    """Read-model: derived day-level status for one enrollment."""

    enrollment_id: int
    student_id: int
    student_name: str
    date: date
    day_status: StatusRole
    class_attendances: tuple[ClassAttendanceDetail, ...] = ()

    def to_dict(self) -> dict:
        return {
            "enrollmentId": self.enrollment_id,
            "studentId": self.student_id,
            "studentName": self.student_name,
            "date": format_iso_date(self.date),
            "dayStatus": self.day_status.value,
            "classAttendances": [c.to_dict() for c in self.class_attendances],
        }


@dataclass(frozen=True)
class SectionDay:
    """All day aggregates of a section plus the enrollments with no record."""

    date: date
    students: tuple[DayAttendance, ...] = ()
    without_record: tuple[Enrollment, ...] = field(default_factory=tuple)

    @property
    def total_enrolled(self) -> int:
        return len(self.students) + len(self.without_record)

    def count(self, status: StatusRole) -> int:
        return sum(1 for s in self.students if s.day_status == status)
