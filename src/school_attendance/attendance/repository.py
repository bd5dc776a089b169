from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional, Protocol, Sequence

from .model import AttendanceStatusDefinition, Enrollment, RoleAttendancePermission, StudentClassAttendance


class EnrollmentRepository(Protocol):
    def list_for_section(self, *, section_id: int, cycle_id: int, active_only: bool = True) -> Sequence[Enrollment]:
        raise NotImplementedError

    def get_by_id(self, enrollment_id: int) -> Optional[Enrollment]:
        raise NotImplementedError


class AttendanceRepository(Protocol):
    def list_for_enrollments(
        self,
        *,
        enrollment_ids: Sequence[int],
        start_date: date,
        end_date: date,
    ) -> Sequence[StudentClassAttendance]:
        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[StudentClassAttendance]:
        raise NotImplementedError

    def find_existing(
        self,
        *,
        enrollment_id: int,
        on_date: date,
        schedule_id: Optional[int],
    ) -> Optional[StudentClassAttendance]:
        raise NotImplementedError

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
        raise NotImplementedError

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
        """Correction keeps the row and records who/when/why in the audit fields."""

        raise NotImplementedError


class AttendanceStatusRepository(Protocol):
    def list_all(self) -> Sequence[AttendanceStatusDefinition]:
        raise NotImplementedError


class PermissionRepository(Protocol):
    def list_for_role(self, role_id: int) -> Sequence[RoleAttendancePermission]:
        raise NotImplementedError
