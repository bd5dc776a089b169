from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Callable, Mapping, Optional

from ..calendar.model import RegistrationContext
from ..calendar.service import CalendarService
from ..common.datetime_utils import DateLike, now_local, to_calendar_day
from ..common.validators import require_non_empty, require_positive_id
from ..core.enums import PermissionAction
from ..core.exceptions import EmptyInputError, NotFoundError, ValidationError
from .aggregator import AttendanceStatusAggregator
from .catalog import StatusCatalog
from .model import AttendanceStatusDefinition, Enrollment, SectionDay
from .permissions import PermissionMatrix
from .repository import AttendanceRepository, AttendanceStatusRepository, EnrollmentRepository, PermissionRepository
from .strategies.base import DayStatusPolicy

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        enrollments: EnrollmentRepository,
        statuses: AttendanceStatusRepository,
        permissions: PermissionRepository,
        calendar: CalendarService,
        *,
        policy: DayStatusPolicy | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._attendance = attendance
        self._enrollments = enrollments
        self._statuses = statuses
        self._permissions = permissions
        self._calendar = calendar
        self._policy = policy
        self._clock = clock or (lambda: now_local(calendar.policy.timezone))

    def _catalog(self) -> StatusCatalog:
        return StatusCatalog(self._statuses.list_all())

    def _aggregator(self, catalog: StatusCatalog | None = None) -> AttendanceStatusAggregator:
        return AttendanceStatusAggregator(catalog or self._catalog(), self._policy)

    def get_section_day(self, *, section_id: int, cycle_id: int, on_date: DateLike) -> SectionDay:
        day = to_calendar_day(on_date)
        enrollments = self._enrollments.list_for_section(section_id=section_id, cycle_id=cycle_id)
        records = self._attendance.list_for_enrollments(
            enrollment_ids=[e.enrollment_id for e in enrollments],
            start_date=day,
            end_date=day,
        )
        return self._aggregator().aggregate_section_day(enrollments, records, day)

    def _validate_date(self, on_date: DateLike, today: date | None) -> RegistrationContext:
        try:
            return self._calendar.validate_registration_date(on_date, today=today)
        except ValidationError as exc:
            logger.info("Attendance registration for %s rejected: %s", on_date, exc)
            raise

    def _resolve_status(self, catalog: StatusCatalog, status_code: str) -> AttendanceStatusDefinition:
        status = catalog.by_code(require_non_empty(status_code, "status"))
        if not status:
            raise NotFoundError(f"Attendance status {status_code!r} not found")
        if not status.is_active:
            raise ValidationError(f"Attendance status {status.name} is inactive")
        return status

    def _check_notes(
        self,
        matrix: PermissionMatrix,
        role_id: int,
        status: AttendanceStatusDefinition,
        notes: Optional[str],
    ) -> Optional[str]:
        if matrix.requires_notes(role_id, status.status_id):
            return require_non_empty(notes, f"Notes for {status.name}")
        return notes.strip() if notes and notes.strip() else None

    def _check_registration(
        self,
        *,
        ctx: RegistrationContext,
        matrix: PermissionMatrix,
        role_id: int,
        enrollment: Enrollment,
        status: AttendanceStatusDefinition,
        notes: Optional[str],
    ) -> Optional[str]:
        """Raise if ``enrollment`` may not get ``status`` on ``ctx.date``; returns the cleaned notes."""

        if not enrollment.is_active:
            raise ValidationError(f"Enrollment {enrollment.enrollment_id} is not active")
        if enrollment.cycle_id != ctx.cycle.cycle_id:
            raise ValidationError(f"Enrollment {enrollment.enrollment_id} does not belong to cycle {ctx.cycle.name}")

        matrix.require(role_id, status.status_id, PermissionAction.CREATE, status_name=status.name)
        return self._check_notes(matrix, role_id, status, notes)

    def _write(
        self,
        *,
        ctx: RegistrationContext,
        user_id: int,
        enrollment: Enrollment,
        status: AttendanceStatusDefinition,
        schedule_id: Optional[int],
        course_assignment_id: Optional[int],
        arrival_time: Optional[time],
        notes: Optional[str],
    ) -> Optional[int]:
        """Create the row; ``None`` when one already exists for the date and schedule."""

        existing = self._attendance.find_existing(
            enrollment_id=enrollment.enrollment_id,
            on_date=ctx.date,
            schedule_id=schedule_id,
        )
        if existing:
            return None

        attendance_id = self._attendance.create(
            enrollment_id=enrollment.enrollment_id,
            on_date=ctx.date,
            schedule_id=schedule_id,
            course_assignment_id=course_assignment_id,
            attendance_status_id=status.status_id,
            status=status.code,
            arrival_time=arrival_time,
            notes=notes,
            recorded_by=user_id,
        )
        logger.info(
            "Recorded %s for enrollment %s on %s (schedule %s) by user %s",
            status.code,
            enrollment.enrollment_id,
            ctx.date,
            schedule_id,
            user_id,
        )
        return attendance_id

    def allowed_statuses(
        self, *, role_id: int, action: PermissionAction = PermissionAction.CREATE
    ) -> list[AttendanceStatusDefinition]:
        """Active statuses the role may apply, in catalog order."""

        allowed = PermissionMatrix(self._permissions.list_for_role(role_id)).allowed_status_ids(role_id, action)
        return [d for d in self._catalog().active() if d.status_id in allowed]

    def record_class_attendance(
        self,
        *,
        role_id: int,
        user_id: int,
        enrollment_id: int,
        on_date: DateLike,
        status_code: str,
        schedule_id: Optional[int] = None,
        course_assignment_id: Optional[int] = None,
        arrival_time: Optional[time] = None,
        notes: Optional[str] = None,
        today: date | None = None,
    ) -> int:
        user_id = require_positive_id(user_id, "user")
        enrollment = self._enrollments.get_by_id(require_positive_id(enrollment_id, "enrollment"))
        if not enrollment:
            raise NotFoundError(f"Enrollment {enrollment_id} not found")

        ctx = self._validate_date(on_date, today)
        status = self._resolve_status(self._catalog(), status_code)
        matrix = PermissionMatrix(self._permissions.list_for_role(role_id))
        notes = self._check_registration(
            ctx=ctx, matrix=matrix, role_id=role_id, enrollment=enrollment, status=status, notes=notes
        )

        attendance_id = self._write(
            ctx=ctx,
            user_id=user_id,
            enrollment=enrollment,
            status=status,
            schedule_id=schedule_id,
            course_assignment_id=course_assignment_id,
            arrival_time=arrival_time,
            notes=notes,
        )
        if attendance_id is None:
            raise ValidationError(f"Attendance already recorded for enrollment {enrollment_id} on {ctx.date}")
        return attendance_id

    def record_section_attendance(
        self,
        *,
        role_id: int,
        user_id: int,
        section_id: int,
        cycle_id: int,
        on_date: DateLike,
        statuses: Mapping[int, str],
        default_status_code: Optional[str] = None,
        schedule_id: Optional[int] = None,
        course_assignment_id: Optional[int] = None,
        notes: Optional[Mapping[int, str]] = None,
        today: date | None = None,
    ) -> list[int]:
        """Bulk registration for a section; already recorded enrollments are skipped.

        ``statuses`` maps enrollment_id -> status code. Enrollments missing from
        it get ``default_status_code`` or are left unrecorded. Every entry is
        checked before the first row is written, so one invalid entry rejects
        the whole request.
        """

        user_id = require_positive_id(user_id, "user")
        enrollments = self._enrollments.list_for_section(section_id=section_id, cycle_id=cycle_id)
        if not enrollments:
            raise EmptyInputError(f"Section {section_id} has no active enrollments")

        ctx = self._validate_date(on_date, today)
        catalog = self._catalog()
        matrix = PermissionMatrix(self._permissions.list_for_role(role_id))
        notes = notes or {}

        pending: list[tuple[Enrollment, AttendanceStatusDefinition, Optional[str]]] = []
        for e in enrollments:
            code = statuses.get(e.enrollment_id, default_status_code)
            if not code:
                continue
            status = self._resolve_status(catalog, code)
            cleaned = self._check_registration(
                ctx=ctx, matrix=matrix, role_id=role_id, enrollment=e, status=status, notes=notes.get(e.enrollment_id)
            )
            pending.append((e, status, cleaned))

        created: list[int] = []
        for e, status, cleaned in pending:
            attendance_id = self._write(
                ctx=ctx,
                user_id=user_id,
                enrollment=e,
                status=status,
                schedule_id=schedule_id,
                course_assignment_id=course_assignment_id,
                arrival_time=None,
                notes=cleaned,
            )
            if attendance_id is None:
                logger.info("Enrollment %s already has attendance on %s; skipped", e.enrollment_id, ctx.date)
                continue
            created.append(attendance_id)
        return created

    def correct_class_attendance(
        self,
        *,
        role_id: int,
        user_id: int,
        attendance_id: int,
        status_code: str,
        reason: str,
        notes: Optional[str] = None,
        now: datetime | None = None,
    ) -> None:
        record = self._attendance.get_by_id(require_positive_id(attendance_id, "attendance"))
        if not record:
            raise NotFoundError(f"Attendance record {attendance_id} not found")

        reason = require_non_empty(reason, "Modification reason")
        status = self._resolve_status(self._catalog(), status_code)
        matrix = PermissionMatrix(self._permissions.list_for_role(role_id))
        matrix.require(role_id, status.status_id, PermissionAction.MODIFY, status_name=status.name)
        notes = self._check_notes(matrix, role_id, status, notes if notes is not None else record.notes)

        ok = self._attendance.update_status(
            attendance_id=record.attendance_id,
            attendance_status_id=status.status_id,
            status=status.code,
            notes=notes,
            last_modified_by=require_positive_id(user_id, "user"),
            last_modified_at=now or self._clock(),
            modification_reason=reason,
        )
        if not ok:
            raise ValidationError("Attendance correction failed")

        logger.info(
            "Attendance %s changed %s -> %s by user %s: %s",
            record.attendance_id,
            record.status,
            status.code,
            user_id,
            reason,
        )
