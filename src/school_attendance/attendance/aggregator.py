from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import DateLike, to_calendar_day
from ..core.enums import StatusRole
from .catalog import StatusCatalog
from .model import ClassAttendanceDetail, DayAttendance, Enrollment, SectionDay, StudentClassAttendance
from .strategies.base import DayStatusPolicy
from .strategies.precedence_policy import PrecedenceDayStatusPolicy


class AttendanceStatusAggregator:
    """Collapse per-class attendance rows into one day status per student.

    Pure: the same records always give the same result, and nothing is
    written back (the day status is a derived view).
    """

    def __init__(self, catalog: StatusCatalog | None = None, policy: DayStatusPolicy | None = None):
        self._catalog = catalog or StatusCatalog()
        self._policy = policy or PrecedenceDayStatusPolicy()

    def day_status(self, codes: Iterable[str]) -> StatusRole:
        return self._policy.decide(self._catalog.role_of(c) for c in codes)

    def _detail(self, r: StudentClassAttendance) -> ClassAttendanceDetail:
        return ClassAttendanceDetail(
            attendance_id=r.attendance_id,
            schedule_id=r.schedule_id,
            course_assignment_id=r.course_assignment_id,
            status_code=r.status,
            status=self._catalog.role_of(r.status),
            arrival_time=r.arrival_time,
            notes=r.notes,
            recorded_by=r.recorded_by,
            recorded_by_name=r.recorded_by_name,
            last_modified_by=r.last_modified_by,
            last_modified_by_name=r.last_modified_by_name,
            last_modified_at=r.last_modified_at,
            modification_reason=r.modification_reason,
        )

    def aggregate_student_day(
        self,
        enrollment: Enrollment,
        records: Sequence[StudentClassAttendance],
        on: DateLike | None = None,
    ) -> Optional[DayAttendance]:
        """Day aggregate for one enrollment; ``None`` when there are no records."""

        if not records:
            return None

        day = to_calendar_day(on) if on is not None else to_calendar_day(records[0].date)
        ordered = sorted(records, key=lambda r: (r.schedule_id or 0, r.attendance_id))
        return DayAttendance(
            enrollment_id=enrollment.enrollment_id,
            student_id=enrollment.student_id,
            student_name=enrollment.student_name,
            date=day,
            day_status=self.day_status(r.status for r in ordered),
            class_attendances=tuple(self._detail(r) for r in ordered),
        )

    def aggregate_section_day(
        self,
        enrollments: Sequence[Enrollment],
        records: Iterable[StudentClassAttendance],
        on: DateLike,
    ) -> SectionDay:
        """Aggregate every enrollment of a section for one day.

        Enrollments without records are left out of ``students`` and listed in
        ``without_record`` so rate calculations can count them as absent.
        """

        day = to_calendar_day(on)
        by_enrollment: dict[int, list[StudentClassAttendance]] = defaultdict(list)
        for r in records:
            if to_calendar_day(r.date) == day:
                by_enrollment[r.enrollment_id].append(r)

        students: list[DayAttendance] = []
        without: list[Enrollment] = []
        for e in enrollments:
            agg = self.aggregate_student_day(e, by_enrollment.get(e.enrollment_id, []), day)
            if agg is None:
                if e.is_active:
                    without.append(e)
            else:
                students.append(agg)

        students.sort(key=lambda s: (s.student_name.lower(), s.enrollment_id))
        without.sort(key=lambda e: (e.student_name.lower(), e.enrollment_id))
        return SectionDay(date=day, students=tuple(students), without_record=tuple(without))

    def aggregate_range(
        self,
        enrollments: Sequence[Enrollment],
        records: Iterable[StudentClassAttendance],
    ) -> dict[date, SectionDay]:
        """Section days keyed by every date that has at least one record."""

        by_day: dict[date, list[StudentClassAttendance]] = defaultdict(list)
        for r in records:
            by_day[to_calendar_day(r.date)].append(r)
        return {d: self.aggregate_section_day(enrollments, by_day[d], d) for d in sorted(by_day)}
