from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..attendance.aggregator import AttendanceStatusAggregator
from ..attendance.catalog import StatusCatalog
from ..attendance.model import Enrollment, SectionDay
from ..attendance.repository import AttendanceRepository, AttendanceStatusRepository, EnrollmentRepository
from ..attendance.strategies.base import DayStatusPolicy
from ..calendar.service import CalendarService
from ..common.datetime_utils import DateLike, to_calendar_day
from ..common.validators import require_date_order
from ..core.constants import RISK_BAND_WIDTH
from ..core.enums import RiskLevel, StatusRole
from ..core.policy import AttendancePolicy
from .calculator.base import RateCalculator
from .calculator.standard_calculator import StandardRateCalculator, actual_absent, percentage
from .model import DailySectionReport, DayStatusCounts, PeriodReport, PeriodStatistics, StudentAttendanceSummary

logger = logging.getLogger(__name__)

_ATTENDED = (StatusRole.PRESENT, StatusRole.TARDY)


def classify_risk(rate: float, consecutive_absences: int, policy: AttendancePolicy) -> RiskLevel:
    threshold = policy.risk_threshold_percentage
    if rate >= threshold:
        level = RiskLevel.LOW
    elif rate >= threshold - RISK_BAND_WIDTH:
        level = RiskLevel.MEDIUM
    elif rate >= threshold - 2 * RISK_BAND_WIDTH:
        level = RiskLevel.HIGH
    else:
        level = RiskLevel.CRITICAL

    if level == RiskLevel.LOW and consecutive_absences >= policy.consecutive_absence_alert:
        return RiskLevel.MEDIUM
    return level


def count_section_day(section_day: SectionDay) -> DayStatusCounts:
    return DayStatusCounts(
        date=section_day.date,
        present=section_day.count(StatusRole.PRESENT),
        absent=section_day.count(StatusRole.ABSENT),
        tardy=section_day.count(StatusRole.TARDY),
        excused=section_day.count(StatusRole.EXCUSED),
        without_record=len(section_day.without_record),
    )


class AttendanceReportService:
    """Daily, weekly and bimester attendance reports for a section."""

    def __init__(
        self,
        enrollments: EnrollmentRepository,
        attendance: AttendanceRepository,
        statuses: AttendanceStatusRepository,
        calendar: CalendarService,
        *,
        calculator: Optional[RateCalculator] = None,
        policy: Optional[AttendancePolicy] = None,
        day_policy: Optional[DayStatusPolicy] = None,
    ):
        self._enrollments = enrollments
        self._attendance = attendance
        self._statuses = statuses
        self._calendar = calendar
        self._calculator = calculator or StandardRateCalculator()
        self._policy = policy or AttendancePolicy()
        self._day_policy = day_policy

    def _aggregator(self) -> AttendanceStatusAggregator:
        return AttendanceStatusAggregator(StatusCatalog(self._statuses.list_all()), self._day_policy)

    def _fetch(self, section_id: int, cycle_id: int, start: date, end: date):
        enrollments = list(self._enrollments.list_for_section(section_id=section_id, cycle_id=cycle_id))
        records = self._attendance.list_for_enrollments(
            enrollment_ids=[e.enrollment_id for e in enrollments],
            start_date=start,
            end_date=end,
        )
        return enrollments, records

    def daily_report(self, *, section_id: int, cycle_id: int, on_date: DateLike) -> DailySectionReport:
        day = to_calendar_day(on_date)
        enrollments, records = self._fetch(section_id, cycle_id, day, day)
        section_day = self._aggregator().aggregate_section_day(enrollments, records, day)
        counts = count_section_day(section_day)
        total = len(enrollments)

        if counts.without_record:
            logger.info("Section %s on %s: %s students without attendance", section_id, day, counts.without_record)

        return DailySectionReport(
            section_id=section_id,
            context=self._calendar.describe(cycle_id, day),
            section_day=section_day,
            counts=counts,
            total_enrolled=total,
            actual_absent=actual_absent(counts.absent, counts.without_record),
            attendance_rate=self._calculator.daily_rate(counts.present, counts.tardy, total),
        )

    def _student_summaries(
        self,
        enrollments: Sequence[Enrollment],
        days: Sequence[SectionDay],
    ) -> list[StudentAttendanceSummary]:
        observed = [d for d in days if d.students]
        status_by_day = [{s.enrollment_id: s.day_status for s in d.students} for d in observed]

        out: list[StudentAttendanceSummary] = []
        for e in enrollments:
            statuses = [by_id.get(e.enrollment_id) for by_id in status_by_day]
            counts = {role: sum(1 for s in statuses if s == role) for role in StatusRole}
            missing = sum(1 for s in statuses if s is None)

            consecutive = 0
            for s in reversed(statuses):
                if s is None or s == StatusRole.ABSENT:
                    consecutive += 1
                else:
                    break

            last_absent = None
            for d, s in zip(reversed(observed), reversed(statuses)):
                if s is None or s == StatusRole.ABSENT:
                    last_absent = d.date
                    break

            rate = percentage(sum(counts[r] for r in _ATTENDED), len(observed))
            level = classify_risk(rate, consecutive, self._policy) if observed else RiskLevel.LOW
            at_risk = bool(observed) and (
                rate < self._policy.risk_threshold_percentage
                or consecutive >= self._policy.consecutive_absence_alert
            )
            out.append(
                StudentAttendanceSummary(
                    enrollment_id=e.enrollment_id,
                    student_id=e.student_id,
                    student_name=e.student_name,
                    present=counts[StatusRole.PRESENT],
                    absent=counts[StatusRole.ABSENT],
                    tardy=counts[StatusRole.TARDY],
                    excused=counts[StatusRole.EXCUSED],
                    without_record=missing,
                    attendance_rate=rate,
                    consecutive_absences=consecutive,
                    last_absent_date=last_absent,
                    risk_level=level,
                    is_at_risk=at_risk,
                )
            )

        out.sort(key=lambda s: (s.student_name.lower(), s.enrollment_id))
        return out

    def period_report(
        self,
        *,
        section_id: int,
        cycle_id: int,
        start_date: DateLike,
        end_date: DateLike,
        label: str = "",
    ) -> PeriodReport:
        start = to_calendar_day(start_date)
        end = to_calendar_day(end_date)
        require_date_order(start, end, "Report period")

        enrollments, records = self._fetch(section_id, cycle_id, start, end)
        days = list(self._aggregator().aggregate_range(enrollments, records).values())
        by_day = [count_section_day(d) for d in days]
        total = len(enrollments)

        observed = [c for c in by_day if c.has_records]
        rate = self._calculator.period_rate(by_day, total)
        statistics = PeriodStatistics(
            total=sum(c.recorded for c in observed),
            present=sum(c.present for c in observed),
            absent=sum(c.absent for c in observed),
            late=sum(c.tardy for c in observed),
            excused=sum(c.excused for c in observed),
            attendance_rate=rate,
        )
        students = self._student_summaries(enrollments, days)

        return PeriodReport(
            section_id=section_id,
            start_date=start,
            end_date=end,
            total_enrolled=total,
            distinct_dates=len(observed),
            attendance_rate=rate,
            averages=self._calculator.day_averages(by_day),
            statistics=statistics,
            by_day=tuple(by_day),
            by_student=tuple(students),
            label=label,
            at_risk=tuple(s for s in students if s.is_at_risk),
        )

    def weekly_report(self, *, section_id: int, week_id: int) -> PeriodReport:
        week = self._calendar.get_week(week_id)
        bimester = self._calendar.get_bimester(week.bimester_id)
        return self.period_report(
            section_id=section_id,
            cycle_id=bimester.cycle_id,
            start_date=week.start_date,
            end_date=week.end_date,
            label=f"{bimester.label} - week {week.number}",
        )

    def bimester_report(self, *, section_id: int, bimester_id: int) -> PeriodReport:
        bimester = self._calendar.get_bimester(bimester_id)
        return self.period_report(
            section_id=section_id,
            cycle_id=bimester.cycle_id,
            start_date=bimester.start_date,
            end_date=bimester.end_date,
            label=bimester.label,
        )
