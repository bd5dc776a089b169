from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Callable, Optional

from ..common.datetime_utils import DateLike, to_calendar_day, today_local
from ..core.enums import WeekType
from ..core.exceptions import CalendarGapError, NotFoundError, ValidationError
from ..core.policy import AttendancePolicy
from .model import AcademicCycle, AcademicWeek, Bimester, DateContext, Holiday, RegistrationContext
from .repository import CalendarRepository
from .resolver import CalendarPeriodResolver, find_overlapping_weeks

logger = logging.getLogger(__name__)


class CalendarService:
    """Repository-backed access to the period resolver."""

    def __init__(
        self,
        calendar: CalendarRepository,
        *,
        policy: AttendancePolicy | None = None,
        clock: Callable[[], date] | None = None,
    ):
        self._calendar = calendar
        self._policy = policy or AttendancePolicy()
        self._clock = clock or (lambda: today_local(self._policy.timezone))

    @property
    def policy(self) -> AttendancePolicy:
        return self._policy

    def resolver_for(self, cycle_id: int, *, strict: bool = False) -> CalendarPeriodResolver:
        bimesters = list(self._calendar.list_bimesters(cycle_id))
        weeks: list[AcademicWeek] = []
        holidays: list[Holiday] = []
        for b in bimesters:
            weeks.extend(self._calendar.list_weeks(b.bimester_id))
            holidays.extend(self._calendar.list_holidays(b.bimester_id))
        return CalendarPeriodResolver(
            bimesters,
            weeks,
            holidays,
            strict=strict,
            max_attempts=self._policy.max_navigation_attempts,
        )

    def get_bimester(self, bimester_id: int) -> Bimester:
        bimester = self._calendar.get_bimester(bimester_id)
        if not bimester:
            raise NotFoundError(f"Bimester {bimester_id} not found")
        return bimester

    def get_week(self, week_id: int) -> AcademicWeek:
        week = self._calendar.get_week(week_id)
        if not week:
            raise NotFoundError(f"Academic week {week_id} not found")
        return week

    def _bimester_resolver(self, bimester_id: int) -> CalendarPeriodResolver:
        bimester = self._calendar.get_bimester(bimester_id)
        if not bimester:
            return CalendarPeriodResolver([])
        return CalendarPeriodResolver(
            [bimester],
            self._calendar.list_weeks(bimester_id),
            self._calendar.list_holidays(bimester_id),
            max_attempts=self._policy.max_navigation_attempts,
        )

    def resolve_bimester(self, cycle_id: int, on: DateLike) -> Optional[Bimester]:
        return CalendarPeriodResolver(self._calendar.list_bimesters(cycle_id)).resolve_bimester(cycle_id, on)

    def resolve_academic_week(self, bimester_id: int, on: DateLike) -> Optional[AcademicWeek]:
        return self._bimester_resolver(bimester_id).resolve_academic_week(bimester_id, on)

    def get_holiday(self, bimester_id: int, on: DateLike) -> Optional[Holiday]:
        return self._bimester_resolver(bimester_id).get_holiday(bimester_id, on)

    def is_holiday(self, bimester_id: int, on: DateLike) -> bool:
        return self.get_holiday(bimester_id, on) is not None

    def is_allowed_date(self, cycle_id: int, on: DateLike) -> bool:
        return self.resolver_for(cycle_id).is_allowed_date(on)

    def describe(self, cycle_id: int, on: DateLike) -> DateContext:
        return self.resolver_for(cycle_id).describe(on)

    def active_cycle_for(self, on: DateLike) -> Optional[AcademicCycle]:
        day = to_calendar_day(on)
        active = [c for c in self._calendar.list_cycles() if c.is_active]
        if len(active) > 1:
            logger.warning("More than one active academic cycle: %s", [c.cycle_id for c in active])
        for c in active:
            if c.contains(day):
                return c
        return None

    def validate_registration_date(self, on: DateLike, *, today: date | None = None) -> RegistrationContext:
        """Check that attendance may be registered on ``on``.

        Order: not future, within the past limit, active open cycle, active
        bimester, not a non-recovered holiday, inside a non-BREAK week.
        """

        day = to_calendar_day(on)
        today = today or self._clock()

        if day > today:
            raise ValidationError("Attendance cannot be registered for a future date")
        if day < today - timedelta(days=self._policy.max_past_days):
            raise ValidationError(
                f"Attendance cannot be registered more than {self._policy.max_past_days} days in the past"
            )

        cycle = self.active_cycle_for(day)
        if not cycle:
            raise CalendarGapError(f"No active academic cycle covers {day}")
        if cycle.is_closed:
            raise ValidationError(f"Academic cycle {cycle.name} is closed")

        resolver = self.resolver_for(cycle.cycle_id)
        bimester = resolver.resolve_bimester(cycle.cycle_id, day)
        if not bimester or not bimester.is_active:
            raise CalendarGapError(f"No active bimester covers {day}")

        holiday = resolver.get_holiday(bimester.bimester_id, day)
        if holiday and not holiday.is_recovered:
            raise ValidationError(f"{day} is a holiday: {holiday.description}")

        week = resolver.resolve_academic_week(bimester.bimester_id, day)
        if week is None and resolver.weeks_for(bimester.bimester_id):
            raise CalendarGapError(f"{day} is not inside any academic week of {bimester.label}")
        if week is not None and week.week_type == WeekType.BREAK:
            raise ValidationError(f"Week {week.number} is a break week")

        return RegistrationContext(date=day, cycle=cycle, bimester=bimester, academic_week=week, holiday=holiday)

    def check_week_layout(self, bimester_id: int) -> list[str]:
        """List problems with a bimester's weeks (empty list when consistent)."""

        bimester = self.get_bimester(bimester_id)
        weeks = sorted(self._calendar.list_weeks(bimester_id), key=lambda w: (w.number, w.week_id))
        problems: list[str] = []

        for w in weeks:
            if w.start_date > w.end_date:
                problems.append(f"Week {w.number} starts after it ends")
            if w.start_date < bimester.start_date or w.end_date > bimester.end_date:
                problems.append(f"Week {w.number} is outside {bimester.label}")

        for a, b in find_overlapping_weeks(weeks):
            problems.append(f"Weeks {a.number} and {b.number} overlap")

        for prev, nxt in zip(weeks, weeks[1:]):
            if nxt.start_date < prev.start_date:
                problems.append(f"Week {nxt.number} starts before week {prev.number}")

        return problems
