from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Callable, Iterable, Optional, Sequence

from ..common.datetime_utils import DateLike, is_weekend, to_calendar_day
from ..core.constants import MAX_NAVIGATION_ATTEMPTS
from ..core.exceptions import AmbiguousMatchError
from .model import AcademicWeek, Bimester, DateContext, Holiday

logger = logging.getLogger(__name__)


def find_overlapping_weeks(weeks: Iterable[AcademicWeek]) -> list[tuple[AcademicWeek, AcademicWeek]]:
    """Pairs of weeks whose date ranges intersect, in week-number order."""

    ordered = sorted(weeks, key=lambda w: (w.number, w.week_id))
    pairs: list[tuple[AcademicWeek, AcademicWeek]] = []
    for i, a in enumerate(ordered):
        for b in ordered[i + 1 :]:
            if a.start_date <= b.end_date and b.start_date <= a.end_date:
                pairs.append((a, b))
    return pairs


class CalendarPeriodResolver:
    """Maps a calendar day to its bimester, academic week and holiday.

    Works on calendar entities already fetched for a cycle; it performs no I/O.
    Lookups that find nothing return ``None`` (a date outside any bimester is a
    normal gap in a school calendar, not an error).
    """

    def __init__(
        self,
        bimesters: Sequence[Bimester],
        weeks: Sequence[AcademicWeek] = (),
        holidays: Sequence[Holiday] = (),
        *,
        strict: bool = False,
        max_attempts: int = MAX_NAVIGATION_ATTEMPTS,
    ):
        self._bimesters = sorted(bimesters, key=lambda b: (b.number, b.bimester_id))
        self._weeks: dict[int, list[AcademicWeek]] = defaultdict(list)
        for w in sorted(weeks, key=lambda w: (w.number, w.week_id)):
            self._weeks[w.bimester_id].append(w)
        self._holidays: dict[int, dict[date, Holiday]] = defaultdict(dict)
        for h in holidays:
            self._holidays[h.bimester_id].setdefault(to_calendar_day(h.date), h)
        self._strict = strict
        self._max_attempts = int(max_attempts)

    # -- period lookups -------------------------------------------------

    def resolve_bimester(self, cycle_id: int, on: DateLike) -> Optional[Bimester]:
        day = to_calendar_day(on)
        for b in self._bimesters:
            if b.cycle_id == cycle_id and b.contains(day):
                return b
        return None

    def resolve_academic_week(self, bimester_id: int, on: DateLike) -> Optional[AcademicWeek]:
        day = to_calendar_day(on)
        matches = [w for w in self._weeks.get(bimester_id, ()) if w.contains(day)]
        if not matches:
            return None
        if len(matches) > 1:
            numbers = [w.number for w in matches]
            if self._strict:
                raise AmbiguousMatchError(f"{day} matches academic weeks {numbers} of bimester {bimester_id}")
            logger.warning(
                "Date %s matches overlapping academic weeks %s of bimester %s; using week %s",
                day,
                numbers,
                bimester_id,
                matches[0].number,
            )
        return matches[0]

    def get_holiday(self, bimester_id: int, on: DateLike) -> Optional[Holiday]:
        return self._holidays.get(bimester_id, {}).get(to_calendar_day(on))

    def is_holiday(self, bimester_id: int, on: DateLike) -> bool:
        return self.get_holiday(bimester_id, on) is not None

    def weeks_for(self, bimester_id: int) -> list[AcademicWeek]:
        return list(self._weeks.get(bimester_id, ()))

    @property
    def active_bimester(self) -> Optional[Bimester]:
        for b in self._bimesters:
            if b.is_active:
                return b
        return None

    # -- day classification ---------------------------------------------

    def is_allowed_date(self, on: DateLike) -> bool:
        """Inside the active bimester and, when it has weeks, inside one of them."""

        bimester = self.active_bimester
        if bimester is None:
            return False

        day = to_calendar_day(on)
        if not bimester.contains(day):
            return False

        weeks = self._weeks.get(bimester.bimester_id)
        if weeks:
            return any(w.contains(day) for w in weeks)
        return True

    def _holiday_on(self, day: date) -> Optional[Holiday]:
        for b in self._bimesters:
            if b.contains(day):
                h = self._holidays.get(b.bimester_id, {}).get(day)
                if h:
                    return h
        for by_day in self._holidays.values():
            if day in by_day:
                return by_day[day]
        return None

    def is_instructional_day(self, on: DateLike) -> bool:
        """Allowed, not a weekend, and not a holiday (recovered holidays still count)."""

        day = to_calendar_day(on)
        if not self.is_allowed_date(day) or is_weekend(day):
            return False
        holiday = self._holiday_on(day)
        return holiday is None or holiday.is_recovered

    def describe(self, on: DateLike) -> DateContext:
        day = to_calendar_day(on)
        bimester = next((b for b in self._bimesters if b.contains(day)), None)
        week = self.resolve_academic_week(bimester.bimester_id, day) if bimester else None
        allowed = self.is_allowed_date(day)
        return DateContext(
            date=day,
            bimester=bimester,
            academic_week=week,
            holiday=self._holiday_on(day),
            is_weekend=is_weekend(day),
            is_allowed=allowed,
            is_school_day=self.is_instructional_day(day),
        )

    # -- navigation -----------------------------------------------------

    def _step(self, on: DateLike, days: int, accept: Callable[[date], bool]) -> Optional[date]:
        delta = timedelta(days=days)
        candidate = to_calendar_day(on) + delta
        attempts = 0
        while not accept(candidate) and attempts < self._max_attempts:
            candidate += delta
            attempts += 1
        return candidate if accept(candidate) else None

    def previous_day(self, on: DateLike) -> Optional[date]:
        return self._step(on, -1, self.is_allowed_date)

    def next_day(self, on: DateLike) -> Optional[date]:
        return self._step(on, 1, self.is_allowed_date)

    def previous_school_day(self, on: DateLike) -> Optional[date]:
        return self._step(on, -1, self.is_instructional_day)

    def next_school_day(self, on: DateLike) -> Optional[date]:
        return self._step(on, 1, self.is_instructional_day)
