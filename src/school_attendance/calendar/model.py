from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import WeekType
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class AcademicCycle:
    """Domain entity: school year."""

    cycle_id: int
    name: str
    start_date: date
    end_date: date
    is_active: bool = True
    is_closed: bool = False

    def contains(self, on: date) -> bool:
        return self.start_date <= on <= self.end_date


@dataclass(frozen=True)
class Bimester:
    """Domain entity: one of the four grading periods of a cycle."""

    bimester_id: int
    cycle_id: int
    number: int
    start_date: date
    end_date: date
    is_active: bool = False
    weeks_count: int = 0
    name: Optional[str] = None

    def __post_init__(self):
        if self.start_date > self.end_date:
            raise ValidationError(
                f"Bimester {self.number}: start date {self.start_date} is after end date {self.end_date}"
            )

    def contains(self, on: date) -> bool:
        return self.start_date <= on <= self.end_date

    @property
    def label(self) -> str:
        return self.name or f"Bimester {self.number}"


@dataclass(frozen=True)
class AcademicWeek:
    week_id: int
    bimester_id: int
    number: int
    start_date: date
    end_date: date
    week_type: WeekType = WeekType.REGULAR

    def contains(self, on: date) -> bool:
        return self.start_date <= on <= self.end_date


@dataclass(frozen=True)
class Holiday:
    """A non-instructional day, unless it was recovered."""

    holiday_id: int
    bimester_id: int
    date: date
    description: str
    is_recovered: bool = False


@dataclass(frozen=True)
class DateContext:
    """Read-model describing one calendar day for the presentation layer."""

    date: date
    bimester: Optional[Bimester]
    academic_week: Optional[AcademicWeek]
    holiday: Optional[Holiday]
    is_weekend: bool
    is_allowed: bool
    is_school_day: bool

    @property
    def is_holiday(self) -> bool:
        return self.holiday is not None


@dataclass(frozen=True)
class RegistrationContext:
    """Calendar entities that validated a date for attendance registration."""

    date: date
    cycle: AcademicCycle
    bimester: Bimester
    academic_week: Optional[AcademicWeek] = None
    holiday: Optional[Holiday] = None
