from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..attendance.model import Enrollment, SectionDay
from ..calendar.model import DateContext
from ..core.enums import RiskLevel


@dataclass(frozen=True)
class DayStatusCounts:
    """Day-level status counts of a section on one date."""

    date: date
    present: int = 0
    absent: int = 0
    tardy: int = 0
    excused: int = 0
    without_record: int = 0

    @property
    def recorded(self) -> int:
        return self.present + self.absent + self.tardy + self.excused

    @property
    def has_records(self) -> bool:
        return self.recorded > 0


@dataclass(frozen=True)
class PeriodStatistics:
    total: int
    present: int
    absent: int
    late: int
    excused: int
    attendance_rate: float

    @property
    def attendance_rate_label(self) -> str:
        return f"{self.attendance_rate:.1f}"

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "present": self.present,
            "absent": self.absent,
            "late": self.late,
            "excused": self.excused,
            "attendanceRate": self.attendance_rate_label,
        }


@dataclass(frozen=True)
class StudentAttendanceSummary:
    enrollment_id: int
    student_id: int
    student_name: str
    present: int
    absent: int
    tardy: int
    excused: int
    without_record: int
    attendance_rate: float
    consecutive_absences: int
    last_absent_date: Optional[date]
    risk_level: RiskLevel
    is_at_risk: bool


@dataclass(frozen=True)
class DailySectionReport:
    section_id: int
    context: DateContext
    section_day: SectionDay
    counts: DayStatusCounts
    total_enrolled: int
    actual_absent: int
    attendance_rate: float

    @property
    def students_without_record(self) -> tuple[Enrollment, ...]:
        return self.section_day.without_record


@dataclass(frozen=True)
class PeriodReport:
    section_id: int
    start_date: date
    end_date: date
    total_enrolled: int
    distinct_dates: int
    attendance_rate: float
    averages: dict[str, int]
    statistics: PeriodStatistics
    by_day: tuple[DayStatusCounts, ...] = ()
    by_student: tuple[StudentAttendanceSummary, ...] = ()
    label: str = ""
    at_risk: tuple[StudentAttendanceSummary, ...] = field(default_factory=tuple)
