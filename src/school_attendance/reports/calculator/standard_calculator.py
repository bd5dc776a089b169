from __future__ import annotations

from typing import Sequence

from ...common.numbers import round_half_up, round_half_up_int
from ..model import DayStatusCounts
from .base import RateCalculator


def percentage(part: float, whole: float, ndigits: int = 1) -> float:
    """``part / whole * 100`` rounded half-up; 0.0 when ``whole`` is not positive."""
    if whole <= 0:
        return 0.0
    return round_half_up(part / whole * 100, ndigits)


def actual_absent(recorded_absent: int, without_record: int) -> int:
    """Students with no record for the day are counted as absent."""
    return int(recorded_absent) + int(without_record)


class StandardRateCalculator(RateCalculator):
    """Present and tardy both count as attended.

    The period denominator is enrolled x dates that have at least one record,
    not the nominal number of school days: sparse data therefore raises the
    rate. Historical reports depend on this formula.
    """

    def daily_rate(self, present: int, tardy: int, total_enrolled: int) -> float:
        return percentage(present + tardy, total_enrolled)

    @staticmethod
    def observed_days(days: Sequence[DayStatusCounts]) -> list[DayStatusCounts]:
        seen: dict = {}
        for d in days:
            if d.has_records:
                seen.setdefault(d.date, d)
        return list(seen.values())

    def period_rate(self, days: Sequence[DayStatusCounts], total_enrolled: int) -> float:
        observed = self.observed_days(days)
        attended = sum(d.present + d.tardy for d in observed)
        return percentage(attended, total_enrolled * len(observed))

    def day_averages(self, days: Sequence[DayStatusCounts]) -> dict[str, int]:
        observed = self.observed_days(days)
        n = len(observed)
        if n == 0:
            return {"present": 0, "absent": 0, "tardy": 0, "excused": 0}
        return {
            "present": round_half_up_int(sum(d.present for d in observed) / n),
            "absent": round_half_up_int(sum(d.absent for d in observed) / n),
            "tardy": round_half_up_int(sum(d.tardy for d in observed) / n),
            "excused": round_half_up_int(sum(d.excused for d in observed) / n),
        }
