from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ..model import DayStatusCounts


class RateCalculator(ABC):
    """Calculator interface (Strategy Pattern for attendance rates)."""

    @abstractmethod
    def daily_rate(self, present: int, tardy: int, total_enrolled: int) -> float:
        raise NotImplementedError

    @abstractmethod
    def period_rate(self, days: Sequence[DayStatusCounts], total_enrolled: int) -> float:
        raise NotImplementedError

    @abstractmethod
    def day_averages(self, days: Sequence[DayStatusCounts]) -> dict[str, int]:
        raise NotImplementedError
