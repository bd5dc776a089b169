from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AcademicCycle, AcademicWeek, Bimester, Holiday


class CalendarRepository(Protocol):
    def list_cycles(self) -> Sequence[AcademicCycle]:
        raise NotImplementedError

    def list_bimesters(self, cycle_id: int) -> Sequence[Bimester]:
        raise NotImplementedError

    def get_bimester(self, bimester_id: int) -> Optional[Bimester]:
        raise NotImplementedError

    def list_weeks(self, bimester_id: int) -> Sequence[AcademicWeek]:
        raise NotImplementedError

    def get_week(self, week_id: int) -> Optional[AcademicWeek]:
        raise NotImplementedError

    def list_holidays(self, bimester_id: int) -> Sequence[Holiday]:
        raise NotImplementedError
