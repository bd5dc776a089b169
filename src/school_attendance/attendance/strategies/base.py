from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ...core.enums import StatusRole


class DayStatusPolicy(ABC):
    """Strategy Pattern: encapsulate how class-level roles collapse into a day status."""

    @abstractmethod
    def decide(self, roles: Iterable[StatusRole]) -> StatusRole:
        """Day status for a non-empty collection of class-level roles."""

        raise NotImplementedError
