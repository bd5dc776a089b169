from __future__ import annotations

from typing import Iterable

from ...core.enums import StatusRole
from ...core.exceptions import EmptyInputError
from .base import DayStatusPolicy

PRECEDENCE: tuple[StatusRole, ...] = (StatusRole.ABSENT, StatusRole.TARDY, StatusRole.EXCUSED)


class PrecedenceDayStatusPolicy(DayStatusPolicy):
    """ABSENT > TARDY > EXCUSED > PRESENT.

    One absence in any period marks the whole day absent; this is never a
    majority vote.
    """

    def decide(self, roles: Iterable[StatusRole]) -> StatusRole:
        seen = set(roles)
        if not seen:
            raise EmptyInputError("Cannot decide a day status without class records")

        for role in PRECEDENCE:
            if role in seen:
                return role
        return StatusRole.PRESENT
