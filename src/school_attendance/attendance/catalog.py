from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ..core.enums import StatusRole
from .model import AttendanceStatusDefinition

logger = logging.getLogger(__name__)

# Long English names plus the short catalog codes:
# P presente, I/A inasistencia, T tardanza, IJ/TJ justificadas, E excusa, M médica.
DEFAULT_ROLE_ALIASES: dict[str, StatusRole] = {
    "ABSENT": StatusRole.ABSENT,
    "ABSENCE": StatusRole.ABSENT,
    "I": StatusRole.ABSENT,
    "A": StatusRole.ABSENT,
    "INASISTENCIA": StatusRole.ABSENT,
    "TARDY": StatusRole.TARDY,
    "LATE": StatusRole.TARDY,
    "T": StatusRole.TARDY,
    "EXCUSED": StatusRole.EXCUSED,
    "JUSTIFIED": StatusRole.EXCUSED,
    "EXCUSED_ABSENT": StatusRole.EXCUSED,
    "EXCUSED_TARDY": StatusRole.EXCUSED,
    "MEDICAL": StatusRole.EXCUSED,
    "IJ": StatusRole.EXCUSED,
    "TJ": StatusRole.EXCUSED,
    "E": StatusRole.EXCUSED,
    "M": StatusRole.EXCUSED,
    "PRESENT": StatusRole.PRESENT,
    "P": StatusRole.PRESENT,
}


def normalize_code(code: Optional[str]) -> str:
    return (code or "").strip().upper()


class StatusCatalog:
    """Ordered, configurable list of attendance statuses.

    Precedence works on roles, not literal codes, so an institution can rename
    or add codes by pinning ``AttendanceStatusDefinition.role``.
    """

    def __init__(
        self,
        definitions: Iterable[AttendanceStatusDefinition] = (),
        *,
        aliases: Optional[dict[str, StatusRole]] = None,
    ):
        self._definitions = sorted(definitions, key=lambda d: (d.order, d.status_id))
        self._by_code = {normalize_code(d.code): d for d in self._definitions}
        self._by_id = {d.status_id: d for d in self._definitions}
        self._aliases = {normalize_code(k): v for k, v in (aliases or DEFAULT_ROLE_ALIASES).items()}

    def __iter__(self):
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def active(self) -> Sequence[AttendanceStatusDefinition]:
        return [d for d in self._definitions if d.is_active]

    def by_code(self, code: str) -> Optional[AttendanceStatusDefinition]:
        return self._by_code.get(normalize_code(code))

    def by_id(self, status_id: int) -> Optional[AttendanceStatusDefinition]:
        return self._by_id.get(status_id)

    def role_of(self, code: str) -> StatusRole:
        key = normalize_code(code)
        definition = self._by_code.get(key)
        if definition and definition.role:
            return definition.role

        role = self._aliases.get(key)
        if role:
            return role

        logger.debug("Status code %r has no precedence role; treating it as PRESENT", code)
        return StatusRole.PRESENT
