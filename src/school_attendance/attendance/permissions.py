from __future__ import annotations

from typing import Iterable, Optional

from ..core.enums import PermissionAction
from ..core.exceptions import AuthorizationError
from .model import RoleAttendancePermission

_FLAGS = {
    PermissionAction.VIEW: "can_view",
    PermissionAction.CREATE: "can_create",
    PermissionAction.MODIFY: "can_modify",
    PermissionAction.DELETE: "can_delete",
}


class PermissionMatrix:
    """Role x attendance-status permission lookup."""

    def __init__(self, permissions: Iterable[RoleAttendancePermission]):
        self._by_key = {(p.role_id, p.attendance_status_id): p for p in permissions}

    def get(self, role_id: int, status_id: int) -> Optional[RoleAttendancePermission]:
        return self._by_key.get((int(role_id), int(status_id)))

    def allows(self, role_id: int, status_id: int, action: PermissionAction) -> bool:
        p = self.get(role_id, status_id)
        return bool(p and getattr(p, _FLAGS[action]))

    def require(self, role_id: int, status_id: int, action: PermissionAction, *, status_name: str = "") -> None:
        if not self.allows(role_id, status_id, action):
            label = status_name or f"#{status_id}"
            raise AuthorizationError(f"Role {role_id} may not {action.value.lower()} attendance status {label}")

    def requires_notes(self, role_id: int, status_id: int) -> bool:
        p = self.get(role_id, status_id)
        return bool(p and p.requires_notes)

    def allowed_status_ids(self, role_id: int, action: PermissionAction) -> set[int]:
        flag = _FLAGS[action]
        return {sid for (rid, sid), p in self._by_key.items() if rid == int(role_id) and getattr(p, flag)}
