from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EnrollmentStatus, StatusRole
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_date, db_cursor, fetchall, fetchone
from .model import AttendanceStatusDefinition, Enrollment, RoleAttendancePermission
from .repository import AttendanceStatusRepository, EnrollmentRepository, PermissionRepository


def _to_enrollment(r: dict) -> Enrollment:
    return Enrollment(
        enrollment_id=int(r["enrollment_id"]),
        student_id=int(r["student_id"]),
        section_id=int(r["section_id"]),
        cycle_id=int(r["cycle_id"]),
        status=EnrollmentStatus(r["status"]),
        date_enrolled=as_date(r.get("date_enrolled")),
        student_name=(r.get("student_name") or "").strip(),
    )


class MySQLEnrollmentRepository(EnrollmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    _SELECT = """
        SELECT
            e.enrollment_id,
            e.student_id,
            e.section_id,
            e.cycle_id,
            e.status,
            e.date_enrolled,
            CONCAT_WS(' ', s.given_names, s.last_names) AS student_name
        FROM enrollments e
        JOIN students s ON s.student_id = e.student_id
    """

    def list_for_section(self, *, section_id: int, cycle_id: int, active_only: bool = True) -> Sequence[Enrollment]:
        clauses = ["e.section_id=%s", "e.cycle_id=%s"]
        params: list[object] = [int(section_id), int(cycle_id)]
        if active_only:
            clauses.append("e.status=%s")
            params.append(EnrollmentStatus.ACTIVE.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{self._SELECT} WHERE {where} ORDER BY s.last_names ASC, s.given_names ASC", tuple(params))
            return [_to_enrollment(r) for r in fetchall(cur)]

    def get_by_id(self, enrollment_id: int) -> Optional[Enrollment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{self._SELECT} WHERE e.enrollment_id=%s", (int(enrollment_id),))
            r = fetchone(cur)
            return _to_enrollment(r) if r else None


class MySQLAttendanceStatusRepository(AttendanceStatusRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[AttendanceStatusDefinition]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT status_id, code, name, display_order, is_active, role, color_code
                FROM attendance_statuses
                ORDER BY display_order ASC, status_id ASC
                """
            )
            return [
                AttendanceStatusDefinition(
                    status_id=int(r["status_id"]),
                    code=r["code"],
                    name=(r.get("name") or "").strip(),
                    order=int(r.get("display_order") or 0),
                    is_active=as_bool(r.get("is_active")),
                    role=StatusRole(r["role"]) if r.get("role") else None,
                    color_code=r.get("color_code"),
                )
                for r in fetchall(cur)
            ]


class MySQLPermissionRepository(PermissionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_role(self, role_id: int) -> Sequence[RoleAttendancePermission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT role_id, attendance_status_id, can_view, can_create, can_modify, can_delete, requires_notes
                FROM role_attendance_permissions
                WHERE role_id=%s
                """,
                (int(role_id),),
            )
            return [
                RoleAttendancePermission(
                    role_id=int(r["role_id"]),
                    attendance_status_id=int(r["attendance_status_id"]),
                    can_view=as_bool(r["can_view"]),
                    can_create=as_bool(r["can_create"]),
                    can_modify=as_bool(r["can_modify"]),
                    can_delete=as_bool(r["can_delete"]),
                    requires_notes=as_bool(r["requires_notes"]),
                )
                for r in fetchall(cur)
            ]
