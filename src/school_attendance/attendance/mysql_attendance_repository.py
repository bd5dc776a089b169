from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone, in_clause, normalize_mysql_time
from .model import StudentClassAttendance
from .repository import AttendanceRepository

_SELECT = """
    SELECT
        sca.attendance_id,
        sca.enrollment_id,
        sca.date,
        sca.schedule_id,
        sca.course_assignment_id,
        sca.attendance_status_id,
        sca.status,
        sca.arrival_time,
        sca.notes,
        sca.recorded_by,
        sca.last_modified_by,
        sca.last_modified_at,
        sca.modification_reason,
        CONCAT_WS(' ', rb.given_names, rb.last_names) AS recorded_by_name,
        CONCAT_WS(' ', mb.given_names, mb.last_names) AS last_modified_by_name
    FROM student_class_attendance sca
    LEFT JOIN users rb ON rb.user_id = sca.recorded_by
    LEFT JOIN users mb ON mb.user_id = sca.last_modified_by
"""


def _to_record(r: dict) -> StudentClassAttendance:
    return StudentClassAttendance(
        attendance_id=int(r["attendance_id"]),
        enrollment_id=int(r["enrollment_id"]),
        date=as_date(r["date"]),
        schedule_id=int(r["schedule_id"]) if r.get("schedule_id") is not None else None,
        course_assignment_id=int(r["course_assignment_id"]) if r.get("course_assignment_id") is not None else None,
        attendance_status_id=int(r["attendance_status_id"]) if r.get("attendance_status_id") is not None else None,
        status=r["status"],
        arrival_time=normalize_mysql_time(r.get("arrival_time")),
        notes=r.get("notes"),
        recorded_by=r.get("recorded_by"),
        last_modified_by=r.get("last_modified_by"),
        last_modified_at=r.get("last_modified_at"),
        modification_reason=r.get("modification_reason"),
        recorded_by_name=r.get("recorded_by_name") or None,
        last_modified_by_name=r.get("last_modified_by_name") or None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_enrollments(
        self,
        *,
        enrollment_ids: Sequence[int],
        start_date: date,
        end_date: date,
    ) -> Sequence[StudentClassAttendance]:
        if not enrollment_ids:
            return []

        placeholders, ids = in_clause([int(i) for i in enrollment_ids])
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                WHERE sca.enrollment_id IN ({placeholders})
                  AND sca.date BETWEEN %s AND %s
                ORDER BY sca.date ASC, sca.enrollment_id ASC, sca.schedule_id ASC
                """,
                ids + (start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_by_id(self, attendance_id: int) -> Optional[StudentClassAttendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE sca.attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def find_existing(
        self,
        *,
        enrollment_id: int,
        on_date: date,
        schedule_id: Optional[int],
    ) -> Optional[StudentClassAttendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                WHERE sca.enrollment_id=%s AND sca.date=%s AND sca.schedule_id <=> %s
                LIMIT 1
                """,
                (int(enrollment_id), on_date, schedule_id),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create(
        self,
        *,
        enrollment_id: int,
        on_date: date,
        schedule_id: Optional[int],
        course_assignment_id: Optional[int],
        attendance_status_id: int,
        status: str,
        arrival_time: Optional[time],
        notes: Optional[str],
        recorded_by: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO student_class_attendance(
                    enrollment_id, date, schedule_id, course_assignment_id,
                    attendance_status_id, status, arrival_time, notes, recorded_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(enrollment_id),
                    on_date,
                    schedule_id,
                    course_assignment_id,
                    int(attendance_status_id),
                    status,
                    arrival_time,
                    notes,
                    int(recorded_by),
                ),
            )
            return int(cur.lastrowid)

    def update_status(
        self,
        *,
        attendance_id: int,
        attendance_status_id: int,
        status: str,
        notes: Optional[str],
        last_modified_by: int,
        last_modified_at: datetime,
        modification_reason: str,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE student_class_attendance
                SET attendance_status_id=%s,
                    status=%s,
                    notes=%s,
                    last_modified_by=%s,
                    last_modified_at=%s,
                    modification_reason=%s
                WHERE attendance_id=%s
                """,
                (
                    int(attendance_status_id),
                    status,
                    notes,
                    int(last_modified_by),
                    last_modified_at,
                    modification_reason,
                    int(attendance_id),
                ),
            )
            return cur.rowcount > 0
