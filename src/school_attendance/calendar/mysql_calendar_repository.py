from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import WeekType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_date, db_cursor, fetchall, fetchone
from .model import AcademicCycle, AcademicWeek, Bimester, Holiday
from .repository import CalendarRepository

_CYCLE_COLUMNS = "cycle_id, name, start_date, end_date, is_active, is_closed"
_BIMESTER_COLUMNS = "bimester_id, cycle_id, number, name, start_date, end_date, is_active, weeks_count"
_WEEK_COLUMNS = "week_id, bimester_id, number, start_date, end_date, week_type"


def _to_cycle(r: dict) -> AcademicCycle:
    return AcademicCycle(
        cycle_id=int(r["cycle_id"]),
        name=r["name"],
        start_date=as_date(r["start_date"]),
        end_date=as_date(r["end_date"]),
        is_active=as_bool(r["is_active"]),
        is_closed=as_bool(r["is_closed"]),
    )


def _to_bimester(r: dict) -> Bimester:
    return Bimester(
        bimester_id=int(r["bimester_id"]),
        cycle_id=int(r["cycle_id"]),
        number=int(r["number"]),
        name=r.get("name"),
        start_date=as_date(r["start_date"]),
        end_date=as_date(r["end_date"]),
        is_active=as_bool(r["is_active"]),
        weeks_count=int(r.get("weeks_count") or 0),
    )


def _to_week(r: dict) -> AcademicWeek:
    return AcademicWeek(
        week_id=int(r["week_id"]),
        bimester_id=int(r["bimester_id"]),
        number=int(r["number"]),
        start_date=as_date(r["start_date"]),
        end_date=as_date(r["end_date"]),
        week_type=WeekType(r.get("week_type") or WeekType.REGULAR.value),
    )


class MySQLCalendarRepository(CalendarRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_cycles(self) -> Sequence[AcademicCycle]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_CYCLE_COLUMNS} FROM school_cycles ORDER BY start_date ASC")
            return [_to_cycle(r) for r in fetchall(cur)]

    def list_bimesters(self, cycle_id: int) -> Sequence[Bimester]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_BIMESTER_COLUMNS}
                FROM bimesters
                WHERE cycle_id=%s
                ORDER BY number ASC
                """,
                (int(cycle_id),),
            )
            return [_to_bimester(r) for r in fetchall(cur)]

    def get_bimester(self, bimester_id: int) -> Optional[Bimester]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_BIMESTER_COLUMNS} FROM bimesters WHERE bimester_id=%s", (int(bimester_id),))
            r = fetchone(cur)
            return _to_bimester(r) if r else None

    def list_weeks(self, bimester_id: int) -> Sequence[AcademicWeek]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_WEEK_COLUMNS}
                FROM academic_weeks
                WHERE bimester_id=%s
                ORDER BY number ASC
                """,
                (int(bimester_id),),
            )
            return [_to_week(r) for r in fetchall(cur)]

    def get_week(self, week_id: int) -> Optional[AcademicWeek]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_WEEK_COLUMNS} FROM academic_weeks WHERE week_id=%s", (int(week_id),))
            r = fetchone(cur)
            return _to_week(r) if r else None

    def list_holidays(self, bimester_id: int) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT holiday_id, bimester_id, date, description, is_recovered
                FROM holidays
                WHERE bimester_id=%s
                ORDER BY date ASC
                """,
                (int(bimester_id),),
            )
            return [
                Holiday(
                    holiday_id=int(r["holiday_id"]),
                    bimester_id=int(r["bimester_id"]),
                    date=as_date(r["date"]),
                    description=r.get("description") or "",
                    is_recovered=as_bool(r.get("is_recovered")),
                )
                for r in fetchall(cur)
            ]
