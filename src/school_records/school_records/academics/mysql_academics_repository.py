from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import CalendarEntryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import AcademicYear, CalendarEntry, Quarter, Subject
from .repository import AcademicYearRepository, CalendarRepository, QuarterRepository, SubjectRepository


def _to_year(r: dict) -> AcademicYear:
    return AcademicYear(
        academic_year_id=int(r["academic_year_id"]),
        name=r["name"],
        start_date=r["start_date"],
        end_date=r["end_date"],
        is_current=bool(r.get("is_current")),
    )


class MySQLAcademicYearRepository(AcademicYearRepository):
    _SELECT = "SELECT academic_year_id, name, start_date, end_date, is_current FROM academic_years"

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, academic_year_id: int) -> Optional[AcademicYear]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{self._SELECT} WHERE academic_year_id=%s", (int(academic_year_id),))
            r = fetchone(cur)
            return _to_year(r) if r else None

    def get_current(self) -> Optional[AcademicYear]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{self._SELECT} WHERE is_current=1 ORDER BY academic_year_id DESC LIMIT 1")
            r = fetchone(cur)
            return _to_year(r) if r else None

    def get_most_recent(self) -> Optional[AcademicYear]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{self._SELECT} ORDER BY academic_year_id DESC LIMIT 1")
            r = fetchone(cur)
            return _to_year(r) if r else None


class MySQLQuarterRepository(QuarterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_year(self, academic_year_id: int) -> Sequence[Quarter]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT quarter_id, academic_year_id, name, quarter_number, start_date, end_date
                FROM quarters
                WHERE academic_year_id=%s
                ORDER BY start_date ASC
                """,
                (int(academic_year_id),),
            )
            return [
                Quarter(
                    quarter_id=int(r["quarter_id"]),
                    academic_year_id=int(r["academic_year_id"]),
                    name=r["name"],
                    quarter_number=r.get("quarter_number"),
                    start_date=r["start_date"],
                    end_date=r["end_date"],
                )
                for r in fetchall(cur)
            ]


class MySQLSubjectRepository(SubjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_many(self, subject_ids: Sequence[int]) -> Sequence[Subject]:
        ids = [int(s) for s in subject_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT subject_id, name, code FROM subjects WHERE subject_id IN ({in_clause(ids)}) ORDER BY name",
                tuple(ids),
            )
            return [Subject(subject_id=int(r["subject_id"]), name=r["name"], code=r.get("code")) for r in fetchall(cur)]

    def list_curriculum(self, grade_level: str) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DISTINCT yls.subject_id
                FROM year_level_subjects yls
                JOIN year_levels yl ON yl.year_level_id = yls.year_level_id
                WHERE yl.name=%s
                """,
                (grade_level,),
            )
            return [int(r["subject_id"]) for r in fetchall(cur)]


class MySQLCalendarRepository(CalendarRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_non_class_days(self, *, academic_year_id: int, start: date, end: date) -> Sequence[CalendarEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT academic_year_id, date, type, title, is_class_day
                FROM academic_calendars
                WHERE academic_year_id=%s AND date BETWEEN %s AND %s AND is_class_day=0
                ORDER BY date ASC
                """,
                (int(academic_year_id), start, end),
            )
            return [
                CalendarEntry(
                    academic_year_id=int(r["academic_year_id"]),
                    date=r["date"],
                    type=CalendarEntryType(r["type"]),
                    title=r["title"],
                    is_class_day=bool(r["is_class_day"]),
                )
                for r in fetchall(cur)
            ]
