from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ClassSchedule
from .repository import ScheduleRepository


def _to_schedule(r: dict) -> ClassSchedule:
    return ClassSchedule(
        schedule_id=int(r["schedule_id"]),
        subject_id=int(r["subject_id"]),
        section_id=int(r["section_id"]),
        academic_year_id=int(r["academic_year_id"]),
        day_of_week=r["day_of_week"],
        teacher_id=int(r["teacher_id"]) if r.get("teacher_id") is not None else None,
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLScheduleRepository(ScheduleRepository):
    _SELECT = """
        SELECT schedule_id, subject_id, section_id, academic_year_id, teacher_id,
               day_of_week, is_active
        FROM schedules
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, schedule_id: int) -> Optional[ClassSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{self._SELECT} WHERE schedule_id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def list_for_section(self, *, section_id: int, academic_year_id: int) -> Sequence[ClassSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {self._SELECT}
                WHERE section_id=%s AND academic_year_id=%s AND is_active=1
                ORDER BY day_of_week ASC, start_time ASC
                """,
                (int(section_id), int(academic_year_id)),
            )
            return [_to_schedule(r) for r in fetchall(cur)]
