from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import GradeRecord
from .repository import GradeRepository


def _to_grade(r: dict) -> GradeRecord:
    return GradeRecord(
        grade_id=int(r["grade_id"]),
        student_id=int(r["student_id"]),
        subject_id=int(r["subject_id"]),
        quarter_id=int(r["quarter_id"]),
        academic_year_id=int(r["academic_year_id"]),
        grade=float(r["grade"]),
        recorded_by=r.get("recorded_by"),
        updated_at=r.get("updated_at"),
    )


class MySQLGradeRepository(GradeRepository):
    _SELECT = """
        SELECT grade_id, student_id, subject_id, quarter_id, academic_year_id, grade, recorded_by, updated_at
        FROM grades
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(
        self,
        *,
        student_id: int,
        subject_id: int,
        quarter_id: int,
        academic_year_id: int,
        grade: float,
        recorded_by: Optional[int],
        recorded_at: datetime,
    ) -> int:
        key = (int(student_id), int(subject_id), int(quarter_id), int(academic_year_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT grade_id FROM grades
                WHERE student_id=%s AND subject_id=%s AND quarter_id=%s AND academic_year_id=%s
                LIMIT 1
                """,
                key,
            )
            existing = fetchone(cur)
            if existing:
                cur.execute(
                    "UPDATE grades SET grade=%s, recorded_by=%s, updated_at=%s WHERE grade_id=%s",
                    (grade, recorded_by, recorded_at, int(existing["grade_id"])),
                )
                return int(existing["grade_id"])

            cur.execute(
                """
                INSERT INTO grades(student_id, subject_id, quarter_id, academic_year_id, grade, recorded_by,
                                   created_at, updated_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (*key, grade, recorded_by, recorded_at, recorded_at),
            )
            return int(cur.lastrowid)

    def delete(self, *, student_id: int, subject_id: int, quarter_id: int, academic_year_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM grades WHERE student_id=%s AND subject_id=%s AND quarter_id=%s AND academic_year_id=%s",
                (int(student_id), int(subject_id), int(quarter_id), int(academic_year_id)),
            )
            return cur.rowcount > 0

    def list_for_student(
        self,
        *,
        student_id: int,
        academic_year_id: int,
        quarter_id: Optional[int] = None,
    ) -> Sequence[GradeRecord]:
        return self.list_for_students(student_ids=[student_id], academic_year_id=academic_year_id, quarter_id=quarter_id)

    def list_for_students(
        self,
        *,
        student_ids: Sequence[int],
        academic_year_id: int,
        quarter_id: Optional[int] = None,
    ) -> Sequence[GradeRecord]:
        if not student_ids:
            return []

        ids = [int(x) for x in student_ids]
        sql = f"{self._SELECT} WHERE academic_year_id=%s AND student_id IN ({in_clause(ids)})"
        params: list[object] = [int(academic_year_id), *ids]
        if quarter_id is not None:
            sql += " AND quarter_id=%s"
            params.append(int(quarter_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY student_id, subject_id, quarter_id", tuple(params))
            return [_to_grade(r) for r in fetchall(cur)]
