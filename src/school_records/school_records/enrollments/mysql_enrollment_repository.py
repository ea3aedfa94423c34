from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EnrollmentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Enrollment
from .repository import EnrollmentRepository


def _to_enrollment(r: dict) -> Enrollment:
    return Enrollment(
        enrollment_id=int(r["enrollment_id"]),
        student_id=int(r["student_id"]),
        academic_year_id=int(r["academic_year_id"]),
        section_id=int(r["section_id"]),
        grade_level=r["grade_level"],
        enrollment_status=EnrollmentStatus(r["enrollment_status"]),
        student_name=r.get("student_name"),
    )


class MySQLEnrollmentRepository(EnrollmentRepository):
    _SELECT = """
        SELECT e.enrollment_id, e.student_id, e.academic_year_id, e.section_id,
               e.grade_level, e.enrollment_status,
               CONCAT(s.first_name, ' ', s.last_name) AS student_name
        FROM enrollments e
        JOIN students s ON s.student_id = e.student_id
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_student(self, *, student_id: int, academic_year_id: int) -> Optional[Enrollment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {self._SELECT}
                WHERE e.student_id=%s AND e.academic_year_id=%s
                ORDER BY e.enrollment_id DESC
                LIMIT 1
                """,
                (int(student_id), int(academic_year_id)),
            )
            r = fetchone(cur)
            return _to_enrollment(r) if r else None

    def list_enrolled(self, *, section_id: int, academic_year_id: int) -> Sequence[Enrollment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {self._SELECT}
                WHERE e.section_id=%s AND e.academic_year_id=%s AND e.enrollment_status=%s
                ORDER BY s.last_name ASC, s.first_name ASC
                """,
                (int(section_id), int(academic_year_id), EnrollmentStatus.ENROLLED.value),
            )
            return [_to_enrollment(r) for r in fetchall(cur)]
