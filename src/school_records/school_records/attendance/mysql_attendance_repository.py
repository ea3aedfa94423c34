from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, EnrollmentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        student_id=int(r["student_id"]),
        schedule_id=int(r["schedule_id"]),
        academic_year_id=int(r["academic_year_id"]),
        quarter_id=int(r["quarter_id"]) if r.get("quarter_id") is not None else None,
        attendance_date=r["attendance_date"],
        status=AttendanceStatus(r["status"]),
        remarks=r.get("remarks"),
        recorded_by=r.get("recorded_by"),
        recorded_at=r.get("recorded_at"),
        subject_id=int(r["subject_id"]) if r.get("subject_id") is not None else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    _SELECT = """
        SELECT a.attendance_id, a.student_id, a.schedule_id, a.academic_year_id, a.quarter_id,
               a.attendance_date, a.status, a.remarks, a.recorded_by, a.recorded_at,
               sc.subject_id
        FROM attendances a
        JOIN schedules sc ON sc.schedule_id = a.schedule_id
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def count_late(
        self,
        *,
        student_id: int,
        subject_id: int,
        academic_year_id: int,
        quarter_id: Optional[int] = None,
        exclude_date: Optional[date] = None,
    ) -> int:
        clauses = ["a.student_id=%s", "sc.subject_id=%s", "a.academic_year_id=%s", "a.status=%s"]
        params: list[object] = [int(student_id), int(subject_id), int(academic_year_id), AttendanceStatus.LATE.value]

        if quarter_id is not None:
            clauses.append("a.quarter_id=%s")
            params.append(int(quarter_id))
        if exclude_date is not None:
            clauses.append("a.attendance_date<>%s")
            params.append(exclude_date)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT COUNT(*) AS late_count
                FROM attendances a
                JOIN schedules sc ON sc.schedule_id = a.schedule_id
                WHERE {where}
                """,
                tuple(params),
            )
            r = fetchone(cur)
            return int(r["late_count"]) if r else 0

    def upsert(
        self,
        *,
        student_id: int,
        schedule_id: int,
        academic_year_id: int,
        quarter_id: Optional[int],
        attendance_date: date,
        status: AttendanceStatus,
        remarks: Optional[str],
        recorded_by: Optional[int],
        recorded_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id FROM attendances
                WHERE student_id=%s AND schedule_id=%s AND attendance_date=%s
                ORDER BY attendance_id DESC
                LIMIT 1
                """,
                (int(student_id), int(schedule_id), attendance_date),
            )
            existing = fetchone(cur)

            if existing:
                cur.execute(
                    """
                    UPDATE attendances
                    SET academic_year_id=%s, quarter_id=%s, status=%s, remarks=%s, recorded_by=%s, recorded_at=%s
                    WHERE attendance_id=%s
                    """,
                    (
                        int(academic_year_id),
                        quarter_id,
                        status.value,
                        remarks,
                        recorded_by,
                        recorded_at,
                        int(existing["attendance_id"]),
                    ),
                )
                return int(existing["attendance_id"])

            cur.execute(
                """
                INSERT INTO attendances(student_id, schedule_id, academic_year_id, quarter_id, attendance_date,
                                        status, remarks, recorded_by, recorded_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(student_id),
                    int(schedule_id),
                    int(academic_year_id),
                    quarter_id,
                    attendance_date,
                    status.value,
                    remarks,
                    recorded_by,
                    recorded_at,
                ),
            )
            return int(cur.lastrowid)

    def list_for_student(
        self,
        *,
        student_id: int,
        academic_year_id: int,
        quarter_id: Optional[int] = None,
        schedule_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["a.student_id=%s", "a.academic_year_id=%s"]
        params: list[object] = [int(student_id), int(academic_year_id)]

        if quarter_id is not None:
            clauses.append("a.quarter_id=%s")
            params.append(int(quarter_id))
        if schedule_id is not None:
            clauses.append("a.schedule_id=%s")
            params.append(int(schedule_id))
        if start is not None:
            clauses.append("a.attendance_date>=%s")
            params.append(start)
        if end is not None:
            clauses.append("a.attendance_date<=%s")
            params.append(end)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{self._SELECT} WHERE {where} ORDER BY a.attendance_date DESC, a.attendance_id DESC",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_section(
        self,
        *,
        section_id: int,
        academic_year_id: int,
        start: date,
        end: date,
    ) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {self._SELECT}
                JOIN enrollments e
                  ON e.student_id = a.student_id
                 AND e.academic_year_id = a.academic_year_id
                 AND e.section_id=%s
                 AND e.enrollment_status=%s
                WHERE a.academic_year_id=%s AND a.attendance_date BETWEEN %s AND %s
                ORDER BY a.attendance_date ASC, a.student_id ASC
                """,
                (int(section_id), EnrollmentStatus.ENROLLED.value, int(academic_year_id), start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]
