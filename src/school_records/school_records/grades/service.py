from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Any, Optional

from ..academics.context import AcademicContext
from ..academics.repository import SubjectRepository
from ..common.datetime_utils import now_local
from ..common.validators import require_grade, require_positive_id
from ..core.constants import PASSING_GRADE
from ..core.exceptions import NotFoundError
from ..enrollments.model import Enrollment
from ..enrollments.repository import EnrollmentRepository
from ..schedules.model import distinct_subject_ids
from ..schedules.repository import ScheduleRepository
from .model import GradeRecord
from .repository import GradeRepository


def _avg(values: list[float]) -> Optional[float]:
    return round(sum(values) / len(values), 2) if values else None


class GradeService:
    def __init__(
        self,
        grades: GradeRepository,
        schedules: ScheduleRepository,
        enrollments: EnrollmentRepository,
        subjects: SubjectRepository,
    ):
        self._grades = grades
        self._schedules = schedules
        self._enrollments = enrollments
        self._subjects = subjects

    def _enrollment(self, context: AcademicContext, student_id: int) -> Enrollment:
        enrollment = self._enrollments.get_for_student(student_id=student_id, academic_year_id=context.academic_year_id)
        if not enrollment or not enrollment.is_enrolled:
            raise NotFoundError("Student is not enrolled in this academic year")
        return enrollment

    def _section_subject_ids(self, context: AcademicContext, section_id: int) -> list[int]:
        schedules = self._schedules.list_for_section(section_id=section_id, academic_year_id=context.academic_year_id)
        return distinct_subject_ids(schedules)

    def _subject_names(self, subject_ids: list[int]) -> dict[int, str]:
        return {s.subject_id: s.name for s in self._subjects.get_many(subject_ids)}

    def record_grade(
        self,
        context: AcademicContext,
        *,
        student_id: Any,
        subject_id: Any,
        quarter_id: Any,
        grade: Any,
        recorded_by: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> dict:
        """Create or update one quarter grade; an empty grade removes it."""
        student_id = require_positive_id(student_id, "Student")
        subject_id = require_positive_id(subject_id, "Subject")
        quarter = context.get_quarter(require_positive_id(quarter_id, "Quarter"))
        self._enrollment(context, student_id)
        if not self._subjects.get_many([subject_id]):
            raise NotFoundError("Subject not found")

        key = dict(
            student_id=student_id,
            subject_id=subject_id,
            quarter_id=quarter.quarter_id,
            academic_year_id=context.academic_year_id,
        )

        if grade is None or grade == "":
            self._grades.delete(**key)
            return {"id": None, **key, "grade": None, "recorded_by": recorded_by}

        value = require_grade(grade)
        now = now or now_local()
        grade_id = self._grades.upsert(**key, grade=value, recorded_by=recorded_by, recorded_at=now)
        return GradeRecord(grade_id=grade_id, grade=value, recorded_by=recorded_by, updated_at=now, **key).to_dict()

    def quarter_statistics(self, context: AcademicContext, *, section_id: int, quarter_id: int) -> dict:
        quarter = context.get_quarter(quarter_id)
        subject_ids = self._section_subject_ids(context, int(section_id))
        students = self._enrollments.list_enrolled(section_id=int(section_id), academic_year_id=context.academic_year_id)
        grades = self._grades.list_for_students(
            student_ids=[e.student_id for e in students],
            academic_year_id=context.academic_year_id,
            quarter_id=quarter.quarter_id,
        )

        by_student: dict[int, dict[int, float]] = defaultdict(dict)
        for g in grades:
            by_student[g.student_id][g.subject_id] = g.grade

        stats = {
            "section_id": int(section_id),
            "quarter_id": quarter.quarter_id,
            "total_students": len(students),
            "students_with_complete_grades": 0,
            "passing_students": 0,
            "failing_students": 0,
            "subject_averages": [],
        }

        per_subject: dict[int, list[float]] = defaultdict(list)
        for enrollment in students:
            own = by_student.get(enrollment.student_id, {})
            values = [own[s] for s in subject_ids if s in own]
            for s in subject_ids:
                if s in own:
                    per_subject[s].append(own[s])

            if subject_ids and len(values) == len(subject_ids):
                stats["students_with_complete_grades"] += 1
                if sum(values) / len(values) >= PASSING_GRADE:
                    stats["passing_students"] += 1
                else:
                    stats["failing_students"] += 1

        names = self._subject_names(subject_ids)
        for s in subject_ids:
            if per_subject.get(s):
                stats["subject_averages"].append(
                    {
                        "subject_id": s,
                        "subject_name": names.get(s),
                        "average": _avg(per_subject[s]),
                        "student_count": len(per_subject[s]),
                    }
                )
        return stats

    def student_report(self, context: AcademicContext, *, student_id: int) -> dict:
        enrollment = self._enrollment(context, int(student_id))
        subject_ids = self._section_subject_ids(context, enrollment.section_id)
        grades = self._grades.list_for_student(student_id=enrollment.student_id, academic_year_id=context.academic_year_id)

        table: dict[int, dict[int, float]] = defaultdict(dict)
        for g in grades:
            table[g.subject_id][g.quarter_id] = g.grade
        for s in table:
            if s not in subject_ids:
                subject_ids.append(s)

        names = self._subject_names(subject_ids)
        quarter_ids = context.quarter_ids
        subjects = []
        for s in subject_ids:
            row = table.get(s, {})
            average = _avg(list(row.values()))
            if not quarter_ids or any(q not in row for q in quarter_ids):
                status = "Incomplete"
            elif average is not None and average >= PASSING_GRADE:
                status = "Passing"
            else:
                status = "Failing"
            subjects.append(
                {
                    "subject_id": s,
                    "subject_name": names.get(s),
                    "quarters": {str(q): row.get(q) for q in quarter_ids},
                    "average": average,
                    "status": status,
                }
            )

        quarter_averages = {}
        for q in quarter_ids:
            quarter_averages[str(q)] = _avg([table[s][q] for s in table if q in table[s]])

        return {
            "student": enrollment.student_dict(),
            "academic_year": context.to_dict(),
            "quarters": [{"id": q.quarter_id, "name": q.name} for q in context.quarters],
            "subjects": subjects,
            "quarter_averages": quarter_averages,
            "general_average": _avg([x["average"] for x in subjects if x["average"] is not None]),
        }
