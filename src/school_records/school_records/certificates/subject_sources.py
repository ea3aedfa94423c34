"""Expected subjects of a student's grade level for the honor-roll completeness check.

The year-level curriculum is the primary source. When no curriculum is
mapped for the grade level, the subjects the student was actually graded in
are used instead and the substitution is logged.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Sequence

from ..academics.repository import SubjectRepository
from ..enrollments.model import Enrollment
from ..grades.model import GradeRecord
from .model import ExpectedSubjects

logger = logging.getLogger(__name__)


class ExpectedSubjectSource(ABC):
    name: str = ""

    @abstractmethod
    def subject_ids(self, *, enrollment: Enrollment, grades: Sequence[GradeRecord]) -> list[int]:
        raise NotImplementedError


class CurriculumSubjectSource(ExpectedSubjectSource):
    name = "curriculum"

    def __init__(self, subjects: SubjectRepository):
        self._subjects = subjects

    def subject_ids(self, *, enrollment: Enrollment, grades: Sequence[GradeRecord]) -> list[int]:
        return sorted({int(s) for s in self._subjects.list_curriculum(enrollment.grade_level)})


class GradedSubjectSource(ExpectedSubjectSource):
    name = "graded_subjects"

    def subject_ids(self, *, enrollment: Enrollment, grades: Sequence[GradeRecord]) -> list[int]:
        return sorted({g.subject_id for g in grades})


class ExpectedSubjectResolver:
    def __init__(self, primary: ExpectedSubjectSource, fallback: ExpectedSubjectSource):
        self._primary = primary
        self._fallback = fallback

    def resolve(self, *, enrollment: Enrollment, grades: Sequence[GradeRecord]) -> ExpectedSubjects:
        ids = self._primary.subject_ids(enrollment=enrollment, grades=grades)
        if ids:
            return ExpectedSubjects(subject_ids=tuple(ids), source=self._primary.name)

        ids = self._fallback.subject_ids(enrollment=enrollment, grades=grades)
        logger.warning(
            "Expected subjects for grade level %r fell back from %s to %s "
            "(student_id=%s academic_year_id=%s subjects=%s)",
            enrollment.grade_level,
            self._primary.name,
            self._fallback.name,
            enrollment.student_id,
            enrollment.academic_year_id,
            len(ids),
        )
        return ExpectedSubjects(subject_ids=tuple(ids), source=self._fallback.name)
