from __future__ import annotations

from typing import Any

from ..academics.context import AcademicContext
from ..common.validators import require_enum, require_positive_id
from ..core.enums import CertificateType
from ..core.exceptions import NotEligibleError, NotFoundError
from ..core.result import Evaluation
from ..enrollments.repository import EnrollmentRepository
from .gate import CertificateEligibilityGate
from .model import CertificateCheck


class CertificateService:
    def __init__(self, gate: CertificateEligibilityGate, enrollments: EnrollmentRepository):
        self._gate = gate
        self._enrollments = enrollments

    def eligibility(
        self,
        context: AcademicContext,
        *,
        student_id: Any,
        quarter_id: Any,
        certificate_type: Any,
    ) -> Evaluation[CertificateCheck]:
        certificate_type = require_enum(CertificateType, certificate_type, "Certificate type")
        quarter = context.get_quarter(require_positive_id(quarter_id, "Quarter"))
        return self._gate.check(
            student_id=require_positive_id(student_id, "Student"),
            quarter=quarter,
            certificate_type=certificate_type,
        )

    def preview(self, context: AcademicContext, *, student_id: Any, quarter_id: Any, certificate_type: Any) -> dict:
        """Render input of a certificate; refuses students who do not qualify."""
        certificate_type = require_enum(CertificateType, certificate_type, "Certificate type")
        student_id = require_positive_id(student_id, "Student")
        quarter = context.get_quarter(require_positive_id(quarter_id, "Quarter"))

        enrollment = self._enrollments.get_for_student(student_id=student_id, academic_year_id=context.academic_year_id)
        if not enrollment or not enrollment.is_enrolled:
            raise NotFoundError("Student not found")

        check = self._gate.check(student_id=student_id, quarter=quarter, certificate_type=certificate_type).value
        if not check.can_generate:
            raise NotEligibleError(check.reason)

        return {
            "certificate_type": certificate_type.value,
            "student": {**enrollment.student_dict(), "grade_level": enrollment.grade_level},
            "quarter": {"id": quarter.quarter_id, "name": quarter.name},
            "academic_year": context.academic_year.name,
            "issued_date": quarter.end_date.strftime("%B %d, %Y"),
            "data": check.data,
        }

    def section_candidates(self, context: AcademicContext, *, section_id: int, quarter_id: int) -> dict:
        quarter = context.get_quarter(quarter_id)
        students = self._enrollments.list_enrolled(section_id=int(section_id), academic_year_id=context.academic_year_id)

        out: dict[str, list[dict]] = {t.value: [] for t in CertificateType}
        for enrollment in students:
            for certificate_type in CertificateType:
                check = self._gate.check(
                    student_id=enrollment.student_id,
                    quarter=quarter,
                    certificate_type=certificate_type,
                ).value
                if check.can_generate:
                    out[certificate_type.value].append(
                        {"id": enrollment.student_id, "student_name": enrollment.student_name, **check.data}
                    )
        return out
