from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .academics.context import AcademicContextResolver
from .academics.mysql_academics_repository import (
    MySQLAcademicYearRepository,
    MySQLCalendarRepository,
    MySQLQuarterRepository,
    MySQLSubjectRepository,
)
from .academics.repository import AcademicYearRepository, CalendarRepository, QuarterRepository, SubjectRepository
from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.tardiness import TardinessRuleEvaluator
from .certificates.gate import CertificateEligibilityGate
from .certificates.service import CertificateService
from .certificates.subject_sources import CurriculumSubjectSource, ExpectedSubjectResolver, GradedSubjectSource
from .core.constants import LATE_CONVERSION_THRESHOLD
from .database.connection import DBConfig, DatabaseConnection
from .enrollments.mysql_enrollment_repository import MySQLEnrollmentRepository
from .enrollments.repository import EnrollmentRepository
from .grades.mysql_grade_repository import MySQLGradeRepository
from .grades.repository import GradeRepository
from .grades.service import GradeService
from .promotion.evaluator import PromotionEvaluator
from .promotion.factory import get_honor_policy
from .promotion.service import PromotionService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    years_repo: AcademicYearRepository
    quarters_repo: QuarterRepository
    subjects_repo: SubjectRepository
    calendar_repo: CalendarRepository
    schedules_repo: ScheduleRepository
    enrollments_repo: EnrollmentRepository
    attendance_repo: AttendanceRepository
    grades_repo: GradeRepository

    context_resolver: AcademicContextResolver
    tardiness_evaluator: TardinessRuleEvaluator
    attendance_service: AttendanceService
    grade_service: GradeService
    promotion_service: PromotionService
    certificate_service: CertificateService


def assemble_container(
    *,
    years_repo: AcademicYearRepository,
    quarters_repo: QuarterRepository,
    subjects_repo: SubjectRepository,
    calendar_repo: CalendarRepository,
    schedules_repo: ScheduleRepository,
    enrollments_repo: EnrollmentRepository,
    attendance_repo: AttendanceRepository,
    grades_repo: GradeRepository,
    honor_policy: str = "strict",
    late_threshold: int = LATE_CONVERSION_THRESHOLD,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any set of repositories (MySQL or in-memory)."""
    tardiness_evaluator = TardinessRuleEvaluator(attendance_repo, schedules_repo, threshold=late_threshold)
    attendance_service = AttendanceService(
        attendance_repo,
        schedules_repo,
        enrollments_repo,
        calendar_repo,
        tardiness=tardiness_evaluator,
        strategy_factory=AttendanceStrategyFactory(threshold=late_threshold),
    )
    grade_service = GradeService(grades_repo, schedules_repo, enrollments_repo, subjects_repo)
    promotion_service = PromotionService(
        PromotionEvaluator(get_honor_policy(honor_policy)),
        grades_repo,
        attendance_repo,
        schedules_repo,
        enrollments_repo,
    )
    # Certificates always use the strict tiers for their wording.
    certificate_gate = CertificateEligibilityGate(
        attendance_repo,
        grades_repo,
        enrollments_repo,
        ExpectedSubjectResolver(CurriculumSubjectSource(subjects_repo), GradedSubjectSource()),
    )
    certificate_service = CertificateService(certificate_gate, enrollments_repo)

    return Container(
        conn=conn,
        years_repo=years_repo,
        quarters_repo=quarters_repo,
        subjects_repo=subjects_repo,
        calendar_repo=calendar_repo,
        schedules_repo=schedules_repo,
        enrollments_repo=enrollments_repo,
        attendance_repo=attendance_repo,
        grades_repo=grades_repo,
        context_resolver=AcademicContextResolver(years_repo, quarters_repo),
        tardiness_evaluator=tardiness_evaluator,
        attendance_service=attendance_service,
        grade_service=grade_service,
        promotion_service=promotion_service,
        certificate_service=certificate_service,
    )


def build_container(
    *,
    db_config: dict,
    honor_policy: str = "strict",
    late_threshold: int = LATE_CONVERSION_THRESHOLD,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return assemble_container(
        conn=conn,
        years_repo=MySQLAcademicYearRepository(conn),
        quarters_repo=MySQLQuarterRepository(conn),
        subjects_repo=MySQLSubjectRepository(conn),
        calendar_repo=MySQLCalendarRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        enrollments_repo=MySQLEnrollmentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        grades_repo=MySQLGradeRepository(conn),
        honor_policy=honor_policy,
        late_threshold=late_threshold,
    )
