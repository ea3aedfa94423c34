from __future__ import annotations

from flask import Flask

from ..common.http import json_body, json_endpoint, ok, query_int
from ..common.validators import optional_positive_id
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _context(academic_year_id=None):
        return container.context_resolver.resolve(academic_year_id or query_int("academic_year_id"))

    @app.route("/api/grades", methods=["POST"], endpoint="api_record_grade")
    @json_endpoint
    def api_record_grade():
        data = json_body()
        context = _context(optional_positive_id(data.get("academic_year_id"), "Academic year"))
        saved = container.grade_service.record_grade(
            context,
            student_id=data.get("student_id"),
            subject_id=data.get("subject_id"),
            quarter_id=data.get("quarter_id"),
            grade=data.get("grade"),
            recorded_by=optional_positive_id(data.get("recorded_by"), "Recorded by"),
        )
        return ok(saved)

    @app.route(
        "/api/sections/<int:section_id>/grades/statistics",
        methods=["GET"],
        endpoint="api_section_grade_statistics",
    )
    @json_endpoint
    def api_section_grade_statistics(section_id: int):
        context = _context()
        return ok(
            container.grade_service.quarter_statistics(
                context,
                section_id=section_id,
                quarter_id=query_int("quarter_id", required=True),
            )
        )

    @app.route("/api/students/<int:student_id>/grades", methods=["GET"], endpoint="api_student_grades")
    @json_endpoint
    def api_student_grades(student_id: int):
        return ok(container.grade_service.student_report(_context(), student_id=student_id))
