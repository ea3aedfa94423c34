from __future__ import annotations

from flask import Flask

from ..common.http import json_endpoint, ok, query_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _context():
        return container.context_resolver.resolve(query_int("academic_year_id"))

    @app.route(
        "/api/sections/<int:section_id>/promotion/readiness",
        methods=["GET"],
        endpoint="api_section_promotion_readiness",
    )
    @json_endpoint
    def api_section_promotion_readiness(section_id: int):
        readiness = container.promotion_service.section_readiness(_context(), section_id=section_id)
        data = readiness.to_dict()
        data["section_id"] = section_id
        return ok(data)

    @app.route("/api/sections/<int:section_id>/promotion", methods=["GET"], endpoint="api_section_promotion")
    @json_endpoint
    def api_section_promotion(section_id: int):
        return ok(container.promotion_service.section_report(_context(), section_id=section_id))

    @app.route("/api/students/<int:student_id>/promotion", methods=["GET"], endpoint="api_student_promotion")
    @json_endpoint
    def api_student_promotion(student_id: int):
        return ok(container.promotion_service.student_promotion(_context(), student_id=student_id).to_dict())
