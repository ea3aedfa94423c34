from __future__ import annotations

from flask import Flask, request

from ..common.http import json_endpoint, ok, query_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _context():
        return container.context_resolver.resolve(query_int("academic_year_id"))

    @app.route("/api/certificates/eligibility", methods=["GET"], endpoint="api_certificate_eligibility")
    @json_endpoint
    def api_certificate_eligibility():
        result = container.certificate_service.eligibility(
            _context(),
            student_id=request.args.get("student_id"),
            quarter_id=request.args.get("quarter_id"),
            certificate_type=request.args.get("type"),
        )
        data = result.value.to_dict()
        data["fallback"] = not result.ok
        return ok(data)

    @app.route(
        "/api/certificates/<certificate_type>/<int:student_id>/<int:quarter_id>",
        methods=["GET"],
        endpoint="api_certificate_preview",
    )
    @json_endpoint
    def api_certificate_preview(certificate_type: str, student_id: int, quarter_id: int):
        return ok(
            container.certificate_service.preview(
                _context(),
                student_id=student_id,
                quarter_id=quarter_id,
                certificate_type=certificate_type,
            )
        )

    @app.route("/api/sections/<int:section_id>/certificates", methods=["GET"], endpoint="api_section_certificates")
    @json_endpoint
    def api_section_certificates(section_id: int):
        context = _context()
        quarter_id = query_int("quarter_id")
        if quarter_id is None:
            current = context.current_quarter()
            quarter_id = current.quarter_id if current else 0
        return ok(container.certificate_service.section_candidates(context, section_id=section_id, quarter_id=quarter_id))
