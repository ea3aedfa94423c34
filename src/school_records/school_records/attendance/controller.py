from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, json_endpoint, ok, parse_date_field, query_date, query_int
from ..common.validators import optional_positive_id, require_positive_id
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _context(academic_year_id=None):
        return container.context_resolver.resolve(academic_year_id or query_int("academic_year_id"))

    @app.route("/api/attendance", methods=["POST"], endpoint="api_record_attendance")
    @json_endpoint
    def api_record_attendance():
        data = json_body()
        context = _context(optional_positive_id(data.get("academic_year_id"), "Academic year"))
        outcome = container.attendance_service.record_attendance(
            context,
            student_id=data.get("student_id"),
            schedule_id=data.get("schedule_id"),
            attendance_date=parse_date_field(data.get("attendance_date"), "attendance_date"),
            status=data.get("status"),
            remarks=data.get("remarks"),
            recorded_by=optional_positive_id(data.get("recorded_by"), "Recorded by"),
        )
        return ok(outcome.to_dict(), status=201, warning=outcome.warning)

    @app.route("/api/attendance/bulk", methods=["POST"], endpoint="api_record_attendance_bulk")
    @json_endpoint
    def api_record_attendance_bulk():
        data = json_body()
        context = _context(optional_positive_id(data.get("academic_year_id"), "Academic year"))
        entries = data.get("attendance") or []
        if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
            entries = []
        outcome = container.attendance_service.record_bulk(
            context,
            schedule_id=data.get("schedule_id"),
            attendance_date=parse_date_field(data.get("attendance_date"), "attendance_date"),
            entries=entries,
            recorded_by=optional_positive_id(data.get("recorded_by"), "Recorded by"),
        )
        return ok(outcome.to_dict(), warning=outcome.warning)

    @app.route("/api/attendance/tardiness-check", methods=["GET"], endpoint="api_tardiness_check")
    @json_endpoint
    def api_tardiness_check():
        context = _context()
        result = container.attendance_service.tardiness_check(
            context,
            student_id=require_positive_id(request.args.get("student_id"), "Student"),
            schedule_id=require_positive_id(request.args.get("schedule_id"), "Schedule"),
            quarter_id=query_int("quarter_id"),
            attendance_date=query_date("attendance_date"),
        )
        data = result.value.to_dict()
        data["fallback"] = not result.ok
        return ok(data)

    @app.route("/api/students/<int:student_id>/tardiness", methods=["GET"], endpoint="api_student_tardiness")
    @json_endpoint
    def api_student_tardiness(student_id: int):
        context = _context()
        return ok(
            container.attendance_service.tardiness_stats(
                context,
                student_id=student_id,
                quarter_id=query_int("quarter_id"),
            )
        )

    @app.route("/api/students/<int:student_id>/attendance", methods=["GET"], endpoint="api_student_attendance")
    @json_endpoint
    def api_student_attendance(student_id: int):
        context = _context()
        return ok(
            container.attendance_service.student_summary(
                context,
                student_id=student_id,
                schedule_id=query_int("schedule_id"),
                start=query_date("start_date"),
                end=query_date("end_date"),
            )
        )

    @app.route(
        "/api/sections/<int:section_id>/attendance/monthly",
        methods=["GET"],
        endpoint="api_section_attendance_monthly",
    )
    @json_endpoint
    def api_section_attendance_monthly(section_id: int):
        context = _context()
        year = query_int("year")
        month = query_int("month")
        return ok(
            container.attendance_service.section_monthly_summary(
                context,
                section_id=section_id,
                year=context.today.year if year is None else year,
                month=context.today.month if month is None else month,
            )
        )

    @app.route(
        "/api/sections/<int:section_id>/attendance/quarterly",
        methods=["GET"],
        endpoint="api_section_attendance_quarterly",
    )
    @json_endpoint
    def api_section_attendance_quarterly(section_id: int):
        context = _context()
        quarter_id = query_int("quarter_id")
        if quarter_id is None:
            current = context.current_quarter()
            quarter_id = current.quarter_id if current else 0
        return ok(
            container.attendance_service.section_quarter_summary(
                context,
                section_id=section_id,
                quarter_id=quarter_id,
            )
        )
