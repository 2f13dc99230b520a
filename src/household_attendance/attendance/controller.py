from __future__ import annotations

import logging
from datetime import timedelta
from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_date, parse_optional_date
from ..common.web import error_response, request_json
from ..core.constants import DEFAULT_REPORT_DAYS
from ..core.enums import EventStatus, Role
from ..core.exceptions import DomainError, TransientStoreError, ValidationError
from ..container import Container
from .service import parse_event_kind, parse_location

logger = logging.getLogger(__name__)

# Client clocks are never trusted; these keys are dropped from submissions.
_CLIENT_TIME_KEYS = ("occurred_at", "occurredAt", "timestamp", "time")


def register(app: Flask, container: Container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "error": "unauthenticated", "message": "Please sign in"}), 401
            return view(*args, **kwargs)

        return wrapper

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "error": "unauthenticated", "message": "Please sign in"}), 401

            if session.get("role") != Role.ADMIN.value:
                return jsonify({"success": False, "error": "forbidden", "message": "Administrators only"}), 403

            return view(*args, **kwargs)

        return wrapper

    def _range_args():
        today = container.clock.now().date()
        end = parse_optional_date(request.args.get("end"), today)
        start = parse_optional_date(request.args.get("start"), end - timedelta(days=DEFAULT_REPORT_DAYS - 1))
        return start, end

    @app.route("/api/attendance/events", methods=["POST"], endpoint="attendance_submit_event")
    @login_required
    def submit_event():
        data = request_json(request)
        ignored = [k for k in _CLIENT_TIME_KEYS if k in data]
        if ignored:
            logger.debug("Ignoring client-supplied time fields %s from employee %s", ignored, session["user_id"])

        try:
            event = container.attendance_service.submit_event(
                str(session["user_id"]),
                parse_event_kind(data.get("kind")),
                location=parse_location(data.get("location")),
                network=data.get("network"),
                note=data.get("note"),
            )
        except (DomainError, TransientStoreError) as e:
            return error_response(e)
        return jsonify({"success": True, "event": event.to_dict()}), 201

    @app.route("/api/attendance/events", methods=["GET"], endpoint="attendance_list_events")
    @login_required
    def list_events():
        try:
            start, end = _range_args()
            events = container.attendance_service.list_events(str(session["user_id"]), start, end)
        except (DomainError, TransientStoreError) as e:
            return error_response(e)
        return jsonify({"success": True, "events": [e.to_dict() for e in events]})

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @login_required
    def daily_summary():
        try:
            day = parse_optional_date(request.args.get("date"), container.clock.now().date())
            summary = container.attendance_service.get_daily_summary(str(session["user_id"]), day)
        except (DomainError, TransientStoreError) as e:
            return error_response(e)
        return jsonify({"success": True, "summary": summary.to_dict()})

    @app.route("/api/attendance/report", methods=["GET"], endpoint="attendance_report")
    @login_required
    def period_report():
        try:
            start, end = _range_args()
            report = container.attendance_service.build_period_report(str(session["user_id"]), start, end)
        except (DomainError, TransientStoreError) as e:
            return error_response(e)
        return jsonify({"success": True, "report": report.to_dict()})

    @app.route(
        "/api/admin/attendance/events/<event_id>/review",
        methods=["POST"],
        endpoint="admin_attendance_review",
    )
    @admin_required
    def review_event(event_id: str):
        data = request_json(request)
        try:
            try:
                status = EventStatus(str(data.get("status") or "").strip().lower())
            except ValueError:
                raise ValidationError("status must be 'approved' or 'rejected'")
            event = container.attendance_service.review_event(event_id, status)
        except (DomainError, TransientStoreError) as e:
            return error_response(e)
        return jsonify({"success": True, "event": event.to_dict()})

    @app.route("/api/admin/attendance/absence-sweep", methods=["POST"], endpoint="admin_absence_sweep")
    @admin_required
    def absence_sweep():
        data = request_json(request)
        try:
            day = parse_iso_date(data["date"]) if data.get("date") else None
            report = container.absence_sweep.run(day)
        except (DomainError, TransientStoreError) as e:
            return error_response(e)
        return jsonify({"success": True, "created": report.created, "report": report.to_dict()})

    @app.route("/api/admin/attendance/reminder-sweep", methods=["POST"], endpoint="admin_reminder_sweep")
    @admin_required
    def reminder_sweep():
        try:
            report = container.reminder_sweep.run()
        except (DomainError, TransientStoreError) as e:
            return error_response(e)
        return jsonify({"success": True, "created": report.created, "report": report.to_dict()})
