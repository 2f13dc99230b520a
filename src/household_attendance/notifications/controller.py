from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.validators import optional_text
from ..common.web import error_response, request_json
from ..core.constants import MAX_NOTE_LENGTH
from ..core.enums import NotificationKind, Role
from ..core.exceptions import DomainError, TransientStoreError, ValidationError
from ..container import Container


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

    @app.route("/api/notifications", methods=["GET"], endpoint="notifications_list")
    @login_required
    def list_notifications():
        unread_only = request.args.get("unread", "").lower() in {"1", "true", "yes"}
        try:
            items = container.dispatcher.list_notifications(str(session["user_id"]), unread_only=unread_only)
        except TransientStoreError as e:
            return error_response(e)
        return jsonify({"success": True, "notifications": [n.to_dict() for n in items]})

    @app.route("/api/notifications/<notification_id>/read", methods=["POST"], endpoint="notifications_mark_read")
    @login_required
    def mark_read(notification_id: str):
        try:
            container.dispatcher.mark_read(notification_id, employee_id=str(session["user_id"]))
        except (DomainError, TransientStoreError) as e:
            return error_response(e)
        return jsonify({"success": True})

    @app.route("/api/admin/notifications/alerts", methods=["POST"], endpoint="admin_notifications_alert")
    @admin_required
    def send_alert():
        data = request_json(request)
        try:
            raw_employee_id = data.get("employee_id")
            employee_id = optional_text(None if raw_employee_id is None else str(raw_employee_id), "employee_id", 64)
            message = optional_text(data.get("message"), "message", MAX_NOTE_LENGTH)
            if not employee_id or not message:
                raise ValidationError("employee_id and message are required")
            notification = container.dispatcher.dispatch(employee_id, NotificationKind.GENERIC_ALERT, message)
        except (DomainError, TransientStoreError) as e:
            return error_response(e)
        return jsonify({"success": True, "notification": notification.to_dict() if notification else None}), 201
