from __future__ import annotations

from flask import jsonify

from ..core.exceptions import DomainError, TransientStoreError

_STATUS_BY_CODE = {
    "validation_error": 400,
    "not_found": 404,
    "not_configured": 404,
    "out_of_sequence": 409,
    "duplicate_event": 409,
}


def error_response(e: Exception):
    """JSON body and status for a domain or store error."""

    if isinstance(e, TransientStoreError):
        return jsonify({"success": False, "error": e.code, "message": "Storage temporarily unavailable, try again"}), 503
    code = e.code if isinstance(e, DomainError) else "domain_error"
    return jsonify({"success": False, "error": code, "message": str(e)}), _STATUS_BY_CODE.get(code, 400)


def request_json(request) -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
