"""
API package - Flask blueprints and the helpers they share
"""
from flask import current_app, jsonify, request

from ..errors import SubsourceError

DEFAULT_SESSION_ID = "default"


def get_controller():
    return current_app.extensions['validation_controller']


def get_session_id() -> str:
    """Session comes from the X-Session-Id header, then a session_id form/query value"""
    return (
        request.headers.get('X-Session-Id')
        or request.values.get('session_id')
        or DEFAULT_SESSION_ID
    )


def error_response(e: Exception):
    if isinstance(e, SubsourceError):
        return jsonify({"success": False, "error": str(e)}), e.status_code
    print(f"Error: {e}")
    return jsonify({"success": False, "error": str(e)}), 500
