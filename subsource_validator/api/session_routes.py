"""
Session API Routes - Inspect or reset the current session
"""
from flask import Blueprint, jsonify

from . import error_response, get_controller, get_session_id

session_bp = Blueprint('session', __name__)


@session_bp.route('/health', methods=['GET'])
def health_check():
    return jsonify({"status": "ok"})


@session_bp.route('/session', methods=['GET'])
def get_session():
    """
    Current phase, uploaded files and last results
    GET /api/session
    """
    try:
        state = get_controller().get(get_session_id())
        return jsonify({"success": True, "session": state.to_payload()})

    except Exception as e:
        return error_response(e)


@session_bp.route('/reset', methods=['POST'])
def reset_session():
    """
    Drop all files and results
    POST /api/reset
    """
    try:
        state = get_controller().reset(get_session_id())
        return jsonify({"success": True, "session": state.to_payload()})

    except Exception as e:
        return error_response(e)
