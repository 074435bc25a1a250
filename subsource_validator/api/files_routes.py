"""
File API Routes - Upload the master list and datasheets, remove datasheets
"""
from flask import Blueprint, jsonify, request

from ..services.file_service import ingest_files, ingest_upload
from ..services.session_state import add_datasheets, clear_datasheets, remove_datasheet, set_master_list
from . import error_response, get_controller, get_session_id

files_bp = Blueprint('files', __name__)


@files_bp.route('/master', methods=['POST'])
def upload_master_list():
    """
    Upload the master list (Excel, PDF or image)
    POST /api/files/master

    Request:
        - multipart/form-data with 'file' field

    Response:
        {
            "success": true,
            "master_list": {"id": "...", "name": "...", "content_kind": "...", "media_type": "..."},
            "session": {...}
        }
    """
    try:
        if 'file' not in request.files:
            return jsonify({"success": False, "error": "No file provided"}), 400

        ingested = ingest_upload(request.files['file'])
        state = get_controller().apply(get_session_id(), set_master_list, ingested)

        return jsonify({
            "success": True,
            "master_list": ingested.describe(),
            "session": state.to_payload()
        })

    except Exception as e:
        return error_response(e)


@files_bp.route('/datasheets', methods=['POST'])
def upload_datasheets():
    """
    Add one or more datasheets to the session
    POST /api/files/datasheets

    Request:
        - multipart/form-data with one or more 'files' fields

    Response:
        {
            "success": true,
            "added": [{"id": "...", "name": "...", ...}, ...],
            "session": {...}
        }
    """
    try:
        uploads = request.files.getlist('files') or request.files.getlist('file')
        if not uploads:
            return jsonify({"success": False, "error": "No files provided"}), 400

        ingested = ingest_files(uploads)
        state = get_controller().apply(get_session_id(), add_datasheets, ingested)

        return jsonify({
            "success": True,
            "added": [f.describe() for f in ingested],
            "session": state.to_payload()
        })

    except Exception as e:
        return error_response(e)


@files_bp.route('/datasheets/<file_id>', methods=['DELETE'])
def delete_datasheet(file_id):
    """
    Remove one datasheet
    DELETE /api/files/datasheets/<file_id>
    """
    try:
        state = get_controller().apply(get_session_id(), remove_datasheet, file_id)
        return jsonify({"success": True, "session": state.to_payload()})

    except KeyError:
        return jsonify({"success": False, "error": f"Datasheet not found: {file_id}"}), 404
    except Exception as e:
        return error_response(e)


@files_bp.route('/datasheets', methods=['DELETE'])
def delete_all_datasheets():
    """
    Remove every datasheet
    DELETE /api/files/datasheets
    """
    try:
        state = get_controller().apply(get_session_id(), clear_datasheets)
        return jsonify({"success": True, "session": state.to_payload()})

    except Exception as e:
        return error_response(e)
