"""
Analysis API Routes - Completeness check, full analysis and CSV export
"""
from io import BytesIO

from flask import Blueprint, jsonify, send_file

from ..config import EXPORT_FILENAME
from ..services.export_service import export_analysis_csv
from . import error_response, get_controller, get_session_id

analyze_bp = Blueprint('analyze', __name__)


@analyze_bp.route('/check', methods=['POST'])
def check_completeness():
    """
    Check which datasheets are provided or missing per master list row
    POST /api/check

    Response:
        {
            "success": true,
            "result": {
                "groupedRows": [
                    {
                        "original": {"partName": "M1", "status": "Provided", "matchedFilename": "M1_datasheet.pdf"},
                        "substitutes": [{"partName": "M1-SUB", "status": "Missing", "matchedFilename": null}]
                    }
                ],
                "allProvided": false,
                "message": "..."
            }
        }
    """
    try:
        result = get_controller().run_check(get_session_id())
        return jsonify({"success": True, "result": result.to_payload()})

    except Exception as e:
        return error_response(e)


@analyze_bp.route('/analyze', methods=['POST'])
def analyze():
    """
    Compare original and substitute parts for every master list row
    POST /api/analyze

    Response:
        {
            "success": true,
            "result": {
                "groups": [
                    {
                        "id": "...",
                        "rowNumber": 1,
                        "mappedParts": {"partA": "...", "partB": "...", "partC": "..."},
                        "summary": "...",
                        "recommendation": "B",
                        "specs": [{"id": 1, "parameter": "Vds", ...}, ...]
                    }
                ],
                "missingFiles": []
            },
            "total_groups": 1
        }
    """
    try:
        result = get_controller().run_analysis(get_session_id())
        return jsonify({
            "success": True,
            "result": result.to_payload(),
            "total_groups": len(result.groups)
        })

    except Exception as e:
        return error_response(e)


@analyze_bp.route('/export', methods=['GET'])
def export_csv():
    """
    Download the last analysis as a CSV report
    GET /api/export

    Response:
        CSV file download (Substitution_Analysis_Report.csv)
    """
    try:
        state = get_controller().get(get_session_id())
        csv_text = export_analysis_csv(state.analysis_result)

        output = BytesIO(csv_text.encode('utf-8'))
        output.seek(0)

        return send_file(
            output,
            mimetype='text/csv; charset=utf-8',
            as_attachment=True,
            download_name=EXPORT_FILENAME
        )

    except Exception as e:
        return error_response(e)
