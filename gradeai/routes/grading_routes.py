"""
Grading API routes for GradeAI.
Forwards submission text to the AI grader and exports bulk results.
"""
import logging
from flask import Blueprint, Response, request, jsonify, g

from ..services.export_service import grading_results_csv
from ..services.grading_service import grade_submission, grade_batch

grading_bp = Blueprint('grading', __name__)
logger = logging.getLogger(__name__)


@grading_bp.route('/api/grade-assignments', methods=['POST'])
def grade_assignments():
    """
    Grade one submission with AI.

    Body: {assignmentId, rubric, submissionText, studentName}
    Returns {success: true, grading, assignment} or {success: false, error} (500).
    """
    try:
        data = request.get_json(silent=True) or {}
        grading, assignment = grade_submission(
            data.get('assignmentId'),
            data.get('rubric'),
            data.get('submissionText', ''),
            data.get('studentName', ''),
            user_id=g.user_id,
        )
        return jsonify({
            "success": True,
            "grading": grading,
            "assignment": assignment,
        })
    except Exception as e:
        logger.error("Error in grade-assignments: %s", e)
        return jsonify({"success": False, "error": str(e)}), 500


@grading_bp.route('/api/grade-assignments/bulk', methods=['POST'])
def grade_assignments_bulk():
    """
    Grade several pasted submissions for one assignment, one at a time.

    Body: {assignmentId, rubric, submissions: [{studentName, submissionText}]}
    """
    data = request.get_json(silent=True) or {}
    items = data.get('submissions') or []
    if not data.get('assignmentId'):
        return jsonify({"success": False, "error": "Please select an assignment"}), 400
    if not items:
        return jsonify({"success": False, "error": "Please add some submissions to grade."}), 400

    try:
        results = grade_batch(data['assignmentId'], data.get('rubric'), items, user_id=g.user_id)
    except Exception as e:
        logger.error("Bulk grading error: %s", e)
        return jsonify({"success": False, "error": str(e)}), 500

    graded = sum(1 for r in results if r['status'] == 'completed')
    return jsonify({
        "success": True,
        "results": results,
        "graded": graded,
        "failed": len(results) - graded,
    })


@grading_bp.route('/api/grade-assignments/export', methods=['POST'])
def export_grading_results():
    """Download completed bulk-grading results as CSV."""
    data = request.get_json(silent=True) or {}
    content = grading_results_csv(data.get('results') or [])
    return Response(
        content,
        mimetype='text/csv',
        headers={"Content-Disposition": "attachment; filename=grading-results.csv"},
    )
