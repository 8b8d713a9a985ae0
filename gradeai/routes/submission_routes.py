"""
Submission routes for GradeAI.
Lists, creates and updates student submissions and exports graded ones.
"""
import logging
from flask import Blueprint, Response, request, jsonify, g

from ..services import records
from ..services.export_service import sort_submissions, submissions_csv

submission_bp = Blueprint('submission', __name__)
logger = logging.getLogger(__name__)


@submission_bp.route('/api/assignments/<assignment_id>/submissions', methods=['GET'])
def list_submissions(assignment_id):
    """
    Submissions for one assignment with the student joined in.

    Query: sort=date|score|student, search=<student name substring>
    """
    try:
        rows = records.submissions.list(g.user_id, assignment_id=assignment_id)
    except Exception as e:
        logger.error("Failed to fetch submissions: %s", e)
        return jsonify({"error": str(e)}), 500

    rows = sort_submissions(
        rows,
        sort_by=request.args.get('sort', 'date'),
        search=request.args.get('search', ''),
    )
    graded = [s for s in rows if s.get('score') is not None]
    average = sum(s['score'] for s in graded) / len(graded) if graded else 0
    return jsonify({
        "submissions": rows,
        "gradedCount": len(graded),
        "averageScore": round(average, 1),
    })


@submission_bp.route('/api/assignments/<assignment_id>/submissions/export', methods=['GET'])
def export_submissions(assignment_id):
    """Download graded submissions of an assignment as CSV."""
    try:
        assignment = records.assignments.get(g.user_id, assignment_id)
        if assignment is None:
            return jsonify({"error": "Assignment not found"}), 404
        rows = sort_submissions(
            records.submissions.list(g.user_id, assignment_id=assignment_id),
            sort_by=request.args.get('sort', 'date'),
            search=request.args.get('search', ''),
        )
    except Exception as e:
        logger.error("Submission export error: %s", e)
        return jsonify({"error": str(e)}), 500

    content = submissions_csv(rows, assignment.get('total_points'))
    return Response(
        content,
        mimetype='text/csv',
        headers={"Content-Disposition": f"attachment; filename=submissions-{assignment_id}.csv"},
    )


@submission_bp.route('/api/submissions', methods=['POST'])
def create_submission():
    data = request.get_json(silent=True) or {}
    try:
        submission = records.create_submission(g.user_id, data)
        return jsonify({"success": True, "submission": submission}), 201
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except LookupError as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        logger.error("Error creating submission: %s", e)
        return jsonify({"error": str(e)}), 500


@submission_bp.route('/api/submissions/bulk', methods=['POST'])
def create_bulk_submissions():
    """Body: {assignmentId, studentIds: [...]}"""
    data = request.get_json(silent=True) or {}
    try:
        created = records.create_bulk_submissions(
            g.user_id, data.get('assignmentId'), data.get('studentIds') or [],
        )
        return jsonify({
            "success": True,
            "submissions": created,
            "message": f"Created {len(created)} submissions.",
        }), 201
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except LookupError as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        logger.error("Error creating bulk submissions: %s", e)
        return jsonify({"error": str(e)}), 500


@submission_bp.route('/api/submissions/<submission_id>', methods=['PATCH', 'PUT'])
def update_submission(submission_id):
    """Update a submission, usually with grading results."""
    data = request.get_json(silent=True) or {}
    try:
        submission = records.update_submission(g.user_id, submission_id, data)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except LookupError as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        logger.error("Error updating submission %s: %s", submission_id, e)
        return jsonify({"error": str(e)}), 500
    if submission is None:
        return jsonify({"error": "Submission not found"}), 404
    return jsonify({"success": True, "submission": submission})
