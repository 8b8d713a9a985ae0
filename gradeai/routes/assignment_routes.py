"""
Assignment API routes for GradeAI.
Handles listing, creating, updating and deleting the teacher's assignments.
"""
import logging
from flask import Blueprint, request, jsonify, g

from ..services import records, stats_service

assignment_bp = Blueprint('assignment', __name__)
logger = logging.getLogger(__name__)


@assignment_bp.route('/api/assignments', methods=['GET'])
def list_assignments():
    """List the teacher's assignments, newest first."""
    try:
        return jsonify({"assignments": records.assignments.list(g.user_id)})
    except Exception as e:
        logger.error("Error fetching assignments: %s", e)
        return jsonify({"error": str(e)}), 500


@assignment_bp.route('/api/assignments', methods=['POST'])
def create_assignment():
    """
    Create an assignment.

    Body: title, description (required), total_points, due_date, class_id,
    and optional subject, gradeLevel, instructions, learningObjectives, rubric.
    """
    data = request.get_json(silent=True) or {}
    try:
        assignment = records.create_assignment(g.user_id, data)
        return jsonify({"success": True, "assignment": assignment}), 201
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error("Error creating assignment: %s", e)
        return jsonify({"error": str(e)}), 500


@assignment_bp.route('/api/assignments/recent', methods=['GET'])
def recent_assignments():
    """Most recent assignments with submission counts and status."""
    limit = max(request.args.get('limit', 5, type=int), 1)
    try:
        return jsonify({"assignments": stats_service.recent_assignments(g.user_id, limit=limit)})
    except Exception as e:
        logger.error("Error fetching recent assignments: %s", e)
        return jsonify({"error": "Failed to load recent assignments"}), 500


@assignment_bp.route('/api/assignments/<assignment_id>', methods=['GET'])
def get_assignment(assignment_id):
    try:
        assignment = records.assignments.get(g.user_id, assignment_id)
    except Exception as e:
        logger.error("Error fetching assignment %s: %s", assignment_id, e)
        return jsonify({"error": str(e)}), 500
    if assignment is None:
        return jsonify({"error": "Assignment not found"}), 404
    return jsonify({"assignment": assignment})


@assignment_bp.route('/api/assignments/<assignment_id>', methods=['PATCH', 'PUT'])
def update_assignment(assignment_id):
    data = request.get_json(silent=True) or {}
    try:
        assignment = records.assignments.update(g.user_id, assignment_id, data)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error("Error updating assignment %s: %s", assignment_id, e)
        return jsonify({"error": str(e)}), 500
    if assignment is None:
        return jsonify({"error": "Assignment not found"}), 404
    return jsonify({"success": True, "assignment": assignment})


@assignment_bp.route('/api/assignments/<assignment_id>', methods=['DELETE'])
def delete_assignment(assignment_id):
    try:
        deleted = records.assignments.delete(g.user_id, assignment_id)
    except Exception as e:
        logger.error("Error deleting assignment %s: %s", assignment_id, e)
        return jsonify({"error": str(e)}), 500
    if not deleted:
        return jsonify({"error": "Assignment not found"}), 404
    return jsonify({"success": True})
