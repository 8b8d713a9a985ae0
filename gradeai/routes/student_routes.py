"""
Student roster and class routes for GradeAI.
"""
import logging
from flask import Blueprint, request, jsonify, g

from ..services import records

student_bp = Blueprint('student', __name__)
logger = logging.getLogger(__name__)


@student_bp.route('/api/students', methods=['GET'])
def list_students():
    """List the teacher's students ordered by last name."""
    try:
        return jsonify({"students": records.students.list(g.user_id)})
    except Exception as e:
        logger.error("Failed to fetch students: %s", e)
        return jsonify({"error": str(e)}), 500


def _text(value):
    """Trimmed form text; numbers such as external ids are accepted as strings."""
    if value is None:
        return ''
    return str(value).strip()


@student_bp.route('/api/students', methods=['POST'])
def create_student():
    """Add a student. First and last name are required; email and student_id optional."""
    data = request.get_json(silent=True) or {}
    try:
        first_name = _text(data.get('first_name'))
        last_name = _text(data.get('last_name'))
        if not first_name or not last_name:
            return jsonify({"error": "First and last name are required"}), 400

        row = {
            "first_name": first_name,
            "last_name": last_name,
            "email": _text(data.get('email')) or None,
            "student_id": _text(data.get('student_id')) or None,
        }
        student = records.students.create(g.user_id, row)
        return jsonify({"success": True, "student": student}), 201
    except Exception as e:
        logger.error("Error creating student: %s", e)
        return jsonify({"error": str(e)}), 500


@student_bp.route('/api/students/<student_id>', methods=['PATCH', 'PUT'])
def update_student(student_id):
    data = request.get_json(silent=True) or {}
    try:
        student = records.students.update(g.user_id, student_id, data)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error("Error updating student %s: %s", student_id, e)
        return jsonify({"error": str(e)}), 500
    if student is None:
        return jsonify({"error": "Student not found"}), 404
    return jsonify({"success": True, "student": student})


@student_bp.route('/api/students/<student_id>', methods=['DELETE'])
def delete_student(student_id):
    try:
        deleted = records.students.delete(g.user_id, student_id)
    except Exception as e:
        logger.error("Error deleting student %s: %s", student_id, e)
        return jsonify({"error": str(e)}), 500
    if not deleted:
        return jsonify({"error": "Student not found"}), 404
    return jsonify({"success": True})


# ============ Classes ============

@student_bp.route('/api/classes', methods=['GET'])
def list_classes():
    try:
        return jsonify({"classes": records.classes.list(g.user_id)})
    except Exception as e:
        logger.error("Failed to fetch classes: %s", e)
        return jsonify({"error": str(e)}), 500


@student_bp.route('/api/classes', methods=['POST'])
def create_class():
    data = request.get_json(silent=True) or {}
    name = (data.get('name') or '').strip()
    if not name:
        return jsonify({"error": "Class name is required"}), 400
    try:
        created = records.classes.create(g.user_id, {"name": name})
        return jsonify({"success": True, "class": created}), 201
    except Exception as e:
        logger.error("Error creating class: %s", e)
        return jsonify({"error": str(e)}), 500
