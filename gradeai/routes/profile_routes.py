"""
Teacher profile routes for GradeAI.
Profile settings, the onboarding questionnaire and the account data export.
"""
import json
import logging
from flask import Blueprint, Response, request, jsonify, g

from ..services import records
from ..services.export_service import user_data_export, export_filename

profile_bp = Blueprint('profile', __name__)
logger = logging.getLogger(__name__)


@profile_bp.route('/api/profile', methods=['GET'])
def get_profile():
    try:
        profile = records.get_profile(g.user_id)
    except Exception as e:
        logger.error("Error fetching profile: %s", e)
        return jsonify({"error": str(e)}), 500
    if profile is None:
        return jsonify({"error": "Profile not found"}), 404
    return jsonify({"profile": profile})


@profile_bp.route('/api/profile', methods=['PATCH', 'PUT'])
def update_profile():
    """
    Update profile settings.

    Body may contain display_name, school_name, years_teaching, student_count,
    preferred_grading_style, grade_levels, subjects.
    """
    data = request.get_json(silent=True) or {}
    try:
        profile = records.update_profile(g.user_id, data)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error("Error updating profile: %s", e)
        return jsonify({"error": str(e)}), 500
    if profile is None:
        return jsonify({"error": "Profile not found"}), 404
    return jsonify({"success": True, "profile": profile})


@profile_bp.route('/api/profile/onboarding', methods=['POST'])
def complete_onboarding():
    """Save the first-run teacher questionnaire."""
    data = request.get_json(silent=True) or {}
    try:
        profile = records.complete_onboarding(g.user_id, data)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error("Error saving onboarding: %s", e)
        return jsonify({"error": str(e)}), 500
    if profile is None:
        return jsonify({"error": "Profile not found"}), 404
    return jsonify({"success": True, "profile": profile})


@profile_bp.route('/api/profile/export', methods=['GET'])
def export_data():
    """Download profile, assignments, submissions and students as JSON."""
    try:
        export = user_data_export(
            records.get_profile(g.user_id),
            records.assignments.list(g.user_id),
            records.submissions.list(g.user_id),
            records.students.list(g.user_id),
        )
    except Exception as e:
        logger.error("Export error: %s", e)
        return jsonify({"error": "Failed to export data"}), 500

    return Response(
        json.dumps(export, indent=2, default=str),
        mimetype='application/json',
        headers={"Content-Disposition": f"attachment; filename={export_filename()}"},
    )
