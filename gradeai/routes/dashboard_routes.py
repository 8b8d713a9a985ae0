"""
Dashboard routes for GradeAI.
"""
import logging
from flask import Blueprint, jsonify, g

from ..services import stats_service

dashboard_bp = Blueprint('dashboard', __name__)
logger = logging.getLogger(__name__)


@dashboard_bp.route('/api/dashboard/stats', methods=['GET'])
def get_dashboard_stats():
    try:
        return jsonify({"stats": stats_service.dashboard_stats(g.user_id)})
    except Exception as e:
        logger.error("Error fetching dashboard stats: %s", e)
        return jsonify({"error": "Failed to load dashboard statistics"}), 500
