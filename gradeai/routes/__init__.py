"""
GradeAI API Routes
==================

All API route blueprints for the GradeAI application.

Usage:
    from gradeai.routes import register_routes
    register_routes(app)
"""
from .assignment_routes import assignment_bp
from .dashboard_routes import dashboard_bp
from .grading_routes import grading_bp
from .profile_routes import profile_bp
from .student_routes import student_bp
from .submission_routes import submission_bp


def register_routes(app):
    """Register all route blueprints with the Flask app."""
    app.register_blueprint(assignment_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(grading_bp)
    app.register_blueprint(profile_bp)
    app.register_blueprint(student_bp)
    app.register_blueprint(submission_bp)


__all__ = [
    'register_routes',
    'assignment_bp',
    'dashboard_bp',
    'grading_bp',
    'profile_bp',
    'student_bp',
    'submission_bp',
]
