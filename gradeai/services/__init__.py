"""
GradeAI Services
================

Business logic services for the GradeAI application.

Services:
- supabase_client: lazily created Supabase client
- records: owner-scoped CRUD over assignments, students, submissions, classes, profiles
- grading_service: AI-powered submission grading
- stats_service: dashboard statistics
- export_service: CSV and JSON exports
"""

# Services are imported directly when needed to avoid circular imports
# Example: from gradeai.services.grading_service import grade_submission

__all__ = [
    'supabase_client',
    'records',
    'grading_service',
    'stats_service',
    'export_service',
]
