"""
GradeAI Backend Package
=======================

Flask-based backend for the GradeAI teacher grading assistant.

Structure:
- routes/: API route blueprints
- services/: Supabase access, AI grading, statistics and exports
- auth.py: Supabase JWT validation
- config.py: Configuration management
"""

from .config import config, Config

__version__ = "1.0.0"

__all__ = ['config', 'Config']
