"""
Supabase JWT Authentication for GradeAI.
Validates Bearer tokens on all /api/ routes except public endpoints.
"""
import jwt
from flask import request, jsonify, g

from .config import config


# Routes that don't require authentication
PUBLIC_PREFIXES = []

PUBLIC_EXACT = [
    '/api/health',
]

LOCAL_DEV_USER = 'local-dev'


def get_jwt_secret():
    """Get the Supabase JWT secret from configuration."""
    secret = config.jwt_secret
    if not secret:
        raise RuntimeError('SUPABASE_JWT_SECRET not configured')
    return secret


def validate_token(token):
    """
    Validate a Supabase JWT and return the decoded payload.
    Returns None if invalid.
    """
    try:
        payload = jwt.decode(
            token,
            get_jwt_secret(),
            algorithms=['HS256'],
            audience='authenticated',
        )
        return payload
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def is_public_route(path):
    """Check if a route is public (no auth required)."""
    if path in PUBLIC_EXACT:
        return True
    for prefix in PUBLIC_PREFIXES:
        if path.startswith(prefix):
            return True
    return False


def init_auth(app):
    """
    Register the before_request auth hook on the Flask app.
    Call this BEFORE registering blueprints.
    """
    @app.before_request
    def check_auth():
        if not request.path.startswith('/api/'):
            return None

        # CORS preflight carries no credentials
        if request.method == 'OPTIONS':
            return None

        if is_public_route(request.path):
            return None

        if config.local_dev:
            g.user_id = LOCAL_DEV_USER
            g.user_email = ''
            return None

        auth_header = request.headers.get('Authorization', '')
        if not auth_header.startswith('Bearer '):
            return jsonify({'error': 'Authentication required'}), 401

        token = auth_header[7:]  # Strip 'Bearer '
        payload = validate_token(token)
        if payload is None or not payload.get('sub'):
            return jsonify({'error': 'Invalid or expired token'}), 401

        g.user_id = payload.get('sub')
        g.user_email = payload.get('email', '')
