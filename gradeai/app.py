#!/usr/bin/env python3
"""
GradeAI - AI-Assisted Grading for Teachers
==========================================
Run: python3 -m gradeai.app
Then call: http://localhost:3000/api/...
"""

import logging

from flask import Flask, jsonify
from flask_cors import CORS

from .auth import init_auth
from .config import HOST, PORT, DEBUG, LOG_LEVEL
from .routes import register_routes

CORS_ALLOW_HEADERS = ['authorization', 'x-client-info', 'apikey', 'content-type']


def create_app():
    """Build the Flask app: permissive CORS, JWT auth hook, then blueprints."""
    app = Flask(__name__)
    CORS(app, origins='*', allow_headers=CORS_ALLOW_HEADERS)

    # Auth hook must be registered before the blueprints
    init_auth(app)
    register_routes(app)

    @app.route('/api/health')
    def health():
        return jsonify({"status": "ok"})

    return app


def main():
    logging.basicConfig(
        level=LOG_LEVEL,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    app = create_app()
    app.run(host=HOST, port=PORT, debug=DEBUG)


if __name__ == '__main__':
    main()
