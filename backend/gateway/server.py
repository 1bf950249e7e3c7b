"""
API gateway: combines the auth and organizer blueprints.
This is the local entrypoint for development.
"""

import logging
from typing import Optional, Tuple

from flask import Flask, Response, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from backend.auth_service.errors import AuthError
from backend.auth_service.routes import auth_bp
from backend.auth_service.service import AuthService, build_auth_service
from backend.config import Settings
from backend.organizer_service.routes import organizer_bp

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    # Basic console logging during API requests
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s - %(message)s")


def create_app(settings: Optional[Settings] = None, auth_service: Optional[AuthService] = None) -> Flask:
    """
    Application factory for creating the Flask app.

    Args:
        settings (Settings, optional): Defaults to Settings.from_env().
        auth_service (AuthService, optional): Defaults to one built from settings.

    Returns:
        Flask: The configured Flask application.
    """
    if settings is None:
        settings = Settings.from_env()
    if auth_service is None:
        auth_service = build_auth_service(settings)

    app = Flask(__name__)
    app.config["SETTINGS"] = settings
    app.extensions["auth_service"] = auth_service

    CORS(app, resources={
        r"/*": {
            "origins": settings.cors_origins or [settings.frontend_url],
            "methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
        }
    })

    # --- REGISTER BLUEPRINTS ---
    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(organizer_bp)

    # --- ERROR HANDLERS ---
    @app.errorhandler(AuthError)
    def handle_auth_error(error: AuthError) -> Tuple[Response, int]:
        if error.status_code >= 500:
            logger.error("Request failed: %s", error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        if isinstance(error, HTTPException):
            return error
        logger.exception("Unhandled error")
        return jsonify({"error": "Internal server error", "reason": "internal_error"}), 500

    # --- BASIC HEALTH CHECKPOINTS ---
    @app.route("/")
    def ping():
        """
        Root URL for simple 'online' check.
        """
        return jsonify({"status": "gateway_ok"}), 200

    @app.route("/health")
    def health():
        """
        Health check endpoint.
        """
        return jsonify({"status": "ok"}), 200

    return app


if __name__ == "__main__":
    configure_logging()
    settings = Settings.from_env()
    app = create_app(settings)
    app.run(host="0.0.0.0", port=settings.port, debug=settings.debug)
