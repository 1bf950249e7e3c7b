"""
Authentication service route handlers.

Provides routes for:
- User signup
- User login
- Session check (/session), used by the frontend route guard

All credential logic lives in `auth_service.service.AuthService`; the
instance is read from `current_app.extensions["auth_service"]`.
"""

import logging
from typing import Any, Dict, Tuple

from flask import Blueprint, Response, current_app, jsonify, request

from backend.auth_service.errors import InvalidCredentials
from backend.auth_service.service import AuthService
from backend.auth_service.utils import verify_token_from_request

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


def get_auth_service() -> AuthService:
    return current_app.extensions["auth_service"]


def get_json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


# --- REQUEST LOGGING ---
@auth_bp.before_request
def before_request() -> None:
    """Log every incoming request method and path. Headers are not logged."""
    logger.info("[Auth] Incoming %s %s", request.method, request.path)


@auth_bp.after_request
def after_request(response: Response) -> Response:
    logger.info("[Auth] Response %s", response.status)
    return response


# --- SIGNUP ---
@auth_bp.route("/signup", methods=["POST"])
def signup() -> Tuple[Response, int]:
    """
    Register a new general user.

    Expects a JSON body with:
    - fullName (str)
    - email (str): Stored trimmed and lowercased.
    - phone (str)
    - username (str)
    - password (str)

    Returns:
        201: Success message and the public user record.
        400: Missing fields, invalid email, or email/username already exists.
        500: Server-side error (hashing or database).
    """
    data = get_json_body()

    user = get_auth_service().signup(
        full_name=data.get("fullName"),
        email=data.get("email"),
        phone=data.get("phone"),
        username=data.get("username"),
        password=data.get("password"),
    )

    return jsonify({"message": "User registered successfully!", "user": user.to_public_dict()}), 201


# --- LOGIN ---
@auth_bp.route("/login", methods=["POST"])
def login() -> Tuple[Response, int]:
    """
    Authenticate a user and return a JWT.

    Expects a JSON body with:
    - email (str)
    - password (str)

    Returns:
        200: JSON with message and token.
        400: Missing credentials, or invalid email/password.
        500: Database error.
    """
    data = get_json_body()

    try:
        token = get_auth_service().login(data.get("email"), data.get("password"))
    except InvalidCredentials as exc:
        return jsonify(exc.to_dict()), 400

    return jsonify({"message": "Login successful!", "token": token}), 200


# --- SESSION ---
@auth_bp.route("/session", methods=["GET"])
def session() -> Tuple[Response, int]:
    """
    Return the claims of the bearer token in the Authorization header.

    Returns:
        200: Token claims.
        401: Missing, expired or invalid token.
    """
    claims, err, code = verify_token_from_request(get_auth_service().tokens)
    if err:
        return err, code

    return jsonify(claims.to_dict()), 200
