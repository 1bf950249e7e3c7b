"""
Event organizer routes: provisioning, login, password change and listing.
Organizers are created by an administrator and receive an auto-generated
password by email.
"""

import logging
from typing import Tuple

from flask import Blueprint, Response, jsonify, request

from backend.auth_service.errors import InvalidCredentials
from backend.auth_service.models import EventOrganizer
from backend.auth_service.routes import get_auth_service, get_json_body

logger = logging.getLogger(__name__)

organizer_bp = Blueprint("organizers", __name__)


@organizer_bp.before_request
def before_request() -> None:
    logger.info("[Organizers] Incoming %s %s", request.method, request.path)


@organizer_bp.after_request
def after_request(response: Response) -> Response:
    logger.info("[Organizers] Response %s", response.status)
    return response


@organizer_bp.route("/register-organizer", methods=["POST"])
def register_organizer() -> Tuple[Response, int]:
    """
    Register an event organizer. No password is accepted; one is generated
    and emailed to the organizer.

    Expects JSON:
        { "organizerName", "fullName", "email", "phone", "username" }

    Returns:
        201: Organizer created (email delivery is not guaranteed).
        400: Missing fields, or email/username already exists.
        500: Server error.
    """
    data = get_json_body()

    organizer = get_auth_service().register_organizer(
        organizer_name=data.get("organizerName"),
        full_name=data.get("fullName"),
        email=data.get("email"),
        phone=data.get("phone"),
        username=data.get("username"),
    )

    return jsonify({
        "message": "Event Organizer registered successfully!",
        "organizer": organizer.to_public_dict(),
    }), 201


@organizer_bp.route("/organizer-login", methods=["POST"])
def organizer_login() -> Tuple[Response, int]:
    """
    Authenticate an organizer with the emailed (or since changed) password.

    Returns:
        200: JSON with message and token.
        400: Missing credentials, or invalid email/password.
    """
    data = get_json_body()

    try:
        token = get_auth_service().login(data.get("email"), data.get("password"), kind=EventOrganizer.kind)
    except InvalidCredentials as exc:
        return jsonify(exc.to_dict()), 400

    return jsonify({"message": "Login successful!", "token": token}), 200


@organizer_bp.route("/change-password", methods=["POST"])
def change_password() -> Tuple[Response, int]:
    """
    Change an organizer's password.

    Expects JSON:
        { "email", "currentPassword", "newPassword" }

    Returns:
        200: Password updated.
        400: A field is missing.
        401: Current password is incorrect.
        404: Organizer not found.
    """
    data = get_json_body()

    get_auth_service().change_password(
        email=data.get("email"),
        current_password=data.get("currentPassword"),
        new_password=data.get("newPassword"),
    )

    return jsonify({"message": "Password updated successfully"}), 200


@organizer_bp.route("/registered-organizers", methods=["GET"])
def registered_organizers() -> Tuple[Response, int]:
    """
    List all registered organizers, without password hashes.

    Returns:
        200: List of organizer objects.
        500: Database error.
    """
    return jsonify(get_auth_service().list_organizers()), 200
