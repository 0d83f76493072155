import functools
import logging

from flask import Blueprint, jsonify, request

from recipes_api.backend.database.context import DatabaseContext
from recipes_api.backend.modules.auth.auth_service import (
    AuthError,
    AuthService,
    RefreshTooEarly,
    bearer_token,
)

logger = logging.getLogger(__name__)

bp = Blueprint("auth_controller", __name__)


def _auth_service() -> AuthService:
    return AuthService(DatabaseContext.get().settings)


def require_auth(view):
    """
    Reject the request with 401 unless the configured auth mode accepts it.
    """

    @functools.wraps(view)
    def wrapper(*args, **kwargs):
        if not _auth_service().is_authorized(request.headers):
            return jsonify({"error": "Unauthorized"}), 401
        return view(*args, **kwargs)

    return wrapper


@bp.route("/signin", methods=["POST"])
def signin():
    """
    Exchange admin credentials for a short-lived token.

    body = {"username": "admin", "password": "password"}
    """
    payload = request.get_json(silent=True)
    if (
        not isinstance(payload, dict)
        or not isinstance(payload.get("username"), str)
        or not isinstance(payload.get("password"), str)
    ):
        return jsonify({"error": "Error reading data"}), 400

    service = _auth_service()
    if not service.check_credentials(payload["username"], payload["password"]):
        return jsonify({"error": "Invalid credentials"}), 401

    try:
        token, expires = service.issue(payload["username"])
    except AuthError as e:
        logger.error(f"Error tokenizing: {e}")
        return jsonify({"error": "Error issuing token"}), 500
    return jsonify({"token": token, "expires": expires.isoformat()}), 200


@bp.route("/refresh", methods=["POST"])
def refresh():
    """
    Reissue a token that expires within the next 30 seconds.
    """
    try:
        token, expires = _auth_service().refresh(bearer_token(request.headers.get("Authorization")))
    except AuthError as e:
        logger.info(f"Refresh rejected: {e}")
        return jsonify({"error": "Unauthorized"}), 401
    except RefreshTooEarly as e:
        return jsonify({"error": str(e)}), 400
    return jsonify({"token": token, "expires": expires.isoformat()}), 200
