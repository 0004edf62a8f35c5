"""Routes for the auth blueprint.

Sign-in itself happens in the browser with the Firebase client SDK. These
routes exchange the resulting ID token for a server-side session.
"""

from __future__ import annotations

from typing import Any

from firebase_admin import auth, firestore
from flask import current_app, jsonify, request, session
from flask_wtf.csrf import generate_csrf

from arenaclash.core.constants import ROLE_ADMIN
from arenaclash.user.services import UserService

from . import bp


@bp.route("/session_login", methods=["POST"])
def session_login() -> Any:
    """
    This endpoint is called from the client-side after a successful Firebase login.
    It receives the ID token, verifies it, and creates a server-side session.
    """
    payload = request.get_json(silent=True) or {}
    id_token = payload.get("idToken")
    if not id_token:
        return jsonify({"status": "error", "message": "Missing ID token."}), 400

    try:
        decoded_token = auth.verify_id_token(id_token)
    except Exception as e:
        current_app.logger.error(f"Error during session login: {e}")
        return (
            jsonify({"status": "error", "message": "Invalid token or server error."}),
            401,
        )

    db = firestore.client()
    user_data = UserService.ensure_user_profile(
        db,
        decoded_token["uid"],
        email=decoded_token.get("email"),
        display_name=decoded_token.get("name") or payload.get("displayName"),
    )

    session.clear()
    session["user_id"] = decoded_token["uid"]
    session["is_admin"] = user_data.get("role") == ROLE_ADMIN
    current_app.logger.info(f"Session started for user {decoded_token['uid']}")
    return jsonify(
        {
            "status": "success",
            "isAdmin": session["is_admin"],
            "needsOnboarding": not user_data.get("hasCompletedOnboarding", False),
        }
    )


@bp.route("/logout", methods=["POST"])
def logout() -> Any:
    """
    The actual logout is handled by the Firebase client-side SDK.
    This route clears the server-side session.
    """
    session.clear()
    return jsonify({"status": "success", "message": "You have been logged out."})


@bp.route("/csrf_token", methods=["GET"])
def csrf_token() -> Any:
    """Return a CSRF token for the X-CSRFToken header."""
    return jsonify({"csrfToken": generate_csrf()})
