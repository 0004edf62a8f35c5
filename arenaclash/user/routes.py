"""Routes for the user blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import current_app, g, jsonify

from arenaclash.auth.decorators import login_required
from arenaclash.tournament.services import TournamentService

from . import bp
from .forms import OnboardingForm, SettingsForm
from .services import UserService


@bp.route("/me", methods=["GET"])
@login_required
def me() -> Any:
    """Return the logged-in user's profile."""
    db = firestore.client()
    return jsonify({"user": UserService.get_profile(db, g.user["uid"])})


@bp.route("/onboarding", methods=["POST"])
@login_required
def onboarding() -> Any:
    """Complete the first-login profile."""
    form = OnboardingForm()
    form.validate_or_raise()

    db = firestore.client()
    UserService.complete_onboarding(
        db, g.user["uid"], form.username.data, form.favoriteGame.data
    )
    current_app.logger.info(f"User {g.user['uid']} completed onboarding")
    return jsonify({"status": "success", "message": "Profile completed!"})


@bp.route("/settings", methods=["POST"])
@login_required
def settings() -> Any:
    """Update the display name."""
    form = SettingsForm()
    form.validate_or_raise()

    db = firestore.client()
    UserService.update_settings(db, g.user["uid"], form.displayName.data)
    return jsonify({"status": "success", "message": "Settings updated."})


@bp.route("/registrations", methods=["GET"])
@login_required
def registrations() -> Any:
    """List the tournaments the user has joined."""
    db = firestore.client()
    items = TournamentService.get_user_registrations(db, g.user["uid"])
    return jsonify({"registrations": items})
