"""Routes for the game blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import jsonify

from . import bp
from .services import GameService


@bp.route("/", methods=["GET"])
def list_games() -> Any:
    """List the active games players can browse."""
    db = firestore.client()
    games = GameService.list_games(db, active_only=True)
    return jsonify({"games": games})
