"""Routes for the tournament blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import current_app, g, jsonify, request

from arenaclash.auth.decorators import login_required

from . import bp
from .forms import JoinTournamentForm
from .services import TournamentService


@bp.route("/", methods=["GET"])
def list_tournaments() -> Any:
    """List tournaments, optionally filtered with ``?game=``."""
    db = firestore.client()
    game = request.args.get("game", "").strip() or None
    viewer_uid = g.user["uid"] if g.get("user") else None
    tournaments = TournamentService.list_tournaments(db, game, viewer_uid)
    return jsonify({"tournaments": tournaments})


@bp.route("/<string:tournament_id>", methods=["GET"])
def view_tournament(tournament_id: str) -> Any:
    """Show a single tournament."""
    db = firestore.client()
    viewer_uid = g.user["uid"] if g.get("user") else None
    tournament = TournamentService.get_tournament(db, tournament_id, viewer_uid)
    return jsonify({"tournament": tournament})


@bp.route("/<string:tournament_id>/join", methods=["POST"])
@login_required
def join_tournament(tournament_id: str) -> Any:
    """Join a tournament, paying the entry fee from the wallet."""
    form = JoinTournamentForm()
    form.validate_or_raise()

    db = firestore.client()
    result = TournamentService.join_tournament(
        db,
        tournament_id,
        g.user["uid"],
        form.ingameName.data,
        expected_fee=form.entryFee.data,
    )
    current_app.logger.info(
        f"User {g.user['uid']} registered for tournament {tournament_id}"
    )
    return jsonify(
        {
            "status": "success",
            "message": "Successfully joined the tournament!",
            **result,
        }
    )
