"""Admin routes for the application."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import current_app, g, jsonify, request

from arenaclash.auth.decorators import login_required
from arenaclash.errors import ValidationError
from arenaclash.game.forms import GameDetailsForm, GameForm, GamemodeForm
from arenaclash.game.services import GameService
from arenaclash.tournament.forms import (
    RoomDetailsForm,
    TournamentForm,
    TournamentStatusForm,
)
from arenaclash.tournament.services import TournamentService
from arenaclash.wallet.services import WalletService

from . import bp
from .forms import BalanceAdjustForm, GamemodeRemoveForm
from .services import AdminService


def _success(message: str, **extra: Any) -> Any:
    return jsonify({"status": "success", "message": message, **extra})


@bp.route("/")
@login_required(admin_required=True)
def dashboard() -> Any:
    """Return the dashboard counters."""
    db = firestore.client()
    return jsonify({"stats": AdminService.get_admin_stats(db)})


# Users


@bp.route("/users")
@login_required(admin_required=True)
def users() -> Any:
    """List users, optionally searching with ``?q=``."""
    db = firestore.client()
    return jsonify({"users": AdminService.list_users(db, request.args.get("q"))})


@bp.route("/users/<string:user_id>")
@login_required(admin_required=True)
def user_detail(user_id: str) -> Any:
    db = firestore.client()
    return jsonify(
        {
            "user": AdminService.get_user_detail(db, user_id),
            "transactions": WalletService.list_transactions(db, user_id),
        }
    )


@bp.route("/users/<string:user_id>/balance", methods=["POST"])
@login_required(admin_required=True)
def adjust_balance(user_id: str) -> Any:
    """Credit or debit a user's wallet."""
    form = BalanceAdjustForm()
    form.validate_or_raise()

    db = firestore.client()
    new_balance = WalletService.adjust_balance(
        db, user_id, form.amount.data, g.user["uid"]
    )
    return _success("Balance updated.", walletBalance=new_balance)


@bp.route("/users/<string:user_id>/toggle_role", methods=["POST"])
@login_required(admin_required=True)
def toggle_role(user_id: str) -> Any:
    db = firestore.client()
    role = AdminService.toggle_role(db, user_id, g.user["uid"])
    return _success(f"Role changed to {role}.", role=role)


@bp.route("/users/<string:user_id>/delete", methods=["POST"])
@login_required(admin_required=True)
def delete_user(user_id: str) -> Any:
    db = firestore.client()
    AdminService.delete_user(db, user_id, g.user["uid"])
    current_app.logger.info(f"Admin {g.user['uid']} deleted user {user_id}")
    return _success("User deleted successfully.")


# Games


@bp.route("/games")
@login_required(admin_required=True)
def games() -> Any:
    """List every game, active or not."""
    db = firestore.client()
    return jsonify({"games": GameService.list_games(db)})


@bp.route("/games", methods=["POST"])
@login_required(admin_required=True)
def create_game() -> Any:
    form = GameForm()
    form.validate_or_raise()

    db = firestore.client()
    game_id = GameService.create_game(db, form.name.data)
    return _success("Game added.", id=game_id), 201


@bp.route("/games/<string:game_id>")
@login_required(admin_required=True)
def game_detail(game_id: str) -> Any:
    db = firestore.client()
    return jsonify({"game": GameService.get_game(db, game_id)})


@bp.route("/games/<string:game_id>", methods=["POST"])
@login_required(admin_required=True)
def update_game(game_id: str) -> Any:
    """Save a game's details, links and default settings."""
    form = GameDetailsForm()
    form.validate_or_raise()

    db = firestore.client()
    GameService.update_game(db, game_id, form.data)
    return _success("Game updated.")


@bp.route("/games/<string:game_id>/toggle", methods=["POST"])
@login_required(admin_required=True)
def toggle_game(game_id: str) -> Any:
    db = firestore.client()
    is_active = GameService.toggle_game(db, game_id)
    return _success("Game updated.", isActive=is_active)


@bp.route("/games/<string:game_id>/gamemodes", methods=["POST"])
@login_required(admin_required=True)
def add_gamemode(game_id: str) -> Any:
    form = GamemodeForm()
    form.validate_or_raise()

    db = firestore.client()
    gamemodes = GameService.add_gamemode(db, game_id, form.name.data)
    return _success("Gamemode added.", gamemodes=gamemodes)


@bp.route("/games/<string:game_id>/gamemodes/delete", methods=["POST"])
@login_required(admin_required=True)
def remove_gamemode(game_id: str) -> Any:
    form = GamemodeRemoveForm()
    form.validate_or_raise()

    db = firestore.client()
    gamemodes = GameService.remove_gamemode(db, game_id, form.name.data)
    return _success("Gamemode removed.", gamemodes=gamemodes)


@bp.route("/games/<string:game_id>/delete", methods=["POST"])
@login_required(admin_required=True)
def delete_game(game_id: str) -> Any:
    db = firestore.client()
    GameService.delete_game(db, game_id)
    return _success("Game deleted.")


# Tournaments


@bp.route("/tournaments")
@login_required(admin_required=True)
def tournaments() -> Any:
    """List every tournament with room credentials."""
    db = firestore.client()
    return jsonify({"tournaments": TournamentService.list_all(db)})


@bp.route("/tournaments", methods=["POST"])
@login_required(admin_required=True)
def create_tournament() -> Any:
    form = TournamentForm()
    form.validate_or_raise()

    db = firestore.client()
    tournament_id = TournamentService.create_tournament(db, form.data)
    current_app.logger.info(f"Tournament {tournament_id} created by {g.user['uid']}")
    return _success("Tournament created.", id=tournament_id), 201


@bp.route("/tournaments/<string:tournament_id>", methods=["POST"])
@login_required(admin_required=True)
def update_tournament(tournament_id: str) -> Any:
    form = TournamentForm()
    form.validate_or_raise()

    db = firestore.client()
    TournamentService.update_tournament(db, tournament_id, form.data)
    return _success("Tournament updated.")


@bp.route("/tournaments/<string:tournament_id>/status", methods=["POST"])
@login_required(admin_required=True)
def set_tournament_status(tournament_id: str) -> Any:
    form = TournamentStatusForm()
    form.validate_or_raise()

    db = firestore.client()
    TournamentService.set_status(db, tournament_id, form.status.data)
    return _success("Status updated.", tournamentStatus=form.status.data)


@bp.route("/tournaments/<string:tournament_id>/room", methods=["POST"])
@login_required(admin_required=True)
def publish_room(tournament_id: str) -> Any:
    """Publish room credentials and notify participants."""
    form = RoomDetailsForm()
    form.validate_or_raise()

    db = firestore.client()
    notified = TournamentService.publish_room_details(
        db, tournament_id, form.roomId.data, form.roomPassword.data
    )
    return _success(f"Room details sent to {notified} players.", notified=notified)


@bp.route("/tournaments/<string:tournament_id>/participants")
@login_required(admin_required=True)
def participants(tournament_id: str) -> Any:
    db = firestore.client()
    return jsonify(
        {"participants": TournamentService.list_participants(db, tournament_id)}
    )


@bp.route("/tournaments/<string:tournament_id>/complete", methods=["POST"])
@login_required(admin_required=True)
def complete_tournament(tournament_id: str) -> Any:
    """Finish a tournament. Body: ``{"prizes": [{"userId", "amount"}]}``."""
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object.")
    prizes = payload.get("prizes") or []
    if not isinstance(prizes, list) or not all(isinstance(p, dict) for p in prizes):
        return (
            jsonify({"status": "error", "message": "Prizes must be a list."}),
            400,
        )

    db = firestore.client()
    awarded = TournamentService.complete_tournament(db, tournament_id, prizes)
    return _success("Tournament completed.", prizes=awarded)


@bp.route("/tournaments/<string:tournament_id>/delete", methods=["POST"])
@login_required(admin_required=True)
def delete_tournament(tournament_id: str) -> Any:
    db = firestore.client()
    TournamentService.delete_tournament(db, tournament_id)
    return _success("Tournament deleted.")
