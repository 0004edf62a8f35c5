"""Routes for the wallet blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import g, jsonify

from arenaclash.auth.decorators import login_required

from . import bp
from .services import WalletService


@bp.route("/", methods=["GET"])
@login_required
def summary() -> Any:
    """Balance, recent transactions, winnings and spend."""
    db = firestore.client()
    return jsonify(WalletService.get_summary(db, g.user["uid"]))


@bp.route("/transactions", methods=["GET"])
@login_required
def transactions() -> Any:
    db = firestore.client()
    return jsonify(
        {"transactions": WalletService.list_transactions(db, g.user["uid"])}
    )
