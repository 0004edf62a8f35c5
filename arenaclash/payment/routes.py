"""Routes for the payment and webhook blueprints."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import current_app, g, jsonify, request

from arenaclash.auth.decorators import login_required
from arenaclash.core.constants import (
    TXN_PENDING,
    TXN_SUCCESS,
    WEBHOOK_SIGNATURE_HEADER,
)
from arenaclash.errors import PaymentGatewayError

from . import bp, webhook_bp
from .forms import StatusForm, TopupForm
from .services import PaymentService, map_gateway_status


@bp.route("/create", methods=["POST"])
@login_required
def create() -> Any:
    """Start a wallet top-up and return the gateway payment link."""
    form = TopupForm()
    form.validate_or_raise()

    db = firestore.client()
    result = PaymentService.create_topup(
        db,
        g.user,
        form.amount.data,
        order_id=form.orderId.data or None,
        customer_mobile=form.customerMobile.data or None,
    )
    return jsonify({"status": "success", **result})


@bp.route("/status", methods=["POST"])
@login_required
def status() -> Any:
    """Reconcile a top-up with the gateway."""
    form = StatusForm()
    form.validate_or_raise()

    db = firestore.client()
    result = PaymentService.check_status(db, form.orderId.data, g.user)
    return jsonify({"status": "success", **result})


@bp.route("/processing/<string:order_id>", methods=["GET"])
@login_required
def processing(order_id: str) -> Any:
    """
    The page the gateway redirects back to. With ``?status=check`` a pending
    deposit is reconciled first; gateway trouble leaves it pending.
    """
    db = firestore.client()
    transaction = PaymentService.get_transaction(db, order_id, g.user)

    if (
        request.args.get("status") == "check"
        and transaction.get("status") == TXN_PENDING
    ):
        try:
            PaymentService.check_status(db, order_id, g.user)
        except PaymentGatewayError as e:
            current_app.logger.warning(
                f"Status check for order {order_id} failed: {e.message}"
            )
        transaction = PaymentService.get_transaction(db, order_id, g.user)

    return jsonify({"transaction": transaction})


@webhook_bp.route("/webhook", methods=["POST"])
def webhook() -> Any:
    """Receive a gateway callback.

    Responds 200 only for a success status (in any letter case), matching
    what the gateway expects. Other statuses are still recorded before the 400.
    """
    raw_body = request.get_data()
    payload = request.get_json(force=True, silent=True)

    db = firestore.client()
    PaymentService.handle_webhook(
        db,
        raw_body,
        request.headers.get(WEBHOOK_SIGNATURE_HEADER),
        payload,
        current_app.config.get("ZAPUPI_WEBHOOK_SECRET"),
    )

    if map_gateway_status(payload.get("status")) == TXN_SUCCESS:
        return jsonify({"message": "Webhook received successfully"}), 200
    return jsonify({"message": "Invalid status received"}), 400
