"""Service layer for wallet top-ups through the payment gateway."""

from __future__ import annotations

import hashlib
import hmac
import logging
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore
from flask import current_app
from google.api_core.exceptions import Conflict

from arenaclash.core.constants import (
    DEFAULT_CUSTOMER_MOBILE,
    ROLE_ADMIN,
    TOPUP_REMARK,
    TRANSACTIONS_COLLECTION,
    TXN_DEPOSIT,
    TXN_FAILED,
    TXN_PENDING,
    TXN_SUCCESS,
    USERS_COLLECTION,
)
from arenaclash.errors import (
    DuplicateResourceError,
    NotFoundError,
    PaymentGatewayError,
    PermissionDeniedError,
    ValidationError,
    WebhookSignatureError,
)
from arenaclash.notification.services import NotificationService
from arenaclash.utils import (
    format_amount,
    generate_order_id,
    parse_amount,
    snapshot_to_dict,
)

from .gateway import ZapUPIClient

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference
    from google.cloud.firestore_v1.transaction import Transaction

SUCCESS_STATUSES = frozenset({"success", "completed"})
FAILED_STATUSES = frozenset({"failed", "failure", "cancelled", "expired", "rejected"})
AMOUNT_TOLERANCE = 0.005


def map_gateway_status(status: Any) -> str:
    """Map a gateway status string onto a ledger status."""
    normalized = str(status or "").strip().lower()
    if normalized in SUCCESS_STATUSES:
        return TXN_SUCCESS
    if normalized in FAILED_STATUSES:
        return TXN_FAILED
    return TXN_PENDING


def extract_payment_url(result: dict[str, Any]) -> str | None:
    """Find the payment link, which the gateway nests inconsistently."""
    for container in (result.get("result"), result, result.get("data")):
        if isinstance(container, dict) and container.get("payment_url"):
            return str(container["payment_url"])
    return None


def verify_webhook_signature(
    raw_body: bytes, signature: str | None, secret: str | None
) -> None:
    """Check the hex HMAC-SHA256 of the raw body, or raise WebhookSignatureError."""
    if not secret:
        raise WebhookSignatureError("Webhook secret is not configured.")
    if not signature:
        raise WebhookSignatureError("Missing webhook signature.")

    expected = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()
    if not hmac.compare_digest(expected, signature.strip().lower()):
        raise WebhookSignatureError()


class PaymentService:
    """Creates top-up orders and settles them exactly once."""

    @staticmethod
    def _client() -> ZapUPIClient:
        return ZapUPIClient.from_config(current_app.config)

    @staticmethod
    def _get_owned(
        db: Client, order_id: str, user: dict[str, Any] | None
    ) -> dict[str, Any]:
        """Fetch a deposit, checking that the user may see it."""
        doc = cast(Any, db.collection(TRANSACTIONS_COLLECTION).document(order_id).get())
        if not doc.exists:
            raise NotFoundError("Transaction not found.")
        data = snapshot_to_dict(doc)
        if (
            user is not None
            and user.get("role") != ROLE_ADMIN
            and data.get("userId") != user.get("uid")
        ):
            raise PermissionDeniedError()
        return data

    @staticmethod
    def create_topup(
        db: Client,
        user: dict[str, Any],
        amount: Any,
        order_id: str | None = None,
        customer_mobile: str | None = None,
    ) -> dict[str, Any]:
        """Record a pending deposit and open a gateway payment session.

        Returns the order id and the URL the player pays at.
        """
        amount = parse_amount(amount)
        if amount <= 0:
            raise ValidationError("Amount must be greater than zero.")

        order_id = order_id or generate_order_id()
        txn_ref = db.collection(TRANSACTIONS_COLLECTION).document(order_id)
        try:
            # create() fails if the id is taken, so a reused order id can
            # never overwrite another user's deposit.
            txn_ref.create(
                {
                    "userId": user["uid"],
                    "amount": amount,
                    "type": TXN_DEPOSIT,
                    "description": "Wallet Recharge (Pending)",
                    "status": TXN_PENDING,
                    "gatewayOrderId": order_id,
                    "timestamp": firestore.SERVER_TIMESTAMP,
                }
            )
        except Conflict as e:
            raise DuplicateResourceError("Order already exists.") from e

        config = current_app.config
        mobile = (
            customer_mobile
            or user.get("mobile")
            or config.get("DEFAULT_CUSTOMER_MOBILE")
            or DEFAULT_CUSTOMER_MOBILE
        )
        app_url = (config.get("APP_URL") or "").rstrip("/")
        redirect_url = f"{app_url}/payment/processing/{order_id}?status=check"

        try:
            result = PaymentService._client().create_order(
                amount=amount,
                order_id=order_id,
                customer_mobile=mobile,
                redirect_url=redirect_url,
                remark=TOPUP_REMARK,
            )
            payment_url = extract_payment_url(result)
            if not payment_url:
                raise PaymentGatewayError(
                    "The payment gateway did not return a payment link.", payload=result
                )
        except PaymentGatewayError as e:
            txn_ref.update(
                {
                    "status": TXN_FAILED,
                    "description": "Wallet Recharge (Failed)",
                    "failureReason": e.message,
                }
            )
            logging.error(f"Top-up {order_id} could not be started: {e.message}")
            raise

        logging.info(f"Top-up {order_id} of {amount} started for user {user['uid']}")
        return {"orderId": order_id, "paymentUrl": payment_url, "amount": amount}

    @staticmethod
    def get_transaction(
        db: Client, order_id: str, user: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Fetch a deposit for the processing page."""
        return PaymentService._get_owned(db, order_id, user)

    @staticmethod
    def check_status(
        db: Client, order_id: str, user: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Reconcile a deposit with the gateway's view of the order."""
        data = PaymentService._get_owned(db, order_id, user)
        if data.get("status") != TXN_PENDING:
            return {
                "orderId": order_id,
                "status": data.get("status"),
                "alreadyProcessed": True,
                "credited": False,
            }

        gateway_data = PaymentService._client().order_status(order_id)
        return PaymentService.settle(
            db,
            order_id,
            map_gateway_status(gateway_data.get("status")),
            gateway_amount=gateway_data.get("amount"),
            utr=gateway_data.get("utr"),
            gateway_txn_id=gateway_data.get("txn_id"),
            via="poll",
            reason=gateway_data.get("status"),
        )

    @staticmethod
    def handle_webhook(
        db: Client,
        raw_body: bytes,
        signature: str | None,
        payload: Any,
        secret: str | None,
    ) -> dict[str, Any]:
        """Authenticate a gateway callback and settle the order it reports."""
        verify_webhook_signature(raw_body, signature, secret)
        if not isinstance(payload, dict):
            raise ValidationError("Invalid JSON payload")

        order_id = str(payload.get("order_id") or "").strip()
        if not order_id:
            raise ValidationError("Missing order_id.")

        logging.info(
            f"Webhook for order {order_id}: status {payload.get('status')}, "
            f"amount {payload.get('amount')}"
        )
        return PaymentService.settle(
            db,
            order_id,
            map_gateway_status(payload.get("status")),
            gateway_amount=payload.get("amount"),
            utr=payload.get("utr"),
            gateway_txn_id=payload.get("txn_id"),
            via="webhook",
            reason=payload.get("status"),
        )

    @staticmethod
    def _settle_in_transaction(  # noqa: PLR0913
        transaction: Transaction,
        db: Client,
        txn_ref: DocumentReference,
        outcome: str,
        gateway_amount: Any,
        utr: str | None,
        gateway_txn_id: str | None,
        via: str,
        reason: str | None,
    ) -> dict[str, Any]:
        """Move a pending deposit to its final state inside a transaction."""
        # 1. Read phase
        txn_doc = txn_ref.get(transaction=transaction)
        if not txn_doc.exists:
            raise NotFoundError("Transaction not found.")
        data = txn_doc.to_dict() or {}

        result = {
            "orderId": txn_ref.id,
            "status": data.get("status"),
            "alreadyProcessed": False,
            "credited": False,
        }
        if data.get("status") != TXN_PENDING:
            result["alreadyProcessed"] = True
            return result
        if outcome == TXN_PENDING:
            return result

        user_ref = db.collection(USERS_COLLECTION).document(data.get("userId") or "-")
        user_doc = user_ref.get(transaction=transaction)

        settled = {"settledAt": firestore.SERVER_TIMESTAMP, "settledVia": via}
        if utr:
            settled["utr"] = str(utr)
        if gateway_txn_id:
            settled["gatewayTxnId"] = str(gateway_txn_id)

        # 2. Validation phase
        amount = parse_amount(data.get("amount"))
        failure = None
        if outcome == TXN_FAILED:
            failure = f"Payment {str(reason or 'failed').lower()}"
        elif gateway_amount not in (None, "") and (
            abs(parse_amount(gateway_amount) - amount) > AMOUNT_TOLERANCE
        ):
            reported = format_amount(parse_amount(gateway_amount))
            failure = (
                f"Amount mismatch: gateway reported ₹{reported}, "
                f"expected ₹{format_amount(amount)}"
            )
        elif not user_doc.exists:
            failure = "User profile not found"

        # 3. Write phase
        if failure:
            transaction.update(
                txn_ref,
                {
                    "status": TXN_FAILED,
                    "description": "Wallet Recharge (Failed)",
                    "failureReason": failure,
                    **settled,
                },
            )
            result["status"] = TXN_FAILED
            result["failureReason"] = failure
            return result

        balance = parse_amount((user_doc.to_dict() or {}).get("walletBalance"))
        new_balance = round(balance + amount, 2)
        transaction.update(user_ref, {"walletBalance": new_balance})
        transaction.update(
            txn_ref,
            {"status": TXN_SUCCESS, "description": "Wallet Recharge", **settled},
        )
        NotificationService.create_in_transaction(
            transaction,
            db,
            user_ref.id,
            "Funds added",
            f"₹{format_amount(amount)} has been added to your wallet.",
        )
        result.update(
            {"status": TXN_SUCCESS, "credited": True, "walletBalance": new_balance}
        )
        return result

    @staticmethod
    def settle(  # noqa: PLR0913
        db: Client,
        order_id: str,
        outcome: str,
        gateway_amount: Any = None,
        utr: str | None = None,
        gateway_txn_id: str | None = None,
        via: str = "poll",
        reason: str | None = None,
    ) -> dict[str, Any]:
        """Apply a gateway outcome to a pending deposit, at most once."""
        txn_ref = db.collection(TRANSACTIONS_COLLECTION).document(order_id)
        settle = firestore.transactional(PaymentService._settle_in_transaction)
        result = settle(
            db.transaction(),
            db,
            txn_ref,
            outcome,
            gateway_amount,
            utr,
            gateway_txn_id,
            via,
            reason,
        )
        if result["alreadyProcessed"]:
            logging.info(f"Order {order_id} already {result['status']}, skipped ({via})")
        else:
            logging.info(f"Order {order_id} settled as {result['status']} ({via})")
        return cast(dict[str, Any], result)
