"""Service layer for wallet balances and the transaction ledger."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from arenaclash.core.constants import (
    RECENT_TRANSACTIONS_LIMIT,
    TRANSACTION_HISTORY_LIMIT,
    TRANSACTIONS_COLLECTION,
    TXN_DEPOSIT,
    TXN_ENTRY,
    TXN_PRIZE,
    TXN_SUCCESS,
    TXN_WITHDRAWAL,
    USERS_COLLECTION,
)
from arenaclash.errors import InsufficientBalanceError, NotFoundError, ValidationError
from arenaclash.utils import (
    format_amount,
    parse_amount,
    snapshot_to_dict,
    timestamp_sort_key,
)

from .models import LedgerEntry, WalletSummary

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference
    from google.cloud.firestore_v1.transaction import Transaction


class WalletService:
    """Reads balances and ledger entries, and applies admin adjustments."""

    @staticmethod
    def _user_transactions(db: Client, user_uid: str) -> list[LedgerEntry]:
        """All of a user's ledger entries, newest first."""
        query = db.collection(TRANSACTIONS_COLLECTION).where(
            filter=firestore.FieldFilter("userId", "==", user_uid)
        )
        entries = [cast(LedgerEntry, snapshot_to_dict(doc)) for doc in query.stream()]
        entries.sort(key=lambda e: timestamp_sort_key(e.get("timestamp")), reverse=True)
        return entries

    @staticmethod
    def get_balance(db: Client, user_uid: str) -> float:
        """Current wallet balance of a user."""
        doc = cast(Any, db.collection(USERS_COLLECTION).document(user_uid).get())
        if not doc.exists:
            raise NotFoundError("User profile not found!")
        return parse_amount((doc.to_dict() or {}).get("walletBalance"))

    @staticmethod
    def get_summary(db: Client, user_uid: str) -> WalletSummary:
        """Balance, recent activity and lifetime totals for the wallet page."""
        balance = WalletService.get_balance(db, user_uid)
        entries = WalletService._user_transactions(db, user_uid)

        def total(txn_type: str) -> float:
            return round(
                sum(
                    parse_amount(e.get("amount"))
                    for e in entries
                    if e.get("type") == txn_type and e.get("status") == TXN_SUCCESS
                ),
                2,
            )

        return WalletSummary(
            walletBalance=balance,
            recentTransactions=entries[:RECENT_TRANSACTIONS_LIMIT],
            totalWinnings=total(TXN_PRIZE),
            totalSpent=total(TXN_ENTRY),
        )

    @staticmethod
    def list_transactions(
        db: Client, user_uid: str, limit: int = TRANSACTION_HISTORY_LIMIT
    ) -> list[LedgerEntry]:
        """A user's transaction history, newest first."""
        return WalletService._user_transactions(db, user_uid)[:limit]

    @staticmethod
    def _adjust_in_transaction(
        transaction: Transaction,
        db: Client,
        user_ref: DocumentReference,
        amount: float,
        admin_uid: str,
    ) -> float:
        """Apply a signed balance change and record it in the ledger."""
        user_doc = user_ref.get(transaction=transaction)
        if not user_doc.exists:
            raise NotFoundError("User profile not found!")

        balance = parse_amount((user_doc.to_dict() or {}).get("walletBalance"))
        new_balance = round(balance + amount, 2)
        if new_balance < 0:
            raise InsufficientBalanceError(
                f"Cannot debit ₹{format_amount(-amount)}, the balance is only "
                f"₹{format_amount(balance)}."
            )

        transaction.update(user_ref, {"walletBalance": new_balance})
        transaction.set(
            db.collection(TRANSACTIONS_COLLECTION).document(),
            {
                "userId": user_ref.id,
                "amount": abs(amount),
                "type": TXN_DEPOSIT if amount > 0 else TXN_WITHDRAWAL,
                "description": "Admin credit" if amount > 0 else "Admin debit",
                "status": TXN_SUCCESS,
                "adjustedBy": admin_uid,
                "timestamp": firestore.SERVER_TIMESTAMP,
            },
        )
        return new_balance

    @staticmethod
    def adjust_balance(
        db: Client, user_uid: str, amount: float, admin_uid: str
    ) -> float:
        """Credit (positive) or debit (negative) a wallet. Returns the new balance."""
        amount = round(float(amount), 2)
        if amount == 0:
            raise ValidationError("Amount must not be zero.")

        user_ref = db.collection(USERS_COLLECTION).document(user_uid)
        adjust = firestore.transactional(WalletService._adjust_in_transaction)
        new_balance = adjust(db.transaction(), db, user_ref, amount, admin_uid)
        logging.info(
            f"Admin {admin_uid} adjusted balance of {user_uid} by {amount}"
        )
        return cast(float, new_balance)
