"""Tests for wallet summaries and admin balance adjustments."""

from __future__ import annotations

import unittest

from arenaclash.errors import InsufficientBalanceError, NotFoundError, ValidationError
from arenaclash.wallet.services import WalletService
from tests.helpers import FirestoreAppTestCase


class WalletServiceTestCase(FirestoreAppTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.create_user("user1", balance=75)
        ledger = self.mock_db.collection("transactions")
        entries = [
            ("deposit", 100, "success"),
            ("entry", 50, "success"),
            ("entry", 25, "success"),
            ("prize", 200, "success"),
            ("prize", 999, "failed"),
            ("deposit", 500, "pending"),
            ("entry", 10, "success"),
        ]
        for i, (txn_type, amount, status) in enumerate(entries):
            ledger.document(f"txn{i}").set(
                {"userId": "user1", "type": txn_type, "amount": amount, "status": status}
            )
        ledger.document("other").set(
            {"userId": "user2", "type": "prize", "amount": 1, "status": "success"}
        )

    def test_summary(self) -> None:
        summary = WalletService.get_summary(self.mock_db, "user1")

        self.assertEqual(summary["walletBalance"], 75)
        self.assertEqual(len(summary["recentTransactions"]), 5)
        self.assertEqual(summary["totalWinnings"], 200)
        self.assertEqual(summary["totalSpent"], 85)

    def test_history_only_lists_own_transactions(self) -> None:
        history = WalletService.list_transactions(self.mock_db, "user1")
        self.assertEqual(len(history), 7)
        self.assertTrue(all(t["userId"] == "user1" for t in history))

    def test_admin_credit(self) -> None:
        new_balance = WalletService.adjust_balance(self.mock_db, "user1", 25, "admin1")

        self.assertEqual(new_balance, 100)
        self.assertEqual(self.user_data("user1")["walletBalance"], 100)
        credits = [
            t
            for t in self.transactions_for("user1", "deposit")
            if t.get("description") == "Admin credit"
        ]
        self.assertEqual(len(credits), 1)
        self.assertEqual(credits[0]["adjustedBy"], "admin1")

    def test_admin_debit(self) -> None:
        WalletService.adjust_balance(self.mock_db, "user1", -70, "admin1")

        self.assertEqual(self.user_data("user1")["walletBalance"], 5)
        debits = self.transactions_for("user1", "withdrawal")
        self.assertEqual(debits[0]["amount"], 70)
        self.assertEqual(debits[0]["description"], "Admin debit")

    def test_debit_cannot_go_negative(self) -> None:
        with self.assertRaises(InsufficientBalanceError):
            WalletService.adjust_balance(self.mock_db, "user1", -80, "admin1")
        self.assertEqual(self.user_data("user1")["walletBalance"], 75)

    def test_zero_adjustment(self) -> None:
        with self.assertRaises(ValidationError):
            WalletService.adjust_balance(self.mock_db, "user1", 0, "admin1")

    def test_unknown_user(self) -> None:
        with self.assertRaises(NotFoundError):
            WalletService.adjust_balance(self.mock_db, "ghost", 10, "admin1")


class WalletRoutesTestCase(FirestoreAppTestCase):
    def test_summary_route(self) -> None:
        self.create_user("user1", balance="₹40")
        self.login("user1")

        response = self.client.get("/wallet/")

        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertEqual(body["walletBalance"], 40)
        self.assertEqual(body["recentTransactions"], [])

    def test_transactions_route_requires_login(self) -> None:
        response = self.client.get("/wallet/transactions")
        self.assertEqual(response.status_code, 401)


if __name__ == "__main__":
    unittest.main()
