"""Base test case wiring the app to an in-memory Firestore."""

import unittest
from typing import Any, Optional
from unittest.mock import patch

from mockfirestore import MockFirestore

from arenaclash import create_app
from tests.mock_utils import MockFirestoreBuilder, patch_mockfirestore

patch_mockfirestore()

# Every module that does ``from firebase_admin import firestore``.
FIRESTORE_MODULES = (
    "arenaclash",
    "arenaclash.auth.routes",
    "arenaclash.user.routes",
    "arenaclash.user.services",
    "arenaclash.game.routes",
    "arenaclash.game.services",
    "arenaclash.tournament.routes",
    "arenaclash.tournament.services",
    "arenaclash.wallet.routes",
    "arenaclash.wallet.services",
    "arenaclash.payment.routes",
    "arenaclash.payment.services",
    "arenaclash.notification.routes",
    "arenaclash.notification.services",
    "arenaclash.admin.routes",
    "arenaclash.admin.services",
)

TEST_CONFIG = {
    "TESTING": True,
    "WTF_CSRF_ENABLED": False,
    "SECRET_KEY": "test",
    "MAIL_SUPPRESS_SEND": True,
    "MAIL_DEFAULT_SENDER": "noreply@example.com",
    "ZAPUPI_TOKEN_KEY": "token-key",
    "ZAPUPI_SECRET_KEY": "secret-key",
    "ZAPUPI_BASE_URL": "https://gateway.test/api",
    "ZAPUPI_WEBHOOK_SECRET": "webhook-secret",
    "APP_URL": "https://arena.test",
}


class FirestoreAppTestCase(unittest.TestCase):
    """Creates the app against MockFirestore with Auth patched out."""

    config_overrides: dict[str, Any] = {}

    def setUp(self) -> None:
        self.mock_db = MockFirestore()
        MockFirestoreBuilder.attach_write_helpers(self.mock_db)
        self.mock_firestore_module = MockFirestoreBuilder.build_firestore_module(
            self.mock_db
        )

        patchers = {
            f"firestore:{name}": patch(
                f"{name}.firestore", new=self.mock_firestore_module
            )
            for name in FIRESTORE_MODULES
        }
        patchers.update(
            {
                "init_app": patch("firebase_admin.initialize_app"),
                "verify_id_token": patch("firebase_admin.auth.verify_id_token"),
                "update_user": patch("firebase_admin.auth.update_user"),
                "delete_user": patch("firebase_admin.auth.delete_user"),
            }
        )
        self.mocks = {name: p.start() for name, p in patchers.items()}
        for p in patchers.values():
            self.addCleanup(p.stop)

        self.app = create_app({**TEST_CONFIG, **self.config_overrides})
        self.client = self.app.test_client()
        self.app_context = self.app.app_context()
        self.app_context.push()
        self.addCleanup(self.app_context.pop)

    # Fixtures

    def create_user(
        self,
        uid: str = "user1",
        balance: float = 0.0,
        role: str = "user",
        **fields: Any,
    ) -> str:
        data = {
            "email": f"{uid}@example.com",
            "displayName": uid.title(),
            "role": role,
            "walletBalance": balance,
            "hasCompletedOnboarding": True,
            **fields,
        }
        self.mock_db.collection("users").document(uid).set(data)
        return uid

    def create_game(self, name: str = "BGMI", **fields: Any) -> str:
        data = {"name": name, "isActive": True, "gamemodes": [], **fields}
        ref = self.mock_db.collection("games").document(name.lower().replace(" ", "-"))
        ref.set(data)
        return ref.id

    def create_tournament(
        self,
        tournament_id: str = "t1",
        entry_fee: Any = 50,
        max_players: int = 100,
        current_players: int = 0,
        **fields: Any,
    ) -> str:
        data = {
            "game": "BGMI",
            "title": "Sunday Scrim",
            "map": "Erangel",
            "entryFee": entry_fee,
            "prizePool": 1000,
            "perKill": 10,
            "date": "2024-06-01",
            "time": "18:00",
            "maxPlayers": max_players,
            "currentPlayers": current_players,
            "participant_ids": [],
            "roomId": "",
            "roomPassword": "",
            "status": "upcoming",
            "type": "scrim",
            **fields,
        }
        self.mock_db.collection("tournaments").document(tournament_id).set(data)
        return tournament_id

    def add_participant(self, tournament_id: str, uid: str, **fields: Any) -> None:
        t_ref = self.mock_db.collection("tournaments").document(tournament_id)
        t_data = t_ref.get().to_dict()
        t_ref.update(
            {
                "participant_ids": t_data.get("participant_ids", []) + [uid],
                "currentPlayers": t_data.get("currentPlayers", 0) + 1,
            }
        )
        t_ref.collection("participants").document(uid).set(
            {
                "userId": uid,
                "displayName": uid.title(),
                "email": f"{uid}@example.com",
                "ingameName": f"{uid}_ign",
                "feePaid": t_data.get("entryFee", 0),
                **fields,
            }
        )

    # Session helpers

    def login(self, uid: str = "user1", is_admin: bool = False) -> None:
        with self.client.session_transaction() as sess:
            sess["user_id"] = uid
            sess["is_admin"] = is_admin

    def user_data(self, uid: str) -> dict[str, Any]:
        return self.mock_db.collection("users").document(uid).get().to_dict()

    def transactions_for(self, uid: str, txn_type: Optional[str] = None) -> list:
        docs = [
            doc.to_dict()
            for doc in self.mock_db.collection("transactions").stream()
            if doc.to_dict().get("userId") == uid
        ]
        if txn_type:
            docs = [d for d in docs if d.get("type") == txn_type]
        return docs
