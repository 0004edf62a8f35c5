"""Tests for the admin blueprint."""

from __future__ import annotations

import unittest
from unittest.mock import MagicMock, patch

from firebase_admin import auth

from arenaclash.admin.services import AdminService
from arenaclash.errors import PermissionDeniedError
from tests.helpers import FirestoreAppTestCase


class AdminStatsTestCase(unittest.TestCase):
    """Dashboard counters use count aggregations."""

    def test_get_admin_stats(self) -> None:
        db = MagicMock()
        aggregate = MagicMock()
        aggregate.value = 7
        query = db.collection.return_value
        query.count.return_value.get.return_value = [[aggregate]]
        query.where.return_value.count.return_value.get.return_value = [[aggregate]]

        stats = AdminService.get_admin_stats(db)

        self.assertEqual(
            stats,
            {
                "total_users": 7,
                "active_tournaments": 7,
                "total_games": 7,
                "pending_deposits": 7,
            },
        )


class AdminServiceTestCase(FirestoreAppTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.create_user("admin1", role="admin", displayName="Boss")
        self.create_user("user1", displayName="Rohan", email="rohan@example.com")
        self.create_user("user2", displayName="Priya", email="priya@example.com")

    def test_search_users(self) -> None:
        users = AdminService.list_users(self.mock_db, "PRIYA")
        self.assertEqual([u["uid"] for u in users], ["user2"])

        self.assertEqual(len(AdminService.list_users(self.mock_db)), 3)

    def test_toggle_role(self) -> None:
        self.assertEqual(AdminService.toggle_role(self.mock_db, "user1", "admin1"), "admin")
        self.assertEqual(self.user_data("user1")["role"], "admin")
        self.assertEqual(AdminService.toggle_role(self.mock_db, "user1", "admin1"), "user")

    def test_cannot_toggle_own_role(self) -> None:
        with self.assertRaises(PermissionDeniedError):
            AdminService.toggle_role(self.mock_db, "admin1", "admin1")

    def test_delete_user(self) -> None:
        AdminService.delete_user(self.mock_db, "user1", "admin1")

        self.assertFalse(self.mock_db.collection("users").document("user1").get().exists)
        self.mocks["delete_user"].assert_called_once_with("user1")

    def test_delete_user_without_auth_record(self) -> None:
        self.mocks["delete_user"].side_effect = auth.UserNotFoundError("gone")

        AdminService.delete_user(self.mock_db, "user1", "admin1")

        self.assertFalse(self.mock_db.collection("users").document("user1").get().exists)


class AdminRoutesTestCase(FirestoreAppTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.create_user("admin1", role="admin")
        self.create_user("user1", balance=10)
        self.create_game(defaultSettings={"minEntryFee": 0, "maxEntryFee": 0})

    def test_non_admin_is_forbidden(self) -> None:
        self.login("user1")
        response = self.client.get("/admin/users")
        self.assertEqual(response.status_code, 403)

    def test_stale_admin_session_is_forbidden(self) -> None:
        self.login("user1", is_admin=True)
        response = self.client.get("/admin/users")
        self.assertEqual(response.status_code, 403)

    def test_adjust_balance_route(self) -> None:
        self.login("admin1", is_admin=True)

        response = self.client.post("/admin/users/user1/balance", json={"amount": 15})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["walletBalance"], 25)

    def test_adjust_balance_route_overdraft(self) -> None:
        self.login("admin1", is_admin=True)
        response = self.client.post("/admin/users/user1/balance", json={"amount": -50})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.user_data("user1")["walletBalance"], 10)

    def test_toggle_own_role_route(self) -> None:
        self.login("admin1", is_admin=True)
        response = self.client.post("/admin/users/admin1/toggle_role")
        self.assertEqual(response.status_code, 403)

    def test_create_tournament_route(self) -> None:
        self.login("admin1", is_admin=True)

        response = self.client.post(
            "/admin/tournaments",
            json={
                "game": "BGMI",
                "title": "Friday Scrim",
                "entryFee": 0,
                "date": "2024-08-02",
                "time": "21:30",
                "maxPlayers": 50,
            },
        )

        self.assertEqual(response.status_code, 201)
        tournament_id = response.get_json()["id"]
        data = self.mock_db.collection("tournaments").document(tournament_id).get().to_dict()
        self.assertEqual(data["title"], "Friday Scrim")
        self.assertEqual(data["type"], "scrim")
        self.assertEqual(data["maxPlayers"], 50)

    def test_create_tournament_route_validates_date(self) -> None:
        self.login("admin1", is_admin=True)
        response = self.client.post(
            "/admin/tournaments",
            json={"game": "BGMI", "title": "X", "date": "tomorrow", "time": "21:30"},
        )
        self.assertEqual(response.status_code, 400)

    @patch("arenaclash.tournament.services.send_email")
    def test_room_and_complete_routes(self, mock_send) -> None:
        self.create_tournament("t1", entry_fee=0)
        self.add_participant("t1", "user1")
        self.login("admin1", is_admin=True)

        room = self.client.post(
            "/admin/tournaments/t1/room", json={"roomId": "42", "roomPassword": "pw"}
        )
        self.assertEqual(room.get_json()["notified"], 1)

        participants = self.client.get("/admin/tournaments/t1/participants")
        self.assertEqual(len(participants.get_json()["participants"]), 1)

        done = self.client.post(
            "/admin/tournaments/t1/complete",
            json={"prizes": [{"userId": "user1", "amount": 90}]},
        )
        self.assertEqual(done.status_code, 200)
        self.assertEqual(self.user_data("user1")["walletBalance"], 100)

    def test_complete_route_rejects_malformed_prizes(self) -> None:
        self.create_tournament("t1")
        self.login("admin1", is_admin=True)
        response = self.client.post("/admin/tournaments/t1/complete", json={"prizes": "x"})
        self.assertEqual(response.status_code, 400)

    def test_complete_route_rejects_array_body(self) -> None:
        self.create_tournament("t1")
        self.login("admin1", is_admin=True)

        response = self.client.post(
            "/admin/tournaments/t1/complete", json=[{"userId": "user1", "amount": 90}]
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.get_json()["message"], "Request body must be a JSON object."
        )
        tournament = self.mock_db.collection("tournaments").document("t1").get()
        self.assertEqual(tournament.to_dict()["status"], "upcoming")

    def test_admin_tournament_list_includes_room_details(self) -> None:
        self.create_tournament("t1", roomId="77", roomPassword="pw")
        self.login("admin1", is_admin=True)
        response = self.client.get("/admin/tournaments")
        self.assertEqual(response.get_json()["tournaments"][0]["roomId"], "77")


if __name__ == "__main__":
    unittest.main()
