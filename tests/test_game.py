"""Tests for the game catalogue."""

from __future__ import annotations

import unittest

from arenaclash.errors import DuplicateResourceError, NotFoundError, ValidationError
from arenaclash.game.services import GameService
from tests.helpers import FirestoreAppTestCase


class GameServiceTestCase(FirestoreAppTestCase):
    def test_create_game_is_active(self) -> None:
        game_id = GameService.create_game(self.mock_db, " Free Fire ")

        game = GameService.get_game(self.mock_db, game_id)
        self.assertEqual(game["name"], "Free Fire")
        self.assertTrue(game["isActive"])
        self.assertEqual(game["gamemodes"], [])

    def test_duplicate_name_is_case_insensitive(self) -> None:
        self.create_game("BGMI")
        with self.assertRaises(DuplicateResourceError):
            GameService.create_game(self.mock_db, "bgmi")

    def test_update_rejects_inverted_fee_range(self) -> None:
        game_id = self.create_game("BGMI")
        with self.assertRaises(ValidationError):
            GameService.update_game(
                self.mock_db,
                game_id,
                {"name": "BGMI", "minEntryFee": 50, "maxEntryFee": 10},
            )

    def test_update_writes_settings(self) -> None:
        game_id = self.create_game("BGMI")
        GameService.update_game(
            self.mock_db,
            game_id,
            {
                "name": "BGMI",
                "discord": "https://discord.gg/x",
                "minEntryFee": 10,
                "maxEntryFee": 100,
                "perKillBonus": 5,
            },
        )

        game = GameService.get_game(self.mock_db, game_id)
        self.assertEqual(game["defaultSettings"]["maxEntryFee"], 100)
        self.assertEqual(game["socialLinks"]["discord"], "https://discord.gg/x")

    def test_gamemodes(self) -> None:
        game_id = self.create_game("BGMI")

        GameService.add_gamemode(self.mock_db, game_id, "Erangel")
        with self.assertRaises(DuplicateResourceError):
            GameService.add_gamemode(self.mock_db, game_id, "Erangel")
        remaining = GameService.remove_gamemode(self.mock_db, game_id, "Erangel")

        self.assertEqual(remaining, [])

    def test_toggle_and_active_listing(self) -> None:
        game_id = self.create_game("BGMI")
        self.create_game("Apex")

        self.assertFalse(GameService.toggle_game(self.mock_db, game_id))
        self.assertEqual(GameService.get_active_game_names(self.mock_db), ["Apex"])

    def test_delete_missing_game(self) -> None:
        with self.assertRaises(NotFoundError):
            GameService.delete_game(self.mock_db, "nope")


class GameRoutesTestCase(FirestoreAppTestCase):
    def test_public_listing_only_shows_active_games(self) -> None:
        self.create_game("BGMI")
        self.create_game("Valorant", isActive=False)

        response = self.client.get("/games/")

        names = [g["name"] for g in response.get_json()["games"]]
        self.assertEqual(names, ["BGMI"])

    def test_admin_game_lifecycle(self) -> None:
        self.create_user("admin1", role="admin")
        self.login("admin1", is_admin=True)

        created = self.client.post("/admin/games", json={"name": "COD Mobile"})
        self.assertEqual(created.status_code, 201)
        game_id = created.get_json()["id"]

        mode = self.client.post(f"/admin/games/{game_id}/gamemodes", json={"name": "TDM"})
        self.assertEqual(mode.get_json()["gamemodes"], ["TDM"])

        toggled = self.client.post(f"/admin/games/{game_id}/toggle")
        self.assertFalse(toggled.get_json()["isActive"])

        deleted = self.client.post(f"/admin/games/{game_id}/delete")
        self.assertEqual(deleted.status_code, 200)
        self.assertEqual(self.client.get(f"/admin/games/{game_id}").status_code, 404)


if __name__ == "__main__":
    unittest.main()
