"""Service layer for game catalogue management."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from arenaclash.core.constants import GAMES_COLLECTION
from arenaclash.errors import DuplicateResourceError, NotFoundError, ValidationError
from arenaclash.utils import snapshot_to_dict, timestamp_sort_key

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference


class GameService:
    """Handles business logic and data access for games."""

    @staticmethod
    def _get_ref(db: Client, game_id: str) -> tuple[DocumentReference, dict[str, Any]]:
        """Resolve a game reference and its data, or raise NotFoundError."""
        ref = db.collection(GAMES_COLLECTION).document(game_id)
        doc = cast(Any, ref.get())
        if not doc.exists:
            raise NotFoundError("Game not found.")
        return ref, snapshot_to_dict(doc)

    @staticmethod
    def list_games(db: Client, active_only: bool = False) -> list[dict[str, Any]]:
        """List games, newest first. Public listings only show active games."""
        collection = db.collection(GAMES_COLLECTION)
        if active_only:
            query = collection.where(
                filter=firestore.FieldFilter("isActive", "==", True)
            )
            games = [snapshot_to_dict(doc) for doc in query.stream()]
            games.sort(key=lambda g: str(g.get("name", "")).lower())
            return games

        games = [snapshot_to_dict(doc) for doc in collection.stream()]
        games.sort(key=lambda g: timestamp_sort_key(g.get("createdAt")), reverse=True)
        return games

    @staticmethod
    def get_active_game_names(db: Client) -> list[str]:
        """Names of the games players can currently pick."""
        return [g["name"] for g in GameService.list_games(db, active_only=True)]

    @staticmethod
    def get_game(db: Client, game_id: str) -> dict[str, Any]:
        """Fetch a single game."""
        _, data = GameService._get_ref(db, game_id)
        return data

    @staticmethod
    def find_by_name(db: Client, name: str) -> dict[str, Any] | None:
        """Find a game by its display name, case-insensitively."""
        wanted = name.strip().lower()
        for doc in db.collection(GAMES_COLLECTION).stream():
            data = doc.to_dict() or {}
            if str(data.get("name", "")).strip().lower() == wanted:
                return snapshot_to_dict(doc)
        return None

    @staticmethod
    def create_game(db: Client, name: str) -> str:
        """Add a game, active by default, and return its ID."""
        name = name.strip()
        if GameService.find_by_name(db, name):
            raise DuplicateResourceError("A game with this name already exists.")

        _, ref = db.collection(GAMES_COLLECTION).add(
            {
                "name": name,
                "isActive": True,
                "gamemodes": [],
                "createdAt": firestore.SERVER_TIMESTAMP,
            }
        )
        return str(ref.id)

    @staticmethod
    def update_game(db: Client, game_id: str, details: dict[str, Any]) -> None:
        """Update a game's details, links and fee defaults."""
        ref, _ = GameService._get_ref(db, game_id)

        min_fee = float(details.get("minEntryFee") or 0)
        max_fee = float(details.get("maxEntryFee") or 0)
        if max_fee and min_fee > max_fee:
            raise ValidationError("Min entry fee cannot exceed max entry fee.")

        ref.update(
            {
                "name": (details.get("name") or "").strip(),
                "coverImage": (details.get("coverImage") or "").strip(),
                "description": (details.get("description") or "").strip(),
                "rules": (details.get("rules") or "").strip(),
                "socialLinks": {
                    "discord": (details.get("discord") or "").strip(),
                    "website": (details.get("website") or "").strip(),
                },
                "defaultSettings": {
                    "minEntryFee": min_fee,
                    "maxEntryFee": max_fee,
                    "perKillBonus": float(details.get("perKillBonus") or 0),
                },
            }
        )

    @staticmethod
    def toggle_game(db: Client, game_id: str) -> bool:
        """Flip a game's active flag and return the new value."""
        ref, data = GameService._get_ref(db, game_id)
        is_active = not data.get("isActive", False)
        ref.update({"isActive": is_active})
        return is_active

    @staticmethod
    def add_gamemode(db: Client, game_id: str, mode_name: str) -> list[str]:
        """Add a gamemode if it is not already listed."""
        ref, data = GameService._get_ref(db, game_id)
        mode_name = mode_name.strip()
        gamemodes = list(data.get("gamemodes") or [])
        if mode_name in gamemodes:
            raise DuplicateResourceError("Gamemode already exists.")
        gamemodes.append(mode_name)
        ref.update({"gamemodes": gamemodes})
        return gamemodes

    @staticmethod
    def remove_gamemode(db: Client, game_id: str, mode_name: str) -> list[str]:
        """Remove a gamemode from a game."""
        ref, data = GameService._get_ref(db, game_id)
        gamemodes = [m for m in (data.get("gamemodes") or []) if m != mode_name]
        ref.update({"gamemodes": gamemodes})
        return gamemodes

    @staticmethod
    def delete_game(db: Client, game_id: str) -> None:
        """Delete a game document."""
        ref, _ = GameService._get_ref(db, game_id)
        ref.delete()
