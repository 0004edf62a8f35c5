"""Service layer for user profiles."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import auth, firestore

from arenaclash.core.constants import ROLE_USER, USERS_COLLECTION
from arenaclash.errors import NotFoundError, ValidationError
from arenaclash.game.services import GameService
from arenaclash.utils import parse_amount

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

PROFILE_FIELDS = (
    "email",
    "displayName",
    "username",
    "role",
    "favoriteGame",
    "hasCompletedOnboarding",
)


class UserService:
    """Handles business logic and data access for user profiles."""

    @staticmethod
    def ensure_user_profile(
        db: Client,
        uid: str,
        email: str | None = None,
        display_name: str | None = None,
    ) -> dict[str, Any]:
        """Create the user document on first login, or refresh ``lastLogin``."""
        user_ref = db.collection(USERS_COLLECTION).document(uid)
        user_doc = user_ref.get()
        if user_doc.exists:
            user_ref.set({"lastLogin": firestore.SERVER_TIMESTAMP}, merge=True)
            return cast(dict[str, Any], user_doc.to_dict() or {})

        user_data = {
            "email": email,
            "displayName": display_name or (email or "").split("@")[0],
            "role": ROLE_USER,
            "walletBalance": 0.0,
            "hasCompletedOnboarding": False,
            "createdAt": firestore.SERVER_TIMESTAMP,
            "lastLogin": firestore.SERVER_TIMESTAMP,
        }
        user_ref.set(user_data)
        logging.info(f"Created profile for new user {uid}")
        return user_data

    @staticmethod
    def get_user(db: Client, uid: str) -> dict[str, Any]:
        """Fetch a user document or raise NotFoundError."""
        user_doc = db.collection(USERS_COLLECTION).document(uid).get()
        if not user_doc.exists:
            raise NotFoundError("User profile not found!")
        data = cast(dict[str, Any], user_doc.to_dict() or {})
        data["uid"] = uid
        return data

    @staticmethod
    def get_profile(db: Client, uid: str) -> dict[str, Any]:
        """Return the fields a user may see about themselves."""
        data = UserService.get_user(db, uid)
        profile = {key: data.get(key) for key in PROFILE_FIELDS}
        profile["uid"] = uid
        profile["walletBalance"] = parse_amount(data.get("walletBalance"))
        profile["hasCompletedOnboarding"] = bool(
            data.get("hasCompletedOnboarding", False)
        )
        return profile

    @staticmethod
    def complete_onboarding(
        db: Client, uid: str, username: str, favorite_game: str
    ) -> None:
        """Store the chosen username and favorite game."""
        username = username.strip()
        if favorite_game not in GameService.get_active_game_names(db):
            raise ValidationError("Please select a favorite game")

        db.collection(USERS_COLLECTION).document(uid).update(
            {
                "username": username,
                "favoriteGame": favorite_game,
                "hasCompletedOnboarding": True,
            }
        )

    @staticmethod
    def update_settings(db: Client, uid: str, display_name: str) -> None:
        """Update the display name in Firebase Auth and Firestore."""
        display_name = display_name.strip()
        auth.update_user(uid, display_name=display_name)
        db.collection(USERS_COLLECTION).document(uid).update(
            {"displayName": display_name}
        )
