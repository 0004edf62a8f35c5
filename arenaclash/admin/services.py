"""Service layer for admin-related operations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from firebase_admin import auth, firestore

from arenaclash.core.constants import (
    GAMES_COLLECTION,
    ROLE_ADMIN,
    ROLE_USER,
    TOURNAMENT_COMPLETED,
    TOURNAMENTS_COLLECTION,
    TRANSACTIONS_COLLECTION,
    TXN_PENDING,
    USERS_COLLECTION,
)
from arenaclash.errors import NotFoundError, PermissionDeniedError
from arenaclash.utils import parse_amount, snapshot_to_dict, timestamp_sort_key

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

USER_LIST_FIELDS = (
    "email",
    "displayName",
    "username",
    "role",
    "favoriteGame",
    "createdAt",
    "lastLogin",
)


class AdminService:
    """Service class for admin-related operations."""

    @staticmethod
    def _count(query: Any) -> int:
        return int(query.count().get()[0][0].value)

    @staticmethod
    def get_admin_stats(db: Client) -> dict[str, int]:
        """Fetch dashboard counters using count aggregations."""
        return {
            "total_users": AdminService._count(db.collection(USERS_COLLECTION)),
            "active_tournaments": AdminService._count(
                db.collection(TOURNAMENTS_COLLECTION).where(
                    filter=firestore.FieldFilter("status", "!=", TOURNAMENT_COMPLETED)
                )
            ),
            "total_games": AdminService._count(db.collection(GAMES_COLLECTION)),
            "pending_deposits": AdminService._count(
                db.collection(TRANSACTIONS_COLLECTION).where(
                    filter=firestore.FieldFilter("status", "==", TXN_PENDING)
                )
            ),
        }

    @staticmethod
    def list_users(db: Client, search: str | None = None) -> list[dict[str, Any]]:
        """List users, newest first, filtered on email or display name."""
        needle = (search or "").strip().lower()
        users = []
        for doc in db.collection(USERS_COLLECTION).stream():
            data = doc.to_dict() or {}
            haystack = f"{data.get('email') or ''} {data.get('displayName') or ''}"
            if needle and needle not in haystack.lower():
                continue
            user = {key: data.get(key) for key in USER_LIST_FIELDS}
            user["uid"] = doc.id
            user["walletBalance"] = parse_amount(data.get("walletBalance"))
            users.append(user)

        users.sort(key=lambda u: timestamp_sort_key(u.get("createdAt")), reverse=True)
        return users

    @staticmethod
    def toggle_role(db: Client, user_id: str, acting_uid: str) -> str:
        """Switch a user between the user and admin roles. Returns the new role."""
        if user_id == acting_uid:
            raise PermissionDeniedError("You cannot change your own role.")

        user_ref = db.collection(USERS_COLLECTION).document(user_id)
        doc = user_ref.get()
        if not doc.exists:
            raise NotFoundError("User profile not found!")

        current = (doc.to_dict() or {}).get("role")
        new_role = ROLE_USER if current == ROLE_ADMIN else ROLE_ADMIN
        user_ref.update({"role": new_role})
        logging.info(f"Admin {acting_uid} set role of {user_id} to {new_role}")
        return new_role

    @staticmethod
    def delete_user(db: Client, user_id: str, acting_uid: str) -> None:
        """Delete a user from Firestore and Firebase Auth."""
        if user_id == acting_uid:
            raise PermissionDeniedError("You cannot delete your own account.")

        user_ref = db.collection(USERS_COLLECTION).document(user_id)
        if not user_ref.get().exists:
            raise NotFoundError("User profile not found!")
        user_ref.delete()
        try:
            auth.delete_user(user_id)
        except auth.UserNotFoundError:
            logging.warning(f"User {user_id} had no Auth record to delete")

    @staticmethod
    def get_user_detail(db: Client, user_id: str) -> dict[str, Any]:
        """Fetch a user document for the admin console."""
        doc = db.collection(USERS_COLLECTION).document(user_id).get()
        if not doc.exists:
            raise NotFoundError("User profile not found!")
        data = snapshot_to_dict(doc)
        data["uid"] = data.pop("id")
        data["walletBalance"] = parse_amount(data.get("walletBalance"))
        return data
