"""Service layer for in-app notifications."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from arenaclash.core.constants import NOTIFICATIONS_COLLECTION, NOTIFICATIONS_LIMIT
from arenaclash.errors import NotFoundError, PermissionDeniedError
from arenaclash.utils import snapshot_to_dict

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.transaction import Transaction


class NotificationService:
    """Creates and reads per-user notifications."""

    @staticmethod
    def _payload(user_id: str, title: str, message: str) -> dict[str, Any]:
        return {
            "userId": user_id,
            "title": title,
            "message": message,
            "read": False,
            "createdAt": firestore.SERVER_TIMESTAMP,
        }

    @staticmethod
    def create(db: Client, user_id: str, title: str, message: str) -> str:
        """Create a notification and return its ID."""
        _, ref = db.collection(NOTIFICATIONS_COLLECTION).add(
            NotificationService._payload(user_id, title, message)
        )
        return str(ref.id)

    @staticmethod
    def create_in_transaction(
        transaction: Transaction, db: Client, user_id: str, title: str, message: str
    ) -> None:
        """Queue a notification write on an open transaction."""
        ref = db.collection(NOTIFICATIONS_COLLECTION).document()
        transaction.set(ref, NotificationService._payload(user_id, title, message))

    @staticmethod
    def list_for_user(
        db: Client, user_id: str, limit: int = NOTIFICATIONS_LIMIT
    ) -> tuple[list[dict[str, Any]], int]:
        """Return the latest notifications and how many of them are unread."""
        query = (
            db.collection(NOTIFICATIONS_COLLECTION)
            .where(filter=firestore.FieldFilter("userId", "==", user_id))
            .order_by("createdAt", direction=firestore.Query.DESCENDING)
            .limit(limit)
        )
        notifications = [snapshot_to_dict(doc) for doc in query.stream()]
        unread = sum(1 for n in notifications if not n.get("read"))
        return notifications, unread

    @staticmethod
    def mark_read(db: Client, user_id: str, notification_id: str) -> None:
        """Mark one of the user's notifications as read."""
        ref = db.collection(NOTIFICATIONS_COLLECTION).document(notification_id)
        doc = cast(Any, ref.get())
        if not doc.exists:
            raise NotFoundError("Notification not found.")
        if (doc.to_dict() or {}).get("userId") != user_id:
            raise PermissionDeniedError()
        ref.update({"read": True})

    @staticmethod
    def mark_all_read(db: Client, user_id: str) -> int:
        """Mark every unread notification of the user as read."""
        query = (
            db.collection(NOTIFICATIONS_COLLECTION)
            .where(filter=firestore.FieldFilter("userId", "==", user_id))
            .where(filter=firestore.FieldFilter("read", "==", False))
        )
        batch = db.batch()
        count = 0
        for doc in query.stream():
            batch.update(doc.reference, {"read": True})
            count += 1
        if count:
            batch.commit()
        return count
