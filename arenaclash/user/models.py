"""Data models for the user blueprint."""

from __future__ import annotations

from typing import Any

from arenaclash.core.types import FirestoreDocument


class User(FirestoreDocument, total=False):
    """A user document in Firestore."""

    uid: str
    email: str
    displayName: str
    username: str
    role: str
    walletBalance: float
    favoriteGame: str
    hasCompletedOnboarding: bool
    mobile: str
    lastLogin: Any
