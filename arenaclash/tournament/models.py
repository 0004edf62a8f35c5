"""Data models for the tournament blueprint."""

from __future__ import annotations

from typing import Any, TypedDict

from arenaclash.core.types import FirestoreDocument


class Participant(TypedDict, total=False):
    """A document in a tournament's participants sub-collection."""

    userId: str
    displayName: str
    email: str
    ingameName: str
    joinedAt: Any
    feePaid: float
    prize: float


class Tournament(FirestoreDocument, total=False):
    """A tournament document in Firestore."""

    game: str
    title: str
    map: str
    entryFee: float | str
    prizePool: float | str
    perKill: float
    date: str
    time: str
    maxPlayers: int
    currentPlayers: int
    participant_ids: list[str]
    roomId: str
    roomPassword: str
    status: str  # upcoming/live/completed
    type: str  # scrim/championship


class Registration(TypedDict, total=False):
    """A user's view of one tournament they joined."""

    tournamentId: str
    tournamentTitle: str
    game: str
    status: str
    prizePool: float | str
    date: str
    time: str
    ingameName: str
    joinedAt: Any
    feePaid: float
    roomId: str
    roomPassword: str
