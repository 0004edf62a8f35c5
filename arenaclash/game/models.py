"""Data models for the game blueprint."""

from __future__ import annotations

from typing import TypedDict

from arenaclash.core.types import FirestoreDocument


class SocialLinks(TypedDict, total=False):
    """Community links shown on a game page."""

    discord: str
    website: str


class DefaultSettings(TypedDict, total=False):
    """Fee defaults applied to new tournaments of a game."""

    minEntryFee: float
    maxEntryFee: float
    perKillBonus: float


class Game(FirestoreDocument, total=False):
    """A game document in Firestore."""

    name: str
    coverImage: str
    description: str
    rules: str
    isActive: bool
    gamemodes: list[str]
    bannerImages: list[str]
    socialLinks: SocialLinks
    defaultSettings: DefaultSettings
