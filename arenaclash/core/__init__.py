"""Core module for the Arena Clash application."""

from .types import FirestoreDocument

__all__ = ["FirestoreDocument"]
