"""Core module for the rushx application."""

from .types import FirestoreDocument, UserProfile, public_profile

__all__ = ["FirestoreDocument", "UserProfile", "public_profile"]
