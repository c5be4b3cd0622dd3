"""Core data types shared by the rushx blueprints."""

from __future__ import annotations

from typing import Any, TypedDict


class _FirestoreDocumentBase(TypedDict):
    id: str
    created_at: Any


class FirestoreDocument(_FirestoreDocumentBase, total=False):
    """Generic Firestore document structure."""

    updated_at: Any


class UserProfile(TypedDict, total=False):
    """Public subset of a user document shown next to teams and referrals."""

    id: str
    username: str
    gamer_tag: str
    avatar_url: str


def public_profile(user_id: str, data: dict[str, Any] | None) -> UserProfile:
    """Reduce a raw user document to the fields other players may see."""
    data = data or {}
    return {
        "id": user_id,
        "username": data.get("username", "Unknown"),
        "gamer_tag": data.get("gamer_tag", ""),
        "avatar_url": data.get("avatar_url", ""),
    }
