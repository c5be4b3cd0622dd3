"""Team-related utility functions."""

from __future__ import annotations

import datetime
from typing import Any

from rushx.core.constants import ROLE_OWNER, TEAM_TAG_MAX_LENGTH

_LATEST = datetime.datetime.max.replace(tzinfo=datetime.timezone.utc)


def member_id(tournament_id: str, user_id: str) -> str:
    """Deterministic membership id; a user has one row per tournament."""
    return f"{tournament_id}_{user_id}"


def normalize_tag(tag: str | None) -> str:
    """Upper-case and trim a team tag to its maximum length."""
    return (tag or "").strip().upper()[:TEAM_TAG_MAX_LENGTH]


def join_order_key(member: dict[str, Any]) -> tuple[Any, str]:
    """Sort key: earliest joined first, ties broken by membership id."""
    return (member.get("joined_at") or _LATEST, member.get("id", ""))


def roster_order_key(member: dict[str, Any]) -> tuple[bool, Any, str]:
    """Sort key for display: owner first, then join order."""
    return (member.get("role") != ROLE_OWNER, *join_order_key(member))


def invite_code(team: dict[str, Any]) -> str:
    """Short shareable code, e.g. ``RXZ-1a2b3c4d``."""
    return f"{team.get('team_tag', '')}-{str(team.get('tournament_id', ''))[:8]}"
