"""Data models for tournaments."""

from __future__ import annotations

from enum import Enum
from typing import Any

from rushx.core.types import FirestoreDocument
from rushx.errors import ValidationError


class MatchType(str, Enum):
    """Tournament format, which fixes how many players form a team."""

    SOLO = "solo"
    DUO = "duo"
    SQUAD = "squad"

    @property
    def capacity(self) -> int:
        """Maximum number of accepted members in one team."""
        return _CAPACITY[self]

    @property
    def allows_teams(self) -> bool:
        """Solo tournaments have no team concept."""
        return self.capacity > 1

    @classmethod
    def parse(cls, value: Any) -> MatchType:
        """Coerce a stored match type into the enum."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise ValidationError(f"Unknown match type: {value!r}.") from e


_CAPACITY = {MatchType.SOLO: 1, MatchType.DUO: 2, MatchType.SQUAD: 4}


def team_capacity(match_type: Any) -> int:
    """Return the team capacity for a tournament match type."""
    return MatchType.parse(match_type).capacity


class Tournament(FirestoreDocument, total=False):
    """A tournament document in Firestore."""

    title: str
    slug: str
    game_name: str
    match_type: str
    joining_fee: float
    max_participants: int
    current_participants: int
    status: str  # upcoming/ongoing/completed
