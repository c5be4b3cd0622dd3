"""Data models for the teams feature."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, TypedDict

from rushx.core.constants import (
    PRIVACY_CLOSED,
    PRIVACY_OPEN,
    TEAM_DESCRIPTION_MAX_LENGTH,
    TEAM_NAME_MAX_LENGTH,
    TEAM_PRIVACY_CHOICES,
)
from rushx.core.types import FirestoreDocument, UserProfile
from rushx.errors import ValidationError

from .utils import normalize_tag


class Team(FirestoreDocument, total=False):
    """A team document, scoped to one tournament."""

    tournament_id: str
    team_name: str
    team_tag: str
    team_description: str
    team_logo: Optional[str]
    privacy: str  # open/closed
    owner_id: Optional[str]


class TeamMember(TypedDict, total=False):
    """A membership row; its id is derived from tournament and user."""

    id: str
    team_id: str
    tournament_id: str
    user_id: str
    role: str  # owner/member
    status: str  # pending/accepted
    requested_at: Any
    joined_at: Any

    # UI and calculated fields
    user: UserProfile


@dataclass
class TeamSubmission:
    """Editable team fields as entered by the owner."""

    name: str
    tag: str
    description: str = ""
    logo: Optional[str] = None
    privacy: str = PRIVACY_OPEN

    def validate(self) -> None:
        """Reject names, tags and descriptions outside the allowed shape."""
        name = (self.name or "").strip()
        if not name:
            raise ValidationError("Team name is required.")
        if len(name) > TEAM_NAME_MAX_LENGTH:
            raise ValidationError(
                f"Team name must be at most {TEAM_NAME_MAX_LENGTH} characters."
            )
        if not normalize_tag(self.tag):
            raise ValidationError("Team tag is required.")
        if len((self.description or "").strip()) > TEAM_DESCRIPTION_MAX_LENGTH:
            raise ValidationError(
                f"Description must be at most {TEAM_DESCRIPTION_MAX_LENGTH} characters."
            )
        if (self.privacy or "").strip().lower() not in TEAM_PRIVACY_CHOICES:
            raise ValidationError("Privacy must be 'open' or 'closed'.")

    def to_document(self) -> dict[str, Any]:
        """Validated, normalized fields ready to store."""
        self.validate()
        return {
            "team_name": self.name.strip(),
            "team_tag": normalize_tag(self.tag),
            "team_description": (self.description or "").strip(),
            "team_logo": self.logo or None,
            "privacy": self.privacy.strip().lower(),
        }


@dataclass
class TeamDetails:
    """A team together with its accepted members, owner first."""

    team: Team
    capacity: int
    members: list[TeamMember] = field(default_factory=list)

    @property
    def member_count(self) -> int:
        return len(self.members)

    @property
    def is_full(self) -> bool:
        return self.member_count >= self.capacity

    @property
    def status(self) -> str:
        """Badge shown on team cards: full, closed or open."""
        if self.is_full:
            return "full"
        if self.team.get("privacy") == PRIVACY_CLOSED:
            return PRIVACY_CLOSED
        return PRIVACY_OPEN

    @property
    def owner(self) -> Optional[TeamMember]:
        owner_id = self.team.get("owner_id")
        return next((m for m in self.members if m.get("user_id") == owner_id), None)
