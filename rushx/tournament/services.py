"""Service layer for tournament reads and the participant counter."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from firebase_admin import firestore

from rushx.core.constants import TOURNAMENTS_COLLECTION
from rushx.errors import NotFoundError

from .models import Tournament

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client


class TournamentService:
    """Read access to tournaments and the only writer of their counter."""

    @staticmethod
    def get_tournament(db: Client, tournament_id: str) -> Tournament:
        """Fetch a tournament or raise NotFoundError."""
        doc = cast(
            "DocumentSnapshot",
            db.collection(TOURNAMENTS_COLLECTION).document(tournament_id).get(),
        )
        if not doc.exists:
            raise NotFoundError("Tournament not found.")
        data = cast(Tournament, doc.to_dict() or {})
        data["id"] = doc.id
        return data

    @staticmethod
    def increment_participants(db: Client, tournament_id: str) -> None:
        """Atomically add one enrolled participant."""
        db.collection(TOURNAMENTS_COLLECTION).document(tournament_id).update(
            {"current_participants": firestore.Increment(1)}
        )

    @staticmethod
    def is_full(tournament: Tournament) -> bool:
        """Check the advisory capacity counter."""
        current = int(tournament.get("current_participants") or 0)
        maximum = int(tournament.get("max_participants") or 0)
        return current >= maximum
