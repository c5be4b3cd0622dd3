"""Fire-and-forget notification records."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, TypedDict

from firebase_admin import firestore

from rushx.core.constants import NOTIFICATIONS_COLLECTION, NOTIFY_INFO

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


class Notification(TypedDict, total=False):
    """A notification document in Firestore."""

    user_id: str
    title: str
    message: str
    type: str
    related_tournament_id: Optional[str]
    related_team_id: Optional[str]
    read: bool
    created_at: Any


class NotificationService:
    """Writes notifications for the delivery layer to pick up."""

    @staticmethod
    def notify(  # noqa: PLR0913
        db: Client,
        user_id: str,
        title: str,
        message: str,
        type: str = NOTIFY_INFO,
        related_tournament_id: str | None = None,
        related_team_id: str | None = None,
    ) -> bool:
        """Record a notification; failures are logged and never raised."""
        payload: Notification = {
            "user_id": user_id,
            "title": title,
            "message": message,
            "type": type,
            "related_tournament_id": related_tournament_id,
            "related_team_id": related_team_id,
            "read": False,
            "created_at": firestore.SERVER_TIMESTAMP,
        }
        try:
            db.collection(NOTIFICATIONS_COLLECTION).add(payload)
            return True
        except Exception as e:
            logging.error(f"Notification '{title}' for user {user_id} failed: {e}")
            return False
