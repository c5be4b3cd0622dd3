"""Data models for tournament enrollment."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from rushx.core.types import FirestoreDocument
from rushx.errors import ValidationError

REQUIRED_FIELDS = {
    "in_game_nickname": "In-game nickname",
    "game_uid": "Game UID",
    "mobile_number": "Mobile number",
    "address": "Address",
    "transaction_id": "Transaction ID",
}


class Enrollment(FirestoreDocument, total=False):
    """A tournament enrollment document in Firestore."""

    tournament_id: str
    user_id: str
    # In-game identity; locked once submitted
    in_game_nickname: str
    game_uid: str
    mobile_number: str
    address: str
    transaction_id: str
    payment_status: str  # pending/completed/rejected
    referral_code: Optional[str]
    discount_amount: float
    final_amount: float
    team_id: Optional[str]
    # Filled in by the payment reviewer
    room_id: Optional[str]
    room_password: Optional[str]


@dataclass
class EnrollmentSubmission:
    """Dataclass for the registration form plus payment reference."""

    in_game_nickname: str
    game_uid: str
    mobile_number: str
    address: str
    transaction_id: str
    referral_code: Optional[str] = None

    def validate(self) -> None:
        """Reject missing or blank required fields."""
        missing = [
            label
            for field, label in REQUIRED_FIELDS.items()
            if not (getattr(self, field) or "").strip()
        ]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}.")


@dataclass
class Pricing:
    """Entry fee after the optional referral discount."""

    fee: float
    discount_amount: float
    final_amount: float
