"""Service layer for tournament enrollment."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from rushx.core.constants import (
    ENROLLMENTS_COLLECTION,
    NOTIFY_INFO,
    NOTIFY_WARNING,
    PAYMENT_PENDING,
    TOURNAMENT_UPCOMING,
)
from rushx.errors import (
    CapacityExceededError,
    DuplicateResourceError,
    TournamentNotOpenError,
)
from rushx.notifications.services import NotificationService
from rushx.referral.models import ReferralCode
from rushx.referral.services import ReferralService
from rushx.referral.utils import percentage_of
from rushx.tournament.models import Tournament
from rushx.tournament.services import TournamentService

from .models import Enrollment, EnrollmentSubmission, Pricing

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client


def enrollment_id(tournament_id: str, user_id: str) -> str:
    """Deterministic document id; one enrollment per user and tournament."""
    return f"{tournament_id}_{user_id}"


class EnrollmentService:
    """Registers users into tournaments and wires up referral discounts."""

    @staticmethod
    def calculate_pricing(fee: float, discount_percentage: float = 0) -> Pricing:
        """Apply a percentage discount to an entry fee."""
        fee = float(fee or 0)
        discount = percentage_of(fee, discount_percentage) if discount_percentage else 0.0
        return Pricing(
            fee=fee, discount_amount=discount, final_amount=round(fee - discount, 2)
        )

    @staticmethod
    def get_enrollment(
        db: Client, tournament_id: str, user_id: str
    ) -> Enrollment | None:
        """Fetch the user's enrollment for a tournament, if any."""
        doc_id = enrollment_id(tournament_id, user_id)
        doc = cast(
            "DocumentSnapshot",
            db.collection(ENROLLMENTS_COLLECTION).document(doc_id).get(),
        )
        if not doc.exists:
            return None
        data = cast(Enrollment, doc.to_dict() or {})
        data["id"] = doc.id
        return data

    @staticmethod
    def _check_open(db: Client, tournament: Tournament, user_id: str) -> None:
        """Preconditions that must hold before anything is written."""
        if tournament.get("status") != TOURNAMENT_UPCOMING:
            raise TournamentNotOpenError()
        if EnrollmentService.get_enrollment(db, tournament["id"], user_id):
            raise DuplicateResourceError("You are already enrolled in this tournament.")
        if TournamentService.is_full(tournament):
            raise CapacityExceededError("Tournament is full! Registration closed.")

    @staticmethod
    def _resolve_referral(
        db: Client, code: str | None, user_id: str
    ) -> ReferralCode | None:
        """Re-validate a referral code; anything unusable counts as absent."""
        if not code:
            return None
        result = ReferralService.validate(db, code)
        if not result.valid or result.record is None:
            logging.info(f"Ignoring invalid referral code {code!r} from user {user_id}.")
            return None
        if result.record.get("user_id") == user_id:
            logging.info(f"Ignoring self-referral by user {user_id}.")
            return None
        return result.record

    @staticmethod
    def submit_enrollment(
        db: Client,
        tournament_id: str,
        user_id: str,
        submission: EnrollmentSubmission,
    ) -> Enrollment:
        """Register a user with a pending payment and apply any referral."""
        submission.validate()

        tournament = TournamentService.get_tournament(db, tournament_id)
        EnrollmentService._check_open(db, tournament, user_id)

        referral = EnrollmentService._resolve_referral(
            db, submission.referral_code, user_id
        )
        discount_percentage = referral.get("discount_percentage", 0) if referral else 0
        pricing = EnrollmentService.calculate_pricing(
            tournament.get("joining_fee") or 0, discount_percentage
        )

        doc_id = enrollment_id(tournament_id, user_id)
        enrollment_data: dict[str, Any] = {
            "tournament_id": tournament_id,
            "user_id": user_id,
            "in_game_nickname": submission.in_game_nickname.strip(),
            "game_uid": submission.game_uid.strip(),
            "mobile_number": submission.mobile_number.strip(),
            "address": submission.address.strip(),
            "transaction_id": submission.transaction_id.strip(),
            "payment_status": PAYMENT_PENDING,
            "referral_code": referral["code"] if referral else None,
            "discount_amount": pricing.discount_amount,
            "final_amount": pricing.final_amount,
            "team_id": None,
            "room_id": None,
            "room_password": None,
            "created_at": firestore.SERVER_TIMESTAMP,
        }
        # Primary write; a failure here propagates to the caller.
        db.collection(ENROLLMENTS_COLLECTION).document(doc_id).set(enrollment_data)

        if referral:
            try:
                ReferralService.record_usage(
                    db,
                    referral["code"],
                    user_id,
                    tournament_id,
                    doc_id,
                    pricing.discount_amount,
                    pricing.fee,
                )
            except Exception as e:
                logging.error(
                    f"Referral bookkeeping failed for enrollment {doc_id} "
                    f"(code {referral['code']}): {e}"
                )

        try:
            TournamentService.increment_participants(db, tournament_id)
        except Exception as e:
            logging.error(
                f"Participant counter update failed for tournament {tournament_id} "
                f"after enrollment {doc_id}: {e}"
            )

        EnrollmentService._notify_submitted(db, tournament, user_id, submission)

        enrollment = cast(Enrollment, enrollment_data)
        enrollment["id"] = doc_id
        return enrollment

    @staticmethod
    def _notify_submitted(
        db: Client,
        tournament: Tournament,
        user_id: str,
        submission: EnrollmentSubmission,
    ) -> None:
        """Queue the review request and the user's confirmation."""
        title = tournament.get("title", "the tournament")
        NotificationService.notify(
            db,
            user_id,
            "Payment Verification Required",
            f"New enrollment for {title}. Transaction ID: {submission.transaction_id}",
            NOTIFY_WARNING,
            related_tournament_id=tournament["id"],
        )
        NotificationService.notify(
            db,
            user_id,
            "Enrollment Submitted",
            f"Your enrollment for {title} is under review. We will verify your "
            "payment and assign Team ID soon.",
            NOTIFY_INFO,
            related_tournament_id=tournament["id"],
        )
