"""Service layer for referral codes, usage and commission bookkeeping."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from rushx.core.constants import (
    EARNING_PENDING,
    ENROLLMENTS_COLLECTION,
    PAYMENT_COMPLETED,
    PAYMENT_PENDING,
    REFERRAL_CODE_MIN_LOOKUP_LENGTH,
    REFERRAL_CODES_COLLECTION,
    REFERRAL_COMMISSION_PERCENTAGE,
    REFERRAL_DISCOUNT_PERCENTAGE,
    REFERRAL_EARNINGS_COLLECTION,
    REFERRAL_MAX_USES,
    REFERRAL_USAGE_COLLECTION,
    USERS_COLLECTION,
)
from rushx.core.types import public_profile
from rushx.errors import NotFoundError, ReferralCodeCollisionError

from .models import (
    ReferralCode,
    ReferralEarning,
    ReferralStats,
    ReferralUsage,
    ReferralValidation,
)
from .utils import generate_code, normalize_code, percentage_of

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client


class ReferralService:
    """Issues codes, validates them and keeps the commission trail."""

    @staticmethod
    def _find_by_code(db: Client, code: str) -> DocumentSnapshot | None:
        """Return the snapshot holding ``code``, if any."""
        docs = list(
            db.collection(REFERRAL_CODES_COLLECTION)
            .where(filter=firestore.FieldFilter("code", "==", code))
            .limit(1)
            .stream()
        )
        return docs[0] if docs else None

    @staticmethod
    def _allocate_code(db: Client) -> str:
        """Generate a code that is not taken, regenerating at most once."""
        code = generate_code()
        if ReferralService._find_by_code(db, code) is None:
            return code

        logging.warning(f"Referral code {code} already taken, regenerating.")
        code = generate_code()
        if ReferralService._find_by_code(db, code) is None:
            return code

        logging.error(f"Referral code {code} collided on retry.")
        raise ReferralCodeCollisionError()

    @staticmethod
    def ensure_code_for_user(db: Client, user_id: str) -> ReferralCode:
        """Return the user's referral code, issuing one on first access."""
        code_ref = db.collection(REFERRAL_CODES_COLLECTION).document(user_id)
        doc = cast("DocumentSnapshot", code_ref.get())
        if doc.exists:
            existing = cast(ReferralCode, doc.to_dict() or {})
            existing["id"] = doc.id
            return existing

        payload: dict[str, Any] = {
            "user_id": user_id,
            "code": ReferralService._allocate_code(db),
            "discount_percentage": REFERRAL_DISCOUNT_PERCENTAGE,
            "commission_percentage": REFERRAL_COMMISSION_PERCENTAGE,
            "is_active": True,
            "max_uses": REFERRAL_MAX_USES,
            "current_uses": 0,
            "created_at": firestore.SERVER_TIMESTAMP,
        }
        code_ref.set(payload)
        logging.info(f"Issued referral code {payload['code']} to user {user_id}.")

        record = cast(ReferralCode, dict(payload))
        record["id"] = user_id
        return record

    @staticmethod
    def validate(db: Client, code: str | None) -> ReferralValidation:
        """Check that a code exists and is active."""
        normalized = normalize_code(code)
        if len(normalized) < REFERRAL_CODE_MIN_LOOKUP_LENGTH:
            return ReferralValidation(valid=False)

        doc = ReferralService._find_by_code(db, normalized)
        if doc is None:
            return ReferralValidation(valid=False)

        record = cast(ReferralCode, doc.to_dict() or {})
        record["id"] = doc.id
        if not record.get("is_active"):
            return ReferralValidation(valid=False, record=record)

        # max_uses is informational; the cap is never enforced.
        return ReferralValidation(valid=True, record=record)

    @staticmethod
    def record_usage(  # noqa: PLR0913
        db: Client,
        code: str,
        user_id: str,
        tournament_id: str,
        enrollment_id: str,
        discount_applied: float,
        tournament_fee: float,
    ) -> ReferralUsage:
        """Append a usage row plus its pending earning and bump the counter."""
        normalized = normalize_code(code)
        code_doc = ReferralService._find_by_code(db, normalized)
        if code_doc is None:
            raise NotFoundError("Referral code not found.")
        code_data = code_doc.to_dict() or {}
        commission_percentage = code_data.get(
            "commission_percentage", REFERRAL_COMMISSION_PERCENTAGE
        )

        usage: ReferralUsage = {
            "referral_code": normalized,
            "referrer_id": code_data.get("user_id", code_doc.id),
            "used_by": user_id,
            "tournament_id": tournament_id,
            "enrollment_id": enrollment_id,
            "discount_applied": discount_applied,
            "tournament_fee": tournament_fee,
            "commission_percentage": commission_percentage,
            "used_at": firestore.SERVER_TIMESTAMP,
        }
        _, usage_ref = db.collection(REFERRAL_USAGE_COLLECTION).add(dict(usage))
        usage["id"] = usage_ref.id

        earning: ReferralEarning = {
            "usage_id": usage_ref.id,
            "referrer_id": usage["referrer_id"],
            "enrollment_id": enrollment_id,
            "amount": percentage_of(tournament_fee, commission_percentage),
            "status": EARNING_PENDING,
            "created_at": firestore.SERVER_TIMESTAMP,
        }
        db.collection(REFERRAL_EARNINGS_COLLECTION).add(dict(earning))

        db.collection(REFERRAL_CODES_COLLECTION).document(code_doc.id).update(
            {"current_uses": firestore.Increment(1)}
        )
        return usage

    @staticmethod
    def _fetch_usages(db: Client, code: str) -> list[ReferralUsage]:
        """Load every usage row recorded against a code."""
        docs = (
            db.collection(REFERRAL_USAGE_COLLECTION)
            .where(filter=firestore.FieldFilter("referral_code", "==", code))
            .stream()
        )
        usages = []
        for doc in docs:
            data = cast(ReferralUsage, doc.to_dict() or {})
            data["id"] = doc.id
            usages.append(data)
        return usages

    @staticmethod
    def _payment_statuses(
        db: Client, usages: list[ReferralUsage]
    ) -> dict[str, str | None]:
        """Map enrollment id to its payment status for the given usages."""
        enrollment_ids = {u["enrollment_id"] for u in usages if u.get("enrollment_id")}
        if not enrollment_ids:
            return {}
        refs = [
            db.collection(ENROLLMENTS_COLLECTION).document(eid) for eid in enrollment_ids
        ]
        statuses: dict[str, str | None] = {}
        for snapshot in db.get_all(refs):
            shot = cast("DocumentSnapshot", snapshot)
            if shot.exists:
                statuses[shot.id] = (shot.to_dict() or {}).get("payment_status")
        return statuses

    @staticmethod
    def aggregate_stats(db: Client, code: str) -> ReferralStats:
        """Summarize uses and earnings of a code by payment outcome."""
        normalized = normalize_code(code)
        usages = ReferralService._fetch_usages(db, normalized)
        statuses = ReferralService._payment_statuses(db, usages)

        stats = ReferralStats(total_uses=len(usages))
        for usage in usages:
            commission = percentage_of(
                usage.get("tournament_fee") or 0,
                usage.get("commission_percentage", REFERRAL_COMMISSION_PERCENTAGE),
            )
            status = statuses.get(usage.get("enrollment_id", ""))
            if status == PAYMENT_COMPLETED:
                stats.successful_uses += 1
                stats.total_earnings += commission
            elif status == PAYMENT_PENDING:
                stats.pending_uses += 1
                stats.pending_earnings += commission

        stats.total_earnings = round(stats.total_earnings, 2)
        stats.pending_earnings = round(stats.pending_earnings, 2)
        return stats

    @staticmethod
    def list_usage(db: Client, code: str) -> list[ReferralUsage]:
        """Usage history of a code, newest first, with referred user and status."""
        normalized = normalize_code(code)
        usages = ReferralService._fetch_usages(db, normalized)
        if not usages:
            return []
        statuses = ReferralService._payment_statuses(db, usages)

        user_ids = {u["used_by"] for u in usages if u.get("used_by")}
        users_map: dict[str, Any] = {}
        if user_ids:
            user_refs = [db.collection(USERS_COLLECTION).document(uid) for uid in user_ids]
            for snapshot in db.get_all(user_refs):
                shot = cast("DocumentSnapshot", snapshot)
                if shot.exists:
                    users_map[shot.id] = shot.to_dict()

        for usage in usages:
            usage["payment_status"] = statuses.get(usage.get("enrollment_id", ""))
            used_by = usage.get("used_by", "")
            usage["user"] = dict(public_profile(used_by, users_map.get(used_by)))

        usages.sort(
            key=lambda u: (u.get("used_at") is not None, u.get("used_at")),
            reverse=True,
        )
        return usages
