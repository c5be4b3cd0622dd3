"""Data models for the referral ledger."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, TypedDict

from rushx.core.types import FirestoreDocument


class ReferralCode(FirestoreDocument, total=False):
    """A referral code document, keyed by the owning user's id."""

    user_id: str
    code: str
    discount_percentage: float
    commission_percentage: float
    is_active: bool
    max_uses: int
    current_uses: int


class ReferralUsage(TypedDict, total=False):
    """One application of a code to an enrollment."""

    id: str
    referral_code: str
    referrer_id: str
    used_by: str
    tournament_id: str
    enrollment_id: str
    discount_applied: float
    tournament_fee: float
    commission_percentage: float
    used_at: Any

    # UI and calculated fields
    payment_status: Optional[str]
    user: dict[str, Any]


class ReferralEarning(TypedDict, total=False):
    """Commission owed to a referrer for one usage."""

    id: str
    usage_id: str
    referrer_id: str
    enrollment_id: str
    amount: float
    status: str  # pending/settled
    created_at: Any


@dataclass
class ReferralValidation:
    """Outcome of looking up a code."""

    valid: bool
    record: Optional[ReferralCode] = None


@dataclass
class ReferralStats:
    """Usage and earnings split by the referred enrollments' payment status."""

    total_uses: int = 0
    successful_uses: int = 0
    pending_uses: int = 0
    total_earnings: float = 0.0
    pending_earnings: float = 0.0
