"""Routes for the referral blueprint."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from firebase_admin import firestore
from flask import g, jsonify, request

from rushx.auth.decorators import login_required

from . import bp
from .services import ReferralService
from .utils import referral_link


@bp.route("/me", methods=["GET"])
@login_required
def my_referral() -> Any:
    """Show the current user's code, its stats and usage history."""
    db = firestore.client()
    record = ReferralService.ensure_code_for_user(db, g.user["uid"])
    code = record["code"]
    stats = ReferralService.aggregate_stats(db, code)
    usage = ReferralService.list_usage(db, code)

    return jsonify(
        {
            "status": "success",
            "code": code,
            "discount_percentage": record.get("discount_percentage"),
            "commission_percentage": record.get("commission_percentage"),
            "link": referral_link(request.host_url, code),
            "stats": asdict(stats),
            "usage": [
                {
                    "id": u.get("id"),
                    "tournament_id": u.get("tournament_id"),
                    "discount_applied": u.get("discount_applied"),
                    "payment_status": u.get("payment_status"),
                    "user": u.get("user"),
                }
                for u in usage
            ],
        }
    )


@bp.route("/validate/<string:code>", methods=["GET"])
@login_required
def validate_code(code: str) -> Any:
    """Tell the enrollment form whether a code would currently apply."""
    db = firestore.client()
    result = ReferralService.validate(db, code)
    payload: dict[str, Any] = {"status": "success", "valid": result.valid}
    if result.valid and result.record:
        payload["discount_percentage"] = result.record.get("discount_percentage")
    return jsonify(payload)
