"""Routes for the enrollment blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import current_app, g, jsonify

from rushx.auth.decorators import login_required

from . import bp
from .forms import EnrollmentForm
from .models import Enrollment, EnrollmentSubmission
from .services import EnrollmentService

PUBLIC_FIELDS = (
    "id",
    "tournament_id",
    "user_id",
    "in_game_nickname",
    "game_uid",
    "payment_status",
    "referral_code",
    "discount_amount",
    "final_amount",
    "team_id",
    "room_id",
    "room_password",
)


def _serialize(enrollment: Enrollment) -> dict[str, Any]:
    return {key: enrollment.get(key) for key in PUBLIC_FIELDS}


@bp.route("/<string:tournament_id>/enroll", methods=["POST"])
@login_required
def enroll(tournament_id: str) -> Any:
    """Submit a registration with its payment reference."""
    form = EnrollmentForm()
    if not form.validate_on_submit():
        return jsonify({"status": "error", "errors": form.errors}), 400

    submission = EnrollmentSubmission(
        in_game_nickname=form.in_game_nickname.data or "",
        game_uid=form.game_uid.data or "",
        mobile_number=form.mobile_number.data or "",
        address=form.address.data or "",
        transaction_id=form.transaction_id.data or "",
        referral_code=form.referral_code.data or None,
    )
    db = firestore.client()
    enrollment = EnrollmentService.submit_enrollment(
        db, tournament_id, g.user["uid"], submission
    )
    current_app.logger.info(
        f"User {g.user['uid']} enrolled in tournament {tournament_id}."
    )
    return jsonify({"status": "success", "enrollment": _serialize(enrollment)}), 201


@bp.route("/<string:tournament_id>/enrollment", methods=["GET"])
@login_required
def view_enrollment(tournament_id: str) -> Any:
    """Show the current user's enrollment and its review state."""
    db = firestore.client()
    enrollment = EnrollmentService.get_enrollment(db, tournament_id, g.user["uid"])
    if enrollment is None:
        return (
            jsonify({"status": "error", "message": "You are not enrolled."}),
            404,
        )
    return jsonify({"status": "success", "enrollment": _serialize(enrollment)})
