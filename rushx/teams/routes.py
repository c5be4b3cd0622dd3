"""Routes for the teams blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import current_app, g, jsonify, request

from rushx.auth.decorators import login_required
from rushx.enrollment.services import EnrollmentService
from rushx.errors import NotFoundError

from . import bp
from .forms import TeamForm
from .models import Team, TeamDetails, TeamMember, TeamSubmission
from .services import TeamService
from .utils import invite_code

TEAM_FIELDS = (
    "id",
    "tournament_id",
    "team_name",
    "team_tag",
    "team_description",
    "team_logo",
    "privacy",
    "owner_id",
)
MEMBER_FIELDS = ("id", "user_id", "role", "status", "user")


def _serialize_team(team: Team) -> dict[str, Any]:
    return {key: team.get(key) for key in TEAM_FIELDS}


def _serialize_member(member: TeamMember) -> dict[str, Any]:
    return {key: member.get(key) for key in MEMBER_FIELDS}


def _serialize_details(details: TeamDetails) -> dict[str, Any]:
    data = _serialize_team(details.team)
    data.update(
        {
            "members": [_serialize_member(m) for m in details.members],
            "member_count": details.member_count,
            "capacity": details.capacity,
            "status": details.status,
            "invite_code": invite_code(details.team),
        }
    )
    return data


def _submission_from(form: TeamForm) -> TeamSubmission:
    return TeamSubmission(
        name=form.team_name.data or "",
        tag=form.team_tag.data or "",
        description=form.team_description.data or "",
        logo=form.team_logo.data or None,
        privacy=form.privacy.data or "",
    )


def _check_tournament(db: Any, tournament_id: str, team_id: str) -> Team:
    """Load a team, treating one from another tournament as missing."""
    team = TeamService.get_team(db, team_id)
    if team.get("tournament_id") != tournament_id:
        raise NotFoundError("Team not found.")
    return team


@bp.route("", methods=["GET"])
@login_required
def list_teams(tournament_id: str) -> Any:
    """List teams of a tournament, optionally filtered."""
    db = firestore.client()
    team_filter = request.args.get("filter", "all")
    teams = TeamService.list_teams(db, tournament_id, team_filter)
    return jsonify(
        {"status": "success", "teams": [_serialize_details(t) for t in teams]}
    )


@bp.route("", methods=["POST"])
@login_required
def create_team(tournament_id: str) -> Any:
    """Create a team owned by the current user."""
    form = TeamForm()
    if not form.validate_on_submit():
        return jsonify({"status": "error", "errors": form.errors}), 400

    db = firestore.client()
    user_id = g.user["uid"]
    enrollment = EnrollmentService.get_enrollment(db, tournament_id, user_id)
    team = TeamService.create_team(
        db, tournament_id, user_id, enrollment, _submission_from(form)
    )
    current_app.logger.info(f"Team {team['id']} created by {user_id}.")
    details = TeamService.get_team_details(db, team["id"])
    return jsonify({"status": "success", "team": _serialize_details(details)}), 201


@bp.route("/mine", methods=["GET"])
@login_required
def my_team(tournament_id: str) -> Any:
    """Show the team the current user belongs to or asked to join."""
    db = firestore.client()
    user_id = g.user["uid"]
    details = TeamService.get_user_team(db, tournament_id, user_id)
    if details is None:
        return jsonify({"status": "success", "team": None, "membership": None})
    membership = TeamService.get_membership(db, tournament_id, user_id)
    return jsonify(
        {
            "status": "success",
            "team": _serialize_details(details),
            "membership": _serialize_member(membership) if membership else None,
        }
    )


@bp.route("/<string:team_id>", methods=["GET"])
@login_required
def view_team(tournament_id: str, team_id: str) -> Any:
    """Display a single team with its roster."""
    db = firestore.client()
    _check_tournament(db, tournament_id, team_id)
    details = TeamService.get_team_details(db, team_id)
    payload: dict[str, Any] = {
        "status": "success",
        "team": _serialize_details(details),
    }
    if details.team.get("owner_id") == g.user["uid"]:
        pending = TeamService.get_pending_requests(db, team_id, g.user["uid"])
        payload["pending_requests"] = [_serialize_member(m) for m in pending]
    return jsonify(payload)


@bp.route("/<string:team_id>/edit", methods=["POST"])
@login_required
def edit_team(tournament_id: str, team_id: str) -> Any:
    """Edit the team's details; owner only."""
    form = TeamForm()
    if not form.validate_on_submit():
        return jsonify({"status": "error", "errors": form.errors}), 400

    db = firestore.client()
    _check_tournament(db, tournament_id, team_id)
    team = TeamService.update_team(db, team_id, g.user["uid"], _submission_from(form))
    return jsonify({"status": "success", "team": _serialize_team(team)})


@bp.route("/<string:team_id>/join", methods=["POST"])
@login_required
def join_team(tournament_id: str, team_id: str) -> Any:
    """Join an open team or request to join a closed one."""
    db = firestore.client()
    user_id = g.user["uid"]
    _check_tournament(db, tournament_id, team_id)
    enrollment = EnrollmentService.get_enrollment(db, tournament_id, user_id)
    member = TeamService.join_team(db, team_id, user_id, enrollment)
    current_app.logger.info(
        f"User {user_id} joined team {team_id} with status {member['status']}."
    )
    return jsonify({"status": "success", "membership": _serialize_member(member)})


@bp.route("/<string:team_id>/leave", methods=["POST"])
@login_required
def leave_team(tournament_id: str, team_id: str) -> Any:
    """Leave a team."""
    db = firestore.client()
    _check_tournament(db, tournament_id, team_id)
    TeamService.leave_team(db, team_id, g.user["uid"])
    return jsonify({"status": "success"})


@bp.route("/<string:team_id>/requests", methods=["GET"])
@login_required
def pending_requests(tournament_id: str, team_id: str) -> Any:
    """List join requests awaiting the owner's decision."""
    db = firestore.client()
    _check_tournament(db, tournament_id, team_id)
    pending = TeamService.get_pending_requests(db, team_id, g.user["uid"])
    return jsonify(
        {"status": "success", "requests": [_serialize_member(m) for m in pending]}
    )


@bp.route("/<string:team_id>/requests/<string:request_id>/accept", methods=["POST"])
@login_required
def accept_request(tournament_id: str, team_id: str, request_id: str) -> Any:
    """Accept a join request."""
    db = firestore.client()
    _check_tournament(db, tournament_id, team_id)
    member = TeamService.accept_request(db, team_id, request_id, g.user["uid"])
    return jsonify({"status": "success", "membership": _serialize_member(member)})


@bp.route("/<string:team_id>/requests/<string:request_id>/reject", methods=["POST"])
@login_required
def reject_request(tournament_id: str, team_id: str, request_id: str) -> Any:
    """Reject a join request."""
    db = firestore.client()
    _check_tournament(db, tournament_id, team_id)
    TeamService.reject_request(db, team_id, request_id, g.user["uid"])
    return jsonify({"status": "success"})


@bp.route("/<string:team_id>/members/<string:member_id>/remove", methods=["POST"])
@login_required
def remove_member(tournament_id: str, team_id: str, member_id: str) -> Any:
    """Remove a member from the team."""
    db = firestore.client()
    _check_tournament(db, tournament_id, team_id)
    TeamService.remove_member(db, team_id, member_id, g.user["uid"])
    return jsonify({"status": "success"})
