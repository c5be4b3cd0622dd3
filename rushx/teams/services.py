"""Service layer for tournament team formation."""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from rushx.core.constants import (
    MEMBER_ACCEPTED,
    MEMBER_PENDING,
    NOTIFY_INFO,
    NOTIFY_SUCCESS,
    NOTIFY_WARNING,
    PAYMENT_COMPLETED,
    PRIVACY_CLOSED,
    PRIVACY_OPEN,
    ROLE_MEMBER,
    ROLE_OWNER,
    TEAM_FILTERS,
    TEAM_MEMBERS_COLLECTION,
    TEAMS_COLLECTION,
    USERS_COLLECTION,
)
from rushx.core.types import public_profile
from rushx.enrollment.models import Enrollment
from rushx.errors import (
    CapacityExceededError,
    DuplicateResourceError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from rushx.notifications.services import NotificationService
from rushx.tournament.models import MatchType
from rushx.tournament.services import TournamentService

from .models import Team, TeamDetails, TeamMember, TeamSubmission
from .utils import join_order_key, member_id, roster_order_key

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client


def _now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class TeamService:
    """Handles team creation, join requests and membership changes."""

    # --- Reads ---

    @staticmethod
    def get_team(db: Client, team_id: str) -> Team:
        """Fetch a team or raise NotFoundError."""
        doc = cast(
            "DocumentSnapshot", db.collection(TEAMS_COLLECTION).document(team_id).get()
        )
        if not doc.exists:
            raise NotFoundError("Team not found.")
        data = cast(Team, doc.to_dict() or {})
        data["id"] = doc.id
        return data

    @staticmethod
    def get_membership(
        db: Client, tournament_id: str, user_id: str
    ) -> TeamMember | None:
        """The user's membership row in a tournament, pending or accepted."""
        doc = cast(
            "DocumentSnapshot",
            db.collection(TEAM_MEMBERS_COLLECTION)
            .document(member_id(tournament_id, user_id))
            .get(),
        )
        if not doc.exists:
            return None
        data = cast(TeamMember, doc.to_dict() or {})
        data["id"] = doc.id
        return data

    @staticmethod
    def _get_member_row(db: Client, team_id: str, row_id: str) -> TeamMember | None:
        doc = cast(
            "DocumentSnapshot",
            db.collection(TEAM_MEMBERS_COLLECTION).document(row_id).get(),
        )
        if not doc.exists:
            return None
        data = cast(TeamMember, doc.to_dict() or {})
        if data.get("team_id") != team_id:
            return None
        data["id"] = doc.id
        return data

    @staticmethod
    def _query_members(
        db: Client, field: str, value: str, status: str | None = MEMBER_ACCEPTED
    ) -> list[TeamMember]:
        query = db.collection(TEAM_MEMBERS_COLLECTION).where(
            filter=firestore.FieldFilter(field, "==", value)
        )
        if status:
            query = query.where(filter=firestore.FieldFilter("status", "==", status))
        members = []
        for doc in query.stream():
            data = cast(TeamMember, doc.to_dict() or {})
            data["id"] = doc.id
            members.append(data)
        members.sort(key=join_order_key)
        return members

    @staticmethod
    def get_members(
        db: Client, team_id: str, status: str | None = MEMBER_ACCEPTED
    ) -> list[TeamMember]:
        """Membership rows of a team in join order."""
        return TeamService._query_members(db, "team_id", team_id, status)

    @staticmethod
    def _attach_profiles(db: Client, members: list[TeamMember]) -> None:
        user_ids = {m["user_id"] for m in members if m.get("user_id")}
        if not user_ids:
            return
        refs = [db.collection(USERS_COLLECTION).document(uid) for uid in user_ids]
        users_map: dict[str, Any] = {}
        for snapshot in db.get_all(refs):
            shot = cast("DocumentSnapshot", snapshot)
            if shot.exists:
                users_map[shot.id] = shot.to_dict()
        for member in members:
            uid = member.get("user_id", "")
            member["user"] = public_profile(uid, users_map.get(uid))

    @staticmethod
    def _capacity_for(db: Client, tournament_id: str) -> int:
        tournament = TournamentService.get_tournament(db, tournament_id)
        return MatchType.parse(tournament.get("match_type")).capacity

    @staticmethod
    def get_team_details(db: Client, team_id: str) -> TeamDetails:
        """A team with its accepted roster (owner first) and capacity."""
        team = TeamService.get_team(db, team_id)
        capacity = TeamService._capacity_for(db, team["tournament_id"])
        members = TeamService.get_members(db, team_id)
        members.sort(key=roster_order_key)
        TeamService._attach_profiles(db, members)
        return TeamDetails(team=team, capacity=capacity, members=members)

    @staticmethod
    def list_teams(
        db: Client, tournament_id: str, team_filter: str = "all"
    ) -> list[TeamDetails]:
        """Teams of a tournament, newest first, narrowed by a card filter."""
        if team_filter not in TEAM_FILTERS:
            raise ValidationError(f"Unknown team filter: {team_filter}")
        capacity = TeamService._capacity_for(db, tournament_id)

        teams: list[Team] = []
        docs = (
            db.collection(TEAMS_COLLECTION)
            .where(filter=firestore.FieldFilter("tournament_id", "==", tournament_id))
            .stream()
        )
        for doc in docs:
            data = cast(Team, doc.to_dict() or {})
            data["id"] = doc.id
            teams.append(data)
        teams.sort(
            key=lambda t: (t.get("created_at") is not None, t.get("created_at"), t["id"]),
            reverse=True,
        )

        roster: dict[str, list[TeamMember]] = {}
        accepted = TeamService._query_members(db, "tournament_id", tournament_id)
        TeamService._attach_profiles(db, accepted)
        for member in accepted:
            roster.setdefault(member.get("team_id", ""), []).append(member)

        results = []
        for team in teams:
            members = sorted(roster.get(team["id"], []), key=roster_order_key)
            details = TeamDetails(team=team, capacity=capacity, members=members)
            if team_filter in (PRIVACY_OPEN, PRIVACY_CLOSED):
                if team.get("privacy") != team_filter:
                    continue
            elif team_filter == "full" and not details.is_full:
                continue
            elif team_filter == "available" and details.is_full:
                continue
            results.append(details)
        return results

    @staticmethod
    def team_status(details: TeamDetails) -> str:
        """Return 'full', 'closed' or 'open' for a team card."""
        return details.status

    @staticmethod
    def get_user_team(
        db: Client, tournament_id: str, user_id: str
    ) -> TeamDetails | None:
        """The team the user belongs to or has asked to join, if any."""
        membership = TeamService.get_membership(db, tournament_id, user_id)
        if membership is None:
            return None
        return TeamService.get_team_details(db, membership["team_id"])

    @staticmethod
    def get_pending_requests(
        db: Client, team_id: str, acting_user_id: str
    ) -> list[TeamMember]:
        """Outstanding join requests; visible to the owner only."""
        team = TeamService.get_team(db, team_id)
        TeamService._require_owner(team, acting_user_id)
        pending = TeamService.get_members(db, team_id, MEMBER_PENDING)
        TeamService._attach_profiles(db, pending)
        return pending

    # --- Guards ---

    @staticmethod
    def _require_owner(team: Team, acting_user_id: str) -> None:
        if not team.get("owner_id") or team.get("owner_id") != acting_user_id:
            raise NotAuthorizedError("Only the team owner can do that.")

    @staticmethod
    def _require_verified_enrollment(
        enrollment: Enrollment | None, user_id: str, tournament_id: str
    ) -> Enrollment:
        if enrollment is None:
            raise NotFoundError("You need to be enrolled in this tournament first.")
        if enrollment.get("user_id") != user_id:
            raise NotAuthorizedError("That enrollment belongs to another user.")
        if enrollment.get("tournament_id") != tournament_id:
            raise ValidationError("That enrollment is for a different tournament.")
        if enrollment.get("payment_status") != PAYMENT_COMPLETED:
            raise NotAuthorizedError(
                "Your payment must be verified before you can create or join a team."
            )
        return enrollment

    @staticmethod
    def _require_no_membership(db: Client, tournament_id: str, user_id: str) -> None:
        if TeamService.get_membership(db, tournament_id, user_id) is not None:
            raise DuplicateResourceError("You are already in a team for this tournament.")

    # --- Writes ---

    @staticmethod
    def create_team(
        db: Client,
        tournament_id: str,
        user_id: str,
        owner_enrollment: Enrollment | None,
        submission: TeamSubmission,
    ) -> Team:
        """Create a team owned by the caller, who becomes its first member."""
        fields = submission.to_document()
        tournament = TournamentService.get_tournament(db, tournament_id)
        match_type = MatchType.parse(tournament.get("match_type"))
        if not match_type.allows_teams:
            raise ValidationError("Teams are not available for solo tournaments.")
        TeamService._require_verified_enrollment(
            owner_enrollment, user_id, tournament_id
        )
        TeamService._require_no_membership(db, tournament_id, user_id)

        team_data: dict[str, Any] = {
            **fields,
            "tournament_id": tournament_id,
            "owner_id": user_id,
            "created_at": firestore.SERVER_TIMESTAMP,
        }
        _, team_ref = db.collection(TEAMS_COLLECTION).add(dict(team_data))

        now = _now()
        db.collection(TEAM_MEMBERS_COLLECTION).document(
            member_id(tournament_id, user_id)
        ).set(
            {
                "team_id": team_ref.id,
                "tournament_id": tournament_id,
                "user_id": user_id,
                "role": ROLE_OWNER,
                "status": MEMBER_ACCEPTED,
                "requested_at": now,
                "joined_at": now,
            }
        )
        logging.info(f"User {user_id} created team {team_ref.id} in {tournament_id}.")

        team = cast(Team, team_data)
        team["id"] = team_ref.id
        return team

    @staticmethod
    def join_team(
        db: Client,
        team_id: str,
        user_id: str,
        joiner_enrollment: Enrollment | None,
    ) -> TeamMember:
        """Join an open team directly or file a request with a closed one.

        A user joining a team that lost its last member takes it over as owner.
        """
        team = TeamService.get_team(db, team_id)
        tournament_id = team["tournament_id"]
        capacity = TeamService._capacity_for(db, tournament_id)
        enrollment = TeamService._require_verified_enrollment(
            joiner_enrollment, user_id, tournament_id
        )
        TeamService._require_no_membership(db, tournament_id, user_id)
        if len(TeamService.get_members(db, team_id)) >= capacity:
            raise CapacityExceededError("This team is already full!")

        ownerless = not team.get("owner_id")
        now = _now()
        member: dict[str, Any] = {
            "team_id": team_id,
            "tournament_id": tournament_id,
            "user_id": user_id,
            "role": ROLE_OWNER if ownerless else ROLE_MEMBER,
            "requested_at": now,
        }
        if ownerless or team.get("privacy") == PRIVACY_OPEN:
            member["status"] = MEMBER_ACCEPTED
            member["joined_at"] = now
        else:
            member["status"] = MEMBER_PENDING
            member["joined_at"] = None

        row_id = member_id(tournament_id, user_id)
        db.collection(TEAM_MEMBERS_COLLECTION).document(row_id).set(member)

        if ownerless:
            db.collection(TEAMS_COLLECTION).document(team_id).update(
                {"owner_id": user_id, "updated_at": firestore.SERVER_TIMESTAMP}
            )
            logging.info(f"User {user_id} took over ownerless team {team_id}.")
        elif member["status"] == MEMBER_PENDING:
            nickname = enrollment.get("in_game_nickname") or "A player"
            NotificationService.notify(
                db,
                team["owner_id"],
                "Team Join Request",
                f'{nickname} wants to join your team "{team.get("team_name")}"',
                NOTIFY_INFO,
                related_tournament_id=tournament_id,
                related_team_id=team_id,
            )

        result = cast(TeamMember, member)
        result["id"] = row_id
        return result

    @staticmethod
    def accept_request(
        db: Client, team_id: str, request_id: str, acting_user_id: str
    ) -> TeamMember:
        """Owner approves a pending request if a slot is still free."""
        team = TeamService.get_team(db, team_id)
        TeamService._require_owner(team, acting_user_id)
        request = TeamService._get_member_row(db, team_id, request_id)
        if request is None or request.get("status") != MEMBER_PENDING:
            raise NotFoundError("Join request not found.")

        capacity = TeamService._capacity_for(db, team["tournament_id"])
        if len(TeamService.get_members(db, team_id)) >= capacity:
            raise CapacityExceededError("Team is full!")

        joined_at = _now()
        db.collection(TEAM_MEMBERS_COLLECTION).document(request_id).update(
            {"status": MEMBER_ACCEPTED, "joined_at": joined_at}
        )
        request["status"] = MEMBER_ACCEPTED
        request["joined_at"] = joined_at

        NotificationService.notify(
            db,
            request["user_id"],
            "Team Request Accepted",
            f"Your request to join {team.get('team_name')} has been accepted!",
            NOTIFY_SUCCESS,
            related_tournament_id=team["tournament_id"],
            related_team_id=team_id,
        )
        return request

    @staticmethod
    def reject_request(
        db: Client, team_id: str, request_id: str, acting_user_id: str
    ) -> None:
        """Owner declines a pending request; the row is removed."""
        team = TeamService.get_team(db, team_id)
        TeamService._require_owner(team, acting_user_id)
        request = TeamService._get_member_row(db, team_id, request_id)
        if request is None or request.get("status") != MEMBER_PENDING:
            raise NotFoundError("Join request not found.")

        db.collection(TEAM_MEMBERS_COLLECTION).document(request_id).delete()

        NotificationService.notify(
            db,
            request["user_id"],
            "Team Request Rejected",
            f"Your request to join {team.get('team_name')} has been rejected.",
            NOTIFY_WARNING,
            related_tournament_id=team["tournament_id"],
            related_team_id=team_id,
        )

    @staticmethod
    def remove_member(
        db: Client, team_id: str, member_row_id: str, acting_user_id: str
    ) -> None:
        """Owner removes another member from the team."""
        team = TeamService.get_team(db, team_id)
        TeamService._require_owner(team, acting_user_id)
        member = TeamService._get_member_row(db, team_id, member_row_id)
        if member is None:
            raise NotFoundError("Member not found.")
        if member.get("user_id") == acting_user_id:
            raise ValidationError("You cannot remove yourself. Leave the team instead.")

        db.collection(TEAM_MEMBERS_COLLECTION).document(member_row_id).delete()

        NotificationService.notify(
            db,
            member["user_id"],
            "Removed from Team",
            f"You have been removed from {team.get('team_name')}",
            NOTIFY_WARNING,
            related_tournament_id=team["tournament_id"],
            related_team_id=team_id,
        )

    @staticmethod
    def _drop_pending_requests(db: Client, team: Team) -> None:
        """Reject every open request of a team nobody can answer for."""
        for request in TeamService.get_members(db, team["id"], MEMBER_PENDING):
            db.collection(TEAM_MEMBERS_COLLECTION).document(request["id"]).delete()
            NotificationService.notify(
                db,
                request["user_id"],
                "Team Request Rejected",
                f"Your request to join {team.get('team_name')} was closed because "
                "the team has no members left.",
                NOTIFY_WARNING,
                related_tournament_id=team["tournament_id"],
                related_team_id=team["id"],
            )

    @staticmethod
    def leave_team(db: Client, team_id: str, user_id: str) -> None:
        """Leave a team; an owner hands the team to the earliest-joined member."""
        team = TeamService.get_team(db, team_id)
        row_id = member_id(team["tournament_id"], user_id)
        membership = TeamService._get_member_row(db, team_id, row_id)
        if membership is None:
            raise NotFoundError("You are not a member of this team.")

        db.collection(TEAM_MEMBERS_COLLECTION).document(row_id).delete()

        if team.get("owner_id") != user_id:
            return

        team_ref = db.collection(TEAMS_COLLECTION).document(team_id)
        remaining = TeamService.get_members(db, team_id)
        if not remaining:
            team_ref.update({"owner_id": None, "updated_at": firestore.SERVER_TIMESTAMP})
            logging.info(f"Team {team_id} has no members left after owner left.")
            TeamService._drop_pending_requests(db, team)
            return

        successor = remaining[0]
        db.collection(TEAM_MEMBERS_COLLECTION).document(successor["id"]).update(
            {"role": ROLE_OWNER}
        )
        team_ref.update(
            {"owner_id": successor["user_id"], "updated_at": firestore.SERVER_TIMESTAMP}
        )
        logging.info(
            f"Ownership of team {team_id} passed from {user_id} "
            f"to {successor['user_id']}."
        )

    @staticmethod
    def update_team(
        db: Client, team_id: str, acting_user_id: str, submission: TeamSubmission
    ) -> Team:
        """Owner edits the team's name, tag, description, logo or privacy."""
        fields = submission.to_document()
        team = TeamService.get_team(db, team_id)
        TeamService._require_owner(team, acting_user_id)

        db.collection(TEAMS_COLLECTION).document(team_id).update(
            {**fields, "updated_at": firestore.SERVER_TIMESTAMP}
        )
        team.update(cast(Team, fields))
        return team
