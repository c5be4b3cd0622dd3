"""Teams blueprint."""

from flask import Blueprint

bp = Blueprint("teams", __name__, url_prefix="/tournaments/<string:tournament_id>/teams")

from . import routes  # noqa: E402, F401
from .models import Team, TeamDetails, TeamMember, TeamSubmission  # noqa: E402
from .services import TeamService  # noqa: E402

__all__ = [
    "Team",
    "TeamDetails",
    "TeamMember",
    "TeamService",
    "TeamSubmission",
    "routes",
]
