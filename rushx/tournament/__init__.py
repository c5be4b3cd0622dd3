"""Tournament domain: match types and the participant counter."""

from .models import MatchType, Tournament, team_capacity
from .services import TournamentService

__all__ = ["MatchType", "Tournament", "TournamentService", "team_capacity"]
