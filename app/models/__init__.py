from .enums import Round, PredictionType, MultiplierType, Outcome
from .user import User, LoginSession
from .team import Team
from .match import Match
from .team_prediction import TeamPrediction
from .match_prediction import MatchPrediction
from .multiplier import Multiplier
from .user_points import UserPoints

__all__ = [
    "Round",
    "PredictionType",
    "MultiplierType",
    "Outcome",
    "User",
    "LoginSession",
    "Team",
    "Match",
    "TeamPrediction",
    "MatchPrediction",
    "Multiplier",
    "UserPoints",
]
