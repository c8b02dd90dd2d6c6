import logging
from typing import Dict, Optional
from sqlmodel import Session

from ..models.enums import PredictionType, Round
from ..models.match import Match
from ..models.match_prediction import MatchPrediction
from ..models.team_prediction import TeamPrediction
from .multipliers import get_active_multiplier, get_match_multiplier
from .predictions import get_match_prediction, get_team_prediction
from .standings import get_qualifying_round_leaders, get_tournament_result, group_has_results

logger = logging.getLogger(__name__)

# Points per round: correct outcome / exact score
ROUND_POINTS: Dict[Round, Dict[str, int]] = {
    Round.QUALIFYING: {"outcome": 5, "exact": 25},
    Round.ROUND_OF_16: {"outcome": 10, "exact": 50},
    Round.QUARTERFINALS: {"outcome": 15, "exact": 75},
    Round.SEMIFINALS: {"outcome": 20, "exact": 100},
    Round.FINAL: {"outcome": 25, "exact": 125},
}

TOURNAMENT_WINNER_POINTS = 500
TOURNAMENT_RUNNER_UP_POINTS = 300
GROUP_WINNER_POINTS = 200
GROUP_RUNNER_UP_POINTS = 100


def calculate_points(prediction: MatchPrediction, match: Match) -> int:
    """
    Calculate base points for a single match prediction, before multipliers.

    Scoring (per ROUND_POINTS):
    - Exact score: the round's exact-score award
    - Correct outcome (team1 / team2 / draw): the round's outcome award
    - The two are exclusive; exact score pays only the higher value
    """
    outcome = match.actual_outcome
    # Can't calculate if match not completed
    if outcome is None:
        return 0

    points = ROUND_POINTS[match.round]

    if (prediction.predicted_team1_score == match.team1_score and
            prediction.predicted_team2_score == match.team2_score):
        return points["exact"]

    if prediction.predicted_outcome == outcome:
        return points["outcome"]

    return 0


def calculate_match_prediction_points(db: Session, user_id: int, match_id: int) -> int:
    """Points for a user's prediction on one match, multiplier applied."""
    prediction = get_match_prediction(db, user_id, match_id)
    if not prediction:
        return 0

    match = db.get(Match, match_id)
    if not match or not match.is_completed:
        return 0

    base_points = calculate_points(prediction, match)
    if base_points == 0:
        return 0

    return base_points * get_match_multiplier(db, user_id, match)


def calculate_team_prediction_points(db: Session, prediction: TeamPrediction) -> int:
    """
    Points for a TP1, TP2 or TP3 prediction.

    The combined winner + runner-up award is multiplied by the multiplier on
    the predicted winner only, even for the runner-up component.
    """
    if prediction.prediction_type == PredictionType.TP2:
        if not prediction.group_letter or not group_has_results(db, prediction.group_letter):
            return 0

        leaders = get_qualifying_round_leaders(db, prediction.group_letter)
        if len(leaders) < 2:
            return 0

        winner_id, runner_up_id = leaders[0]["team_id"], leaders[1]["team_id"]
        winner_award, runner_up_award = GROUP_WINNER_POINTS, GROUP_RUNNER_UP_POINTS
    else:
        result = get_tournament_result(db)
        if result is None:
            return 0

        winner_id, runner_up_id = result
        winner_award, runner_up_award = TOURNAMENT_WINNER_POINTS, TOURNAMENT_RUNNER_UP_POINTS

    points = 0
    if prediction.winner_team_id == winner_id:
        points += winner_award
    if prediction.runner_up_team_id == runner_up_id:
        points += runner_up_award

    if points == 0:
        return 0

    return points * get_active_multiplier(db, prediction.user_id, prediction.winner_team_id)


def compute_prediction_points(
    db: Session,
    user_id: int,
    prediction_type: Optional[PredictionType] = None,
    group_letter: Optional[str] = None,
    match_id: Optional[int] = None
) -> int:
    """
    Points for one stored prediction: a team prediction when
    `prediction_type` is given, otherwise the prediction on `match_id`.

    Missing predictions score 0, and so does any failure while scoring so
    one bad row cannot block a whole recalculation.
    """
    try:
        if prediction_type is not None:
            prediction = get_team_prediction(db, user_id, prediction_type, group_letter)
            if not prediction:
                return 0
            return calculate_team_prediction_points(db, prediction)

        if match_id is not None:
            return calculate_match_prediction_points(db, user_id, match_id)
    except Exception:
        logger.exception(
            "Scoring failed for user %s (type=%s group=%s match=%s), counting 0",
            user_id, prediction_type, group_letter, match_id
        )
        return 0

    raise ValueError("Either prediction_type or match_id is required")
