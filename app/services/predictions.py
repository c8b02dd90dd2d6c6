from typing import Dict, List, Optional, Any
from sqlmodel import Session, select

from ..database import upsert_statement
from ..models.enums import PredictionType, outcome_from_scores
from ..models.match_prediction import MatchPrediction
from ..models.team_prediction import TeamPrediction
from ..time_utils import utcnow_naive


def _group_key(prediction_type: PredictionType, group_letter: Optional[str]) -> str:
    if prediction_type == PredictionType.TP2:
        return group_letter or ""
    return ""


def get_team_prediction(
    db: Session,
    user_id: int,
    prediction_type: PredictionType,
    group_letter: Optional[str] = None
) -> Optional[TeamPrediction]:
    statement = select(TeamPrediction).where(
        TeamPrediction.user_id == user_id,
        TeamPrediction.prediction_type == prediction_type,
        TeamPrediction.group_key == _group_key(prediction_type, group_letter)
    )
    return db.exec(statement).first()


def get_team_predictions(
    db: Session,
    user_id: int,
    prediction_type: Optional[PredictionType] = None
) -> List[TeamPrediction]:
    statement = select(TeamPrediction).where(TeamPrediction.user_id == user_id)
    if prediction_type:
        statement = statement.where(TeamPrediction.prediction_type == prediction_type)
    return list(db.exec(statement.order_by(TeamPrediction.prediction_type, TeamPrediction.group_key)).all())


def upsert_team_prediction(
    db: Session,
    user_id: int,
    prediction_type: PredictionType,
    winner_team_id: int,
    runner_up_team_id: int,
    group_letter: Optional[str] = None
) -> TeamPrediction:
    """Insert or update the single prediction for (user, type, group)."""
    group_key = _group_key(prediction_type, group_letter)
    now = utcnow_naive()

    statement = upsert_statement(db, TeamPrediction).values(
        user_id=user_id,
        prediction_type=prediction_type,
        group_letter=group_key or None,
        group_key=group_key,
        winner_team_id=winner_team_id,
        runner_up_team_id=runner_up_team_id,
        created_at=now,
        updated_at=now
    )
    statement = statement.on_conflict_do_update(
        index_elements=["user_id", "prediction_type", "group_key"],
        set_={
            "winner_team_id": winner_team_id,
            "runner_up_team_id": runner_up_team_id,
            "updated_at": now
        }
    )
    db.execute(statement)
    db.commit()

    return get_team_prediction(db, user_id, prediction_type, group_letter)


def get_match_prediction(db: Session, user_id: int, match_id: int) -> Optional[MatchPrediction]:
    statement = select(MatchPrediction).where(
        MatchPrediction.user_id == user_id,
        MatchPrediction.match_id == match_id
    )
    return db.exec(statement).first()


def get_match_predictions(db: Session, user_id: int) -> List[MatchPrediction]:
    statement = select(MatchPrediction).where(MatchPrediction.user_id == user_id)
    return list(db.exec(statement.order_by(MatchPrediction.match_id)).all())


def upsert_match_prediction(
    db: Session,
    user_id: int,
    match_id: int,
    predicted_team1_score: int,
    predicted_team2_score: int
) -> MatchPrediction:
    """Insert or update a match prediction; the outcome is derived from the scores."""
    predicted_outcome = outcome_from_scores(predicted_team1_score, predicted_team2_score)
    now = utcnow_naive()

    statement = upsert_statement(db, MatchPrediction).values(
        user_id=user_id,
        match_id=match_id,
        predicted_team1_score=predicted_team1_score,
        predicted_team2_score=predicted_team2_score,
        predicted_outcome=predicted_outcome,
        created_at=now,
        updated_at=now
    )
    statement = statement.on_conflict_do_update(
        index_elements=["user_id", "match_id"],
        set_={
            "predicted_team1_score": predicted_team1_score,
            "predicted_team2_score": predicted_team2_score,
            "predicted_outcome": predicted_outcome,
            "updated_at": now
        }
    )
    db.execute(statement)
    db.commit()

    return get_match_prediction(db, user_id, match_id)


def get_user_predictions(db: Session, user_id: int) -> Dict[str, List[Any]]:
    """All of a user's team and match predictions."""
    return {
        "team_predictions": get_team_predictions(db, user_id),
        "match_predictions": get_match_predictions(db, user_id)
    }
