from datetime import datetime
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from ..database import get_session
from ..dependencies import get_now, require_user
from ..models.enums import Round
from ..models.match import Match
from ..models.match_prediction import MatchPrediction
from ..models.team import Team
from ..models.user import User
from ..services.eligibility import match_prediction_deadline
from ..services.tournament import get_current_matches, get_match, get_matches

router = APIRouter(prefix="/api/matches", tags=["matches"])


def build_match_entry(db: Session, match: Match) -> Dict[str, Any]:
    """Match with team names and its prediction deadline."""
    team1 = db.get(Team, match.team1_id) if match.team1_id else None
    team2 = db.get(Team, match.team2_id) if match.team2_id else None

    return {
        "id": match.id,
        "match_number": match.match_number,
        "round": match.round,
        "scheduled_datetime": match.scheduled_datetime,
        "prediction_deadline": match_prediction_deadline(match),
        "team1_id": match.team1_id,
        "team1_name": team1.name if team1 else "TBD",
        "team1_code": team1.country_code if team1 else None,
        "team2_id": match.team2_id,
        "team2_name": team2.name if team2 else "TBD",
        "team2_code": team2.country_code if team2 else None,
        "team1_score": match.team1_score,
        "team2_score": match.team2_score,
        "penalty_winner_id": match.penalty_winner_id,
        "is_completed": match.is_completed
    }


@router.get("")
async def list_matches(
    round: Optional[Round] = None,
    upcoming: bool = False,
    now: datetime = Depends(get_now),
    db: Session = Depends(get_session)
):
    """All matches by kickoff, optionally one round or only upcoming ones."""
    matches = get_matches(db, round_filter=round, upcoming_only=upcoming, now=now)
    return {"matches": [build_match_entry(db, m) for m in matches]}


@router.get("/current")
async def current_matches(
    now: datetime = Depends(get_now),
    db: Session = Depends(get_session)
):
    """Matches currently being played."""
    return {"matches": [build_match_entry(db, m) for m in get_current_matches(db, now)]}


@router.get("/{match_id}")
async def match_detail(
    match_id: int,
    db: Session = Depends(get_session)
):
    match = get_match(db, match_id)
    if not match:
        raise HTTPException(status_code=404, detail="Match not found")
    return {"match": build_match_entry(db, match)}


@router.get("/{match_id}/predictions")
async def match_predictions(
    match_id: int,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_session)
):
    """Everyone's predictions for a match, hidden until it completes."""
    match = get_match(db, match_id)
    if not match:
        raise HTTPException(status_code=404, detail="Match not found")

    if not match.is_completed:
        raise HTTPException(status_code=403, detail="Predictions hidden until match completes")

    rows = db.exec(
        select(MatchPrediction, User.username)
        .join(User, User.id == MatchPrediction.user_id)
        .where(MatchPrediction.match_id == match_id)
        .order_by(MatchPrediction.created_at)
    ).all()

    return {
        "predictions": [
            {
                "user_id": prediction.user_id,
                "username": username,
                "predicted_team1_score": prediction.predicted_team1_score,
                "predicted_team2_score": prediction.predicted_team2_score,
                "predicted_outcome": prediction.predicted_outcome
            }
            for prediction, username in rows
        ]
    }
