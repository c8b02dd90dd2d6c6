from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlmodel import Session

from ..database import get_session
from ..dependencies import get_now, require_user
from ..models.enums import MultiplierType, PredictionType
from ..models.match import Match
from ..models.team import Team
from ..models.user import User
from ..services.eligibility import DenialReason, Eligibility, SubmissionKind, check_eligibility
from ..services.multipliers import activate_multiplier
from ..services.predictions import get_user_predictions, upsert_match_prediction, upsert_team_prediction
from ..services.recalculation import recalculate_user
from ..services.tournament import NotFoundError

router = APIRouter(prefix="/api/predictions", tags=["predictions"])

# Timing denials are 403, unmet conditions are 400
FORBIDDEN_REASONS = {DenialReason.DEADLINE_PASSED, DenialReason.NOT_YET_OPEN}


class TeamPredictionCreate(BaseModel):
    prediction_type: PredictionType
    winner_team_id: int
    runner_up_team_id: int
    group_letter: Optional[str] = Field(default=None, min_length=1, max_length=1)


class MatchPredictionCreate(BaseModel):
    match_id: int
    predicted_team1_score: int = Field(ge=0)
    predicted_team2_score: int = Field(ge=0)


class MultiplierActivate(BaseModel):
    team_id: int
    multiplier_type: MultiplierType


def ensure_allowed(result: Eligibility) -> None:
    """Turn an eligibility denial into the matching HTTP error."""
    if result.allowed:
        return
    status_code = 403 if result.reason in FORBIDDEN_REASONS else 400
    raise HTTPException(
        status_code=status_code,
        detail={"reason": result.reason.value, "message": result.message}
    )


def run_check(db: Session, kind: SubmissionKind, user_id: int, now: datetime, **params) -> Eligibility:
    try:
        return check_eligibility(db, kind, user_id, now, **params)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=f"{exc.entity} not found")


@router.post("/team")
async def submit_team_prediction(
    prediction_data: TeamPredictionCreate,
    current_user: User = Depends(require_user),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_session)
):
    """Submit or update a TP1, TP2 or TP3 prediction."""
    group_letter = prediction_data.group_letter.upper() if prediction_data.group_letter else None

    if prediction_data.prediction_type == PredictionType.TP2 and not group_letter:
        raise HTTPException(status_code=400, detail="group_letter is required for TP2")
    if prediction_data.prediction_type != PredictionType.TP2 and group_letter:
        raise HTTPException(status_code=400, detail="group_letter only applies to TP2")
    if prediction_data.winner_team_id == prediction_data.runner_up_team_id:
        raise HTTPException(status_code=400, detail="Winner and runner-up must be different teams")

    for team_id in (prediction_data.winner_team_id, prediction_data.runner_up_team_id):
        if not db.get(Team, team_id):
            raise HTTPException(status_code=404, detail="Team not found")

    kind = SubmissionKind.for_prediction(prediction_data.prediction_type)
    ensure_allowed(run_check(db, kind, current_user.id, now))

    prediction = upsert_team_prediction(
        db,
        current_user.id,
        prediction_data.prediction_type,
        prediction_data.winner_team_id,
        prediction_data.runner_up_team_id,
        group_letter
    )

    return {
        "message": "Team prediction submitted successfully",
        "prediction": prediction
    }


@router.post("/match")
async def submit_match_prediction(
    prediction_data: MatchPredictionCreate,
    current_user: User = Depends(require_user),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_session)
):
    """Submit or update a score prediction until the match deadline."""
    if not db.get(Match, prediction_data.match_id):
        raise HTTPException(status_code=404, detail="Match not found")

    ensure_allowed(run_check(db, SubmissionKind.MATCH, current_user.id, now, match_id=prediction_data.match_id))

    prediction = upsert_match_prediction(
        db,
        current_user.id,
        prediction_data.match_id,
        prediction_data.predicted_team1_score,
        prediction_data.predicted_team2_score
    )

    return {
        "message": "Match prediction submitted successfully",
        "prediction": prediction
    }


@router.post("/multiplier")
async def submit_multiplier(
    data: MultiplierActivate,
    current_user: User = Depends(require_user),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_session)
):
    """Activate Double Up or Re-Double Up on a team, then rescore the user."""
    kind = SubmissionKind.for_multiplier(data.multiplier_type)
    ensure_allowed(run_check(db, kind, current_user.id, now, team_id=data.team_id))

    multiplier = activate_multiplier(db, current_user.id, data.team_id, data.multiplier_type, now)
    points = recalculate_user(db, current_user.id)
    db.refresh(multiplier)

    return {
        "message": "Multiplier activated successfully",
        "multiplier": multiplier,
        "points": points
    }


@router.get("/user")
async def my_predictions(
    current_user: User = Depends(require_user),
    db: Session = Depends(get_session)
):
    """All predictions of the logged-in user."""
    return get_user_predictions(db, current_user.id)


@router.get("/eligibility")
async def eligibility(
    kind: SubmissionKind,
    match_id: Optional[int] = None,
    team_id: Optional[int] = None,
    current_user: User = Depends(require_user),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_session)
):
    """Whether a submission would currently be accepted, without submitting it."""
    if kind == SubmissionKind.MATCH and match_id is None:
        raise HTTPException(status_code=400, detail="match_id is required")
    if kind in (SubmissionKind.DOUBLE_UP, SubmissionKind.RE_DOUBLE_UP) and team_id is None:
        raise HTTPException(status_code=400, detail="team_id is required")

    return run_check(db, kind, current_user.id, now, match_id=match_id, team_id=team_id)
