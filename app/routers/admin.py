import logging
from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlmodel import Session

from ..database import get_session
from ..dependencies import require_admin
from ..models.match import Match
from ..models.user import User
from ..services.leaderboard import get_league_stats
from ..services.recalculation import recalculate_all, run_global_recalculation
from ..services.tournament import record_match_result

router = APIRouter(prefix="/api/admin", tags=["admin"])
logger = logging.getLogger(__name__)


class MatchResult(BaseModel):
    team1_score: int = Field(ge=0)
    team2_score: int = Field(ge=0)
    penalty_winner_id: Optional[int] = None


@router.post("/matches/{match_id}/result")
async def update_match_result(
    match_id: int,
    result: MatchResult,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_session)
):
    """Record (or correct) a result and rescore everyone in the background."""
    match = db.get(Match, match_id)
    if not match:
        raise HTTPException(status_code=404, detail="Match not found")

    try:
        record_match_result(db, match, result.team1_score, result.team2_score, result.penalty_winner_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    logger.info("Match %s result recorded: %s-%s", match_id, result.team1_score, result.team2_score)

    # Global recalculation is too slow to run inline
    background_tasks.add_task(run_global_recalculation, db.get_bind())

    return {
        "message": "Match updated, recalculation scheduled",
        "match_id": match.id,
        "team1_score": match.team1_score,
        "team2_score": match.team2_score,
        "is_completed": match.is_completed
    }


@router.post("/recalculate")
async def recalculate(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_session)
):
    """Recalculate every user's points now."""
    return recalculate_all(db)


@router.get("/stats")
async def league_stats(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_session)
):
    return get_league_stats(db)
