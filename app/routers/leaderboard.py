from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from ..database import get_session
from ..dependencies import require_user
from ..models.user import User
from ..services.leaderboard import get_leaderboard
from ..services.recalculation import recalculate_user

router = APIRouter(prefix="/api/leaderboard", tags=["leaderboard"])


@router.get("")
async def leaderboard(db: Session = Depends(get_session)):
    """Full leaderboard with the per-category breakdown."""
    return {"leaderboard": get_leaderboard(db)}


@router.get("/top/{limit}")
async def leaderboard_top(
    limit: int,
    db: Session = Depends(get_session)
):
    if limit < 1:
        raise HTTPException(status_code=400, detail="limit must be positive")
    return {"leaderboard": get_leaderboard(db, limit)}


@router.get("/me")
async def my_points(
    current_user: User = Depends(require_user),
    db: Session = Depends(get_session)
):
    """Recalculate and return the logged-in user's points."""
    return {"points": recalculate_user(db, current_user.id)}
