from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from ..database import get_session
from ..services.standings import calculate_group_standings
from ..services.tournament import get_team, get_teams

router = APIRouter(prefix="/api/teams", tags=["teams"])


@router.get("")
async def list_teams(
    group: Optional[str] = None,
    db: Session = Depends(get_session)
):
    """All teams, optionally filtered by group."""
    return {"teams": get_teams(db, group)}


@router.get("/group/{group_letter}")
async def group_teams(
    group_letter: str,
    db: Session = Depends(get_session)
):
    return {"teams": get_teams(db, group_letter.upper())}


@router.get("/group/{group_letter}/standings")
async def group_standings(
    group_letter: str,
    db: Session = Depends(get_session)
):
    """Official standings from completed qualifying matches."""
    standings = calculate_group_standings(db, group_letter.upper())
    if not standings:
        raise HTTPException(status_code=404, detail="Group not found")
    return {"group": group_letter.upper(), "standings": standings}


@router.get("/{team_id}")
async def team_detail(
    team_id: int,
    db: Session = Depends(get_session)
):
    team = get_team(db, team_id)
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")
    return {"team": team}
