from datetime import datetime
from typing import List, Optional
from sqlmodel import Session, select

from ..database import upsert_statement
from ..models.enums import MultiplierType
from ..models.match import Match
from ..models.multiplier import Multiplier
from ..time_utils import utcnow_naive


def get_active_multipliers(db: Session, user_id: int, team_id: int) -> List[Multiplier]:
    statement = select(Multiplier).where(
        Multiplier.user_id == user_id,
        Multiplier.team_id == team_id,
        Multiplier.is_active == True
    )
    return list(db.exec(statement).all())


def get_active_multiplier(db: Session, user_id: int, team_id: Optional[int]) -> int:
    """
    Effective multiplier for points attributed to a team.

    Every active activation doubles, so double_up and re_double_up on the
    same team stack to x4.
    """
    if team_id is None:
        return 1

    multiplier = 1
    for _ in get_active_multipliers(db, user_id, team_id):
        multiplier *= 2
    return multiplier


def get_match_multiplier(db: Session, user_id: int, match: Match) -> int:
    """The larger of the two teams' multipliers; holding both does not compound."""
    return max(
        get_active_multiplier(db, user_id, match.team1_id),
        get_active_multiplier(db, user_id, match.team2_id)
    )


def activate_multiplier(
    db: Session,
    user_id: int,
    team_id: int,
    multiplier_type: MultiplierType,
    now: Optional[datetime] = None
) -> Multiplier:
    """Activate (or re-activate) a multiplier for a user and team."""
    activated_at = now or utcnow_naive()

    statement = upsert_statement(db, Multiplier).values(
        user_id=user_id,
        team_id=team_id,
        multiplier_type=multiplier_type,
        is_active=True,
        activated_at=activated_at
    )
    statement = statement.on_conflict_do_update(
        index_elements=["user_id", "team_id", "multiplier_type"],
        set_={"is_active": True, "activated_at": activated_at}
    )
    db.execute(statement)
    db.commit()

    return db.exec(
        select(Multiplier).where(
            Multiplier.user_id == user_id,
            Multiplier.team_id == team_id,
            Multiplier.multiplier_type == multiplier_type
        )
    ).one()
