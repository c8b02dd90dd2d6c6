"""
Read access to the authoritative tournament data (teams and matches) and
the one write the engine accepts on it: recording a match result.
"""

from datetime import datetime, timedelta
from typing import List, Optional
from sqlmodel import Session, select

from ..models.enums import Round
from ..models.match import Match
from ..models.team import Team
from ..time_utils import utcnow_naive


class NotFoundError(LookupError):
    """A referenced match, team or user does not exist."""

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


def get_teams(db: Session, group_letter: Optional[str] = None) -> List[Team]:
    query = select(Team)
    if group_letter:
        query = query.where(Team.group_letter == group_letter)
    return list(db.exec(query.order_by(Team.group_letter, Team.name)).all())


def get_team(db: Session, team_id: int) -> Optional[Team]:
    return db.get(Team, team_id)


def get_all_groups(db: Session) -> List[str]:
    """All group letters present in the database, sorted."""
    groups = db.exec(select(Team.group_letter).distinct().order_by(Team.group_letter)).all()
    return [g for g in groups if g]


def get_matches(
    db: Session,
    round_filter: Optional[Round] = None,
    upcoming_only: bool = False,
    now: Optional[datetime] = None
) -> List[Match]:
    """Matches ordered by kickoff, optionally one round or only not-yet-played ones."""
    query = select(Match)
    if round_filter:
        query = query.where(Match.round == round_filter)
    if upcoming_only:
        now = now or utcnow_naive()
        query = query.where(Match.scheduled_datetime > now, Match.is_completed == False)
    return list(db.exec(query.order_by(Match.scheduled_datetime, Match.id)).all())


def get_match(db: Session, match_id: int) -> Optional[Match]:
    return db.get(Match, match_id)


def get_current_matches(db: Session, now: Optional[datetime] = None) -> List[Match]:
    """Matches kicked off within the last two hours that have no result yet."""
    now = now or utcnow_naive()
    query = (
        select(Match)
        .where(
            Match.scheduled_datetime >= now - timedelta(hours=2),
            Match.scheduled_datetime <= now,
            Match.is_completed == False
        )
        .order_by(Match.scheduled_datetime)
    )
    return list(db.exec(query).all())


def get_first_match(db: Session) -> Optional[Match]:
    """The earliest scheduled match of the tournament."""
    return db.exec(select(Match).order_by(Match.scheduled_datetime).limit(1)).first()


def record_match_result(
    db: Session,
    match: Match,
    team1_score: int,
    team2_score: int,
    penalty_winner_id: Optional[int] = None
) -> Match:
    """
    Store the final score of a match and mark it completed.

    Also used for corrections; callers are responsible for triggering a
    recalculation afterwards.
    """
    if team1_score < 0 or team2_score < 0:
        raise ValueError("Scores must be non-negative")

    if penalty_winner_id is not None:
        if match.round == Round.QUALIFYING:
            raise ValueError("Qualifying matches have no penalty shootout")
        if team1_score != team2_score:
            raise ValueError("Penalty winner only applies to drawn matches")
        if penalty_winner_id not in (match.team1_id, match.team2_id):
            raise ValueError("Penalty winner must be one of the match teams")

    match.team1_score = team1_score
    match.team2_score = team2_score
    match.penalty_winner_id = penalty_winner_id
    match.is_completed = True
    match.updated_at = utcnow_naive()

    db.add(match)
    db.commit()
    db.refresh(match)

    return match
