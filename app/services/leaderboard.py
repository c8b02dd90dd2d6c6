from typing import Any, Dict, List, Optional
from sqlmodel import Session, select, func

from ..models.match import Match
from ..models.match_prediction import MatchPrediction
from ..models.team import Team
from ..models.team_prediction import TeamPrediction
from ..models.user import User
from ..models.user_points import UserPoints


def get_leaderboard(db: Session, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """
    Every non-admin user with their stored points summary.

    Users who were never recalculated show zeros. Ordered by total points,
    then username; ranks are sequential.
    """
    total = func.coalesce(UserPoints.total_points, 0)
    query = (
        select(
            User.id,
            User.username,
            total.label("total_points"),
            func.coalesce(UserPoints.tp1_points, 0),
            func.coalesce(UserPoints.tp2_points, 0),
            func.coalesce(UserPoints.tp3_points, 0),
            func.coalesce(UserPoints.match_points, 0),
            UserPoints.updated_at
        )
        .outerjoin(UserPoints, UserPoints.user_id == User.id)
        .where(User.is_admin == False)
        .order_by(total.desc(), User.username)
    )
    if limit is not None:
        query = query.limit(limit)

    results = db.exec(query).all()

    return [
        {
            "rank": i + 1,
            "user_id": row[0],
            "username": row[1],
            "total_points": row[2],
            "tp1_points": row[3],
            "tp2_points": row[4],
            "tp3_points": row[5],
            "match_points": row[6],
            "updated_at": row[7]
        }
        for i, row in enumerate(results)
    ]


def get_league_stats(db: Session) -> Dict[str, int]:
    """Row counts for the admin overview."""
    return {
        "users": db.exec(select(func.count(User.id))).one(),
        "teams": db.exec(select(func.count(Team.id))).one(),
        "matches": db.exec(select(func.count(Match.id))).one(),
        "completed_matches": db.exec(select(func.count(Match.id)).where(Match.is_completed == True)).one(),
        "match_predictions": db.exec(select(func.count(MatchPrediction.id))).one(),
        "team_predictions": db.exec(select(func.count(TeamPrediction.id))).one()
    }
