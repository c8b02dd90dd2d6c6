"""
Recompute the materialized per-user points summary.

A summary is always a full recompute from the stored predictions and the
current tournament state, written in a single upsert statement, so running
it twice (or concurrently) leaves one complete snapshot behind.
"""

import logging
from typing import Any, Dict, Optional
from sqlmodel import Session, select

from ..database import engine, upsert_statement
from ..models.enums import PredictionType
from ..models.user import User
from ..models.user_points import UserPoints
from ..time_utils import utcnow_naive
from .predictions import get_match_predictions, get_team_predictions
from .scoring import compute_prediction_points
from .tournament import NotFoundError

logger = logging.getLogger(__name__)


def calculate_user_totals(db: Session, user_id: int) -> Dict[str, int]:
    """Compute (without persisting) the five summary numbers for a user."""
    tp1_points = compute_prediction_points(db, user_id, prediction_type=PredictionType.TP1)

    # One term per stored group prediction
    tp2_points = sum(
        compute_prediction_points(
            db, user_id,
            prediction_type=PredictionType.TP2,
            group_letter=prediction.group_letter
        )
        for prediction in get_team_predictions(db, user_id, PredictionType.TP2)
    )

    tp3_points = compute_prediction_points(db, user_id, prediction_type=PredictionType.TP3)

    match_points = sum(
        compute_prediction_points(db, user_id, match_id=prediction.match_id)
        for prediction in get_match_predictions(db, user_id)
    )

    return {
        "total_points": tp1_points + tp2_points + tp3_points + match_points,
        "tp1_points": tp1_points,
        "tp2_points": tp2_points,
        "tp3_points": tp3_points,
        "match_points": match_points,
    }


def get_user_points(db: Session, user_id: int) -> Optional[UserPoints]:
    return db.exec(select(UserPoints).where(UserPoints.user_id == user_id)).first()


def recalculate_user(db: Session, user_id: int) -> UserPoints:
    """Recompute and persist one user's summary, overwriting the previous one."""
    if not db.get(User, user_id):
        raise NotFoundError("User", user_id)

    totals = calculate_user_totals(db, user_id)
    updated_at = utcnow_naive()

    statement = upsert_statement(db, UserPoints).values(
        user_id=user_id, updated_at=updated_at, **totals
    )
    statement = statement.on_conflict_do_update(
        index_elements=["user_id"],
        set_={**totals, "updated_at": updated_at}
    )
    db.execute(statement)
    db.commit()

    logger.debug("Recalculated user %s: %s", user_id, totals)
    return get_user_points(db, user_id)


def recalculate_all(db: Session) -> Dict[str, Any]:
    """
    Recalculate every registered user.

    Each user is committed on its own; a failure rolls back only that user,
    whose previous summary stays in place, and the loop continues.
    """
    user_ids = db.exec(select(User.id).order_by(User.id)).all()

    updated = 0
    failed = []
    for user_id in user_ids:
        try:
            recalculate_user(db, user_id)
            updated += 1
        except Exception:
            db.rollback()
            failed.append(user_id)
            logger.exception("Recalculation failed for user %s", user_id)

    logger.info("All user points recalculated: %d updated, %d failed", updated, len(failed))
    return {"updated": updated, "failed": failed}


def run_global_recalculation(bind=None) -> Dict[str, Any]:
    """Background-task entry point: recalculate everyone in a fresh session."""
    with Session(bind or engine) as db:
        return recalculate_all(db)
