"""
Deadline and eligibility rules for prediction and multiplier submissions.

Every check is a function of `now`, the tournament state and the user's
prediction history. A denial is an ordinary result carrying a reason code,
not an exception; only a reference to a missing match or team raises
NotFoundError.
"""

import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional
from pydantic import BaseModel
from sqlmodel import Session

from ..config import (
    DOUBLE_UP_DEADLINE,
    PREDICTION_DEADLINE_MINUTES,
    RE_DOUBLE_UP_OPENS,
    TP1_TP2_DEADLINE,
    TP3_DEADLINE,
    TP3_REQUIRE_ELIMINATED_TP1,
)
from ..models.enums import MultiplierType, PredictionType
from ..models.match import Match
from ..models.team import Team
from .predictions import get_team_prediction
from .standings import get_team_qualifying_record, is_eliminated_in_qualifying
from .tournament import NotFoundError, get_first_match

logger = logging.getLogger(__name__)

DOUBLE_UP_MIN_MATCHES = 2
DOUBLE_UP_MAX_POINTS = 6  # exclusive


class SubmissionKind(str, Enum):
    TP1 = "TP1"
    TP2 = "TP2"
    TP3 = "TP3"
    MATCH = "match"
    DOUBLE_UP = "double_up"
    RE_DOUBLE_UP = "re_double_up"

    @classmethod
    def for_prediction(cls, prediction_type: PredictionType) -> "SubmissionKind":
        return cls(prediction_type.value)

    @classmethod
    def for_multiplier(cls, multiplier_type: MultiplierType) -> "SubmissionKind":
        return cls(multiplier_type.value)


class DenialReason(str, Enum):
    DEADLINE_PASSED = "deadline_passed"
    NOT_YET_OPEN = "not_yet_open"
    MISSING_PREREQUISITE = "missing_prerequisite"
    PREREQUISITE_NOT_MET = "prerequisite_not_met"
    NOT_YET_ELIGIBLE = "not_yet_eligible"
    DOES_NOT_QUALIFY = "does_not_qualify"


class Eligibility(BaseModel):
    allowed: bool
    reason: Optional[DenialReason] = None
    message: Optional[str] = None

    @classmethod
    def ok(cls) -> "Eligibility":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenialReason, message: str) -> "Eligibility":
        return cls(allowed=False, reason=reason, message=message)


def match_prediction_deadline(match: Match) -> datetime:
    """Last instant a prediction on this match is accepted."""
    return match.scheduled_datetime - timedelta(minutes=PREDICTION_DEADLINE_MINUTES)


def check_tournament_prediction(db: Session, now: datetime) -> Eligibility:
    """
    TP1 / TP2 gate.

    Blocks only when the first match has kicked off AND the fixed deadline
    has passed; either condition alone still allows the submission.
    """
    first_match = get_first_match(db)
    if first_match and now > first_match.scheduled_datetime and now > TP1_TP2_DEADLINE:
        return Eligibility.deny(DenialReason.DEADLINE_PASSED, "Deadline passed for this prediction type")
    return Eligibility.ok()


def check_revised_prediction(db: Session, user_id: int, now: datetime) -> Eligibility:
    """TP3 gate: before its deadline and only with a TP1 already on record."""
    if now > TP3_DEADLINE:
        return Eligibility.deny(DenialReason.DEADLINE_PASSED, "Deadline passed for TP3 predictions")

    tp1 = get_team_prediction(db, user_id, PredictionType.TP1)
    if not tp1:
        return Eligibility.deny(DenialReason.MISSING_PREREQUISITE, "Must have TP1 prediction before TP3")

    if TP3_REQUIRE_ELIMINATED_TP1 and not is_eliminated_in_qualifying(db, tp1.winner_team_id):
        return Eligibility.deny(
            DenialReason.PREREQUISITE_NOT_MET,
            "TP3 is only available once your TP1 winner is eliminated in qualifying"
        )

    return Eligibility.ok()


def check_match_prediction(db: Session, match_id: int, now: datetime) -> Eligibility:
    match = db.get(Match, match_id)
    if not match:
        raise NotFoundError("Match", match_id)

    if now > match_prediction_deadline(match):
        return Eligibility.deny(DenialReason.DEADLINE_PASSED, "Prediction deadline has passed for this match")
    return Eligibility.ok()


def check_double_up(db: Session, team_id: int, now: datetime) -> Eligibility:
    """Double Up: before its deadline, for a team with < 6 points after >= 2 qualifying games."""
    if not db.get(Team, team_id):
        raise NotFoundError("Team", team_id)

    if now > DOUBLE_UP_DEADLINE:
        return Eligibility.deny(DenialReason.DEADLINE_PASSED, "Deadline passed for Double Up")

    played, points = get_team_qualifying_record(db, team_id)
    if played < DOUBLE_UP_MIN_MATCHES:
        return Eligibility.deny(
            DenialReason.NOT_YET_ELIGIBLE,
            f"Team has played {played} qualifying matches, Double Up opens after {DOUBLE_UP_MIN_MATCHES}"
        )
    if points >= DOUBLE_UP_MAX_POINTS:
        return Eligibility.deny(
            DenialReason.DOES_NOT_QUALIFY,
            "Team does not qualify for Double Up (must have < 6 points after 2 games)"
        )
    return Eligibility.ok()


def check_re_double_up(db: Session, team_id: int, now: datetime) -> Eligibility:
    """Re-Double Up opens at its date; there is no closing deadline."""
    if not db.get(Team, team_id):
        raise NotFoundError("Team", team_id)

    if now < RE_DOUBLE_UP_OPENS:
        return Eligibility.deny(
            DenialReason.NOT_YET_OPEN,
            f"Re-Double Up can only be activated from {RE_DOUBLE_UP_OPENS:%m/%d}"
        )
    return Eligibility.ok()


def check_eligibility(
    db: Session,
    kind: SubmissionKind,
    user_id: int,
    now: datetime,
    match_id: Optional[int] = None,
    team_id: Optional[int] = None
) -> Eligibility:
    """Decide whether a submission of `kind` is currently allowed."""
    if kind in (SubmissionKind.TP1, SubmissionKind.TP2):
        result = check_tournament_prediction(db, now)
    elif kind == SubmissionKind.TP3:
        result = check_revised_prediction(db, user_id, now)
    elif kind == SubmissionKind.MATCH:
        if match_id is None:
            raise ValueError("match_id is required for match predictions")
        result = check_match_prediction(db, match_id, now)
    elif kind == SubmissionKind.DOUBLE_UP:
        if team_id is None:
            raise ValueError("team_id is required for multipliers")
        result = check_double_up(db, team_id, now)
    elif kind == SubmissionKind.RE_DOUBLE_UP:
        if team_id is None:
            raise ValueError("team_id is required for multipliers")
        result = check_re_double_up(db, team_id, now)
    else:
        raise ValueError(f"Unknown submission kind: {kind}")

    if not result.allowed:
        logger.debug("User %s denied %s: %s", user_id, kind.value, result.reason.value)
    return result
