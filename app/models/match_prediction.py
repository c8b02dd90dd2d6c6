from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field, UniqueConstraint

from ..time_utils import utcnow_naive
from .enums import Outcome


class MatchPrediction(SQLModel, table=True):
    __tablename__ = "match_predictions"
    __table_args__ = (UniqueConstraint("user_id", "match_id", name="unique_user_match"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    match_id: int = Field(foreign_key="matches.id", index=True)

    predicted_team1_score: int
    predicted_team2_score: int
    predicted_outcome: Outcome  # derived from the two scores

    created_at: datetime = Field(default_factory=utcnow_naive)
    updated_at: datetime = Field(default_factory=utcnow_naive)
