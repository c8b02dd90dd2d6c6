from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field, UniqueConstraint

from ..time_utils import utcnow_naive
from .enums import PredictionType


class TeamPrediction(SQLModel, table=True):
    __tablename__ = "team_predictions"
    __table_args__ = (
        UniqueConstraint("user_id", "prediction_type", "group_key", name="unique_user_type_group"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    prediction_type: PredictionType = Field(index=True)
    group_letter: Optional[str] = Field(default=None)  # TP2 only
    # Group letter or "" so TP1/TP3 rows still collide on the unique key
    group_key: str = Field(default="")

    winner_team_id: int = Field(foreign_key="teams.id")
    runner_up_team_id: int = Field(foreign_key="teams.id")

    created_at: datetime = Field(default_factory=utcnow_naive)
    updated_at: datetime = Field(default_factory=utcnow_naive)
