from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field

from ..time_utils import utcnow_naive
from .enums import Round, Outcome, outcome_from_scores


class Match(SQLModel, table=True):
    __tablename__ = "matches"

    id: Optional[int] = Field(default=None, primary_key=True)
    match_number: Optional[int] = Field(default=None, index=True)
    round: Round = Field(index=True)

    # Teams (nullable for knockout fixtures not yet decided)
    team1_id: Optional[int] = Field(default=None, foreign_key="teams.id")
    team2_id: Optional[int] = Field(default=None, foreign_key="teams.id")

    scheduled_datetime: datetime = Field(index=True)  # kickoff, naive UTC

    # Actual results (filled by admin); present iff is_completed
    team1_score: Optional[int] = Field(default=None)
    team2_score: Optional[int] = Field(default=None)
    penalty_winner_id: Optional[int] = Field(default=None, foreign_key="teams.id")  # knockout draws
    is_completed: bool = Field(default=False, index=True)

    updated_at: datetime = Field(default_factory=utcnow_naive)

    @property
    def actual_outcome(self) -> Optional[Outcome]:
        if not self.is_completed or self.team1_score is None or self.team2_score is None:
            return None
        return outcome_from_scores(self.team1_score, self.team2_score)
