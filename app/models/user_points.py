from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field

from ..time_utils import utcnow_naive


class UserPoints(SQLModel, table=True):
    """Derived points summary; only ever overwritten by recalculation."""
    __tablename__ = "user_points"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", unique=True, index=True)
    total_points: int = Field(default=0)
    tp1_points: int = Field(default=0)
    tp2_points: int = Field(default=0)
    tp3_points: int = Field(default=0)
    match_points: int = Field(default=0)
    updated_at: datetime = Field(default_factory=utcnow_naive)
