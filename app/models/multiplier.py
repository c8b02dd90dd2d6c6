from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field, UniqueConstraint

from ..time_utils import utcnow_naive
from .enums import MultiplierType


class Multiplier(SQLModel, table=True):
    __tablename__ = "multipliers"
    __table_args__ = (
        UniqueConstraint("user_id", "team_id", "multiplier_type", name="unique_user_team_multiplier"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    team_id: int = Field(foreign_key="teams.id", index=True)
    multiplier_type: MultiplierType
    is_active: bool = Field(default=True)
    activated_at: datetime = Field(default_factory=utcnow_naive)
