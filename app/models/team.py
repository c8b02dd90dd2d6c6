from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field

from ..time_utils import utcnow_naive


class Team(SQLModel, table=True):
    __tablename__ = "teams"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    country_code: Optional[str] = Field(default=None)  # FIFA trigram
    group_letter: Optional[str] = Field(default=None, index=True)  # A-H
    created_at: datetime = Field(default_factory=utcnow_naive)
