from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field

from ..time_utils import utcnow_naive


class User(SQLModel, table=True):
    """A league participant. Admins record results and are left off the leaderboard."""
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)
    email: str = Field(unique=True, index=True)
    password_hash: str
    is_admin: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow_naive)


class LoginSession(SQLModel, table=True):
    """Cookie token issued at login or registration."""
    __tablename__ = "login_sessions"

    token: str = Field(primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    expires_at: datetime = Field(index=True)
    created_at: datetime = Field(default_factory=utcnow_naive)
