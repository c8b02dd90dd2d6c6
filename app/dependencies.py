from datetime import datetime
from typing import Optional
from fastapi import Request, Depends, HTTPException, status
from sqlmodel import Session

from .config import SESSION_COOKIE_NAME
from .database import get_session
from .models.user import User
from .services.auth import resolve_session
from .time_utils import utcnow_naive


def get_now() -> datetime:
    """Wall-clock time (naive UTC) that deadline checks compare against."""
    return utcnow_naive()


async def get_current_user(
    request: Request,
    db: Session = Depends(get_session)
) -> Optional[User]:
    token = request.cookies.get(SESSION_COOKIE_NAME)
    return resolve_session(db, token) if token else None


async def require_user(current_user: Optional[User] = Depends(get_current_user)) -> User:
    if current_user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return current_user


async def require_admin(current_user: User = Depends(require_user)) -> User:
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user
