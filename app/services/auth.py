"""
Accounts and cookie sessions.

Passwords are stored as bcrypt hashes; a login hands out a random token
that maps to a LoginSession row until it expires or the user logs out.
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional
import bcrypt
from sqlmodel import Session, select, or_

from ..config import SESSION_EXPIRE_DAYS
from ..models.user import LoginSession, User
from ..time_utils import utcnow_naive

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    """bcrypt only looks at the first 72 bytes; longer input is cut there."""
    return bcrypt.hashpw(password.encode()[:BCRYPT_MAX_BYTES], bcrypt.gensalt()).decode()


def verify_password(password: str, hashed: str) -> bool:
    return bcrypt.checkpw(password.encode()[:BCRYPT_MAX_BYTES], hashed.encode())


def open_session(db: Session, user: User) -> str:
    """Issue a new session token for the user."""
    login = LoginSession(
        token=secrets.token_urlsafe(32),
        user_id=user.id,
        expires_at=utcnow_naive() + timedelta(days=SESSION_EXPIRE_DAYS)
    )
    db.add(login)
    db.commit()
    return login.token


def close_session(db: Session, token: str) -> None:
    login = db.get(LoginSession, token)
    if login:
        db.delete(login)
        db.commit()


def resolve_session(db: Session, token: str, now: Optional[datetime] = None) -> Optional[User]:
    """The user behind an unexpired token, or None."""
    statement = (
        select(User)
        .join(LoginSession, LoginSession.user_id == User.id)
        .where(LoginSession.token == token, LoginSession.expires_at > (now or utcnow_naive()))
    )
    return db.exec(statement).first()


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.exec(select(User).where(User.username == username)).first()


def user_exists(db: Session, username: str, email: str) -> bool:
    statement = select(User.id).where(or_(User.username == username, User.email == email))
    return db.exec(statement).first() is not None


def create_user(
    db: Session,
    username: str,
    email: str,
    password: str,
    is_admin: bool = False
) -> User:
    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        is_admin=is_admin
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("Created %s %s", "admin" if is_admin else "user", username)
    return user


def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    """The user if the credentials match, else None."""
    user = get_user_by_username(db, username)
    if user and verify_password(password, user.password_hash):
        return user
    return None
