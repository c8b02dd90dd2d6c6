from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel
from sqlmodel import Session

from ..config import SESSION_COOKIE_NAME, SESSION_EXPIRE_DAYS
from ..database import get_session
from ..dependencies import require_user
from ..models.user import User
from ..services.auth import authenticate_user, close_session, create_user, open_session, user_exists

router = APIRouter(prefix="/api/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str


class LoginRequest(BaseModel):
    username: str
    password: str


def user_payload(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "is_admin": user.is_admin
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    response: Response,
    db: Session = Depends(get_session)
):
    if len(data.username) < 3 or len(data.password) < 6:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username must be at least 3 characters and password at least 6"
        )

    if user_exists(db, data.username, data.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username or email already exists"
        )

    user = create_user(db, data.username, data.email, data.password)
    _set_session_cookie(response, open_session(db, user))

    return user_payload(user)


@router.post("/login")
async def login(
    data: LoginRequest,
    response: Response,
    db: Session = Depends(get_session)
):
    user = authenticate_user(db, data.username, data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    _set_session_cookie(response, open_session(db, user))
    return user_payload(user)


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    db: Session = Depends(get_session)
):
    session_token = request.cookies.get(SESSION_COOKIE_NAME)
    if session_token:
        close_session(db, session_token)
    response.delete_cookie(SESSION_COOKIE_NAME)
    return {"message": "Logged out"}


@router.get("/me")
async def me(current_user: User = Depends(require_user)):
    return user_payload(current_user)


def _set_session_cookie(response: Response, session_token: Optional[str]) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session_token,
        httponly=True,
        max_age=SESSION_EXPIRE_DAYS * 24 * 60 * 60,
        samesite="lax"
    )
