"""Account endpoints: register, login, refresh, logout, me and profile self-service."""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from garden_club.auth import (
    create_access_token,
    create_refresh_token,
    get_current_user,
    revoke_refresh_token,
    rotate_refresh_token,
    verify_password,
)
from garden_club.config import get_settings
from garden_club.database import get_db
from garden_club.errors import Unauthorized
from garden_club.models import User
from garden_club.ratelimit import limiter
from garden_club.schemas import (
    LoginRequest,
    LogoutRequest,
    MessageResponse,
    PasswordChange,
    ProfileUpdate,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserEnvelope,
)
from garden_club.services import users as user_service

settings = get_settings()

router = APIRouter(prefix="/api", tags=["auth"])


def _tokens(db: Session, user: User, refresh: str | None = None) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(user),
        refresh_token=refresh or create_refresh_token(db, user),
        role=user.role.value,
        user_id=user.id,
    )


@router.post("/register", response_model=UserEnvelope, status_code=201)
@limiter.limit(settings.auth_rate_limit)
def register(request: Request, payload: RegisterRequest, db: Session = Depends(get_db)):
    user = user_service.register(db, payload)
    return {"user": user}


@router.post("/auth/login", response_model=TokenResponse)
@limiter.limit(settings.auth_rate_limit)
def login(request: Request, payload: LoginRequest, db: Session = Depends(get_db)):
    user = user_service.find_by_email(db, payload.email)
    if not user or not verify_password(payload.password, user.password_hash):
        raise Unauthorized("Invalid email or password")
    return _tokens(db, user)


@router.post("/auth/refresh", response_model=TokenResponse)
def refresh(payload: RefreshRequest, db: Session = Depends(get_db)):
    user, new_refresh = rotate_refresh_token(db, payload.refresh_token)
    return _tokens(db, user, new_refresh)


@router.post("/auth/logout", status_code=204)
def logout(payload: LogoutRequest, db: Session = Depends(get_db)):
    revoke_refresh_token(db, payload.refresh_token)


@router.get("/auth/me", response_model=UserEnvelope)
def me(current_user: User = Depends(get_current_user)):
    return {"user": current_user}


@router.put("/profile", response_model=UserEnvelope)
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {"user": user_service.update_profile(db, current_user, payload)}


@router.patch("/profile", response_model=MessageResponse)
def change_password(
    payload: PasswordChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user_service.change_password(db, current_user, payload)
    return {"message": "Password updated successfully"}
