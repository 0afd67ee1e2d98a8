from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from app.core.config import settings
from app.core.rate_limit import rate_limit
from app.core.security import create_access_token, get_current_user
from app.db.repositories import UserRepository
from app.db.session import get_user_repository
from app.models.user import User
from app.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    SessionResponse,
)
from app.services.accounts import authenticate, change_password, register_user

router = APIRouter(prefix="/auth", tags=["auth"])


def user_out(user: User) -> dict:
    return {**user.public(), "isAdmin": user.is_admin}


def _is_prod() -> bool:
    return (settings.app_env or "").strip().lower() in {"prod", "production"}


@router.post("/register", response_model=RegisterResponse)
def register(
    payload: RegisterRequest,
    repo: UserRepository = Depends(get_user_repository),
    _: object = rate_limit(key_prefix="auth_register", limit=10, window_seconds=60),
):
    user = register_user(
        repo,
        email=payload.email,
        password=payload.password,
        name=payload.name,
        category=payload.category,
    )
    return {
        "user": user_out(user),
        "message": "Registration successful. Your account is pending validation.",
    }


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    response: Response,
    repo: UserRepository = Depends(get_user_repository),
    _: object = rate_limit(key_prefix="auth_login", limit=20, window_seconds=60),
):
    user = authenticate(repo, email=payload.email, password=payload.password)
    token = create_access_token(user_id=user.id)
    response.set_cookie(
        settings.auth_cookie_name,
        token,
        httponly=True,
        secure=_is_prod(),
        samesite="lax",
        max_age=int(settings.jwt_access_token_minutes) * 60,
    )
    return {"user": user_out(user), "message": "Login successful", "accessToken": token}


@router.get("/session", response_model=SessionResponse)
def session(user: User = Depends(get_current_user)):
    return {"user": user_out(user)}


@router.delete("/session")
def logout(response: Response):
    response.delete_cookie(settings.auth_cookie_name)
    return {"message": "Logged out successfully"}


@router.post("/change-password")
def change_password_endpoint(
    body: ChangePasswordRequest,
    repo: UserRepository = Depends(get_user_repository),
    user: User = Depends(get_current_user),
    _: object = rate_limit(key_prefix="auth_change_password", limit=10, window_seconds=60),
):
    change_password(repo, user.id, current_password=body.current_password, new_password=body.new_password)
    return {"ok": True}
