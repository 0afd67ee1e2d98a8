from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

from fastapi import Depends, HTTPException, Request
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from app.core.config import settings
from app.db.repositories import UserRepository
from app.db.session import get_user_repository
from app.models.user import User
from app.services.accounts import get_user


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def create_access_token(*, user_id: str) -> str:
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=settings.jwt_access_token_minutes)
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": expire,
        "iss": settings.jwt_issuer,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def _resolve_user(request: Request, token: str | None, repo: UserRepository) -> User | None:
    if not token:
        token = request.cookies.get(settings.auth_cookie_name)
    if not token:
        return None

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
        )
    except JWTError as e:
        raise HTTPException(status_code=401, detail="invalid token") from e

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="invalid token")

    user = get_user(repo, str(user_id))
    if user is None:
        raise HTTPException(status_code=401, detail="invalid token")
    if not user.validated:
        raise HTTPException(status_code=403, detail="account pending validation")

    request.state.user_id = user.id
    return user


def get_current_user(
    request: Request,
    repo: UserRepository = Depends(get_user_repository),
    token: str | None = Depends(oauth2_scheme),
) -> User:
    user = _resolve_user(request, token, repo)
    if user is None:
        raise HTTPException(status_code=401, detail="not authenticated")
    return user


def get_optional_user(
    request: Request,
    repo: UserRepository = Depends(get_user_repository),
    token: str | None = Depends(oauth2_scheme),
) -> User | None:
    return _resolve_user(request, token, repo)


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="forbidden")
    return user
