from __future__ import annotations

from app.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    email: str = ""
    password: str = ""
    name: str = ""
    category: str = ""


class LoginRequest(CamelModel):
    email: str = ""
    password: str = ""


class ScoreRecordOut(CamelModel):
    category: str
    score: int | float
    date: int


class UserPublic(CamelModel):
    id: str
    email: str
    name: str
    category: str
    validated: bool
    created_at: int
    scores: list[ScoreRecordOut] = []
    is_admin: bool = False


class RegisterResponse(CamelModel):
    user: UserPublic
    message: str


class LoginResponse(CamelModel):
    user: UserPublic
    message: str
    access_token: str
    token_type: str = "bearer"


class SessionResponse(CamelModel):
    user: UserPublic


class ChangePasswordRequest(CamelModel):
    current_password: str = ""
    new_password: str = ""
