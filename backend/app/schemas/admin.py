from __future__ import annotations

from app.schemas.common import CamelModel


class PendingUser(CamelModel):
    id: str
    name: str
    email: str
    category: str
    created_at: int


class PendingUsersResponse(CamelModel):
    pending_users: list[PendingUser]


class ValidateUserRequest(CamelModel):
    user_id: str = ""


class ValidatedUser(CamelModel):
    id: str
    name: str
    email: str
    validated: bool


class ValidateUserResponse(CamelModel):
    message: str
    user: ValidatedUser
