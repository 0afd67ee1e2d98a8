from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends

from app.core.security import require_admin
from app.db.repositories import UserRepository
from app.db.session import get_user_repository
from app.models.user import User
from app.schemas.admin import PendingUsersResponse, ValidateUserRequest, ValidateUserResponse
from app.services.accounts import pending_users, validate_user
from app.services.notifications import notify_account_validated

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/pending", response_model=PendingUsersResponse)
def list_pending(
    repo: UserRepository = Depends(get_user_repository),
    _: User = Depends(require_admin),
):
    return {
        "pendingUsers": [
            {"id": u.id, "name": u.name, "email": u.email, "category": u.category, "createdAt": u.created_at}
            for u in pending_users(repo)
        ]
    }


@router.post("/validate", response_model=ValidateUserResponse)
def validate(
    body: ValidateUserRequest,
    background_tasks: BackgroundTasks,
    repo: UserRepository = Depends(get_user_repository),
    _: User = Depends(require_admin),
):
    user = validate_user(repo, body.user_id)
    background_tasks.add_task(notify_account_validated, user.name, user.email)
    return {
        "message": "User validated successfully",
        "user": {"id": user.id, "name": user.name, "email": user.email, "validated": True},
    }
