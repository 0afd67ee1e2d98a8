from __future__ import annotations

from fastapi import APIRouter, Depends

from app.core.security import require_admin
from app.models.user import User
from app.schemas.update import UpdateActionResponse, UpdateRequest, UpdateStatusResponse
from app.services.updates import check_for_updates, update_instructions

router = APIRouter(prefix="/update", tags=["update"])


@router.get("", response_model=UpdateStatusResponse)
def status():
    return check_for_updates()


@router.post("", response_model=UpdateActionResponse)
def apply(body: UpdateRequest, _: User = Depends(require_admin)):
    return update_instructions(body.action)
