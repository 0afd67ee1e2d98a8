from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.core.security import get_current_user, get_optional_user
from app.db.repositories import DocRepository
from app.db.session import get_doc_repository
from app.models.user import User
from app.schemas.doc import DocCreateRequest, DocResponse, DocsResponse, DocUpdateRequest
from app.schemas.document import DeleteResponse
from app.services.docs import create_doc, delete_doc, list_docs, update_doc

router = APIRouter(prefix="/docs", tags=["docs"])


@router.get("", response_model=DocsResponse)
def docs(
    filter: str | None = Query(default=None),
    repo: DocRepository = Depends(get_doc_repository),
    user: User | None = Depends(get_optional_user),
):
    items = list_docs(repo, user_id=user.id if user else None, visibility=filter)
    return {"docs": [d.model_dump(by_alias=True) for d in items]}


@router.post("", response_model=DocResponse)
def create(
    body: DocCreateRequest,
    repo: DocRepository = Depends(get_doc_repository),
    user: User = Depends(get_current_user),
):
    doc = create_doc(
        repo,
        user_id=user.id,
        title=body.title,
        content=body.content,
        category=body.category,
        is_public=body.is_public,
    )
    return {"doc": doc.model_dump(by_alias=True)}


@router.put("", response_model=DocResponse)
def update(
    body: DocUpdateRequest,
    repo: DocRepository = Depends(get_doc_repository),
    user: User = Depends(get_current_user),
):
    doc = update_doc(
        repo,
        user_id=user.id,
        doc_id=body.id,
        title=body.title,
        content=body.content,
        category=body.category,
    )
    return {"doc": doc.model_dump(by_alias=True)}


@router.delete("", response_model=DeleteResponse)
def remove(
    id: str = Query(default=""),
    repo: DocRepository = Depends(get_doc_repository),
    user: User = Depends(get_current_user),
):
    delete_doc(repo, user_id=user.id, doc_id=id)
    return {"success": True}
