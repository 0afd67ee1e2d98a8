from __future__ import annotations

from fastapi import APIRouter, Depends, File, Query, UploadFile

from app.core.security import get_current_user
from app.db.repositories import DocumentRepository
from app.db.session import get_document_repository
from app.models.user import User
from app.schemas.document import DeleteResponse, DocumentOut, UploadDocumentsResponse
from app.services.documents import IncomingFile, delete_document, list_documents, store_uploads

router = APIRouter(prefix="/documents", tags=["documents"])


@router.get("", response_model=list[DocumentOut])
def documents(repo: DocumentRepository = Depends(get_document_repository)):
    return [d.model_dump(by_alias=True) for d in list_documents(repo)]


@router.post("", response_model=UploadDocumentsResponse)
async def upload(
    files: list[UploadFile] = File(...),
    repo: DocumentRepository = Depends(get_document_repository),
    _: User = Depends(get_current_user),
):
    incoming = [
        IncomingFile(name=f.filename or "", content_type=f.content_type or "", data=await f.read())
        for f in files
    ]
    created = store_uploads(repo, incoming)
    return {"success": True, "documents": [d.model_dump(by_alias=True) for d in created]}


@router.delete("", response_model=DeleteResponse)
def remove(
    id: str = Query(default=""),
    repo: DocumentRepository = Depends(get_document_repository),
    _: User = Depends(get_current_user),
):
    delete_document(repo, id)
    return {"success": True}
