from __future__ import annotations

from fastapi import APIRouter, Depends

from app.core.errors import InvalidInputError
from app.core.rate_limit import rate_limit
from app.db.repositories import DocumentRepository
from app.db.session import get_document_repository
from app.schemas.chat import ChatRequest, ChatResponse
from app.services.chat import chat_reply

router = APIRouter(tags=["chat"])


@router.post("/chat", response_model=ChatResponse)
def chat(
    body: ChatRequest,
    documents: DocumentRepository = Depends(get_document_repository),
    _: object = rate_limit(key_prefix="chat", limit=30, window_seconds=60),
):
    if not body.message.strip():
        raise InvalidInputError("message required")
    history = [{"role": m.role, "content": m.content} for m in body.history]
    return {"message": chat_reply(body.message, history, documents.load_all())}
