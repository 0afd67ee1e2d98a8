from __future__ import annotations

from fastapi import APIRouter, Depends

from app.core.rate_limit import rate_limit
from app.db.repositories import DocumentRepository
from app.db.session import get_document_repository
from app.schemas.quiz import QuizResponse
from app.services.quiz_generation import generate_quiz

router = APIRouter(tags=["quiz"])


@router.post("/quiz", response_model=QuizResponse)
def quiz(
    documents: DocumentRepository = Depends(get_document_repository),
    _: object = rate_limit(key_prefix="quiz_generate", limit=10, window_seconds=60),
):
    return generate_quiz(documents.load_all()).model_dump(by_alias=True)
