from __future__ import annotations

from app.core.config import settings
from app.db.repositories import DocRepository, DocumentRepository, UserRepository


def get_user_repository() -> UserRepository:
    return UserRepository(settings.users_file)


def get_document_repository() -> DocumentRepository:
    return DocumentRepository(settings.documents_file)


def get_doc_repository() -> DocRepository:
    return DocRepository(settings.docs_file)
