from __future__ import annotations

from app.core.clock import now_ms
from app.core.errors import ForbiddenError, InvalidInputError, NotFoundError, UnauthorizedError
from app.db.repositories import DocRepository
from app.models.doc import Doc


def list_docs(repo: DocRepository, *, user_id: str | None, visibility: str | None) -> list[Doc]:
    docs = repo.load_all()
    if visibility == "public":
        return [d for d in docs if d.is_public]
    if visibility == "private":
        if not user_id:
            raise UnauthorizedError("not authenticated")
        return [d for d in docs if not d.is_public and d.user_id == user_id]
    if user_id:
        return [d for d in docs if d.is_public or d.user_id == user_id]
    return [d for d in docs if d.is_public]


def _require_fields(**fields: str | None) -> None:
    missing = [k for k, v in fields.items() if not (v or "").strip()]
    if missing:
        raise InvalidInputError(f"missing fields: {', '.join(missing)}")


def create_doc(repo: DocRepository, *, user_id: str, title: str, content: str, category: str, is_public: bool) -> Doc:
    _require_fields(title=title, content=content, category=category)
    doc = Doc(title=title, content=content, category=category, is_public=is_public is True, user_id=user_id)
    with repo.locked():
        docs = repo.load_all()
        docs.append(doc)
        repo.save_all(docs)
    return doc


def _owned(docs: list[Doc], doc_id: str, user_id: str) -> Doc:
    doc = next((d for d in docs if d.id == doc_id), None)
    if doc is None:
        raise NotFoundError("document not found")
    if doc.user_id != user_id:
        raise ForbiddenError("only the owner can modify this document")
    return doc


def update_doc(repo: DocRepository, *, user_id: str, doc_id: str, title: str, content: str, category: str) -> Doc:
    _require_fields(id=doc_id, title=title, content=content, category=category)
    with repo.locked():
        docs = repo.load_all()
        doc = _owned(docs, doc_id, user_id)
        doc.title = title
        doc.content = content
        doc.category = category
        doc.updated_at = now_ms()
        repo.save_all(docs)
    return doc


def delete_doc(repo: DocRepository, *, user_id: str, doc_id: str) -> None:
    _require_fields(id=doc_id)
    with repo.locked():
        docs = repo.load_all()
        _owned(docs, doc_id, user_id)
        repo.save_all([d for d in docs if d.id != doc_id])
