from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path

from app.core.config import settings
from app.core.errors import InvalidInputError, NotFoundError
from app.db.repositories import DocumentRepository
from app.models.document import Document

log = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".txt", ".pdf", ".doc", ".docx"}
ALLOWED_MIME_TYPES = {
    "text/plain",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}
PDF_MAGIC = b"%PDF"


@dataclass(frozen=True)
class IncomingFile:
    name: str
    content_type: str
    data: bytes


def _check_upload(f: IncomingFile) -> str:
    if len(f.data) > int(settings.upload_max_bytes):
        raise InvalidInputError("file size exceeds limit")

    ext = Path(f.name or "").suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise InvalidInputError("invalid file type")

    mime = (f.content_type or "").split(";")[0].strip().lower()
    if mime not in ALLOWED_MIME_TYPES:
        raise InvalidInputError("invalid file type")

    if ext == ".pdf" and not f.data.startswith(PDF_MAGIC):
        raise InvalidInputError("invalid file content")
    return ext


def _extract_text(ext: str, data: bytes) -> str:
    if ext == ".txt":
        return data.decode("utf-8", errors="replace")
    return ""


def list_documents(repo: DocumentRepository) -> list[Document]:
    return repo.load_all()


def store_uploads(repo: DocumentRepository, files: list[IncomingFile]) -> list[Document]:
    if not files:
        raise InvalidInputError("no files provided")

    # Validate the whole batch before writing anything.
    exts = [_check_upload(f) for f in files]

    upload_dir = settings.uploads_dir
    upload_dir.mkdir(parents=True, exist_ok=True)

    created: list[Document] = []
    for f, ext in zip(files, exts):
        filename = f"{uuid.uuid4()}{ext}"
        (upload_dir / filename).write_bytes(f.data)
        created.append(
            Document(
                name=f.name,
                size=len(f.data),
                filename=filename,
                content=_extract_text(ext, f.data),
            )
        )

    with repo.locked():
        documents = repo.load_all()
        documents.extend(created)
        repo.save_all(documents)

    log.info("documents uploaded count=%s", len(created))
    return created


def _safe_filename(filename: str) -> bool:
    return bool(filename) and filename == os.path.basename(filename) and "/" not in filename and "\\" not in filename


def delete_document(repo: DocumentRepository, document_id: str) -> None:
    if not document_id:
        raise InvalidInputError("document id required")

    with repo.locked():
        documents = repo.load_all()
        doc = next((d for d in documents if d.id == document_id), None)
        if doc is None:
            raise NotFoundError("document not found")
        if not _safe_filename(doc.filename):
            raise InvalidInputError("invalid filename")

        path = settings.uploads_dir / doc.filename
        try:
            path.unlink(missing_ok=True)
        except OSError:
            log.exception("failed to remove uploaded file path=%s", path)

        repo.save_all([d for d in documents if d.id != document_id])
