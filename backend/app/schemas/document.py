from __future__ import annotations

from app.schemas.common import CamelModel


class DocumentOut(CamelModel):
    id: str
    name: str
    size: int
    upload_date: str
    filename: str
    content: str = ""


class UploadDocumentsResponse(CamelModel):
    success: bool = True
    documents: list[DocumentOut]


class DeleteResponse(CamelModel):
    success: bool = True
