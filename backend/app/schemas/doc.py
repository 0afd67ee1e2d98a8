from __future__ import annotations

from app.schemas.common import CamelModel


class DocOut(CamelModel):
    id: str
    title: str
    content: str
    category: str
    is_public: bool
    user_id: str | None = None
    created_at: int
    updated_at: int


class DocsResponse(CamelModel):
    docs: list[DocOut]


class DocResponse(CamelModel):
    doc: DocOut


class DocCreateRequest(CamelModel):
    title: str = ""
    content: str = ""
    category: str = ""
    is_public: bool = False


class DocUpdateRequest(CamelModel):
    id: str = ""
    title: str = ""
    content: str = ""
    category: str = ""
