from __future__ import annotations

from app.db.json_store import JsonRepository
from app.models.doc import Doc
from app.models.document import Document
from app.models.user import User


class UserRepository(JsonRepository[User]):
    model = User


class DocumentRepository(JsonRepository[Document]):
    model = Document


class DocRepository(JsonRepository[Doc]):
    model = Doc
