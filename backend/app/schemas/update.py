from __future__ import annotations

from app.schemas.common import CamelModel


class LastCommit(CamelModel):
    sha: str
    message: str | None = None
    author: str | None = None
    date: str | None = None
    url: str | None = None


class UpdateStatusResponse(CamelModel):
    current_version: str
    update_available: bool
    latest_version: str | None = None
    release_notes: str | None = None
    release_url: str | None = None
    published_at: str | None = None
    last_commit: LastCommit | None = None


class UpdateRequest(CamelModel):
    action: str = ""


class UpdateActionResponse(CamelModel):
    message: str
    version: str
    instructions: list[str]
