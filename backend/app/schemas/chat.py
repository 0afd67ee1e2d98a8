from __future__ import annotations

from typing import Literal

from app.schemas.common import CamelModel


class ChatMessage(CamelModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(CamelModel):
    message: str = ""
    history: list[ChatMessage] = []


class ChatResponse(CamelModel):
    message: str
