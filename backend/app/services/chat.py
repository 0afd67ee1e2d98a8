from __future__ import annotations

import logging
from typing import Iterable

from app.core.errors import AIServiceError
from app.models.document import Document
from app.services.ollama import ollama_chat

log = logging.getLogger(__name__)

ASSISTANT_ROLE = (
    "Tu es un assistant éducatif pour des étudiants en BTS CIEL "
    "(Cybersécurité, Informatique et réseaux, Électronique)."
)

OLLAMA_UNAVAILABLE_REPLY = (
    "Je suis désolé, mais je ne peux pas me connecter au service Ollama. "
    "Assurez-vous qu'Ollama est installé et en cours d'exécution avec la commande: 'ollama serve'. "
    "Vous pouvez installer Ollama depuis https://ollama.ai"
)


def documents_context(documents: Iterable[Document]) -> str:
    return "\n\n---\n\n".join(f"Document: {d.name}\n{d.content}" for d in documents if d.content)


def system_prompt(context: str) -> str:
    if context:
        return (
            f"{ASSISTANT_ROLE} Voici le contenu des documents disponibles:\n\n{context}\n\n"
            "Réponds de manière professionnelle et pédagogique aux questions en te basant sur ces documents."
        )
    return f"{ASSISTANT_ROLE} Réponds de manière professionnelle et pédagogique aux questions."


def chat_reply(message: str, history: list[dict[str, str]], documents: list[Document]) -> str:
    messages = [{"role": "system", "content": system_prompt(documents_context(documents))}]
    messages.extend(history)
    messages.append({"role": "user", "content": message})
    try:
        return ollama_chat(messages)
    except AIServiceError as e:
        log.warning("chat fallback reply served: %s", e)
        return OLLAMA_UNAVAILABLE_REPLY
