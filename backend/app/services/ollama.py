from __future__ import annotations

import json
import logging
import re
import time
from typing import Any

import httpx

from app.core.config import settings
from app.core.errors import AIServiceError

log = logging.getLogger(__name__)


def _extract_json(text: str) -> dict[str, Any] | None:
    if not text:
        return None

    s = text.strip()
    if s.startswith("{") and s.endswith("}"):
        try:
            return json.loads(s)
        except ValueError:
            pass

    m = re.search(r"\{[\s\S]*\}", s)
    if not m:
        return None

    try:
        obj = json.loads(m.group(0))
    except ValueError:
        return None
    return obj if isinstance(obj, dict) else None


def _base_url(base_url: str | None) -> str:
    use_base = (str(base_url).strip() if base_url is not None else "") or str(settings.ollama_base_url or "").strip()
    if not use_base.startswith(("http://", "https://")):
        raise AIServiceError("invalid Ollama base URL configuration")
    return use_base.rstrip("/")


def _post(path: str, payload: dict[str, Any], *, base_url: str | None = None, attempts: int = 1) -> dict[str, Any]:
    if not bool(settings.ollama_enabled):
        raise AIServiceError("ollama disabled")

    url = _base_url(base_url) + path
    timeout = httpx.Timeout(connect=4.0, read=float(settings.ollama_timeout_read_seconds), write=20.0, pool=3.0)

    last_exc: Exception | None = None
    with httpx.Client(timeout=timeout) as client:
        for attempt in range(1, max(1, attempts) + 1):
            try:
                r = client.post(url, json=payload)
                r.raise_for_status()
                data = r.json()
                if not isinstance(data, dict):
                    raise ValueError("unexpected response body")
                return data
            except (httpx.HTTPError, ValueError) as e:
                last_exc = e
                if attempt < attempts:
                    time.sleep(0.35 * attempt)

    log.warning("ollama request failed url=%s err=%s: %s", url, type(last_exc).__name__, last_exc)
    raise AIServiceError("ollama not responding") from last_exc


def ollama_chat(messages: list[dict[str, str]], *, model: str | None = None, base_url: str | None = None) -> str:
    payload = {
        "model": (str(model).strip() if model else "") or settings.ollama_model,
        "stream": False,
        "messages": messages,
    }
    data = _post("/api/chat", payload, base_url=base_url)
    message = data.get("message")
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str) or not content.strip():
        raise AIServiceError("empty chat response")
    return content


def ollama_generate_json(
    prompt: str,
    *,
    model: str | None = None,
    base_url: str | None = None,
    attempts: int = 2,
) -> dict[str, Any]:
    payload = {
        "model": (str(model).strip() if model else "") or settings.ollama_model,
        "prompt": prompt,
        "stream": False,
        "format": "json",
    }
    data = _post("/api/generate", payload, base_url=base_url, attempts=attempts)
    raw = data.get("response")
    obj = _extract_json(raw if isinstance(raw, str) else "")
    if obj is None:
        raise AIServiceError("failed to parse model output")
    return obj


def ollama_healthcheck(*, base_url: str | None = None) -> tuple[bool, str | None]:
    if not bool(settings.ollama_enabled):
        return False, "disabled"

    try:
        url = _base_url(base_url) + "/api/tags"
    except AIServiceError:
        return False, "invalid_base_url"
    try:
        with httpx.Client(timeout=2.5) as client:
            r = client.get(url)
            if r.status_code >= 400:
                snip = (r.text or "")[:200]
                return False, f"http_{r.status_code}" + (f":{snip}" if snip else "")
        return True, None
    except httpx.HTTPError as e:
        msg = str(e)[:200]
        return False, f"unreachable:{type(e).__name__}" + (f":{msg}" if msg else "") + f" url={url}"
