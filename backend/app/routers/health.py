import logging
import os

from fastapi import APIRouter, HTTPException

from app.core.config import settings
from app.services.ollama import ollama_healthcheck

log = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/health/live")
def live():
    return {"status": "live"}


@router.get("/health/ready")
def ready():
    data_path = settings.data_path
    try:
        data_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise HTTPException(status_code=503, detail="data dir not ready") from e
    if not os.access(data_path, os.W_OK):
        raise HTTPException(status_code=503, detail="data dir not writable")
    return {"status": "ready"}


@router.get("/health/ollama")
def ollama():
    ok, error = ollama_healthcheck()
    if not ok:
        log.info("ollama health check failed: %s", error)
    return {"ok": ok, "model": settings.ollama_model, "error": error}
