from __future__ import annotations

import logging
from typing import Any

import httpx

from app.core.config import settings
from app.core.errors import InvalidInputError

log = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"
GITHUB_HEADERS = {
    "Accept": "application/vnd.github.v3+json",
    "User-Agent": "eduIA-CIEL-App",
}


def compare_versions(current: str, latest: str) -> int:
    """1 when `latest` is newer, -1 when older, 0 when equal (major.minor.patch)."""

    def _parts(v: str) -> list[int]:
        out: list[int] = []
        for p in str(v or "").split(".")[:3]:
            try:
                out.append(int(p))
            except ValueError:
                out.append(0)
        return out + [0] * (3 - len(out))

    for c, l in zip(_parts(current), _parts(latest)):
        if l > c:
            return 1
        if l < c:
            return -1
    return 0


def _get_json(path: str) -> dict[str, Any] | None:
    url = f"{GITHUB_API}/repos/{settings.github_repo}{path}"
    try:
        with httpx.Client(timeout=httpx.Timeout(5.0), headers=GITHUB_HEADERS) as client:
            r = client.get(url)
            if r.status_code == 404:
                return None
            r.raise_for_status()
            data = r.json()
    except (httpx.HTTPError, ValueError) as e:
        log.warning("github request failed url=%s err=%s", url, e)
        return None
    return data if isinstance(data, dict) else None


def latest_release() -> dict[str, Any] | None:
    return _get_json("/releases/latest")


def latest_commit() -> dict[str, Any] | None:
    return _get_json("/commits/main")


def _release_version(release: dict[str, Any]) -> str:
    tag = str(release.get("tag_name") or "")
    return tag[1:] if tag.startswith("v") else tag


def check_for_updates() -> dict[str, Any]:
    current = settings.app_version
    out: dict[str, Any] = {
        "currentVersion": current,
        "updateAvailable": False,
        "latestVersion": None,
        "releaseNotes": None,
        "releaseUrl": None,
        "publishedAt": None,
        "lastCommit": None,
    }

    release = latest_release()
    if release:
        latest = _release_version(release)
        out["updateAvailable"] = compare_versions(current, latest) > 0
        out["latestVersion"] = latest
        out["releaseNotes"] = release.get("body")
        out["releaseUrl"] = release.get("html_url")
        out["publishedAt"] = release.get("published_at")

    commit = latest_commit()
    if commit:
        info = commit.get("commit") or {}
        author = info.get("author") or {}
        out["lastCommit"] = {
            "sha": str(commit.get("sha") or "")[:7],
            "message": info.get("message"),
            "author": author.get("name"),
            "date": author.get("date"),
            "url": commit.get("html_url"),
        }

    return out


def update_instructions(action: str) -> dict[str, Any]:
    if action != "update":
        raise InvalidInputError("invalid action")

    release = latest_release()
    if not release:
        raise InvalidInputError("no updates available")

    latest = _release_version(release)
    if compare_versions(settings.app_version, latest) <= 0:
        return {"message": "Already on latest version", "version": settings.app_version, "instructions": []}

    tag = str(release.get("tag_name") or latest)
    steps = [
        "git fetch origin",
        f"git checkout {tag}",
        "pip install -e .",
        "systemctl restart eduia-ciel",
    ]
    log.warning("update requested current=%s latest=%s steps=%s", settings.app_version, latest, " && ".join(steps))
    return {
        "message": "Update instructions logged. Manual update required.",
        "version": latest,
        "instructions": steps,
    }
