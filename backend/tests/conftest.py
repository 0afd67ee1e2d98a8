import sys
import time
import uuid
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

backend_dir = Path(__file__).resolve().parents[1]
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from app.core.config import settings
from app.db.session import get_user_repository
from app.main import create_app
from app.models.user import User
from app.services.accounts import hash_password

PASSWORD = "testpass123"


class _MemoryRedis:
    def __init__(self):
        self._data: dict[str, tuple[str, float | None]] = {}

    def ping(self):
        return True

    def flushall(self):
        self._data.clear()
        return True

    def _now(self) -> float:
        return time.time()

    def _get_entry(self, key: str):
        v = self._data.get(key)
        if not v:
            return None
        value, exp = v
        if exp is not None and exp <= self._now():
            self._data.pop(key, None)
            return None
        return value, exp

    def get(self, key: str):
        entry = self._get_entry(key)
        return entry[0] if entry else None

    def set(self, key: str, value: str, ex: int | None = None):
        exp = (self._now() + int(ex)) if ex else None
        self._data[key] = (value, exp)
        return True

    def delete(self, key: str):
        return 1 if self._data.pop(key, None) is not None else 0

    def incr(self, key: str):
        cur = self.get(key)
        n = int(cur or 0) + 1
        _, exp = self._data.get(key, ("", None))
        self._data[key] = (str(n), exp)
        return n

    def expire(self, key: str, seconds: int):
        entry = self._get_entry(key)
        if not entry:
            return False
        value, _ = entry
        self._data[key] = (value, self._now() + int(seconds))
        return True

    def ttl(self, key: str):
        entry = self._get_entry(key)
        if not entry:
            return -2
        _, exp = entry
        if exp is None:
            return -1
        return max(0, int(exp - self._now()))


# Stub Redis at import time (rate limiting + evaluation sessions).
_mem_redis = _MemoryRedis()
import app.core.redis_client as redis_client_module

redis_client_module.get_redis = lambda: _mem_redis

import app.core.rate_limit as rate_limit_module
rate_limit_module.get_redis = lambda: _mem_redis

import app.services.evaluation as evaluation_module
evaluation_module.get_redis = lambda: _mem_redis


@pytest.fixture(autouse=True)
def _isolated_state(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "data_dir", str(tmp_path / "data"))
    monkeypatch.setattr(settings, "ollama_enabled", False)
    monkeypatch.setattr(settings, "smtp_enabled", False)
    _mem_redis.flushall()
    yield


@pytest.fixture()
def memory_redis():
    return _mem_redis


@pytest.fixture()
def client():
    app = create_app()
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def make_user():
    def _make(
        *,
        name: str | None = None,
        email: str | None = None,
        category: str = "Réseaux",
        validated: bool = True,
        password: str = PASSWORD,
    ) -> User:
        suffix = uuid.uuid4().hex[:8]
        user = User(
            email=email or f"user_{suffix}@example.com",
            password=hash_password(password),
            name=name or f"User {suffix}",
            category=category,
            validated=validated,
        )
        repo = get_user_repository()
        with repo.locked():
            users = repo.load_all()
            users.append(user)
            repo.save_all(users)
        return user

    return _make


@pytest.fixture()
def login(client):
    def _login(email: str, password: str = PASSWORD) -> dict[str, str]:
        r = client.post("/auth/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['accessToken']}"}

    return _login


@pytest.fixture()
def auth_headers(make_user, login):
    user = make_user()
    return login(user.email)


@pytest.fixture()
def admin_headers(make_user, login):
    user = make_user(category="Administration")
    return login(user.email)
