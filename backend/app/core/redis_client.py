from __future__ import annotations

import redis

from app.core.config import settings

_clients: dict[str, redis.Redis] = {}


def get_redis() -> redis.Redis:
    url = settings.redis_url
    client = _clients.get(url)
    if client is None:
        client = redis.Redis.from_url(url, decode_responses=True, socket_connect_timeout=2, socket_timeout=2)
        _clients[url] = client
    return client
