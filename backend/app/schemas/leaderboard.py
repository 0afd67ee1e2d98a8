from __future__ import annotations

from typing import Any

from app.schemas.common import CamelModel


class LeaderboardEntryOut(CamelModel):
    id: str
    name: str
    category: str
    total_score: int | float
    last_activity: int


class LeaderboardResponse(CamelModel):
    leaderboard: list[LeaderboardEntryOut]


class ScoreSubmitRequest(CamelModel):
    # Validated by the ranking service so malformed values map to invalid_input.
    category: Any = None
    score: Any = None


class ScoreSubmitResponse(CamelModel):
    message: str
    previous_rank: int
    new_rank: int
    rank_changed: bool
