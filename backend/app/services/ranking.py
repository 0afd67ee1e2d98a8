"""Leaderboard ordering and rank bookkeeping for score submissions.

The leaderboard and rank helpers are pure functions over a list of users;
`submit_score` is the only operation touching storage, through a
repository offering ``load_all``/``save_all``/``locked``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from numbers import Real
from typing import Callable, Iterable, Protocol

from app.core.clock import now_ms
from app.core.errors import InvalidInputError, NotFoundError
from app.models.user import ScoreRecord, User

log = logging.getLogger(__name__)


class UserStore(Protocol):
    def load_all(self) -> list[User]: ...

    def save_all(self, items: list[User]) -> None: ...

    def locked(self): ...


@dataclass(frozen=True)
class LeaderboardEntry:
    id: str
    name: str
    category: str
    total_score: int | float
    last_activity: int


@dataclass(frozen=True)
class RankingChangeEvent:
    user_name: str
    user_email: str
    category: str
    old_rank: int
    new_rank: int
    total_score: int | float


@dataclass(frozen=True)
class ScoreSubmission:
    previous_rank: int
    new_rank: int
    total_score: int | float

    @property
    def rank_changed(self) -> bool:
        return self.previous_rank != self.new_rank


Notifier = Callable[[RankingChangeEvent], None]


def category_total(user: User, category: str | None) -> int | float:
    return sum(s.score for s in user.scores if not category or s.category == category)


def _last_activity(user: User) -> int:
    if user.scores:
        return max(s.date for s in user.scores)
    return user.created_at


def compute_leaderboard(users: Iterable[User], category: str | None = None) -> list[LeaderboardEntry]:
    entries = [
        LeaderboardEntry(
            id=u.id,
            name=u.name,
            category=u.category,
            total_score=category_total(u, category),
            last_activity=_last_activity(u),
        )
        for u in users
        if u.validated
    ]
    # sorted() is stable: ties keep the collection order.
    return sorted(entries, key=lambda e: e.total_score, reverse=True)


def compute_rank(users: Iterable[User], user_id: str, category: str) -> int:
    """1-based position of `user_id` in the per-category ordering, 0 if absent."""
    for pos, entry in enumerate(compute_leaderboard(users, category), start=1):
        if entry.id == user_id:
            return pos
    return 0


def _validate_submission(category: object, score: object) -> None:
    if not isinstance(category, str) or not category.strip():
        raise InvalidInputError("category and score are required")
    if isinstance(score, bool) or not isinstance(score, Real):
        raise InvalidInputError("category and score are required")
    if not math.isfinite(score):
        raise InvalidInputError("score must be a finite number")
    if score < 0:
        raise InvalidInputError("score must not be negative")


def submit_score(
    repository: UserStore,
    user_id: str,
    category: str,
    score: int | float,
    notify: Notifier | None = None,
) -> ScoreSubmission:
    _validate_submission(category, score)

    with repository.locked():
        users = repository.load_all()
        user = next((u for u in users if u.id == user_id), None)
        if user is None:
            raise NotFoundError("user not found")

        # A user with no record in this category has no previous rank in it.
        had_entries = any(s.category == category for s in user.scores)
        previous_rank = compute_rank(users, user_id, category) if had_entries else 0

        user.scores.append(ScoreRecord(category=category, score=score, date=now_ms()))
        repository.save_all(users)

        new_rank = compute_rank(users, user_id, category)
        total = category_total(user, category)

    result = ScoreSubmission(previous_rank=previous_rank, new_rank=new_rank, total_score=total)

    if result.rank_changed and previous_rank > 0 and notify is not None:
        event = RankingChangeEvent(
            user_name=user.name,
            user_email=user.email,
            category=category,
            old_rank=previous_rank,
            new_rank=new_rank,
            total_score=total,
        )
        try:
            notify(event)
        except Exception:
            log.exception("failed to emit ranking change notification user_id=%s", user_id)

    return result
