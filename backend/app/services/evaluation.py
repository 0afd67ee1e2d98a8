"""Graded evaluation sessions.

A session moves NotStarted -> InProgress -> Completed. NotStarted is the
absence of a stored session; Completed is terminal. Every operation first
applies the time budget, so a late submission finds the session already
completed and earns nothing for the exercise in progress.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable

from pydantic import ValidationError

from app.core.clock import now_ms
from app.core.config import settings
from app.core.errors import InvalidInputError, NoExercisesError, SessionCompletedError
from app.core.redis_client import get_redis
from app.models.evaluation import EvaluationSession
from app.models.exercise import Exercise
from app.services.grading import CodeResult, TerminalResult, grade_code_submission, grade_terminal_submission

log = logging.getLogger(__name__)

DEFAULT_AI_TIME_LIMIT = 1800


def start_session(
    exercises: Iterable[Exercise],
    *,
    user_id: str | None = None,
    time_limit: int | None = None,
    source: str = "standard",
    now: int | None = None,
) -> EvaluationSession:
    items = list(exercises)
    if not items:
        raise NoExercisesError("evaluation has no exercises")
    return EvaluationSession(
        user_id=user_id,
        source=source,
        exercises=items,
        time_limit=time_limit,
        start_time=now if now is not None else now_ms(),
    )


def time_budget_elapsed(session: EvaluationSession, now: int | None = None) -> bool:
    if not session.time_limit:
        return False
    current = now if now is not None else now_ms()
    return (current - session.start_time) / 1000 >= session.time_limit


def check_time_budget(session: EvaluationSession, now: int | None = None) -> bool:
    """Complete the session if its time budget is spent. Returns True on that transition."""
    if session.completed or not time_budget_elapsed(session, now):
        return False
    session.completed = True
    return True


def current_exercise(session: EvaluationSession) -> Exercise | None:
    if session.completed or not session.exercises:
        return None
    return session.exercises[session.current_exercise]


def _credit_current(session: EvaluationSession) -> None:
    exercise = session.exercises[session.current_exercise]
    session.score += int(exercise.points)
    if session.current_exercise >= len(session.exercises) - 1:
        session.completed = True
    else:
        session.current_exercise += 1


def _exercise_in_progress(session: EvaluationSession, expected_type: str, now: int | None) -> Exercise:
    check_time_budget(session, now)
    if session.completed:
        raise SessionCompletedError("evaluation already completed")
    exercise = session.exercises[session.current_exercise]
    if exercise.type != expected_type:
        raise InvalidInputError(f"current exercise is not a {expected_type} exercise")
    return exercise


def submit_terminal(session: EvaluationSession, command: str, now: int | None = None) -> TerminalResult:
    if not (command or "").strip():
        raise InvalidInputError("command required")
    exercise = _exercise_in_progress(session, "terminal", now)
    result = grade_terminal_submission(command, exercise)
    if result.correct:
        _credit_current(session)
    return result


def submit_code(session: EvaluationSession, code: str, now: int | None = None) -> CodeResult:
    if not (code or "").strip():
        raise InvalidInputError("code required")
    exercise = _exercise_in_progress(session, "code", now)
    result = grade_code_submission(code, exercise)
    if result.correct:
        _credit_current(session)
    return result


def percentage(score: int, total_points: int) -> int:
    # Half-up rounding, 12.5 -> 13.
    return int(math.floor(100 * score / total_points + 0.5))


def finalize_session(session: EvaluationSession, now: int | None = None) -> int:
    total = session.total_points
    if not session.exercises or total <= 0:
        raise NoExercisesError("evaluation has no exercises")
    check_time_budget(session, now)
    session.completed = True
    return percentage(session.score, total)


def evaluation_category(exercises: Iterable[Exercise]) -> str:
    kinds = {ex.type for ex in exercises}
    if {"terminal", "code"} <= kinds:
        return "Général"
    if "terminal" in kinds:
        return "Systèmes Linux"
    return "Programmation"


class EvaluationSessionStore:
    """Keeps one in-flight evaluation per user in Redis."""

    def __init__(self, redis_client=None):
        self._r = redis_client if redis_client is not None else get_redis()

    @staticmethod
    def _key(user_id: str) -> str:
        return f"eval_session:{user_id}"

    def load(self, user_id: str) -> EvaluationSession | None:
        raw = self._r.get(self._key(user_id))
        if raw is None:
            return None
        try:
            return EvaluationSession.model_validate_json(raw)
        except ValidationError:
            log.warning("dropping corrupted evaluation session user_id=%s", user_id)
            self._r.delete(self._key(user_id))
            return None

    def save(self, session: EvaluationSession) -> None:
        ttl = int(settings.evaluation_session_ttl_seconds)
        if session.time_limit:
            ttl = max(ttl, int(session.time_limit) + 600)
        self._r.set(self._key(str(session.user_id)), session.model_dump_json(by_alias=True), ex=ttl)

    def delete(self, user_id: str) -> None:
        self._r.delete(self._key(user_id))
