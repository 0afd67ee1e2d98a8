from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends

from app.core.clock import now_ms
from app.core.errors import NotFoundError
from app.core.rate_limit import rate_limit
from app.core.security import get_current_user
from app.db.repositories import DocumentRepository, UserRepository
from app.db.session import get_document_repository, get_user_repository
from app.models.evaluation import EvaluationSession
from app.models.user import User
from app.routers.leaderboard import background_notifier
from app.schemas.evaluation import (
    EvaluationSessionOut,
    ExecuteCommandRequest,
    ExecuteCommandResponse,
    FinishEvaluationResponse,
    GenerateEvaluationRequest,
    SubmitCodeRequest,
    SubmitCodeResponse,
)
from app.services.evaluation import (
    EvaluationSessionStore,
    check_time_budget,
    evaluation_category,
    finalize_session,
    start_session,
    submit_code,
    submit_terminal,
)
from app.services.exercises import standard_exercises
from app.services.quiz_generation import generate_evaluation_exercises
from app.services.ranking import submit_score

router = APIRouter(prefix="/evaluation", tags=["evaluation"])


def get_session_store() -> EvaluationSessionStore:
    return EvaluationSessionStore()


def session_out(session: EvaluationSession, now: int) -> dict:
    remaining = None
    if session.time_limit:
        elapsed = (now - session.start_time) // 1000
        remaining = max(0, int(session.time_limit) - int(elapsed))
    return {
        "sessionId": session.id,
        "source": session.source,
        "state": session.state.value,
        "exercises": [
            {
                "id": ex.id,
                "title": ex.title,
                "description": ex.description,
                "type": ex.type,
                "task": ex.task,
                "points": ex.points,
            }
            for ex in session.exercises
        ],
        "currentExercise": session.current_exercise,
        "score": session.score,
        "completed": session.completed,
        "timeLimit": session.time_limit,
        "startTime": session.start_time,
        "timeRemaining": remaining,
    }


def _load_session(store: EvaluationSessionStore, user: User) -> EvaluationSession:
    session = store.load(user.id)
    if session is None:
        raise NotFoundError("no evaluation in progress")
    return session


@router.post("/start", response_model=EvaluationSessionOut)
def start(
    user: User = Depends(get_current_user),
    store: EvaluationSessionStore = Depends(get_session_store),
):
    now = now_ms()
    session = start_session(standard_exercises(), user_id=user.id, now=now)
    store.save(session)
    return session_out(session, now)


@router.post("/generate", response_model=EvaluationSessionOut)
def generate(
    body: GenerateEvaluationRequest,
    user: User = Depends(get_current_user),
    documents: DocumentRepository = Depends(get_document_repository),
    store: EvaluationSessionStore = Depends(get_session_store),
    _: object = rate_limit(key_prefix="evaluation_generate", limit=5, window_seconds=60),
):
    generated = generate_evaluation_exercises(documents.load_all(), body.document_ids)
    now = now_ms()
    session = start_session(
        generated.exercises,
        user_id=user.id,
        time_limit=generated.time_limit,
        source="ai",
        now=now,
    )
    store.save(session)
    return session_out(session, now)


@router.get("/session", response_model=EvaluationSessionOut)
def current(
    user: User = Depends(get_current_user),
    store: EvaluationSessionStore = Depends(get_session_store),
):
    now = now_ms()
    session = _load_session(store, user)
    if check_time_budget(session, now):
        store.save(session)
    return session_out(session, now)


@router.post("/execute", response_model=ExecuteCommandResponse)
def execute(
    body: ExecuteCommandRequest,
    user: User = Depends(get_current_user),
    store: EvaluationSessionStore = Depends(get_session_store),
):
    now = now_ms()
    session = _load_session(store, user)
    try:
        result = submit_terminal(session, body.command, now)
    finally:
        # Persist time-budget expiry even when the submission is rejected.
        store.save(session)
    return {
        "output": result.output,
        "correct": result.correct,
        "hint": result.hint,
        "session": session_out(session, now),
    }


@router.post("/submit", response_model=SubmitCodeResponse)
def submit(
    body: SubmitCodeRequest,
    user: User = Depends(get_current_user),
    store: EvaluationSessionStore = Depends(get_session_store),
):
    now = now_ms()
    session = _load_session(store, user)
    try:
        result = submit_code(session, body.code, now)
    finally:
        store.save(session)
    return {"correct": result.correct, "message": result.message, "session": session_out(session, now)}


@router.post("/finish", response_model=FinishEvaluationResponse)
def finish(
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    store: EvaluationSessionStore = Depends(get_session_store),
    users: UserRepository = Depends(get_user_repository),
):
    now = now_ms()
    session = _load_session(store, user)
    pct = finalize_session(session, now)
    category = evaluation_category(session.exercises)

    out = {
        "score": session.score,
        "totalPoints": session.total_points,
        "percentage": pct,
        "category": category,
    }
    # Only a positive score earns a leaderboard entry.
    if not session.score_recorded and session.score > 0:
        result = submit_score(users, user.id, category, session.score, notify=background_notifier(background_tasks))
        out.update(
            previousRank=result.previous_rank,
            newRank=result.new_rank,
            rankChanged=result.rank_changed,
        )
    session.score_recorded = True
    store.save(session)
    out["session"] = session_out(session, now)
    return out
