from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from app.core.security import get_current_user
from app.db.repositories import UserRepository
from app.db.session import get_user_repository
from app.models.user import User
from app.schemas.leaderboard import LeaderboardResponse, ScoreSubmitRequest, ScoreSubmitResponse
from app.services.notifications import notify_ranking_change
from app.services.ranking import Notifier, RankingChangeEvent, compute_leaderboard, submit_score

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


def background_notifier(background_tasks: BackgroundTasks) -> Notifier:
    def _emit(event: RankingChangeEvent) -> None:
        background_tasks.add_task(notify_ranking_change, event)

    return _emit


@router.get("", response_model=LeaderboardResponse)
def leaderboard(
    category: str | None = Query(default=None),
    repo: UserRepository = Depends(get_user_repository),
):
    entries = compute_leaderboard(repo.load_all(), category or None)
    return {"leaderboard": [asdict(e) for e in entries]}


@router.post("", response_model=ScoreSubmitResponse)
def add_score(
    body: ScoreSubmitRequest,
    background_tasks: BackgroundTasks,
    repo: UserRepository = Depends(get_user_repository),
    user: User = Depends(get_current_user),
):
    result = submit_score(repo, user.id, body.category, body.score, notify=background_notifier(background_tasks))
    return {
        "message": "Score added successfully",
        "previousRank": result.previous_rank,
        "newRank": result.new_rank,
        "rankChanged": result.rank_changed,
    }
