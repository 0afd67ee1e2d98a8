from __future__ import annotations

from app.schemas.common import CamelModel


class ExercisePublic(CamelModel):
    id: str
    title: str
    description: str
    type: str
    task: str
    points: int


class EvaluationSessionOut(CamelModel):
    session_id: str
    source: str
    state: str
    exercises: list[ExercisePublic]
    current_exercise: int
    score: int
    completed: bool
    time_limit: int | None = None
    start_time: int
    time_remaining: int | None = None


class GenerateEvaluationRequest(CamelModel):
    document_ids: list[str] = []


class ExecuteCommandRequest(CamelModel):
    command: str = ""


class ExecuteCommandResponse(CamelModel):
    output: str
    correct: bool
    hint: str | None = None
    session: EvaluationSessionOut


class SubmitCodeRequest(CamelModel):
    code: str = ""


class SubmitCodeResponse(CamelModel):
    correct: bool
    message: str
    session: EvaluationSessionOut


class FinishEvaluationResponse(CamelModel):
    score: int
    total_points: int
    percentage: int
    category: str
    previous_rank: int | None = None
    new_rank: int | None = None
    rank_changed: bool = False
    session: EvaluationSessionOut
