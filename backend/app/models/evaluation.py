import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from app.core.clock import now_ms
from app.models.exercise import Exercise


class SessionState(str, Enum):
    not_started = "not_started"
    in_progress = "in_progress"
    completed = "completed"


class EvaluationSession(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str | None = Field(default=None, alias="userId")
    source: str = "standard"
    exercises: list[Exercise]
    current_exercise: int = Field(default=0, alias="currentExercise")
    score: int = 0
    completed: bool = False
    time_limit: int | None = Field(default=None, alias="timeLimit")
    start_time: int = Field(default_factory=now_ms, alias="startTime")
    score_recorded: bool = Field(default=False, alias="scoreRecorded")

    @property
    def state(self) -> SessionState:
        return SessionState.completed if self.completed else SessionState.in_progress

    @property
    def total_points(self) -> int:
        return sum(int(ex.points) for ex in self.exercises)
