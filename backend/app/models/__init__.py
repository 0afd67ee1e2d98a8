from app.models.doc import Doc
from app.models.document import Document
from app.models.evaluation import EvaluationSession, SessionState
from app.models.exercise import Exercise
from app.models.user import ScoreRecord, User

__all__ = [
    "Doc",
    "Document",
    "EvaluationSession",
    "Exercise",
    "ScoreRecord",
    "SessionState",
    "User",
]
