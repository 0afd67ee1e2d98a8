from __future__ import annotations

from app.schemas.common import CamelModel


class QuizQuestionOut(CamelModel):
    question: str
    options: list[str]
    correct_answer: int
    explanation: str = ""


class QuizResponse(CamelModel):
    title: str
    questions: list[QuizQuestionOut]
