from __future__ import annotations

import logging
from typing import Iterable

from pydantic import BaseModel, Field, ValidationError, field_validator

from app.core.errors import AIServiceError, InvalidInputError
from app.models.document import Document
from app.models.exercise import Exercise
from app.services.evaluation import DEFAULT_AI_TIME_LIMIT
from app.services.ollama import ollama_generate_json

log = logging.getLogger(__name__)

QUIZ_CONTEXT_LIMIT = 4000
CODE_CONTEXT_LIMIT = 6000

DEFAULT_QUIZ_CONTEXT = (
    "BTS CIEL: Cybersécurité, Informatique et réseaux, Électronique. "
    "Formation technique en systèmes informatiques, réseaux, et électronique."
)

CODE_EXTENSIONS = (".py", ".js", ".java", ".c", ".cpp", ".sh")
CODE_MARKERS = ("function", "def ", "class ")


class QuizQuestion(BaseModel):
    question: str
    options: list[str] = Field(min_length=2)
    correct_answer: int = Field(alias="correctAnswer")
    explanation: str = ""

    @field_validator("correct_answer")
    @classmethod
    def _non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("correctAnswer must be a valid option index")
        return v


class Quiz(BaseModel):
    title: str
    questions: list[QuizQuestion] = Field(min_length=1)


class GeneratedEvaluation(BaseModel):
    exercises: list[Exercise] = Field(default_factory=list)
    time_limit: int = Field(default=DEFAULT_AI_TIME_LIMIT, alias="timeLimit", gt=0)


FALLBACK_QUIZ = {
    "title": "Quiz BTS CIEL - Général",
    "questions": [
        {
            "question": "Qu'est-ce que le BTS CIEL?",
            "options": [
                "Cybersécurité, Informatique et réseaux, Électronique",
                "Commerce International et Économie Locale",
                "Construction Infrastructure et Équipement Lourd",
                "Cuisine Internationale et Événementiel",
            ],
            "correctAnswer": 0,
            "explanation": "BTS CIEL signifie Cybersécurité, Informatique et réseaux, Électronique.",
        },
        {
            "question": "Quel protocole est utilisé pour l'accès sécurisé à distance sur Linux?",
            "options": ["FTP", "SSH", "HTTP", "SMTP"],
            "correctAnswer": 1,
            "explanation": "SSH (Secure Shell) est le protocole standard pour l'accès sécurisé à distance.",
        },
        {
            "question": "Quelle commande Linux permet de lister les fichiers?",
            "options": ["dir", "list", "ls", "show"],
            "correctAnswer": 2,
            "explanation": "La commande 'ls' (list) est utilisée pour lister les fichiers et répertoires.",
        },
        {
            "question": "Quel est le port par défaut du protocole HTTP?",
            "options": ["21", "22", "80", "443"],
            "correctAnswer": 2,
            "explanation": "Le port 80 est le port par défaut pour le protocole HTTP.",
        },
        {
            "question": "Que signifie l'acronyme RAM?",
            "options": [
                "Read Access Memory",
                "Random Access Memory",
                "Rapid Action Module",
                "Remote Access Method",
            ],
            "correctAnswer": 1,
            "explanation": "RAM signifie Random Access Memory (Mémoire à Accès Aléatoire).",
        },
    ],
}


def fallback_quiz() -> Quiz:
    return Quiz.model_validate(FALLBACK_QUIZ)


def _quiz_prompt(context: str) -> str:
    return (
        "À partir du contenu suivant, génère un quiz de 5 questions à choix multiples pour tester les connaissances. "
        "Format JSON exact:\n\n"
        "{\n"
        '  "title": "Quiz sur [sujet]",\n'
        '  "questions": [\n'
        "    {\n"
        '      "question": "Question claire et précise?",\n'
        '      "options": ["Option A", "Option B", "Option C", "Option D"],\n'
        '      "correctAnswer": 0,\n'
        '      "explanation": "Explication de la réponse correcte"\n'
        "    }\n"
        "  ]\n"
        "}\n\n"
        f"Contenu:\n{context}\n\n"
        "Génère UNIQUEMENT le JSON, sans texte avant ou après."
    )


def _evaluation_prompt(code: str) -> str:
    return (
        "Analyse ce code et génère 3-5 exercices d'évaluation pratiques basés sur ce code. Format JSON exact:\n\n"
        "{\n"
        '  "exercises": [\n'
        "    {\n"
        '      "id": "auto-1",\n'
        '      "title": "Titre de l\'exercice",\n'
        '      "description": "Description courte",\n'
        '      "type": "terminal" ou "code",\n'
        '      "task": "Tâche détaillée à accomplir",\n'
        '      "validation": "critère de validation ou pattern regex",\n'
        '      "points": 10-20\n'
        "    }\n"
        "  ],\n"
        '  "timeLimit": 1800\n'
        "}\n\n"
        f"Code à analyser:\n{code}\n\n"
        "Génère UNIQUEMENT le JSON, sans texte avant ou après. Les exercices doivent tester la compréhension du code, "
        "la capacité à le modifier, à déboguer, ou à écrire du code similaire."
    )


def quiz_context(documents: Iterable[Document]) -> str:
    context = "\n\n".join(d.content for d in documents if d.content)[:QUIZ_CONTEXT_LIMIT]
    return context if context.strip() else DEFAULT_QUIZ_CONTEXT


def _valid_quiz(quiz: Quiz) -> bool:
    return all(q.correct_answer < len(q.options) for q in quiz.questions)


def generate_quiz(documents: list[Document]) -> Quiz:
    if not documents:
        raise InvalidInputError("no documents available, please upload documents first")

    try:
        quiz = Quiz.model_validate(ollama_generate_json(_quiz_prompt(quiz_context(documents))))
    except AIServiceError as e:
        log.warning("quiz generation failed, serving fallback quiz: %s", e)
        return fallback_quiz()
    except ValidationError:
        log.warning("quiz generation returned an invalid quiz, serving fallback quiz")
        return fallback_quiz()

    if not _valid_quiz(quiz):
        log.warning("quiz generation returned out-of-range answers, serving fallback quiz")
        return fallback_quiz()
    return quiz


def is_code_document(doc: Document) -> bool:
    if not doc.content:
        return False
    name = doc.name.lower()
    return name.endswith(CODE_EXTENSIONS) or any(marker in doc.content for marker in CODE_MARKERS)


def code_context(documents: Iterable[Document]) -> str:
    return "\n\n".join(f"// File: {d.name}\n{d.content}" for d in documents)[:CODE_CONTEXT_LIMIT]


def generate_evaluation_exercises(documents: list[Document], document_ids: list[str]) -> GeneratedEvaluation:
    if not document_ids:
        raise InvalidInputError("no documents specified")

    wanted = set(document_ids)
    code_docs = [d for d in documents if d.id in wanted and is_code_document(d)]
    if not code_docs:
        raise InvalidInputError("no code documents found, please select files containing code")

    obj = ollama_generate_json(_evaluation_prompt(code_context(code_docs)))
    try:
        generated = GeneratedEvaluation.model_validate(obj)
    except ValidationError as e:
        raise AIServiceError("failed to parse evaluation data") from e
    if not generated.exercises:
        raise AIServiceError("model returned no exercises")
    return generated
