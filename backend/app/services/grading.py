from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from app.models.exercise import Exercise

BUILTIN_HELP = "Commandes disponibles: ls, pwd, whoami, mkdir, cd, chmod, echo, help"
DEFAULT_MATCH_OUTPUT = "Commande exécutée avec succès"
CODE_OK_MESSAGE = "Code correct!"
DEFAULT_CODE_FAILURE = "Votre code ne répond pas encore à la consigne"


@dataclass(frozen=True)
class ExactTokens:
    expected: str
    tokens: tuple[str, ...]

    @property
    def verb(self) -> str:
        return self.tokens[0]


@dataclass(frozen=True)
class FlagSet:
    expected: str
    verb: str
    flags: frozenset[str]


@dataclass(frozen=True)
class Prefix:
    expected: str
    verb: str


@dataclass(frozen=True)
class Substring:
    expected: str


MatchRule = Union[ExactTokens, FlagSet, Prefix, Substring]


@dataclass(frozen=True)
class TerminalResult:
    output: str
    correct: bool
    hint: str | None = None


@dataclass(frozen=True)
class CodeResult:
    correct: bool
    message: str


def normalize_command(command: str) -> str:
    return re.sub(r"\s+", " ", (command or "").strip()).lower()


def _flag_letters(tokens: list[str]) -> set[str]:
    letters: set[str] = set()
    for tok in tokens:
        if tok.startswith("-"):
            letters.update(ch for ch in tok if ch.isalpha())
    return letters


def parse_match_rule(validation: str) -> MatchRule:
    expected = normalize_command(validation)
    parts = expected.split(" ") if expected else []
    verb = parts[0] if parts else ""

    if verb == "ls" and {"l", "a"} <= _flag_letters(parts[1:]):
        return FlagSet(expected=expected, verb="ls", flags=frozenset({"l", "a"}))
    if verb == "mkdir":
        if len(parts) > 1:
            return ExactTokens(expected=expected, tokens=("mkdir", parts[1]))
        return Prefix(expected=expected, verb="mkdir")
    if verb == "chmod":
        return Prefix(expected=expected, verb="chmod")
    return Substring(expected=expected)


def rule_matches(rule: MatchRule, command: str) -> bool:
    normalized = normalize_command(command)
    parts = normalized.split(" ") if normalized else []
    verb = parts[0] if parts else ""

    if isinstance(rule, FlagSet) and verb == rule.verb:
        return rule.flags <= _flag_letters(parts[1:])
    if isinstance(rule, ExactTokens) and verb == rule.verb:
        return tuple(parts) == rule.tokens
    if isinstance(rule, Prefix) and verb == rule.verb:
        return True
    # Family rules only decide for their own verb; anything else is a substring test.
    return bool(rule.expected) and rule.expected in normalized


def _builtin_output(command: str) -> str | None:
    clean = (command or "").strip()
    lower = clean.lower()
    if lower == "pwd":
        return "/home/user"
    if lower == "whoami":
        return "user"
    if lower.startswith("echo "):
        return clean[5:]
    if lower == "help":
        return BUILTIN_HELP
    return None


def grade_terminal_submission(command: str, exercise: Exercise) -> TerminalResult:
    builtin = _builtin_output(command)
    if builtin is not None:
        return TerminalResult(output=builtin, correct=False)

    if rule_matches(parse_match_rule(exercise.validation), command):
        return TerminalResult(output=exercise.output or DEFAULT_MATCH_OUTPUT, correct=True)

    return TerminalResult(output=f"commande non reconnue: {command}", correct=False, hint=exercise.hint)


def _code_matches(clean: str, exercise: Exercise) -> bool:
    source = exercise.pattern or exercise.validation
    try:
        return re.search(source, clean, re.IGNORECASE | re.DOTALL) is not None
    except re.error:
        return normalize_command(source) in clean


def grade_code_submission(code: str, exercise: Exercise) -> CodeResult:
    clean = re.sub(r"\s+", " ", (code or "").lower())
    if _code_matches(clean, exercise):
        return CodeResult(correct=True, message=CODE_OK_MESSAGE)
    return CodeResult(correct=False, message=exercise.failure_message or DEFAULT_CODE_FAILURE)
