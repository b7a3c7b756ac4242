"""Objetos de valor del dominio.

- ContentPolicy: reglas configurables para el enunciado de una pregunta.
- QuestionContent: enunciado validado y normalizado.
- AnswerSet: las 4 respuestas de una pregunta con sus invariantes.
- DifficultyLevel: nivel 1..5 con comparaciones semánticas.

Todos son inmutables y se comparan por valor.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple
from uuid import UUID

from quizbank.domain import rules
from quizbank.domain.entities import Answer, Difficulty
from quizbank.domain.exceptions import (
    ContentTooLongError,
    ContentTooShortError,
    EmptyContentError,
    MissingQuestionMarkError,
    ValidationError,
)

__all__ = [
    "ContentPolicy",
    "LENIENT_CONTENT_POLICY",
    "STRICT_CONTENT_POLICY",
    "CONTENT_POLICIES",
    "get_content_policy",
    "QuestionContent",
    "AnswerSet",
    "DifficultyLevel",
]


# ---------------------------------------------------------------------------
# Política de contenido
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ContentPolicy:
    """Límites aplicados al enunciado de una pregunta."""

    min_length: int = 1
    max_length: int = 500
    require_question_mark: bool = False

    def __post_init__(self) -> None:
        if self.min_length < 1:
            raise ValidationError(message="min_length must be at least 1", field="min_length")
        if self.max_length < self.min_length:
            raise ValidationError(message="max_length must be >= min_length", field="max_length")


LENIENT_CONTENT_POLICY = ContentPolicy()
STRICT_CONTENT_POLICY = ContentPolicy(min_length=10, max_length=500, require_question_mark=True)

CONTENT_POLICIES: Dict[str, ContentPolicy] = {
    "lenient": LENIENT_CONTENT_POLICY,
    "strict": STRICT_CONTENT_POLICY,
}


def get_content_policy(name: str) -> ContentPolicy:
    try:
        return CONTENT_POLICIES[(name or "").strip().lower()]
    except KeyError:
        raise ValidationError(
            message=f"Unknown content policy: {name!r}",
            field="content_policy",
        ) from None


# ---------------------------------------------------------------------------
# QuestionContent
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class QuestionContent:
    """Enunciado de pregunta ya normalizado (espacios internos colapsados)."""

    value: str

    @classmethod
    def create(cls, raw: Optional[str], policy: ContentPolicy = LENIENT_CONTENT_POLICY) -> "QuestionContent":
        trimmed = (raw or "").strip()
        if not trimmed:
            raise EmptyContentError()

        if len(trimmed) > policy.max_length:
            raise ContentTooLongError(
                message=f"Question content must not exceed {policy.max_length} characters",
                details={"max_length": policy.max_length, "length": len(trimmed)},
            )

        normalized = rules.normalize_whitespace(trimmed)
        if len(normalized) < policy.min_length:
            raise ContentTooShortError(
                message=f"Question content must be at least {policy.min_length} characters",
                details={"min_length": policy.min_length, "length": len(normalized)},
            )

        if policy.require_question_mark and "?" not in normalized:
            raise MissingQuestionMarkError()

        return cls(value=normalized)

    @property
    def length(self) -> int:
        return len(self.value)

    def equals(self, other: object) -> bool:
        return isinstance(other, QuestionContent) and other.value == self.value

    def __str__(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# AnswerSet
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnswerSet:
    """Las respuestas de una pregunta: exactamente 4, una correcta, únicas y no vacías."""

    answers: Tuple[Answer, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "answers", tuple(self.answers))
        rules.ensure_answers_count(len(self.answers))
        rules.ensure_single_correct_answer(self.answers)
        rules.ensure_answers_have_content(self.answers)
        rules.ensure_unique_answers(self.answers)

    @classmethod
    def create(cls, answers: Sequence[Answer]) -> "AnswerSet":
        return cls(answers=tuple(answers))

    @property
    def correct_answer(self) -> Answer:
        return next(answer for answer in self.answers if answer.is_correct)

    @property
    def count(self) -> int:
        return len(self.answers)

    def get_answers(self) -> List[Answer]:
        return list(self.answers)

    def has_answer(self, answer_id: UUID) -> bool:
        return any(answer.id == answer_id for answer in self.answers)

    def shuffled(self, rng: Optional[random.Random] = None) -> List[Answer]:
        """Devuelve las respuestas en orden aleatorio sin alterar el conjunto."""

        return (rng or random).sample(list(self.answers), len(self.answers))

    def __iter__(self) -> Iterator[Answer]:
        return iter(self.answers)

    def __len__(self) -> int:
        return len(self.answers)


# ---------------------------------------------------------------------------
# DifficultyLevel
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DifficultyLevel:
    """Nivel de dificultad con semántica de comparación."""

    MIN_LEVEL = 1
    MAX_LEVEL = 5

    level: int
    name: str

    def __post_init__(self) -> None:
        if not isinstance(self.level, int) or not self.MIN_LEVEL <= self.level <= self.MAX_LEVEL:
            raise ValidationError(
                message=f"Difficulty level must be between {self.MIN_LEVEL} and {self.MAX_LEVEL}",
                field="level",
            )
        name = (self.name or "").strip()
        if not name:
            raise ValidationError(message="Difficulty name cannot be empty", field="name")
        object.__setattr__(self, "name", name)

    @classmethod
    def create(cls, level: int, name: str) -> "DifficultyLevel":
        return cls(level=level, name=name)

    @classmethod
    def from_difficulty(cls, difficulty: Difficulty) -> "DifficultyLevel":
        return cls(level=difficulty.level, name=difficulty.name)

    def is_harder_than(self, other: "DifficultyLevel") -> bool:
        return self.level > other.level

    def is_easier_than(self, other: "DifficultyLevel") -> bool:
        return self.level < other.level

    def is_same_as(self, other: "DifficultyLevel") -> bool:
        return self.level == other.level

    @property
    def points_multiplier(self) -> int:
        return self.level

    def is_max_difficulty(self) -> bool:
        return self.level == self.MAX_LEVEL

    def is_min_difficulty(self) -> bool:
        return self.level == self.MIN_LEVEL
