"""Entidades de dominio del banco de preguntas.

Este modulo concentra las entidades puras que describen el nucleo del dominio:
- Answer: respuesta posible de una pregunta (pertenece a una sola pregunta).
- Difficulty: catálogo global de dificultades (nivel 1..5).
- Theme: catálogo global de temas.
- Question: pregunta con su ciclo de moderación (validada / no validada).

Reglas generales:
- No depende de frameworks ni del ORM.
- Las entidades son inmutables; las transiciones devuelven instancias nuevas.
- Las fechas se manejan en UTC mediante `datetime.now(timezone.utc)`.

La construcción de `Question` es confiable: la validación del enunciado y de
las respuestas ocurre antes, en `QuestionValidationService`.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import List, Optional, Sequence
from uuid import UUID, uuid4

from quizbank.domain import rules
from quizbank.domain.exceptions import (
    EntityNotFoundError,
    InvalidOperationError,
    ValidationError,
)

__all__ = ["Answer", "Difficulty", "Theme", "Question"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Answer
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Answer:
    """Respuesta posible de una pregunta."""

    id: UUID
    content: str
    is_correct: bool
    question_id: UUID
    created_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        object.__setattr__(self, "content", (self.content or "").strip())
        object.__setattr__(self, "is_correct", bool(self.is_correct))

    @classmethod
    def create(cls, *, content: str, is_correct: bool, question_id: UUID) -> "Answer":
        return cls(id=uuid4(), content=content, is_correct=is_correct, question_id=question_id)


# ---------------------------------------------------------------------------
# Catálogos
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Difficulty:
    """Dificultad de referencia; `level` en [1, 5]."""

    id: UUID
    name: str
    level: int
    color: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)

    MIN_LEVEL = 1
    MAX_LEVEL = 5

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", (self.name or "").strip())
        object.__setattr__(self, "color", rules.normalize_optional(self.color))
        if not self.name:
            raise ValidationError(message="Difficulty name cannot be empty", field="name")
        if not isinstance(self.level, int) or not self.MIN_LEVEL <= self.level <= self.MAX_LEVEL:
            raise ValidationError(
                message=f"Difficulty level must be between {self.MIN_LEVEL} and {self.MAX_LEVEL}",
                field="level",
            )

    def is_max_level(self) -> bool:
        return self.level == self.MAX_LEVEL


@dataclass(frozen=True)
class Theme:
    """Tema de referencia; el nombre recortado mide entre 2 y 100 caracteres."""

    id: UUID
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    NAME_MIN_LENGTH = 2
    NAME_MAX_LENGTH = 100

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", (self.name or "").strip())
        object.__setattr__(self, "description", rules.normalize_optional(self.description))
        object.__setattr__(self, "color", rules.normalize_optional(self.color))
        if not self.NAME_MIN_LENGTH <= len(self.name) <= self.NAME_MAX_LENGTH:
            raise ValidationError(
                message=(
                    f"Theme name must be between {self.NAME_MIN_LENGTH} "
                    f"and {self.NAME_MAX_LENGTH} characters"
                ),
                field="name",
            )


# ---------------------------------------------------------------------------
# Question
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Question:
    """Pregunta del banco con su estado de moderación."""

    id: UUID
    content: str
    difficulty_id: UUID
    theme_id: UUID
    author_id: str
    explanation: Optional[str] = None
    validated: bool = False
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    REQUIRED_ANSWERS_COUNT = rules.REQUIRED_ANSWERS_COUNT
    MAX_QUESTION_AGE_DAYS = 365
    BASE_POINTS = 10
    MAX_TIME_BONUS_RATIO = 0.5
    TIME_BONUS_WINDOW_SECONDS = 60

    @classmethod
    def create(
        cls,
        *,
        content: str,
        difficulty_id: UUID,
        theme_id: UUID,
        author_id: str,
        explanation: Optional[str] = None,
    ) -> "Question":
        now = _utcnow()
        return cls(
            id=uuid4(),
            content=content,
            difficulty_id=difficulty_id,
            theme_id=theme_id,
            author_id=author_id,
            explanation=explanation,
            validated=False,
            created_at=now,
            updated_at=now,
        )

    @staticmethod
    def validate_answers_count(count: int) -> None:
        rules.ensure_answers_count(count)

    # Moderación
    def mark_as_validated(self) -> "Question":
        if self.validated:
            raise InvalidOperationError(
                message="Question is already validated",
                operation="mark_as_validated",
            )
        return replace(self, validated=True, updated_at=_utcnow())

    def mark_as_rejected(self) -> "Question":
        if not self.validated:
            raise InvalidOperationError(
                message="Cannot reject a non-validated question",
                operation="mark_as_rejected",
            )
        return replace(self, validated=False, updated_at=_utcnow())

    def can_be_modified(self) -> bool:
        return not self.validated

    def can_be_deleted(self) -> bool:
        return not self.validated

    def ensure_can_be_modified(self) -> None:
        if not self.can_be_modified():
            raise InvalidOperationError(
                message="Cannot modify a validated question",
                operation="update_content",
            )

    def update_content(
        self,
        *,
        content: str,
        explanation: Optional[str],
        difficulty_id: UUID,
        theme_id: UUID,
    ) -> "Question":
        self.ensure_can_be_modified()
        return replace(
            self,
            content=content,
            explanation=explanation,
            difficulty_id=difficulty_id,
            theme_id=theme_id,
            updated_at=_utcnow(),
        )

    # Respuestas
    def check_answer(self, answer_id: UUID, answers: Sequence["Answer"]) -> bool:
        answer = next((a for a in answers if a.id == answer_id), None)
        if answer is None:
            raise EntityNotFoundError(
                message="Answer not found",
                entity_type="Answer",
                entity_id=str(answer_id),
            )
        return answer.is_correct

    def get_shuffled_answers(self, answers: Sequence["Answer"]) -> List["Answer"]:
        return random.sample(list(answers), len(answers))

    # Puntaje
    def calculate_points(self, difficulty: Difficulty) -> int:
        return self.BASE_POINTS * difficulty.level

    def calculate_score(self, difficulty: Difficulty, time_spent_seconds: float, is_correct: bool) -> int:
        """Puntos base más un bono lineal por rapidez (máximo 50 % a los 0 s, nulo desde 60 s)."""

        if not is_correct:
            return 0
        base = self.calculate_points(difficulty)
        remaining = 1 - time_spent_seconds / self.TIME_BONUS_WINDOW_SECONDS
        bonus = max(0.0, base * self.MAX_TIME_BONUS_RATIO * remaining)
        return rules.round_half_up(base + bonus)

    # Consultas
    def is_outdated(self, max_age_days: int = MAX_QUESTION_AGE_DAYS, *, now: Optional[datetime] = None) -> bool:
        reference = now or _utcnow()
        age_days = math.floor((reference - self.created_at).total_seconds() / 86400)
        return age_days > max_age_days

    def is_authored_by(self, author_id: str) -> bool:
        return self.author_id == author_id
