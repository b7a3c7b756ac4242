# -*- coding: utf-8 -*-
"""
Comandos (DTOs inmutables) para la capa de aplicación.

Estos objetos encapsulan parámetros de entrada y resultados de los casos de
uso, sin introducir dependencias de infraestructura ni lógica de negocio.

Convenciones:
- Los comandos son `@dataclass(frozen=True)` para favorecer inmutabilidad.
- Las respuestas de una pregunta viajan como `AnswerDraft` del dominio.
- Las secuencias se guardan como tuplas.
"""

from __future__ import annotations

# ── Stdlib ─────────────────────────────────────────────────────────────────────
from dataclasses import dataclass
from typing import Optional, Tuple
from uuid import UUID

# ── Dominio ────────────────────────────────────────────────────────────────────
from quizbank.domain.scoring import QuizScoreSummary
from quizbank.domain.validation import AnswerDraft, ValidationResult

# ── API pública ────────────────────────────────────────────────────────────────
__all__ = [
    "CreateQuestionCommand",
    "UpdateQuestionCommand",
    "SetQuestionValidationCommand",
    "ListQuestionsQuery",
    "RandomQuestionsQuery",
    "CheckAnswerCommand",
    "AnswerCheckResult",
    "QuestionReview",
    "CreateQuizCommand",
    "UpdateQuizMetadataCommand",
    "SubmittedAnswer",
    "ScoreRoundCommand",
    "RoundReport",
]


def _as_tuple(instance, *names: str) -> None:
    for name in names:
        value = getattr(instance, name)
        if value is not None:
            object.__setattr__(instance, name, tuple(value))


# ==============================================================================
#   Preguntas
# ==============================================================================

@dataclass(frozen=True)
class CreateQuestionCommand:
    """Crea una pregunta con sus 4 respuestas (y etiquetas opcionales)."""
    content: str
    difficulty_id: UUID
    theme_id: UUID
    author_id: str
    answers: Tuple[AnswerDraft, ...]
    explanation: Optional[str] = None
    tag_ids: Tuple[UUID, ...] = ()

    def __post_init__(self) -> None:
        _as_tuple(self, "answers", "tag_ids")


@dataclass(frozen=True)
class UpdateQuestionCommand:
    """
    Reemplaza enunciado, explicación, catálogos y respuestas de una pregunta.

    `tag_ids=None` conserva las etiquetas actuales.
    """
    id: UUID
    content: str
    difficulty_id: UUID
    theme_id: UUID
    answers: Tuple[AnswerDraft, ...]
    explanation: Optional[str] = None
    tag_ids: Optional[Tuple[UUID, ...]] = None

    def __post_init__(self) -> None:
        _as_tuple(self, "answers", "tag_ids")


@dataclass(frozen=True)
class SetQuestionValidationCommand:
    id: UUID
    validated: bool


@dataclass(frozen=True)
class ListQuestionsQuery:
    page: int = 1
    limit: int = 10
    theme_id: Optional[UUID] = None
    difficulty_id: Optional[UUID] = None
    validated: Optional[bool] = None
    sort_by: str = "created_at"
    sort_order: str = "desc"


@dataclass(frozen=True)
class RandomQuestionsQuery:
    theme_id: UUID
    limit: int = 10
    exclude_ids: Tuple[UUID, ...] = ()

    def __post_init__(self) -> None:
        _as_tuple(self, "exclude_ids")


@dataclass(frozen=True)
class CheckAnswerCommand:
    question_id: UUID
    answer_id: UUID


@dataclass(frozen=True)
class AnswerCheckResult:
    is_correct: bool
    correct_answer_id: Optional[UUID]


@dataclass(frozen=True)
class QuestionReview:
    """Diagnóstico para moderación: bloqueos y avisos de calidad."""
    question_id: UUID
    validation: ValidationResult
    suitable_for_difficulty: bool
    balanced_answers: bool


# ==============================================================================
#   Quizzes
# ==============================================================================

@dataclass(frozen=True)
class CreateQuizCommand:
    name: str
    theme_id: UUID
    difficulty_id: UUID
    question_ids: Tuple[UUID, ...]
    description: Optional[str] = None

    def __post_init__(self) -> None:
        _as_tuple(self, "question_ids")


@dataclass(frozen=True)
class UpdateQuizMetadataCommand:
    id: UUID
    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class SubmittedAnswer:
    question_id: UUID
    answer_id: UUID
    time_spent_seconds: float = 0.0


@dataclass(frozen=True)
class ScoreRoundCommand:
    quiz_id: UUID
    answers: Tuple[SubmittedAnswer, ...]

    def __post_init__(self) -> None:
        _as_tuple(self, "answers")


@dataclass(frozen=True)
class RoundReport:
    quiz_id: UUID
    policy: str
    summary: QuizScoreSummary
    success_rate: float
    performance_rating: str
    can_level_up: bool
