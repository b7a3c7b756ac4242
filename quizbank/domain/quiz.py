"""Agregado Quiz.

Un quiz referencia preguntas por id (nunca embebe las entidades `Question`).
Las invariantes estructurales (nombre, cantidad, duplicados) se verifican en
cada construcción; las que dependen de las preguntas (validación, tema y
dificultad) se verifican en `create`, `add_question` y `verify_questions`,
donde el llamador aporta las preguntas recién cargadas.

Estados: borrador (`is_published=False`) y publicado. Toda modificación de un
quiz publicado se rechaza; `unpublish` lo devuelve a borrador.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional, Sequence, Tuple
from uuid import UUID, uuid4

from quizbank.domain import rules
from quizbank.domain.entities import Question
from quizbank.domain.exceptions import InvalidOperationError, InvariantViolationError

__all__ = ["Quiz", "SECONDS_PER_QUESTION"]

SECONDS_PER_QUESTION = 45


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Quiz:
    """Raíz del agregado: nombre, tema, dificultad y lista ordenada de preguntas."""

    id: UUID
    name: str
    theme_id: UUID
    difficulty_id: UUID
    question_ids: Tuple[UUID, ...]
    description: Optional[str] = None
    is_published: bool = False
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    MIN_QUESTIONS = 5
    MAX_QUESTIONS = 20
    NAME_MIN_LENGTH = 3
    NAME_MAX_LENGTH = 100

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", (self.name or "").strip())
        object.__setattr__(self, "description", rules.normalize_optional(self.description))
        object.__setattr__(self, "question_ids", tuple(self.question_ids))
        self._validate_name(self.name)
        self._validate_count(len(self.question_ids))
        self._validate_no_duplicates(self.question_ids)

    # ------------------------------------------------------------------
    # Construcción
    # ------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        *,
        name: str,
        description: Optional[str],
        theme_id: UUID,
        difficulty_id: UUID,
        questions: Sequence[Question],
    ) -> "Quiz":
        cls._validate_name((name or "").strip())
        cls._validate_count(len(questions))
        cls._ensure_questions_consistent(questions, theme_id=theme_id, difficulty_id=difficulty_id)

        now = _utcnow()
        return cls(
            id=uuid4(),
            name=name,
            description=description,
            theme_id=theme_id,
            difficulty_id=difficulty_id,
            question_ids=tuple(q.id for q in questions),
            is_published=False,
            created_at=now,
            updated_at=now,
        )

    # ------------------------------------------------------------------
    # Mutaciones (devuelven un Quiz nuevo)
    # ------------------------------------------------------------------

    def add_question(self, question: Question) -> "Quiz":
        self._ensure_modifiable("add_question")

        if len(self.question_ids) >= self.MAX_QUESTIONS:
            raise InvariantViolationError(
                message=f"Cannot add more than {self.MAX_QUESTIONS} questions to a quiz",
                invariant_name="quiz_max_questions",
            )
        if question.theme_id != self.theme_id:
            raise InvariantViolationError(
                message="Question theme must match quiz theme",
                invariant_name="quiz_questions_same_theme",
            )
        if question.difficulty_id != self.difficulty_id:
            raise InvariantViolationError(
                message="Question difficulty must match quiz difficulty",
                invariant_name="quiz_questions_same_difficulty",
            )
        if not question.validated:
            raise InvariantViolationError(
                message="Cannot add non-validated question to quiz",
                invariant_name="quiz_questions_validated",
            )
        if self.has_question(question.id):
            raise InvariantViolationError(
                message="Question already exists in quiz",
                invariant_name="quiz_unique_questions",
            )

        return replace(self, question_ids=self.question_ids + (question.id,), updated_at=_utcnow())

    def remove_question(self, question_id: UUID) -> "Quiz":
        self._ensure_modifiable("remove_question")

        if not self.has_question(question_id):
            raise InvalidOperationError(
                message="Question not found in quiz",
                operation="remove_question",
            )
        if len(self.question_ids) <= self.MIN_QUESTIONS:
            raise InvariantViolationError(
                message=f"Cannot remove question: minimum {self.MIN_QUESTIONS} questions required",
                invariant_name="quiz_min_questions",
            )

        remaining = tuple(qid for qid in self.question_ids if qid != question_id)
        return replace(self, question_ids=remaining, updated_at=_utcnow())

    def update_metadata(self, *, name: str, description: Optional[str]) -> "Quiz":
        self._ensure_modifiable("update_metadata")
        self._validate_name((name or "").strip())
        return replace(self, name=name, description=description, updated_at=_utcnow())

    def publish(self) -> "Quiz":
        if self.is_published:
            raise InvalidOperationError(message="Quiz is already published", operation="publish")
        if len(self.question_ids) < self.MIN_QUESTIONS:
            raise InvariantViolationError(
                message=f"Cannot publish quiz with less than {self.MIN_QUESTIONS} questions",
                invariant_name="quiz_min_questions",
            )
        return replace(self, is_published=True, updated_at=_utcnow())

    def unpublish(self) -> "Quiz":
        if not self.is_published:
            raise InvalidOperationError(message="Quiz is not published", operation="unpublish")
        return replace(self, is_published=False, updated_at=_utcnow())

    def verify_questions(self, questions: Sequence[Question]) -> None:
        """Revisa las preguntas referenciadas, recién cargadas por el llamador.

        Una pregunta puede ser rechazada o reclasificada después de entrar al
        quiz; el servicio llama a este método antes de guardar cada cambio.
        """

        if tuple(q.id for q in questions) != self.question_ids:
            raise InvariantViolationError(
                message="Loaded questions do not match the quiz",
                invariant_name="quiz_questions_loaded",
            )
        self._ensure_questions_consistent(questions, theme_id=self.theme_id, difficulty_id=self.difficulty_id)

    # ------------------------------------------------------------------
    # Consultas
    # ------------------------------------------------------------------

    def can_be_modified(self) -> bool:
        return not self.is_published

    def get_question_count(self) -> int:
        return len(self.question_ids)

    def has_question(self, question_id: UUID) -> bool:
        return question_id in self.question_ids

    def get_estimated_duration(self) -> int:
        """Duración estimada en segundos."""

        return len(self.question_ids) * SECONDS_PER_QUESTION

    # ------------------------------------------------------------------
    # Invariantes
    # ------------------------------------------------------------------

    def _ensure_modifiable(self, operation: str) -> None:
        if self.is_published:
            raise InvalidOperationError(message="Cannot modify a published quiz", operation=operation)

    @classmethod
    def _validate_name(cls, name: str) -> None:
        if len(name) < cls.NAME_MIN_LENGTH:
            raise InvariantViolationError(
                message=f"Quiz name must be at least {cls.NAME_MIN_LENGTH} characters",
                invariant_name="quiz_name_length",
            )
        if len(name) > cls.NAME_MAX_LENGTH:
            raise InvariantViolationError(
                message=f"Quiz name must not exceed {cls.NAME_MAX_LENGTH} characters",
                invariant_name="quiz_name_length",
            )

    @classmethod
    def _validate_count(cls, count: int) -> None:
        if count < cls.MIN_QUESTIONS:
            raise InvariantViolationError(
                message=f"A quiz must have at least {cls.MIN_QUESTIONS} questions",
                invariant_name="quiz_min_questions",
            )
        if count > cls.MAX_QUESTIONS:
            raise InvariantViolationError(
                message=f"A quiz cannot have more than {cls.MAX_QUESTIONS} questions",
                invariant_name="quiz_max_questions",
            )

    @staticmethod
    def _validate_no_duplicates(question_ids: Sequence[UUID]) -> None:
        if len(set(question_ids)) != len(question_ids):
            raise InvariantViolationError(
                message="Question already exists in quiz",
                invariant_name="quiz_unique_questions",
            )

    @staticmethod
    def _ensure_questions_consistent(
        questions: Sequence[Question],
        *,
        theme_id: UUID,
        difficulty_id: UUID,
    ) -> None:
        if any(not q.validated for q in questions):
            raise InvariantViolationError(
                message="All questions in a quiz must be validated",
                invariant_name="quiz_questions_validated",
            )
        if any(q.theme_id != theme_id for q in questions):
            raise InvariantViolationError(
                message="All questions must belong to the same theme",
                invariant_name="quiz_questions_same_theme",
            )
        if any(q.difficulty_id != difficulty_id for q in questions):
            raise InvariantViolationError(
                message="All questions must have the same difficulty",
                invariant_name="quiz_questions_same_difficulty",
            )
