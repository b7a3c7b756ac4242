"""Servicio de validación de preguntas (fail-fast y acumulativo).

`validate` lanza la primera violación encontrada, en este orden: enunciado,
cantidad de respuestas, cantidad de correctas, respuestas vacías y duplicados.
`validate_with_result` aplica las mismas reglas pero devuelve todas las
violaciones para que un formulario pueda mostrarlas a la vez.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence, Tuple

from quizbank.domain import rules
from quizbank.domain.entities import Answer, Difficulty, Question, Theme
from quizbank.domain.exceptions import QuestionValidationError
from quizbank.domain.value_objects import (
    LENIENT_CONTENT_POLICY,
    AnswerSet,
    ContentPolicy,
    QuestionContent,
)

__all__ = ["AnswerDraft", "QuestionDraft", "ValidationResult", "QuestionValidationService"]


@dataclass(frozen=True)
class AnswerDraft:
    content: str
    is_correct: bool = False


@dataclass(frozen=True)
class QuestionDraft:
    """Pregunta aún no persistida, tal como llega del formulario."""

    content: str
    answers: Tuple[AnswerDraft, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "answers", tuple(self.answers))


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: Sequence[str]) -> "ValidationResult":
        return cls(is_valid=not errors, errors=list(errors))


class QuestionValidationService:
    """Reglas de validación de preguntas, sin estado más allá de la política de contenido."""

    SHORT_CONTENT_MAX_LENGTH = 200
    EXPLANATION_REQUIRED_FROM_LEVEL = 4
    BALANCE_MIN_RATIO = 0.5
    BALANCE_MAX_RATIO = 2.0

    def __init__(self, content_policy: ContentPolicy = LENIENT_CONTENT_POLICY) -> None:
        self.content_policy = content_policy

    # ------------------------------------------------------------------
    # Validación completa
    # ------------------------------------------------------------------

    def validate(self, draft: QuestionDraft) -> QuestionContent:
        """Valida el borrador y devuelve el enunciado normalizado."""

        content = QuestionContent.create(draft.content, self.content_policy)
        answers = draft.answers
        self.validate_answers_count(len(answers))
        self.validate_correct_answers_count(answers)
        self.validate_answers_content(answers)
        self.validate_unique_answers(answers)
        return content

    def validate_with_result(self, draft: QuestionDraft) -> ValidationResult:
        answers = draft.answers
        checks: List[Callable[[], Any]] = [
            lambda: QuestionContent.create(draft.content, self.content_policy),
            lambda: self.validate_answers_count(len(answers)),
            lambda: self.validate_correct_answers_count(answers),
            lambda: self.validate_answers_content(answers),
            lambda: self.validate_unique_answers([a for a in answers if rules.normalize_whitespace(a.content)]),
        ]

        errors: List[str] = []
        for check in checks:
            try:
                check()
            except QuestionValidationError as exc:
                errors.append(exc.message)
        return ValidationResult.from_errors(errors)

    # ------------------------------------------------------------------
    # Sub-reglas independientes
    # ------------------------------------------------------------------

    @staticmethod
    def validate_answers_count(count: int) -> None:
        rules.ensure_answers_count(count)

    @staticmethod
    def validate_correct_answers_count(answers: Sequence[Any]) -> None:
        rules.ensure_single_correct_answer(answers)

    @staticmethod
    def validate_answers_content(answers: Sequence[Any]) -> None:
        rules.ensure_answers_have_content(answers)

    @staticmethod
    def validate_unique_answers(answers: Sequence[Any]) -> None:
        rules.ensure_unique_answers(answers)

    # ------------------------------------------------------------------
    # Moderación y calidad
    # ------------------------------------------------------------------

    def can_validate_question(
        self,
        question: Question,
        answers: Sequence[Answer],
        theme: Optional[Theme],
        difficulty: Optional[Difficulty],
    ) -> ValidationResult:
        """Indica si un moderador puede marcar la pregunta como validada."""

        reasons: List[str] = []
        if question.validated:
            reasons.append("Question is already validated")
        if theme is None or theme.id != question.theme_id:
            reasons.append("Question must reference an existing theme")
        if difficulty is None or difficulty.id != question.difficulty_id:
            reasons.append("Question must reference an existing difficulty")

        try:
            QuestionContent.create(question.content, self.content_policy)
        except QuestionValidationError as exc:
            reasons.append(exc.message)

        try:
            AnswerSet.create(answers)
        except QuestionValidationError as exc:
            reasons.append(exc.message)

        return ValidationResult.from_errors(reasons)

    def is_suitable_for_difficulty(
        self,
        content: str,
        explanation: Optional[str],
        difficulty: Difficulty,
    ) -> bool:
        if difficulty.level == Difficulty.MIN_LEVEL and len(rules.normalize_whitespace(content)) > self.SHORT_CONTENT_MAX_LENGTH:
            return False
        if difficulty.level >= self.EXPLANATION_REQUIRED_FROM_LEVEL and not rules.normalize_optional(explanation):
            return False
        return True

    def has_balanced_answers(self, answers: Sequence[Any]) -> bool:
        """Ninguna respuesta debe delatarse por ser mucho más larga o corta que el resto."""

        lengths = [len(rules.normalize_whitespace(a.content)) for a in answers]
        if not lengths:
            return False
        average = sum(lengths) / len(lengths)
        low = average * self.BALANCE_MIN_RATIO
        high = average * self.BALANCE_MAX_RATIO
        return all(low <= length <= high for length in lengths)
