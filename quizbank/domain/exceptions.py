"""Excepciones específicas del dominio.

Cada excepción describe un escenario de negocio que debe poder propagarse sin
depender de frameworks externos. Todas heredan de `DomainException` y exponen
un `kind` estable para que la capa de interfaces pueda clasificarlas.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional

__all__ = [
    "DomainException",
    "DomainError",
    "ValidationError",
    "EntityNotFoundError",
    "BusinessRuleViolationError",
    "InvalidOperationError",
    "InvariantViolationError",
    "QuestionValidationError",
    "InvalidAnswersCountError",
    "InvalidCorrectAnswersCountError",
    "EmptyContentError",
    "EmptyAnswerContentError",
    "ContentTooLongError",
    "ContentTooShortError",
    "MissingQuestionMarkError",
    "DuplicateAnswersError",
]


# ---------------------------------------------------------------------------
# Clase base
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class DomainException(Exception):
    """Excepción base para todo error del dominio."""

    kind: ClassVar[str] = "domain_error"

    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


DomainError = DomainException  # alias histórico


# ---------------------------------------------------------------------------
# Validación y existencia
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class ValidationError(DomainException):
    """Datos inválidos para el dominio."""

    kind: ClassVar[str] = "validation_error"

    field: Optional[str] = None

    def __post_init__(self) -> None:
        if self.field and self.details is None:
            self.details = {"field": self.field}


@dataclass(eq=False)
class EntityNotFoundError(DomainException):
    """La entidad solicitada no existe."""

    kind: ClassVar[str] = "not_found_error"

    entity_type: Optional[str] = None
    entity_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.entity_type and self.entity_id and self.details is None:
            self.details = {"entity_type": self.entity_type, "entity_id": self.entity_id}


# ---------------------------------------------------------------------------
# Reglas de negocio e invariantes
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class BusinessRuleViolationError(DomainException):
    """Se intentó ejecutar una acción prohibida por el dominio."""

    kind: ClassVar[str] = "business_rule_error"

    rule_name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.rule_name and self.details is None:
            self.details = {"rule_name": self.rule_name}


@dataclass(eq=False)
class InvalidOperationError(DomainException):
    """Operación inválida para el estado actual de la entidad."""

    kind: ClassVar[str] = "invalid_operation_error"

    operation: Optional[str] = None

    def __post_init__(self) -> None:
        if self.operation and self.details is None:
            self.details = {"operation": self.operation}


@dataclass(eq=False)
class InvariantViolationError(DomainException):
    """Se violó una invariante del dominio."""

    kind: ClassVar[str] = "invariant_violation_error"

    invariant_name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.invariant_name and self.details is None:
            self.details = {"invariant_name": self.invariant_name}


# ---------------------------------------------------------------------------
# Validación de preguntas
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class QuestionValidationError(ValidationError):
    """Base de los errores detectados al validar una pregunta y sus respuestas.

    Cada subclase define un mensaje por defecto, de modo que puede lanzarse sin
    argumentos: ``raise DuplicateAnswersError()``.
    """

    default_message: ClassVar[str] = "Invalid question"
    default_field: ClassVar[Optional[str]] = None

    message: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            self.message = self.default_message
        if self.field is None:
            self.field = self.default_field
        super().__post_init__()


@dataclass(eq=False)
class InvalidAnswersCountError(QuestionValidationError):
    """El número de respuestas es distinto de 4."""

    kind: ClassVar[str] = "invalid_answers_count"
    default_message: ClassVar[str] = "A question must have exactly 4 answers"
    default_field: ClassVar[Optional[str]] = "answers"


@dataclass(eq=False)
class InvalidCorrectAnswersCountError(QuestionValidationError):
    """No hay exactamente una respuesta correcta."""

    kind: ClassVar[str] = "invalid_correct_answers_count"
    default_message: ClassVar[str] = "A question must have exactly 1 correct answer"
    default_field: ClassVar[Optional[str]] = "answers"


@dataclass(eq=False)
class EmptyContentError(QuestionValidationError):
    """El enunciado queda vacío después de normalizarlo."""

    kind: ClassVar[str] = "empty_content"
    default_message: ClassVar[str] = "Question content cannot be empty"
    default_field: ClassVar[Optional[str]] = "content"


@dataclass(eq=False)
class EmptyAnswerContentError(QuestionValidationError):
    """Alguna respuesta queda vacía después de normalizarla."""

    kind: ClassVar[str] = "empty_answer_content"
    default_message: ClassVar[str] = "All answers must have meaningful content"
    default_field: ClassVar[Optional[str]] = "answers"


@dataclass(eq=False)
class ContentTooLongError(QuestionValidationError):
    """El enunciado supera la longitud máxima."""

    kind: ClassVar[str] = "content_too_long"
    default_message: ClassVar[str] = "Question content must not exceed 500 characters"
    default_field: ClassVar[Optional[str]] = "content"


@dataclass(eq=False)
class ContentTooShortError(QuestionValidationError):
    """El enunciado no alcanza la longitud mínima de la política activa."""

    kind: ClassVar[str] = "content_too_short"
    default_message: ClassVar[str] = "Question content is too short"
    default_field: ClassVar[Optional[str]] = "content"


@dataclass(eq=False)
class MissingQuestionMarkError(QuestionValidationError):
    """La política estricta exige un signo de interrogación."""

    kind: ClassVar[str] = "missing_question_mark"
    default_message: ClassVar[str] = "Question content must contain a question mark"
    default_field: ClassVar[Optional[str]] = "content"


@dataclass(eq=False)
class DuplicateAnswersError(QuestionValidationError):
    """Dos respuestas colisionan tras normalizarlas."""

    kind: ClassVar[str] = "duplicate_answers"
    default_message: ClassVar[str] = "All answers must be unique"
    default_field: ClassVar[Optional[str]] = "answers"
