"""Puertos (interfaces) para persistencia utilizada en el dominio.

Los repositorios devuelven entidades que ya satisfacen sus invariantes; el
dominio no realiza I/O. Los DTOs de consulta (filtros, paginación, orden)
viven aquí para que la aplicación no dependa de la infraestructura.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Generic, List, Optional, Sequence, Tuple, TypeVar
from uuid import UUID

from quizbank.domain.entities import Answer, Difficulty, Question, Theme
from quizbank.domain.quiz import Quiz

T = TypeVar("T")

__all__ = [
    "NewAnswer",
    "NewQuestion",
    "QuestionChanges",
    "QuestionWithAnswers",
    "QuestionFilter",
    "Pagination",
    "SortOptions",
    "Page",
    "QuestionRepository",
    "ThemeRepository",
    "DifficultyRepository",
    "QuizRepository",
]


# ---------------------------------------------------------------------------
# DTOs de persistencia y consulta
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NewAnswer:
    content: str
    is_correct: bool


@dataclass(frozen=True)
class NewQuestion:
    """Datos ya validados de una pregunta por crear."""

    content: str
    difficulty_id: UUID
    theme_id: UUID
    author_id: str
    answers: Tuple[NewAnswer, ...]
    explanation: Optional[str] = None
    tag_ids: Tuple[UUID, ...] = ()


@dataclass(frozen=True)
class QuestionChanges:
    """Reemplazo completo de enunciado y respuestas de una pregunta existente."""

    question: Question
    answers: Tuple[NewAnswer, ...]
    tag_ids: Optional[Tuple[UUID, ...]] = None


@dataclass(frozen=True)
class QuestionWithAnswers:
    question: Question
    answers: Tuple[Answer, ...]
    tag_ids: Tuple[UUID, ...] = ()


@dataclass(frozen=True)
class QuestionFilter:
    theme_id: Optional[UUID] = None
    difficulty_id: Optional[UUID] = None
    validated: Optional[bool] = None


@dataclass(frozen=True)
class Pagination:
    page: int = 1
    limit: int = 10

    MAX_LIMIT = 100

    def __post_init__(self) -> None:
        object.__setattr__(self, "page", max(1, int(self.page)))
        object.__setattr__(self, "limit", min(self.MAX_LIMIT, max(1, int(self.limit))))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class SortOptions:
    sort_by: str = "created_at"  # created_at | updated_at
    sort_order: str = "desc"  # asc | desc

    FIELDS = ("created_at", "updated_at")
    ORDERS = ("asc", "desc")

    def __post_init__(self) -> None:
        if self.sort_by not in self.FIELDS:
            object.__setattr__(self, "sort_by", "created_at")
        if self.sort_order not in self.ORDERS:
            object.__setattr__(self, "sort_order", "desc")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


# ---------------------------------------------------------------------------
# Preguntas
# ---------------------------------------------------------------------------


class QuestionRepository(ABC):
    """Contrato de persistencia para preguntas y sus respuestas."""

    @abstractmethod
    def create(self, data: NewQuestion) -> QuestionWithAnswers:
        """Crea la pregunta con sus respuestas y etiquetas."""

    @abstractmethod
    def update(self, changes: QuestionChanges) -> Optional[QuestionWithAnswers]:
        """Reemplaza enunciado y respuestas; None si la pregunta no existe."""

    @abstractmethod
    def find_by_id(self, id: UUID) -> Optional[QuestionWithAnswers]:
        """Obtiene una pregunta con sus respuestas."""

    @abstractmethod
    def find_many(self, ids: Sequence[UUID]) -> List[Question]:
        """Obtiene las preguntas existentes entre los ids dados (sin garantizar orden)."""

    @abstractmethod
    def find_all(
        self,
        filters: QuestionFilter,
        pagination: Pagination,
        sort: Optional[SortOptions] = None,
    ) -> Page[Question]:
        """Lista preguntas filtradas y paginadas."""

    @abstractmethod
    def set_question_validation(self, id: UUID, validated: bool) -> Optional[Question]:
        """Actualiza la bandera de validación."""

    @abstractmethod
    def find_random_by_theme(
        self,
        theme_id: UUID,
        limit: int,
        exclude_ids: Optional[Sequence[UUID]] = None,
    ) -> List[QuestionWithAnswers]:
        """Selecciona preguntas validadas al azar para un tema."""


# ---------------------------------------------------------------------------
# Catálogos
# ---------------------------------------------------------------------------


class ThemeRepository(ABC):
    """Contrato de lectura para temas."""

    @abstractmethod
    def find_all(self) -> List[Theme]:
        """Lista todos los temas ordenados por nombre."""

    @abstractmethod
    def find_by_id(self, id: UUID) -> Optional[Theme]:
        """Obtiene un tema por id."""


class DifficultyRepository(ABC):
    """Contrato de lectura para dificultades."""

    @abstractmethod
    def find_all(self) -> List[Difficulty]:
        """Lista todas las dificultades ordenadas por nivel."""

    @abstractmethod
    def find_by_id(self, id: UUID) -> Optional[Difficulty]:
        """Obtiene una dificultad por id."""


# ---------------------------------------------------------------------------
# Quizzes
# ---------------------------------------------------------------------------


class QuizRepository(ABC):
    """Contrato de persistencia para el agregado Quiz."""

    @abstractmethod
    def save(self, quiz: Quiz) -> Quiz:
        """Crea o actualiza el quiz junto con el orden de sus preguntas."""

    @abstractmethod
    def find_by_id(self, id: UUID) -> Optional[Quiz]:
        """Obtiene un quiz por id."""

    @abstractmethod
    def find_all(self, *, published: Optional[bool] = None) -> List[Quiz]:
        """Lista quizzes, opcionalmente filtrando por estado de publicación."""

    @abstractmethod
    def delete(self, id: UUID) -> bool:
        """Elimina el quiz; True si existía."""

    @abstractmethod
    def is_question_in_published_quiz(self, question_id: UUID) -> bool:
        """True si algún quiz publicado referencia la pregunta."""
