"""Factoría de servicios para resolver dependencias de infraestructura.

Es la raíz de composición: conoce los repositorios Django y las políticas
configuradas en `settings` (`QUIZBANK_CONTENT_POLICY`, `QUIZBANK_SCORING_POLICY`).
"""

from __future__ import annotations

import logging
from typing import Optional

from django.conf import settings

from quizbank.domain.ports.repositories import (
    DifficultyRepository,
    QuestionRepository,
    QuizRepository,
    ThemeRepository,
)
from quizbank.domain.scoring import ScoringPolicy, get_scoring_policy
from quizbank.domain.validation import QuestionValidationService
from quizbank.domain.value_objects import ContentPolicy, get_content_policy
from quizbank.infrastructure.adapters.repositories import (
    DjangoDifficultyRepository,
    DjangoQuestionRepository,
    DjangoQuizRepository,
    DjangoThemeRepository,
)

__all__ = ["ServiceFactory", "get_service_factory", "reset_service_factory"]

logger = logging.getLogger(__name__)


class ServiceFactory:
    """Administra instancias compartidas de repositorios, políticas y servicios."""

    def __init__(self) -> None:
        self._question_repo: Optional[QuestionRepository] = None
        self._theme_repo: Optional[ThemeRepository] = None
        self._difficulty_repo: Optional[DifficultyRepository] = None
        self._quiz_repo: Optional[QuizRepository] = None

        self._content_policy: Optional[ContentPolicy] = None
        self._scoring_policy: Optional[ScoringPolicy] = None

    # ------------------------------------------------------------------
    # Repositorios
    # ------------------------------------------------------------------

    def _get_question_repository(self) -> QuestionRepository:
        if self._question_repo is None:
            self._question_repo = DjangoQuestionRepository()
        return self._question_repo

    def _get_theme_repository(self) -> ThemeRepository:
        if self._theme_repo is None:
            self._theme_repo = DjangoThemeRepository()
        return self._theme_repo

    def _get_difficulty_repository(self) -> DifficultyRepository:
        if self._difficulty_repo is None:
            self._difficulty_repo = DjangoDifficultyRepository()
        return self._difficulty_repo

    def _get_quiz_repository(self) -> QuizRepository:
        if self._quiz_repo is None:
            self._quiz_repo = DjangoQuizRepository()
        return self._quiz_repo

    # ------------------------------------------------------------------
    # Políticas configurables
    # ------------------------------------------------------------------

    def get_content_policy(self) -> ContentPolicy:
        if self._content_policy is None:
            name = getattr(settings, "QUIZBANK_CONTENT_POLICY", "lenient")
            self._content_policy = get_content_policy(name)
            logger.debug("Política de contenido activa: %s", name)
        return self._content_policy

    def get_scoring_policy(self) -> ScoringPolicy:
        if self._scoring_policy is None:
            name = getattr(settings, "QUIZBANK_SCORING_POLICY", "streak")
            self._scoring_policy = get_scoring_policy(name)
            logger.debug("Política de puntaje activa: %s", name)
        return self._scoring_policy

    # ------------------------------------------------------------------
    # Servicios de aplicación
    # ------------------------------------------------------------------

    def create_question_service(self):
        from quizbank.application.services import QuestionService

        return QuestionService(
            question_repo=self._get_question_repository(),
            theme_repo=self._get_theme_repository(),
            difficulty_repo=self._get_difficulty_repository(),
            quiz_repo=self._get_quiz_repository(),
            validator=QuestionValidationService(self.get_content_policy()),
        )

    def create_quiz_service(self):
        from quizbank.application.services import QuizService

        return QuizService(
            quiz_repo=self._get_quiz_repository(),
            question_repo=self._get_question_repository(),
            difficulty_repo=self._get_difficulty_repository(),
            scoring_policy=self.get_scoring_policy(),
        )

    def create_catalog_service(self):
        from quizbank.application.services import CatalogService

        return CatalogService(
            theme_repo=self._get_theme_repository(),
            difficulty_repo=self._get_difficulty_repository(),
        )

    # ------------------------------------------------------------------
    # Configuración auxiliar
    # ------------------------------------------------------------------

    def with_content_policy(self, policy: ContentPolicy) -> "ServiceFactory":
        self._content_policy = policy
        return self

    def with_scoring_policy(self, policy: ScoringPolicy) -> "ServiceFactory":
        self._scoring_policy = policy
        return self


# ---------------------------------------------------------------------------
# Singleton perezoso
# ---------------------------------------------------------------------------

_default_factory: Optional[ServiceFactory] = None


def get_service_factory() -> ServiceFactory:
    """Devuelve la instancia compartida de ServiceFactory."""

    global _default_factory
    if _default_factory is None:
        _default_factory = ServiceFactory()
    return _default_factory


def reset_service_factory() -> None:
    """Restablece la instancia compartida (útil en pruebas)."""

    global _default_factory
    _default_factory = None
