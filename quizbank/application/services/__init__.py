"""Servicios (casos de uso) de la capa de aplicación."""

from quizbank.application.services.catalog_service import CatalogService
from quizbank.application.services.question_service import QuestionService
from quizbank.application.services.quiz_service import QuizService

__all__ = ["CatalogService", "QuestionService", "QuizService"]
