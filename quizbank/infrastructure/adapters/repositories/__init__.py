# Re-exporta implementaciones Django de los puertos de persistencia
from .question_django import DjangoQuestionRepository
from .catalog_django import DjangoDifficultyRepository, DjangoThemeRepository
from .quiz_django import DjangoQuizRepository

__all__ = [
    "DjangoQuestionRepository",
    "DjangoThemeRepository",
    "DjangoDifficultyRepository",
    "DjangoQuizRepository",
]
