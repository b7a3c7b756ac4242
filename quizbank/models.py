# Django descubre los modelos en `<app>.models`; viven en infraestructura.
from quizbank.infrastructure.models import (  # noqa: F401
    Answer,
    Difficulty,
    Question,
    Quiz,
    QuizQuestion,
    Tag,
    Theme,
)
