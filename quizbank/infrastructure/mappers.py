"""
Funciones de mapeo explícito entre modelos de infraestructura y entidades de dominio.

Mantienen la separación entre capas: el dominio nunca ve modelos Django y
los repositorios nunca devuelven modelos.
"""

from datetime import datetime, timezone
from typing import Iterable, Optional, Tuple

from quizbank.domain.entities import (
    Answer as AnswerEntity,
    Difficulty as DifficultyEntity,
    Question as QuestionEntity,
    Theme as ThemeEntity,
)
from quizbank.domain.quiz import Quiz as QuizEntity
from quizbank.infrastructure.models import (
    Answer as AnswerModel,
    Difficulty as DifficultyModel,
    Question as QuestionModel,
    Quiz as QuizModel,
    Theme as ThemeModel,
)


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    """Asegura fechas con zona horaria (UTC si el backend las devuelve naive)."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# =========================
# Catálogos
# =========================

def theme_model_to_entity(model: ThemeModel) -> ThemeEntity:
    return ThemeEntity(
        id=model.id,
        name=model.name,
        description=model.description,
        color=model.color,
        created_at=_aware(model.created_at),
        updated_at=_aware(model.updated_at),
    )


def theme_entity_to_model(entity: ThemeEntity, model: Optional[ThemeModel] = None) -> ThemeModel:
    model = model or ThemeModel(id=entity.id)
    model.name = entity.name
    model.description = entity.description
    model.color = entity.color
    model.created_at = entity.created_at
    model.updated_at = entity.updated_at
    return model


def difficulty_model_to_entity(model: DifficultyModel) -> DifficultyEntity:
    return DifficultyEntity(
        id=model.id,
        name=model.name,
        level=int(model.level),
        color=model.color,
        created_at=_aware(model.created_at),
    )


def difficulty_entity_to_model(entity: DifficultyEntity, model: Optional[DifficultyModel] = None) -> DifficultyModel:
    model = model or DifficultyModel(id=entity.id)
    model.name = entity.name
    model.level = entity.level
    model.color = entity.color
    model.created_at = entity.created_at
    return model


# =========================
# Preguntas
# =========================

def answer_model_to_entity(model: AnswerModel) -> AnswerEntity:
    return AnswerEntity(
        id=model.id,
        content=model.content,
        is_correct=model.is_correct,
        question_id=model.question_id,
        created_at=_aware(model.created_at),
    )


def question_model_to_entity(model: QuestionModel) -> QuestionEntity:
    return QuestionEntity(
        id=model.id,
        content=model.content,
        explanation=model.explanation,
        difficulty_id=model.difficulty_id,
        theme_id=model.theme_id,
        author_id=model.author_id,
        validated=model.validated,
        created_at=_aware(model.created_at),
        updated_at=_aware(model.updated_at),
    )


def question_entity_to_model(entity: QuestionEntity, model: Optional[QuestionModel] = None) -> QuestionModel:
    """Copia los campos escalares de la entidad al modelo (no toca respuestas ni tags)."""
    model = model or QuestionModel(id=entity.id)
    model.content = entity.content
    model.explanation = entity.explanation
    model.difficulty_id = entity.difficulty_id
    model.theme_id = entity.theme_id
    model.author_id = entity.author_id
    model.validated = entity.validated
    model.created_at = entity.created_at
    model.updated_at = entity.updated_at
    return model


# =========================
# Quizzes
# =========================

def quiz_model_to_entity(model: QuizModel, question_ids: Iterable) -> QuizEntity:
    """
    Rehidrata el agregado. `question_ids` llega ya ordenado por posición
    (los repositorios lo obtienen de `QuizQuestion`).
    """
    return QuizEntity(
        id=model.id,
        name=model.name,
        description=model.description,
        theme_id=model.theme_id,
        difficulty_id=model.difficulty_id,
        question_ids=tuple(question_ids),
        is_published=model.is_published,
        created_at=_aware(model.created_at),
        updated_at=_aware(model.updated_at),
    )


def quiz_entity_to_model(entity: QuizEntity, model: Optional[QuizModel] = None) -> Tuple[QuizModel, Tuple]:
    """Devuelve el modelo con los campos escalares y la lista ordenada de ids."""
    model = model or QuizModel(id=entity.id)
    model.name = entity.name
    model.description = entity.description
    model.theme_id = entity.theme_id
    model.difficulty_id = entity.difficulty_id
    model.is_published = entity.is_published
    model.created_at = entity.created_at
    model.updated_at = entity.updated_at
    return model, tuple(entity.question_ids)
