"""Reglas de negocio puras (sin dependencias de Django).

Incluye la normalización de texto y las reglas sobre el conjunto de respuestas
de una pregunta. Las reglas operan sobre cualquier objeto con atributos
``content`` e ``is_correct`` (borradores o entidades `Answer`), lo que permite
reutilizarlas tanto en `AnswerSet` como en `QuestionValidationService`.
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional, Sequence

from quizbank.domain.exceptions import (
    DuplicateAnswersError,
    EmptyAnswerContentError,
    InvalidAnswersCountError,
    InvalidCorrectAnswersCountError,
)

__all__ = [
    "REQUIRED_ANSWERS_COUNT",
    "REQUIRED_CORRECT_ANSWERS",
    "normalize_whitespace",
    "comparison_key",
    "normalize_optional",
    "ensure_answers_count",
    "ensure_single_correct_answer",
    "ensure_answers_have_content",
    "ensure_unique_answers",
    "round_half_up",
]

REQUIRED_ANSWERS_COUNT = 4
REQUIRED_CORRECT_ANSWERS = 1

_WHITESPACE_RE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Normalización de texto
# ---------------------------------------------------------------------------


def normalize_whitespace(value: Optional[str]) -> str:
    """Recorta extremos y colapsa cualquier racha de espacios en uno solo."""

    if value is None:
        return ""
    return _WHITESPACE_RE.sub(" ", str(value)).strip()


def comparison_key(value: Optional[str]) -> str:
    """Clave usada para detectar respuestas duplicadas (sin mayúsculas)."""

    return normalize_whitespace(value).lower()


def normalize_optional(value: Optional[str]) -> Optional[str]:
    """Devuelve el texto recortado o None si queda vacío."""

    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


# ---------------------------------------------------------------------------
# Reglas sobre respuestas
# ---------------------------------------------------------------------------


def ensure_answers_count(count: int) -> None:
    if count != REQUIRED_ANSWERS_COUNT:
        raise InvalidAnswersCountError(details={"expected": REQUIRED_ANSWERS_COUNT, "received": count})


def ensure_single_correct_answer(answers: Sequence[Any]) -> None:
    correct = sum(1 for answer in answers if answer.is_correct)
    if correct != REQUIRED_CORRECT_ANSWERS:
        raise InvalidCorrectAnswersCountError(details={"expected": REQUIRED_CORRECT_ANSWERS, "received": correct})


def ensure_answers_have_content(answers: Sequence[Any]) -> None:
    if any(not normalize_whitespace(answer.content) for answer in answers):
        raise EmptyAnswerContentError()


def ensure_unique_answers(answers: Sequence[Any]) -> None:
    """Falla si dos respuestas coinciden ignorando mayúsculas y espacios."""

    seen = set()
    for answer in answers:
        key = comparison_key(answer.content)
        if key in seen:
            raise DuplicateAnswersError()
        seen.add(key)


# ---------------------------------------------------------------------------
# Aritmética
# ---------------------------------------------------------------------------


def round_half_up(value: float) -> int:
    """Redondeo comercial (0.5 hacia arriba) para puntajes."""

    return int(math.floor(value + 0.5))
