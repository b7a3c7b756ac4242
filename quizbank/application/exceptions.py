# -*- coding: utf-8 -*-
"""
Excepciones visibles desde la capa de aplicación.

Re-exporta las excepciones del dominio para que las vistas y los servicios
no dependan directamente de `quizbank.domain.exceptions`. No se definen
excepciones nuevas aquí.
"""

from __future__ import annotations

from quizbank.domain.exceptions import (
    DomainException as DomainException,
    DomainError as DomainError,  # alias de compatibilidad
    ValidationError as ValidationError,
    EntityNotFoundError as EntityNotFoundError,
    BusinessRuleViolationError as BusinessRuleViolationError,
    InvalidOperationError as InvalidOperationError,
    InvariantViolationError as InvariantViolationError,
    QuestionValidationError as QuestionValidationError,
)

__all__ = [
    "DomainException",
    "DomainError",
    "ValidationError",
    "EntityNotFoundError",
    "BusinessRuleViolationError",
    "InvalidOperationError",
    "InvariantViolationError",
    "QuestionValidationError",
]
