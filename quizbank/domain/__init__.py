"""
Capa de dominio - Clean Architecture

Esta capa contiene:
- Entidades de negocio (entities.py) y el agregado Quiz (quiz.py)
- Objetos de valor (value_objects.py)
- Reglas y servicios de dominio (rules.py, validation.py, scoring.py)
- Puertos/Interfaces de persistencia (ports/repositories.py)
- Excepciones del dominio (exceptions.py)

La capa de dominio es independiente de frameworks externos y representa
la lógica de negocio pura del sistema.
"""

# Exportar excepciones del dominio para fácil acceso
from .exceptions import (
    DomainException,
    DomainError,
    ValidationError,
    EntityNotFoundError,
    BusinessRuleViolationError,
    InvalidOperationError,
    InvariantViolationError,
)

# Exportar entidades principales
from .entities import (
    Answer,
    Difficulty,
    Question,
    Theme,
)
from .quiz import Quiz

__all__ = [
    # Excepciones
    "DomainException",
    "DomainError",
    "ValidationError",
    "EntityNotFoundError",
    "BusinessRuleViolationError",
    "InvalidOperationError",
    "InvariantViolationError",
    # Entidades
    "Answer",
    "Difficulty",
    "Question",
    "Theme",
    "Quiz",
]
