"""Consulta de catálogos globales (temas y dificultades)."""

from __future__ import annotations

from typing import List
from uuid import UUID

from quizbank.domain.entities import Difficulty, Theme
from quizbank.domain.exceptions import EntityNotFoundError
from quizbank.domain.ports.repositories import DifficultyRepository, ThemeRepository

__all__ = ["CatalogService"]


class CatalogService:
    def __init__(self, *, theme_repo: ThemeRepository, difficulty_repo: DifficultyRepository) -> None:
        self.theme_repo = theme_repo
        self.difficulty_repo = difficulty_repo

    def list_themes(self) -> List[Theme]:
        return self.theme_repo.find_all()

    def get_theme(self, theme_id: UUID) -> Theme:
        theme = self.theme_repo.find_by_id(theme_id)
        if theme is None:
            raise EntityNotFoundError(
                message=f"Theme with id {theme_id} not found",
                entity_type="Theme",
                entity_id=str(theme_id),
            )
        return theme

    def list_difficulties(self) -> List[Difficulty]:
        return self.difficulty_repo.find_all()

    def get_difficulty(self, difficulty_id: UUID) -> Difficulty:
        difficulty = self.difficulty_repo.find_by_id(difficulty_id)
        if difficulty is None:
            raise EntityNotFoundError(
                message=f"Difficulty with id {difficulty_id} not found",
                entity_type="Difficulty",
                entity_id=str(difficulty_id),
            )
        return difficulty
