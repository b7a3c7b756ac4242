# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from quizbank.domain.entities import Difficulty as DDifficulty, Theme as DTheme
from quizbank.domain.ports.repositories import DifficultyRepository, ThemeRepository
from quizbank.infrastructure.mappers import difficulty_model_to_entity, theme_model_to_entity
from quizbank.infrastructure.models import Difficulty as DifficultyModel, Theme as ThemeModel


class DjangoThemeRepository(ThemeRepository):
    """Lectura de temas (catálogo global, ordenado por nombre)."""

    def find_all(self) -> List[DTheme]:
        return [theme_model_to_entity(m) for m in ThemeModel.objects.order_by("name")]

    def find_by_id(self, id: UUID) -> Optional[DTheme]:
        model = ThemeModel.objects.filter(id=id).first()
        return theme_model_to_entity(model) if model else None


class DjangoDifficultyRepository(DifficultyRepository):
    """Lectura de dificultades (catálogo global, ordenado por nivel)."""

    def find_all(self) -> List[DDifficulty]:
        return [difficulty_model_to_entity(m) for m in DifficultyModel.objects.order_by("level")]

    def find_by_id(self, id: UUID) -> Optional[DDifficulty]:
        model = DifficultyModel.objects.filter(id=id).first()
        return difficulty_model_to_entity(model) if model else None
