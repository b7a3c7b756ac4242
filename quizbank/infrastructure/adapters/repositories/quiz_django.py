# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from django.db import transaction

from quizbank.domain.ports.repositories import QuizRepository
from quizbank.domain.quiz import Quiz as DQuiz
from quizbank.infrastructure.mappers import quiz_entity_to_model, quiz_model_to_entity
from quizbank.infrastructure.models import Quiz as QuizModel, QuizQuestion as QuizQuestionModel


class DjangoQuizRepository(QuizRepository):
    """
    Persistencia del agregado Quiz.

    El orden de las preguntas se guarda en `QuizQuestion.position`; cada
    `save` reescribe la lista completa dentro de una transacción.
    """

    @transaction.atomic
    def save(self, quiz: DQuiz) -> DQuiz:
        existing = QuizModel.objects.select_for_update().filter(id=quiz.id).first()
        model, question_ids = quiz_entity_to_model(quiz, existing)
        model.save()

        QuizQuestionModel.objects.filter(quiz=model).delete()
        QuizQuestionModel.objects.bulk_create(
            [
                QuizQuestionModel(quiz=model, question_id=question_id, position=position)
                for position, question_id in enumerate(question_ids)
            ]
        )
        return self._model_to_entity(model)

    def find_by_id(self, id: UUID) -> Optional[DQuiz]:
        model = QuizModel.objects.filter(id=id).prefetch_related("entries").first()
        return self._model_to_entity(model) if model else None

    def find_all(self, *, published: Optional[bool] = None) -> List[DQuiz]:
        qs = QuizModel.objects.prefetch_related("entries").order_by("-created_at")
        if published is not None:
            qs = qs.filter(is_published=published)
        return [self._model_to_entity(m) for m in qs]

    def delete(self, id: UUID) -> bool:
        deleted, _ = QuizModel.objects.filter(id=id).delete()
        return deleted > 0

    def is_question_in_published_quiz(self, question_id: UUID) -> bool:
        return QuizQuestionModel.objects.filter(question_id=question_id, quiz__is_published=True).exists()

    # ------------------------------------------------------------------

    def _model_to_entity(self, model: QuizModel) -> DQuiz:
        question_ids = [entry.question_id for entry in model.entries.all()]
        return quiz_model_to_entity(model, question_ids)
