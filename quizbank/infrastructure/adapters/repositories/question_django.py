# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from quizbank.domain.entities import Question as DQ
from quizbank.domain.ports.repositories import (
    NewAnswer,
    NewQuestion,
    Page,
    Pagination,
    QuestionChanges,
    QuestionFilter,
    QuestionRepository,
    QuestionWithAnswers,
    SortOptions,
)
from quizbank.infrastructure.mappers import (
    answer_model_to_entity,
    question_entity_to_model,
    question_model_to_entity,
)
from quizbank.infrastructure.models import (
    Answer as AnswerModel,
    Question as QuestionModel,
    Tag as TagModel,
)


class DjangoQuestionRepository(QuestionRepository):
    """
    Repositorio de preguntas con sus respuestas y etiquetas.

    Notas:
    - Alta y edición corren dentro de `transaction.atomic` (pregunta + 4 respuestas).
    - La edición reemplaza las respuestas completas; los ids de respuesta cambian.
    - Las etiquetas desconocidas se ignoran.
    """

    # ============================
    # Escritura
    # ============================

    @transaction.atomic
    def create(self, data: NewQuestion) -> QuestionWithAnswers:
        now = timezone.now()
        model = QuestionModel.objects.create(
            content=data.content,
            explanation=data.explanation,
            difficulty_id=data.difficulty_id,
            theme_id=data.theme_id,
            author_id=data.author_id,
            validated=False,
            created_at=now,
            updated_at=now,
        )
        self._replace_answers(model, data.answers)
        if data.tag_ids:
            model.tags.set(self._existing_tags(data.tag_ids))
        return self._with_answers(model)

    @transaction.atomic
    def update(self, changes: QuestionChanges) -> Optional[QuestionWithAnswers]:
        model = QuestionModel.objects.select_for_update().filter(id=changes.question.id).first()
        if model is None:
            return None
        question_entity_to_model(changes.question, model)
        model.save()
        self._replace_answers(model, changes.answers)
        if changes.tag_ids is not None:
            model.tags.set(self._existing_tags(changes.tag_ids))
        return self._with_answers(model)

    def set_question_validation(self, id: UUID, validated: bool) -> Optional[DQ]:
        updated = QuestionModel.objects.filter(id=id).update(validated=validated, updated_at=timezone.now())
        if not updated:
            return None
        return question_model_to_entity(QuestionModel.objects.get(id=id))

    # ============================
    # Lectura
    # ============================

    def find_by_id(self, id: UUID) -> Optional[QuestionWithAnswers]:
        model = (
            QuestionModel.objects
            .filter(id=id)
            .prefetch_related("answers", "tags")
            .first()
        )
        return self._with_answers(model) if model else None

    def find_many(self, ids: Sequence[UUID]) -> List[DQ]:
        if not ids:
            return []
        return [question_model_to_entity(m) for m in QuestionModel.objects.filter(id__in=list(ids))]

    def find_all(
        self,
        filters: QuestionFilter,
        pagination: Pagination,
        sort: Optional[SortOptions] = None,
    ) -> Page[DQ]:
        qs = QuestionModel.objects.all()
        if filters.theme_id is not None:
            qs = qs.filter(theme_id=filters.theme_id)
        if filters.difficulty_id is not None:
            qs = qs.filter(difficulty_id=filters.difficulty_id)
        if filters.validated is not None:
            qs = qs.filter(validated=filters.validated)

        sort = sort or SortOptions()
        prefix = "-" if sort.sort_order == "desc" else ""
        qs = qs.order_by(f"{prefix}{sort.sort_by}", "id")

        total = qs.count()
        start = pagination.offset
        models = list(qs[start:start + pagination.limit])
        return Page(
            items=[question_model_to_entity(m) for m in models],
            total=total,
            page=pagination.page,
            limit=pagination.limit,
        )

    def find_random_by_theme(
        self,
        theme_id: UUID,
        limit: int,
        exclude_ids: Optional[Sequence[UUID]] = None,
    ) -> List[QuestionWithAnswers]:
        qs = QuestionModel.objects.filter(theme_id=theme_id, validated=True)
        if exclude_ids:
            qs = qs.exclude(id__in=list(exclude_ids))
        models = qs.order_by("?").prefetch_related("answers", "tags")[:limit]
        return [self._with_answers(m) for m in models]

    # ============================
    # Helpers internos
    # ============================

    def _replace_answers(self, model: QuestionModel, answers: Sequence[NewAnswer]) -> None:
        AnswerModel.objects.filter(question=model).delete()
        AnswerModel.objects.bulk_create(
            [
                AnswerModel(
                    question=model,
                    content=a.content,
                    is_correct=a.is_correct,
                    position=index,
                )
                for index, a in enumerate(answers)
            ]
        )

    @staticmethod
    def _existing_tags(tag_ids: Sequence[UUID]) -> List[TagModel]:
        return list(TagModel.objects.filter(id__in=list(tag_ids)))

    def _with_answers(self, model: QuestionModel) -> QuestionWithAnswers:
        answers: Tuple = tuple(answer_model_to_entity(a) for a in model.answers.all())
        tag_ids: Tuple = tuple(t.id for t in model.tags.all())
        return QuestionWithAnswers(
            question=question_model_to_entity(model),
            answers=answers,
            tag_ids=tag_ids,
        )
