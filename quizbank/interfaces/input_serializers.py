# -*- coding: utf-8 -*-
"""
Serializers DRF de ENTRADA (validan forma y tipos).

Las reglas de negocio (4 respuestas, una correcta, duplicados, límites del
quiz) NO se repiten aquí: las aplica el dominio y el traductor de excepciones
las convierte en 400. Cada serializer expone `to_command()` para construir el
DTO de aplicación correspondiente.
"""

from __future__ import annotations

from typing import Any, Dict

from rest_framework import serializers

from quizbank.application.commands import (
    CreateQuestionCommand,
    CreateQuizCommand,
    ListQuestionsQuery,
    RandomQuestionsQuery,
    ScoreRoundCommand,
    SubmittedAnswer,
    UpdateQuestionCommand,
)
from quizbank.domain.ports.repositories import Pagination
from quizbank.domain.validation import AnswerDraft


def _drafts(items) -> tuple:
    return tuple(AnswerDraft(content=a["content"], is_correct=a["is_correct"]) for a in items)


# ========= Preguntas =========
class AnswerInputSerializer(serializers.Serializer):
    content = serializers.CharField(allow_blank=True, trim_whitespace=False, max_length=500)
    is_correct = serializers.BooleanField(default=False)


class QuestionPreviewInputSerializer(serializers.Serializer):
    content = serializers.CharField(allow_blank=True, trim_whitespace=False)
    answers = AnswerInputSerializer(many=True)

    def to_drafts(self):
        return _drafts(self.validated_data["answers"])


class CreateQuestionInputSerializer(serializers.Serializer):
    content = serializers.CharField(allow_blank=True, trim_whitespace=False)
    explanation = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    difficulty_id = serializers.UUIDField()
    theme_id = serializers.UUIDField()
    author_id = serializers.CharField(max_length=64)
    answers = AnswerInputSerializer(many=True)
    tag_ids = serializers.ListField(child=serializers.UUIDField(), required=False, default=list)

    def to_command(self) -> CreateQuestionCommand:
        data = self.validated_data
        return CreateQuestionCommand(
            content=data["content"],
            explanation=data.get("explanation"),
            difficulty_id=data["difficulty_id"],
            theme_id=data["theme_id"],
            author_id=data["author_id"],
            answers=_drafts(data["answers"]),
            tag_ids=tuple(data.get("tag_ids") or ()),
        )


class UpdateQuestionInputSerializer(serializers.Serializer):
    content = serializers.CharField(allow_blank=True, trim_whitespace=False)
    explanation = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    difficulty_id = serializers.UUIDField()
    theme_id = serializers.UUIDField()
    answers = AnswerInputSerializer(many=True)
    tag_ids = serializers.ListField(child=serializers.UUIDField(), required=False, allow_null=True)

    def to_command(self, question_id) -> UpdateQuestionCommand:
        data = self.validated_data
        tag_ids = data.get("tag_ids")
        return UpdateQuestionCommand(
            id=question_id,
            content=data["content"],
            explanation=data.get("explanation"),
            difficulty_id=data["difficulty_id"],
            theme_id=data["theme_id"],
            answers=_drafts(data["answers"]),
            tag_ids=tuple(tag_ids) if tag_ids is not None else None,
        )


class SetValidationInputSerializer(serializers.Serializer):
    validated = serializers.BooleanField()


class CheckAnswerInputSerializer(serializers.Serializer):
    answer_id = serializers.UUIDField()


class QuestionListQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=Pagination.MAX_LIMIT, default=10)
    theme_id = serializers.UUIDField(required=False)
    difficulty_id = serializers.UUIDField(required=False)
    validated = serializers.BooleanField(required=False, allow_null=True, default=None)
    sort_by = serializers.ChoiceField(choices=["created_at", "updated_at"], required=False, default="created_at")
    sort_order = serializers.ChoiceField(choices=["asc", "desc"], required=False, default="desc")

    def to_query(self) -> ListQuestionsQuery:
        data: Dict[str, Any] = self.validated_data
        return ListQuestionsQuery(
            page=data["page"],
            limit=data["limit"],
            theme_id=data.get("theme_id"),
            difficulty_id=data.get("difficulty_id"),
            validated=data.get("validated"),
            sort_by=data["sort_by"],
            sort_order=data["sort_order"],
        )


class RandomQuestionsQuerySerializer(serializers.Serializer):
    theme_id = serializers.UUIDField()
    limit = serializers.IntegerField(required=False, min_value=1, max_value=50, default=10)
    exclude_ids = serializers.ListField(child=serializers.UUIDField(), required=False, default=list)

    def to_query(self) -> RandomQuestionsQuery:
        data = self.validated_data
        return RandomQuestionsQuery(
            theme_id=data["theme_id"],
            limit=data["limit"],
            exclude_ids=tuple(data.get("exclude_ids") or ()),
        )


# ========= Quizzes =========
class CreateQuizInputSerializer(serializers.Serializer):
    name = serializers.CharField(allow_blank=True, trim_whitespace=False)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    theme_id = serializers.UUIDField()
    difficulty_id = serializers.UUIDField()
    question_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=True)

    def to_command(self) -> CreateQuizCommand:
        data = self.validated_data
        return CreateQuizCommand(
            name=data["name"],
            description=data.get("description"),
            theme_id=data["theme_id"],
            difficulty_id=data["difficulty_id"],
            question_ids=tuple(data["question_ids"]),
        )


class UpdateQuizMetadataInputSerializer(serializers.Serializer):
    name = serializers.CharField(allow_blank=True, trim_whitespace=False)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class QuizQuestionInputSerializer(serializers.Serializer):
    question_id = serializers.UUIDField()


class SubmittedAnswerInputSerializer(serializers.Serializer):
    question_id = serializers.UUIDField()
    answer_id = serializers.UUIDField()
    time_spent_seconds = serializers.FloatField(required=False, min_value=0, default=0.0)


class ScoreRoundInputSerializer(serializers.Serializer):
    answers = SubmittedAnswerInputSerializer(many=True)

    def to_command(self, quiz_id) -> ScoreRoundCommand:
        return ScoreRoundCommand(
            quiz_id=quiz_id,
            answers=tuple(
                SubmittedAnswer(
                    question_id=a["question_id"],
                    answer_id=a["answer_id"],
                    time_spent_seconds=a["time_spent_seconds"],
                )
                for a in self.validated_data["answers"]
            ),
        )
