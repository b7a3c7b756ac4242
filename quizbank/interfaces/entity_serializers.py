"""
Serializadores manuales (DRF) que trabajan con ENTIDADES de dominio.
Ubicación: interfaces/ (presentación). No dependen de modelos Django ni del ORM.

Las respuestas sólo revelan `is_correct` cuando el contexto trae
`reveal_answers=True` (moderación); en modo juego se ocultan.
"""

from __future__ import annotations

from typing import Any, Dict, Union

from rest_framework import serializers

from quizbank.application.commands import AnswerCheckResult, QuestionReview, RoundReport
from quizbank.domain.entities import Answer, Difficulty, Question, Theme
from quizbank.domain.ports.repositories import Page, QuestionWithAnswers
from quizbank.domain.quiz import Quiz
from quizbank.domain.scoring import QuestionScoreBreakdown
from quizbank.domain.validation import ValidationResult


# =============================================================================
# Catálogos
# =============================================================================

class DomainThemeReadSerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    name = serializers.CharField(read_only=True)
    description = serializers.CharField(read_only=True, allow_null=True)
    color = serializers.CharField(read_only=True, allow_null=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)

    def to_representation(self, instance: Theme) -> Dict[str, Any]:
        return {
            "id": instance.id,
            "name": instance.name,
            "description": instance.description,
            "color": instance.color,
            "created_at": instance.created_at,
            "updated_at": instance.updated_at,
        }


class DomainDifficultyReadSerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    name = serializers.CharField(read_only=True)
    level = serializers.IntegerField(read_only=True)
    color = serializers.CharField(read_only=True, allow_null=True)
    created_at = serializers.DateTimeField(read_only=True)

    def to_representation(self, instance: Difficulty) -> Dict[str, Any]:
        return {
            "id": instance.id,
            "name": instance.name,
            "level": instance.level,
            "color": instance.color,
            "created_at": instance.created_at,
        }


# =============================================================================
# Preguntas
# =============================================================================

class DomainAnswerReadSerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    content = serializers.CharField(read_only=True)
    is_correct = serializers.BooleanField(read_only=True, required=False)

    def to_representation(self, instance: Answer) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": instance.id, "content": instance.content}
        if self.context.get("reveal_answers"):
            data["is_correct"] = instance.is_correct
        return data


class DomainQuestionReadSerializer(serializers.Serializer):
    """Acepta `Question` (listados) o `QuestionWithAnswers` (detalle)."""

    id = serializers.UUIDField(read_only=True)
    content = serializers.CharField(read_only=True)
    explanation = serializers.CharField(read_only=True, allow_null=True)
    difficulty_id = serializers.UUIDField(read_only=True)
    theme_id = serializers.UUIDField(read_only=True)
    author_id = serializers.CharField(read_only=True)
    validated = serializers.BooleanField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)
    answers = DomainAnswerReadSerializer(many=True, read_only=True, required=False)
    tag_ids = serializers.ListField(child=serializers.UUIDField(), read_only=True, required=False)

    def to_representation(self, instance: Union[Question, QuestionWithAnswers]) -> Dict[str, Any]:
        question = instance.question if isinstance(instance, QuestionWithAnswers) else instance
        data: Dict[str, Any] = {
            "id": question.id,
            "content": question.content,
            "explanation": question.explanation,
            "difficulty_id": question.difficulty_id,
            "theme_id": question.theme_id,
            "author_id": question.author_id,
            "validated": question.validated,
            "created_at": question.created_at,
            "updated_at": question.updated_at,
        }
        if isinstance(instance, QuestionWithAnswers):
            answer_serializer = DomainAnswerReadSerializer(context=self.context)
            data["answers"] = [answer_serializer.to_representation(a) for a in instance.answers]
            data["tag_ids"] = list(instance.tag_ids)
        return data


def serialize_question_page(page: Page) -> Dict[str, Any]:
    serializer = DomainQuestionReadSerializer()
    return {
        "data": [serializer.to_representation(q) for q in page.items],
        "total": page.total,
        "page": page.page,
        "limit": page.limit,
        "total_pages": page.total_pages,
    }


class ValidationResultSerializer(serializers.Serializer):
    is_valid = serializers.BooleanField(read_only=True)
    errors = serializers.ListField(child=serializers.CharField(), read_only=True)

    def to_representation(self, instance: ValidationResult) -> Dict[str, Any]:
        return {"is_valid": instance.is_valid, "errors": list(instance.errors)}


class QuestionReviewSerializer(serializers.Serializer):
    question_id = serializers.UUIDField(read_only=True)
    can_validate = serializers.BooleanField(read_only=True)
    reasons = serializers.ListField(child=serializers.CharField(), read_only=True)
    suitable_for_difficulty = serializers.BooleanField(read_only=True)
    balanced_answers = serializers.BooleanField(read_only=True)

    def to_representation(self, instance: QuestionReview) -> Dict[str, Any]:
        return {
            "question_id": instance.question_id,
            "can_validate": instance.validation.is_valid,
            "reasons": list(instance.validation.errors),
            "suitable_for_difficulty": instance.suitable_for_difficulty,
            "balanced_answers": instance.balanced_answers,
        }


class AnswerCheckSerializer(serializers.Serializer):
    is_correct = serializers.BooleanField(read_only=True)
    correct_answer_id = serializers.UUIDField(read_only=True, allow_null=True)

    def to_representation(self, instance: AnswerCheckResult) -> Dict[str, Any]:
        return {"is_correct": instance.is_correct, "correct_answer_id": instance.correct_answer_id}


# =============================================================================
# Quizzes
# =============================================================================

class DomainQuizReadSerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    name = serializers.CharField(read_only=True)
    description = serializers.CharField(read_only=True, allow_null=True)
    theme_id = serializers.UUIDField(read_only=True)
    difficulty_id = serializers.UUIDField(read_only=True)
    question_ids = serializers.ListField(child=serializers.UUIDField(), read_only=True)
    question_count = serializers.IntegerField(read_only=True)
    estimated_duration = serializers.IntegerField(read_only=True)
    is_published = serializers.BooleanField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)

    def to_representation(self, instance: Quiz) -> Dict[str, Any]:
        return {
            "id": instance.id,
            "name": instance.name,
            "description": instance.description,
            "theme_id": instance.theme_id,
            "difficulty_id": instance.difficulty_id,
            "question_ids": list(instance.question_ids),
            "question_count": instance.get_question_count(),
            "estimated_duration": instance.get_estimated_duration(),
            "is_published": instance.is_published,
            "created_at": instance.created_at,
            "updated_at": instance.updated_at,
        }


def _breakdown(item: QuestionScoreBreakdown) -> Dict[str, Any]:
    return {
        "question_id": item.question_id,
        "base_points": item.base_points,
        "difficulty_multiplier": item.difficulty_multiplier,
        "streak_bonus": item.streak_bonus,
        "total_points": item.total_points,
    }


class RoundReportSerializer(serializers.Serializer):
    quiz_id = serializers.UUIDField(read_only=True)
    policy = serializers.CharField(read_only=True)
    total_score = serializers.IntegerField(read_only=True)
    correct_answers = serializers.IntegerField(read_only=True)
    total_questions = serializers.IntegerField(read_only=True)
    longest_streak = serializers.IntegerField(read_only=True)
    current_streak = serializers.IntegerField(read_only=True)
    success_rate = serializers.FloatField(read_only=True)
    performance_rating = serializers.CharField(read_only=True)
    can_level_up = serializers.BooleanField(read_only=True)
    score_breakdown = serializers.ListField(child=serializers.DictField(), read_only=True)

    def to_representation(self, instance: RoundReport) -> Dict[str, Any]:
        summary = instance.summary
        return {
            "quiz_id": instance.quiz_id,
            "policy": instance.policy,
            "total_score": summary.total_score,
            "correct_answers": summary.correct_answers,
            "total_questions": summary.total_questions,
            "longest_streak": summary.longest_streak,
            "current_streak": summary.current_streak,
            "success_rate": round(instance.success_rate, 2),
            "performance_rating": instance.performance_rating,
            "can_level_up": instance.can_level_up,
            "score_breakdown": [_breakdown(item) for item in summary.score_breakdown],
        }
