"""
Casos de uso de preguntas.

Reglas:
- Dependen SOLO de puertos del dominio.
- La validación (fail-fast) termina antes de cualquier llamada de persistencia.
- Los errores de persistencia se propagan sin reintentos.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from quizbank.application.commands import (
    AnswerCheckResult,
    CheckAnswerCommand,
    CreateQuestionCommand,
    ListQuestionsQuery,
    QuestionReview,
    RandomQuestionsQuery,
    SetQuestionValidationCommand,
    UpdateQuestionCommand,
)
from quizbank.domain import rules
from quizbank.domain.entities import Question
from quizbank.domain.exceptions import EntityNotFoundError, InvalidOperationError, ValidationError
from quizbank.domain.ports.repositories import (
    DifficultyRepository,
    NewAnswer,
    NewQuestion,
    Page,
    Pagination,
    QuestionChanges,
    QuestionFilter,
    QuestionRepository,
    QuestionWithAnswers,
    QuizRepository,
    SortOptions,
    ThemeRepository,
)
from quizbank.domain.validation import (
    AnswerDraft,
    QuestionDraft,
    QuestionValidationService,
    ValidationResult,
)

__all__ = ["QuestionService"]

logger = logging.getLogger(__name__)

RANDOM_LIMIT_MAX = 50


class QuestionService:
    """Alta, edición, consulta y moderación de preguntas."""

    def __init__(
        self,
        *,
        question_repo: QuestionRepository,
        theme_repo: ThemeRepository,
        difficulty_repo: DifficultyRepository,
        quiz_repo: QuizRepository,
        validator: Optional[QuestionValidationService] = None,
    ) -> None:
        self.question_repo = question_repo
        self.theme_repo = theme_repo
        self.difficulty_repo = difficulty_repo
        self.quiz_repo = quiz_repo
        self.validator = validator or QuestionValidationService()

    # ---- Commands ----

    def create_question(self, cmd: CreateQuestionCommand) -> QuestionWithAnswers:
        content = self.validator.validate(QuestionDraft(content=cmd.content, answers=cmd.answers))
        self._ensure_catalog(cmd.theme_id, cmd.difficulty_id)

        created = self.question_repo.create(
            NewQuestion(
                content=content.value,
                difficulty_id=cmd.difficulty_id,
                theme_id=cmd.theme_id,
                author_id=cmd.author_id,
                answers=_new_answers(cmd.answers),
                explanation=rules.normalize_optional(cmd.explanation),
                tag_ids=cmd.tag_ids,
            )
        )
        logger.info("Pregunta %s creada por %s", created.question.id, cmd.author_id)
        return created

    def preview_question(self, content: str, answers: Tuple[AnswerDraft, ...]) -> ValidationResult:
        """Valida sin persistir y devuelve todas las violaciones encontradas."""

        return self.validator.validate_with_result(QuestionDraft(content=content, answers=answers))

    def update_question(self, cmd: UpdateQuestionCommand) -> QuestionWithAnswers:
        current = self.get_question(cmd.id)
        current.question.ensure_can_be_modified()
        content = self.validator.validate(QuestionDraft(content=cmd.content, answers=cmd.answers))
        self._ensure_catalog(cmd.theme_id, cmd.difficulty_id)

        question = current.question.update_content(
            content=content.value,
            explanation=rules.normalize_optional(cmd.explanation),
            difficulty_id=cmd.difficulty_id,
            theme_id=cmd.theme_id,
        )
        updated = self.question_repo.update(
            QuestionChanges(question=question, answers=_new_answers(cmd.answers), tag_ids=cmd.tag_ids)
        )
        if updated is None:
            raise _question_not_found(cmd.id)
        logger.info("Pregunta %s actualizada", cmd.id)
        return updated

    def set_question_validation(self, cmd: SetQuestionValidationCommand) -> Question:
        current = self.get_question(cmd.id)
        if cmd.validated:
            question = current.question.mark_as_validated()
            self._ensure_can_validate(current)
        else:
            question = current.question.mark_as_rejected()
            if self.quiz_repo.is_question_in_published_quiz(cmd.id):
                raise InvalidOperationError(
                    message="Cannot reject a question used by a published quiz",
                    operation="mark_as_rejected",
                )

        stored = self.question_repo.set_question_validation(cmd.id, question.validated)
        if stored is None:
            raise _question_not_found(cmd.id)
        logger.info("Pregunta %s %s", cmd.id, "validada" if stored.validated else "rechazada")
        return stored

    # ---- Queries ----

    def get_question(self, question_id: UUID) -> QuestionWithAnswers:
        found = self.question_repo.find_by_id(question_id)
        if found is None:
            raise _question_not_found(question_id)
        return found

    def list_questions(self, query: ListQuestionsQuery) -> Page[Question]:
        return self.question_repo.find_all(
            QuestionFilter(
                theme_id=query.theme_id,
                difficulty_id=query.difficulty_id,
                validated=query.validated,
            ),
            Pagination(page=query.page, limit=query.limit),
            SortOptions(sort_by=query.sort_by, sort_order=query.sort_order),
        )

    def get_random_questions(self, query: RandomQuestionsQuery) -> List[QuestionWithAnswers]:
        limit = min(max(1, query.limit), RANDOM_LIMIT_MAX)
        return self.question_repo.find_random_by_theme(query.theme_id, limit, list(query.exclude_ids))

    def check_answer(self, cmd: CheckAnswerCommand) -> AnswerCheckResult:
        current = self.get_question(cmd.question_id)
        is_correct = current.question.check_answer(cmd.answer_id, current.answers)
        correct = next((a for a in current.answers if a.is_correct), None)
        return AnswerCheckResult(is_correct=is_correct, correct_answer_id=correct.id if correct else None)

    def review_question(self, question_id: UUID) -> QuestionReview:
        current = self.get_question(question_id)
        question = current.question
        theme = self.theme_repo.find_by_id(question.theme_id)
        difficulty = self.difficulty_repo.find_by_id(question.difficulty_id)

        validation = self.validator.can_validate_question(question, current.answers, theme, difficulty)
        suitable = (
            difficulty is not None
            and self.validator.is_suitable_for_difficulty(question.content, question.explanation, difficulty)
        )
        return QuestionReview(
            question_id=question.id,
            validation=validation,
            suitable_for_difficulty=suitable,
            balanced_answers=self.validator.has_balanced_answers(current.answers),
        )

    # ---- Helpers ----

    def _ensure_can_validate(self, current: QuestionWithAnswers) -> None:
        question = current.question
        result = self.validator.can_validate_question(
            question,
            current.answers,
            self.theme_repo.find_by_id(question.theme_id),
            self.difficulty_repo.find_by_id(question.difficulty_id),
        )
        if not result.is_valid:
            raise ValidationError(
                message="; ".join(result.errors),
                details={"errors": result.errors},
            )

    def _ensure_catalog(self, theme_id: UUID, difficulty_id: UUID) -> None:
        if self.theme_repo.find_by_id(theme_id) is None:
            raise EntityNotFoundError(
                message=f"Theme with id {theme_id} not found",
                entity_type="Theme",
                entity_id=str(theme_id),
            )
        if self.difficulty_repo.find_by_id(difficulty_id) is None:
            raise EntityNotFoundError(
                message=f"Difficulty with id {difficulty_id} not found",
                entity_type="Difficulty",
                entity_id=str(difficulty_id),
            )


def _new_answers(answers: Tuple[AnswerDraft, ...]) -> Tuple[NewAnswer, ...]:
    return tuple(
        NewAnswer(content=rules.normalize_whitespace(a.content), is_correct=bool(a.is_correct))
        for a in answers
    )


def _question_not_found(question_id: UUID) -> EntityNotFoundError:
    return EntityNotFoundError(
        message=f"Question with id {question_id} not found",
        entity_type="Question",
        entity_id=str(question_id),
    )
