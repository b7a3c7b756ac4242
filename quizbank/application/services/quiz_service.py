"""
Casos de uso del agregado Quiz.

El quiz sólo guarda ids de preguntas; cada operación que depende de las
preguntas (creación, cualquier cambio del borrador, publicación, puntaje)
las vuelve a cargar desde el repositorio para verificar las invariantes con
datos frescos.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from quizbank.application.commands import (
    CreateQuizCommand,
    RoundReport,
    ScoreRoundCommand,
    UpdateQuizMetadataCommand,
)
from quizbank.domain.entities import Difficulty, Question
from quizbank.domain.exceptions import (
    EntityNotFoundError,
    InvalidOperationError,
    ValidationError,
)
from quizbank.domain.ports.repositories import (
    DifficultyRepository,
    QuestionRepository,
    QuestionWithAnswers,
    QuizRepository,
)
from quizbank.domain.quiz import Quiz
from quizbank.domain.scoring import (
    AnswerResult,
    ScoringPolicy,
    StreakScoringPolicy,
    can_level_up,
    get_performance_rating,
)

__all__ = ["QuizService"]

logger = logging.getLogger(__name__)


class QuizService:
    """Armado, publicación y puntaje de quizzes."""

    def __init__(
        self,
        *,
        quiz_repo: QuizRepository,
        question_repo: QuestionRepository,
        difficulty_repo: DifficultyRepository,
        scoring_policy: Optional[ScoringPolicy] = None,
    ) -> None:
        self.quiz_repo = quiz_repo
        self.question_repo = question_repo
        self.difficulty_repo = difficulty_repo
        self.scoring_policy = scoring_policy or StreakScoringPolicy()

    # ---- Commands ----

    def create_quiz(self, cmd: CreateQuizCommand) -> Quiz:
        questions = self._load_questions(cmd.question_ids)
        quiz = Quiz.create(
            name=cmd.name,
            description=cmd.description,
            theme_id=cmd.theme_id,
            difficulty_id=cmd.difficulty_id,
            questions=questions,
        )
        saved = self.quiz_repo.save(quiz)
        logger.info("Quiz %s creado con %s preguntas", saved.id, saved.get_question_count())
        return saved

    def add_question(self, quiz_id: UUID, question_id: UUID) -> Quiz:
        quiz = self.get_quiz(quiz_id)
        question = self._get_question(question_id).question
        return self._save_checked(quiz.add_question(question))

    def remove_question(self, quiz_id: UUID, question_id: UUID) -> Quiz:
        quiz = self.get_quiz(quiz_id)
        return self._save_checked(quiz.remove_question(question_id))

    def update_metadata(self, cmd: UpdateQuizMetadataCommand) -> Quiz:
        quiz = self.get_quiz(cmd.id)
        return self._save_checked(quiz.update_metadata(name=cmd.name, description=cmd.description))

    def publish(self, quiz_id: UUID) -> Quiz:
        quiz = self._save_checked(self.get_quiz(quiz_id).publish())
        logger.info("Quiz %s publicado", quiz_id)
        return quiz

    def unpublish(self, quiz_id: UUID) -> Quiz:
        quiz = self.quiz_repo.save(self.get_quiz(quiz_id).unpublish())
        logger.info("Quiz %s despublicado", quiz_id)
        return quiz

    def delete_quiz(self, quiz_id: UUID) -> None:
        quiz = self.get_quiz(quiz_id)
        if not quiz.can_be_modified():
            raise InvalidOperationError(message="Cannot delete a published quiz", operation="delete_quiz")
        self.quiz_repo.delete(quiz_id)
        logger.info("Quiz %s eliminado", quiz_id)

    def score_round(self, cmd: ScoreRoundCommand) -> RoundReport:
        quiz = self.get_quiz(cmd.quiz_id)
        if not quiz.is_published:
            raise InvalidOperationError(message="Cannot score an unpublished quiz", operation="score_round")

        levels: Dict[UUID, Difficulty] = {}
        results: List[AnswerResult] = []
        answered = set()
        for submitted in cmd.answers:
            if not quiz.has_question(submitted.question_id):
                raise ValidationError(
                    message=f"Question {submitted.question_id} is not part of this quiz",
                    field="answers",
                )
            if submitted.question_id in answered:
                raise ValidationError(
                    message=f"Question {submitted.question_id} was answered more than once",
                    field="answers",
                )
            answered.add(submitted.question_id)

            current = self._get_question(submitted.question_id)
            difficulty = self._get_difficulty(current.question.difficulty_id, levels)
            results.append(
                AnswerResult(
                    question_id=submitted.question_id,
                    is_correct=current.question.check_answer(submitted.answer_id, current.answers),
                    difficulty_level=difficulty.level,
                    time_spent_seconds=max(0.0, float(submitted.time_spent_seconds)),
                )
            )

        summary = self.scoring_policy.score_round(results)
        quiz_difficulty = self._get_difficulty(quiz.difficulty_id, levels)
        return RoundReport(
            quiz_id=quiz.id,
            policy=self.scoring_policy.name,
            summary=summary,
            success_rate=summary.accuracy_percentage,
            performance_rating=get_performance_rating(summary.accuracy_percentage),
            can_level_up=can_level_up(summary.correct_answers, summary.total_questions, quiz_difficulty),
        )

    # ---- Queries ----

    def get_quiz(self, quiz_id: UUID) -> Quiz:
        quiz = self.quiz_repo.find_by_id(quiz_id)
        if quiz is None:
            raise EntityNotFoundError(
                message=f"Quiz with id {quiz_id} not found",
                entity_type="Quiz",
                entity_id=str(quiz_id),
            )
        return quiz

    def list_quizzes(self, *, published: Optional[bool] = None) -> List[Quiz]:
        return self.quiz_repo.find_all(published=published)

    # ---- Helpers ----

    def _save_checked(self, quiz: Quiz) -> Quiz:
        quiz.verify_questions(self._load_questions(quiz.question_ids))
        return self.quiz_repo.save(quiz)

    def _load_questions(self, question_ids: Sequence[UUID]) -> List[Question]:
        found = {q.id: q for q in self.question_repo.find_many(question_ids)}
        questions = []
        for question_id in question_ids:
            if question_id not in found:
                raise _question_not_found(question_id)
            questions.append(found[question_id])
        return questions

    def _get_question(self, question_id: UUID) -> QuestionWithAnswers:
        found = self.question_repo.find_by_id(question_id)
        if found is None:
            raise _question_not_found(question_id)
        return found

    def _get_difficulty(self, difficulty_id: UUID, cache: Dict[UUID, Difficulty]) -> Difficulty:
        if difficulty_id not in cache:
            difficulty = self.difficulty_repo.find_by_id(difficulty_id)
            if difficulty is None:
                raise EntityNotFoundError(
                    message=f"Difficulty with id {difficulty_id} not found",
                    entity_type="Difficulty",
                    entity_id=str(difficulty_id),
                )
            cache[difficulty_id] = difficulty
        return cache[difficulty_id]


def _question_not_found(question_id: UUID) -> EntityNotFoundError:
    return EntityNotFoundError(
        message=f"Question with id {question_id} not found",
        entity_type="Question",
        entity_id=str(question_id),
    )
