"""Cálculo de puntajes.

Conviven dos modelos de puntaje, expuestos detrás de `ScoringPolicy`:

- `StreakScoringPolicy`: 100 puntos base por acierto, multiplicador por
  dificultad y bono por racha de aciertos consecutivos (10 % por acierto,
  tope de 50 %). Implementado por `QuizScoringService`.
- `SpeedBonusScoringPolicy`: 10 puntos por nivel de dificultad, bono por
  rapidez promedio y bono fijo de 100 puntos por ronda perfecta.

La política activa se elige por configuración (`get_scoring_policy`).
También se exponen las funciones sueltas usadas por la interfaz (tasa de
acierto, calificación, subida de nivel y duración estimada).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence, Type
from uuid import UUID

from quizbank.domain import rules
from quizbank.domain.entities import Difficulty, Question
from quizbank.domain.exceptions import ValidationError
from quizbank.domain.quiz import SECONDS_PER_QUESTION

__all__ = [
    "AnswerResult",
    "QuestionScoreBreakdown",
    "QuizScoreSummary",
    "ScoringConfig",
    "DEFAULT_SCORING_CONFIG",
    "QuizScoringService",
    "ScoringPolicy",
    "StreakScoringPolicy",
    "SpeedBonusScoringPolicy",
    "SCORING_POLICIES",
    "get_scoring_policy",
    "TotalScore",
    "calculate_score",
    "calculate_success_rate",
    "calculate_total_score",
    "can_level_up",
    "get_performance_rating",
    "estimate_duration",
]


# ---------------------------------------------------------------------------
# Tipos de resultado
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnswerResult:
    """Resultado de una respuesta dentro de una ronda."""

    question_id: UUID
    is_correct: bool
    difficulty_level: int
    time_spent_seconds: float = 0.0


@dataclass(frozen=True)
class QuestionScoreBreakdown:
    question_id: UUID
    base_points: int
    difficulty_multiplier: float
    streak_bonus: float
    total_points: int


@dataclass(frozen=True)
class QuizScoreSummary:
    total_score: int
    correct_answers: int
    total_questions: int
    longest_streak: int
    current_streak: int
    accuracy_percentage: float
    score_breakdown: List[QuestionScoreBreakdown] = field(default_factory=list)


@dataclass(frozen=True)
class ScoringConfig:
    base_points_per_question: int = 100
    streak_bonus_multiplier: float = 0.1
    max_streak_bonus: float = 0.5
    difficulty_multipliers: Mapping[int, float] = field(
        default_factory=lambda: {1: 1.0, 2: 1.5, 3: 2.0}
    )
    default_difficulty_multiplier: float = 1.0


DEFAULT_SCORING_CONFIG = ScoringConfig()


def _missed(question_id: UUID) -> QuestionScoreBreakdown:
    return QuestionScoreBreakdown(
        question_id=question_id,
        base_points=0,
        difficulty_multiplier=0.0,
        streak_bonus=0.0,
        total_points=0,
    )


def _streaks(results: Sequence[AnswerResult]) -> List[int]:
    """Racha vigente después de cada respuesta."""

    current = 0
    out: List[int] = []
    for result in results:
        current = current + 1 if result.is_correct else 0
        out.append(current)
    return out


# ---------------------------------------------------------------------------
# Modelo por rachas
# ---------------------------------------------------------------------------


class QuizScoringService:
    """Puntaje por pregunta con multiplicador de dificultad y bono de racha."""

    def __init__(self, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> None:
        self.config = config

    def calculate_round_score(self, results: Sequence[AnswerResult]) -> QuizScoreSummary:
        total_score = 0
        correct_answers = 0
        longest_streak = 0
        breakdown: List[QuestionScoreBreakdown] = []

        streaks = _streaks(results)
        for result, streak in zip(results, streaks):
            if not result.is_correct:
                breakdown.append(_missed(result.question_id))
                continue
            correct_answers += 1
            longest_streak = max(longest_streak, streak)
            item = self.calculate_question_score(result.question_id, result.difficulty_level, streak)
            breakdown.append(item)
            total_score += item.total_points

        return QuizScoreSummary(
            total_score=total_score,
            correct_answers=correct_answers,
            total_questions=len(results),
            longest_streak=longest_streak,
            current_streak=streaks[-1] if streaks else 0,
            accuracy_percentage=calculate_success_rate(correct_answers, len(results)),
            score_breakdown=breakdown,
        )

    def calculate_question_score(
        self,
        question_id: UUID,
        difficulty_level: int,
        current_streak: int,
    ) -> QuestionScoreBreakdown:
        base_points = self.config.base_points_per_question
        multiplier = self.get_difficulty_multiplier(difficulty_level)
        streak_bonus = min(
            (current_streak - 1) * self.config.streak_bonus_multiplier,
            self.config.max_streak_bonus,
        )
        total_points = rules.round_half_up(base_points * multiplier * (1 + streak_bonus))
        return QuestionScoreBreakdown(
            question_id=question_id,
            base_points=base_points,
            difficulty_multiplier=multiplier,
            streak_bonus=streak_bonus,
            total_points=total_points,
        )

    def get_streak_bonus_percentage(self, streak: int) -> float:
        if streak <= 1:
            return 0.0
        bonus = (streak - 1) * self.config.streak_bonus_multiplier
        return min(bonus, self.config.max_streak_bonus) * 100

    def get_difficulty_multiplier(self, level: int) -> float:
        return self.config.difficulty_multipliers.get(level, self.config.default_difficulty_multiplier)


# ---------------------------------------------------------------------------
# Políticas intercambiables
# ---------------------------------------------------------------------------


class ScoringPolicy(ABC):
    """Estrategia de puntaje de una ronda completa."""

    name: str = ""

    @abstractmethod
    def score_round(self, results: Sequence[AnswerResult]) -> QuizScoreSummary:
        """Calcula el resumen de puntaje para los resultados en orden de respuesta."""


class StreakScoringPolicy(ScoringPolicy):
    name = "streak"

    def __init__(self, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> None:
        self.service = QuizScoringService(config)

    def score_round(self, results: Sequence[AnswerResult]) -> QuizScoreSummary:
        return self.service.calculate_round_score(results)


class SpeedBonusScoringPolicy(ScoringPolicy):
    name = "speed_bonus"

    def score_round(self, results: Sequence[AnswerResult]) -> QuizScoreSummary:
        breakdown: List[QuestionScoreBreakdown] = []
        for result in results:
            if not result.is_correct:
                breakdown.append(_missed(result.question_id))
                continue
            points = Question.BASE_POINTS * result.difficulty_level
            breakdown.append(
                QuestionScoreBreakdown(
                    question_id=result.question_id,
                    base_points=Question.BASE_POINTS,
                    difficulty_multiplier=float(result.difficulty_level),
                    streak_bonus=0.0,
                    total_points=points,
                )
            )

        correct = sum(1 for r in results if r.is_correct)
        total = len(results)
        average_time = sum(r.time_spent_seconds for r in results) / total if total else 0.0
        base_score = sum(item.total_points for item in breakdown)
        score = base_score + _speed_bonus(correct, average_time) + _perfect_bonus(correct, total)

        streaks = _streaks(results)
        return QuizScoreSummary(
            total_score=rules.round_half_up(score),
            correct_answers=correct,
            total_questions=total,
            longest_streak=max(streaks, default=0),
            current_streak=streaks[-1] if streaks else 0,
            accuracy_percentage=calculate_success_rate(correct, total),
            score_breakdown=breakdown,
        )


SCORING_POLICIES: Dict[str, Type[ScoringPolicy]] = {
    StreakScoringPolicy.name: StreakScoringPolicy,
    SpeedBonusScoringPolicy.name: SpeedBonusScoringPolicy,
}


def get_scoring_policy(name: str) -> ScoringPolicy:
    try:
        policy_cls = SCORING_POLICIES[(name or "").strip().lower()]
    except KeyError:
        raise ValidationError(
            message=f"Unknown scoring policy: {name!r}",
            field="scoring_policy",
        ) from None
    return policy_cls()


# ---------------------------------------------------------------------------
# Funciones sueltas
# ---------------------------------------------------------------------------

SPEED_BONUS_PER_CORRECT = 5
SPEED_BONUS_WINDOW_SECONDS = 60
PERFECT_ROUND_BONUS = 100
LEVEL_UP_MIN_SUCCESS_RATE = 80
LEVEL_UP_MIN_QUESTIONS = 10

_PERFORMANCE_BANDS = (
    (90, "Excellent"),
    (80, "Très bien"),
    (70, "Bien"),
    (60, "Moyen"),
    (50, "Passable"),
)


@dataclass(frozen=True)
class TotalScore:
    base_score: int
    speed_bonus: float
    perfect_bonus: int
    total: float


def _speed_bonus(correct: int, average_time_seconds: float) -> float:
    return max(0.0, correct * SPEED_BONUS_PER_CORRECT * (1 - average_time_seconds / SPEED_BONUS_WINDOW_SECONDS))


def _perfect_bonus(correct: int, total: int) -> int:
    return PERFECT_ROUND_BONUS if total > 0 and correct == total else 0


def calculate_score(question: Question, difficulty: Difficulty, time_spent_seconds: float, is_correct: bool) -> int:
    return question.calculate_score(difficulty, time_spent_seconds, is_correct)


def calculate_success_rate(correct: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return correct / total * 100


def calculate_total_score(
    correct_answers: int,
    total_questions: int,
    difficulty_level: int,
    average_time_seconds: float,
) -> TotalScore:
    base_score = correct_answers * Question.BASE_POINTS * difficulty_level
    speed_bonus = _speed_bonus(correct_answers, average_time_seconds)
    perfect_bonus = _perfect_bonus(correct_answers, total_questions)
    return TotalScore(
        base_score=base_score,
        speed_bonus=speed_bonus,
        perfect_bonus=perfect_bonus,
        total=base_score + speed_bonus + perfect_bonus,
    )


def can_level_up(correct_answers: int, total_questions: int, current_difficulty: Difficulty) -> bool:
    if total_questions < LEVEL_UP_MIN_QUESTIONS:
        return False
    if current_difficulty.level >= Difficulty.MAX_LEVEL:
        return False
    return calculate_success_rate(correct_answers, total_questions) >= LEVEL_UP_MIN_SUCCESS_RATE


def get_performance_rating(success_rate: float) -> str:
    for threshold, label in _PERFORMANCE_BANDS:
        if success_rate >= threshold:
            return label
    return "À améliorer"


def estimate_duration(question_count: int) -> int:
    return question_count * SECONDS_PER_QUESTION
