"""
Pruebas de puntaje: modelo por rachas, modelo con bono de rapidez y funciones
sueltas (tasa de acierto, calificación, subida de nivel).
"""
import unittest
from uuid import uuid4

from quizbank.domain.entities import Difficulty, Question
from quizbank.domain.exceptions import ValidationError
from quizbank.domain.scoring import (
    AnswerResult,
    QuizScoringService,
    SpeedBonusScoringPolicy,
    StreakScoringPolicy,
    calculate_score,
    calculate_success_rate,
    calculate_total_score,
    can_level_up,
    estimate_duration,
    get_performance_rating,
    get_scoring_policy,
)


def results(*flags, level=1, time_spent=0.0):
    return [
        AnswerResult(question_id=uuid4(), is_correct=flag, difficulty_level=level, time_spent_seconds=time_spent)
        for flag in flags
    ]


class TestQuizScoringService(unittest.TestCase):
    """Modelo por rachas."""

    def setUp(self):
        self.service = QuizScoringService()

    def test_streak_bonus_grows_per_correct_answer(self):
        """Debe sumar 100, 110 y 120 para tres aciertos seguidos (nivel 1)."""
        summary = self.service.calculate_round_score(results(True, True, True))

        self.assertEqual([b.total_points for b in summary.score_breakdown], [100, 110, 120])
        self.assertEqual(summary.total_score, 330)
        self.assertEqual(summary.longest_streak, 3)
        self.assertEqual(summary.current_streak, 3)
        self.assertEqual(summary.accuracy_percentage, 100.0)

    def test_incorrect_answer_resets_streak(self):
        summary = self.service.calculate_round_score(results(True, True, False, True))

        self.assertEqual([b.total_points for b in summary.score_breakdown], [100, 110, 0, 100])
        self.assertEqual(summary.correct_answers, 3)
        self.assertEqual(summary.longest_streak, 2)
        self.assertEqual(summary.current_streak, 1)
        self.assertEqual(summary.accuracy_percentage, 75.0)

    def test_streak_bonus_is_capped(self):
        """Debe limitar el bono de racha al 50 %."""
        summary = self.service.calculate_round_score(results(*([True] * 8)))
        self.assertEqual(summary.score_breakdown[-1].streak_bonus, 0.5)
        self.assertEqual(summary.score_breakdown[-1].total_points, 150)

    def test_difficulty_multiplier(self):
        summary = self.service.calculate_round_score(results(True, level=3))
        self.assertEqual(summary.total_score, 200)
        self.assertEqual(self.service.get_difficulty_multiplier(2), 1.5)
        self.assertEqual(self.service.get_difficulty_multiplier(5), 1.0)

    def test_empty_round(self):
        summary = self.service.calculate_round_score([])
        self.assertEqual(summary.total_score, 0)
        self.assertEqual(summary.current_streak, 0)
        self.assertEqual(summary.accuracy_percentage, 0.0)

    def test_streak_bonus_percentage(self):
        self.assertEqual(self.service.get_streak_bonus_percentage(1), 0.0)
        self.assertAlmostEqual(self.service.get_streak_bonus_percentage(3), 20.0)
        self.assertAlmostEqual(self.service.get_streak_bonus_percentage(10), 50.0)


class TestScoringPolicies(unittest.TestCase):
    def test_lookup(self):
        self.assertIsInstance(get_scoring_policy("streak"), StreakScoringPolicy)
        self.assertIsInstance(get_scoring_policy(" Speed_Bonus "), SpeedBonusScoringPolicy)
        with self.assertRaises(ValidationError):
            get_scoring_policy("random")

    def test_speed_bonus_policy_perfect_round(self):
        """Debe sumar base, rapidez y bono perfecto (2 aciertos, nivel 2, 30 s)."""
        summary = SpeedBonusScoringPolicy().score_round(results(True, True, level=2, time_spent=30.0))
        # base 40 + rapidez 2*5*0.5 = 5 + perfecto 100
        self.assertEqual(summary.total_score, 145)
        self.assertEqual(summary.correct_answers, 2)

    def test_speed_bonus_policy_with_miss(self):
        summary = SpeedBonusScoringPolicy().score_round(results(True, False, level=1, time_spent=60.0))
        self.assertEqual(summary.total_score, 10)
        self.assertEqual(summary.longest_streak, 1)
        self.assertEqual(summary.current_streak, 0)


class TestScoringFunctions(unittest.TestCase):
    def test_calculate_score_delegates_to_question(self):
        question = Question(
            id=uuid4(), content="Q?", difficulty_id=uuid4(), theme_id=uuid4(), author_id="a"
        )
        difficulty = Difficulty(id=uuid4(), name="Difficile", level=3)
        self.assertEqual(calculate_score(question, difficulty, 60, True), 30)
        self.assertEqual(calculate_score(question, difficulty, 0, True), 45)
        self.assertEqual(calculate_score(question, difficulty, 0, False), 0)

    def test_success_rate(self):
        self.assertEqual(calculate_success_rate(3, 4), 75.0)
        self.assertEqual(calculate_success_rate(0, 0), 0.0)

    def test_total_score(self):
        """Debe separar base, rapidez y bono perfecto."""
        score = calculate_total_score(10, 10, 2, 30.0)
        self.assertEqual(score.base_score, 200)
        self.assertEqual(score.speed_bonus, 25.0)
        self.assertEqual(score.perfect_bonus, 100)
        self.assertEqual(score.total, 325.0)

    def test_total_score_without_perfect_bonus(self):
        score = calculate_total_score(7, 10, 1, 90.0)
        self.assertEqual(score.speed_bonus, 0.0)
        self.assertEqual(score.perfect_bonus, 0)
        self.assertEqual(score.total, 70)

    def test_total_score_empty_round_has_no_perfect_bonus(self):
        self.assertEqual(calculate_total_score(0, 0, 1, 0.0).perfect_bonus, 0)

    def test_can_level_up(self):
        """Debe exigir 80 %, al menos 10 preguntas y no estar en el nivel máximo."""
        medium = Difficulty(id=uuid4(), name="Moyen", level=2)
        expert = Difficulty(id=uuid4(), name="Expert", level=5)

        self.assertTrue(can_level_up(8, 10, medium))
        self.assertFalse(can_level_up(7, 10, medium))
        self.assertFalse(can_level_up(9, 9, medium))
        self.assertFalse(can_level_up(10, 10, expert))

    def test_performance_rating_bands(self):
        self.assertEqual(get_performance_rating(100), "Excellent")
        self.assertEqual(get_performance_rating(0), "À améliorer")

    def test_performance_rating_thresholds(self):
        """Cada umbral es inclusivo; un punto por debajo cae en la banda siguiente."""
        cases = [
            (90, "Excellent"),
            (89, "Très bien"),
            (80, "Très bien"),
            (79, "Bien"),
            (70, "Bien"),
            (69, "Moyen"),
            (60, "Moyen"),
            (59, "Passable"),
            (50, "Passable"),
            (49, "À améliorer"),
            (49.9, "À améliorer"),
        ]
        for rate, label in cases:
            with self.subTest(rate=rate):
                self.assertEqual(get_performance_rating(rate), label)

    def test_estimate_duration(self):
        self.assertEqual(estimate_duration(0), 0)
        for count in (1, 5, 8, 20):
            with self.subTest(count=count):
                self.assertEqual(estimate_duration(count), 45 * count)


if __name__ == "__main__":
    unittest.main()
