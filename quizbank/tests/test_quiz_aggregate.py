"""
Pruebas del agregado Quiz: invariantes de armado y máquina de estados
borrador/publicado.
"""
import unittest
from dataclasses import replace
from uuid import uuid4

from quizbank.domain.entities import Question
from quizbank.domain.exceptions import InvalidOperationError, InvariantViolationError
from quizbank.domain.quiz import Quiz


class QuizTestMixin:
    def setUp(self):
        self.theme_id = uuid4()
        self.difficulty_id = uuid4()

    def make_question(self, **overrides):
        data = dict(
            id=uuid4(),
            content="What is React?",
            difficulty_id=self.difficulty_id,
            theme_id=self.theme_id,
            author_id="author-1",
            validated=True,
        )
        data.update(overrides)
        return Question(**data)

    def make_questions(self, count):
        return [self.make_question() for _ in range(count)]

    def make_quiz(self, count=5, name="JS Quiz"):
        return Quiz.create(
            name=name,
            description=None,
            theme_id=self.theme_id,
            difficulty_id=self.difficulty_id,
            questions=self.make_questions(count),
        )


class TestQuizCreate(QuizTestMixin, unittest.TestCase):
    """Pruebas de Quiz.create."""

    def test_create_with_five_questions(self):
        """Debe crear un borrador con 5 preguntas en el orden recibido."""
        questions = self.make_questions(5)
        quiz = Quiz.create(
            name="  JS Quiz ",
            description="  ",
            theme_id=self.theme_id,
            difficulty_id=self.difficulty_id,
            questions=questions,
        )
        self.assertEqual(quiz.name, "JS Quiz")
        self.assertIsNone(quiz.description)
        self.assertFalse(quiz.is_published)
        self.assertEqual(quiz.question_ids, tuple(q.id for q in questions))
        self.assertEqual(quiz.get_question_count(), 5)

    def test_create_with_twenty_questions(self):
        self.assertEqual(self.make_quiz(20).get_question_count(), 20)

    def test_too_few_questions(self):
        with self.assertRaises(InvariantViolationError) as ctx:
            self.make_quiz(4)
        self.assertIn("at least 5 questions", str(ctx.exception))

    def test_too_many_questions(self):
        with self.assertRaises(InvariantViolationError) as ctx:
            self.make_quiz(21)
        self.assertIn("more than 20", str(ctx.exception))

    def test_non_validated_question(self):
        questions = self.make_questions(4) + [self.make_question(validated=False)]
        with self.assertRaises(InvariantViolationError) as ctx:
            Quiz.create(
                name="JS Quiz", description=None,
                theme_id=self.theme_id, difficulty_id=self.difficulty_id, questions=questions,
            )
        self.assertIn("must be validated", str(ctx.exception))

    def test_other_theme(self):
        questions = self.make_questions(4) + [self.make_question(theme_id=uuid4())]
        with self.assertRaises(InvariantViolationError) as ctx:
            Quiz.create(
                name="JS Quiz", description=None,
                theme_id=self.theme_id, difficulty_id=self.difficulty_id, questions=questions,
            )
        self.assertIn("must belong to the same theme", str(ctx.exception))

    def test_other_difficulty(self):
        questions = self.make_questions(4) + [self.make_question(difficulty_id=uuid4())]
        with self.assertRaises(InvariantViolationError) as ctx:
            Quiz.create(
                name="JS Quiz", description=None,
                theme_id=self.theme_id, difficulty_id=self.difficulty_id, questions=questions,
            )
        self.assertIn("must have the same difficulty", str(ctx.exception))

    def test_short_name(self):
        with self.assertRaises(InvariantViolationError) as ctx:
            self.make_quiz(name="AB")
        self.assertIn("at least 3 characters", str(ctx.exception))

    def test_long_name(self):
        with self.assertRaises(InvariantViolationError):
            self.make_quiz(name="x" * 101)

    def test_duplicate_question(self):
        """Debe rechazar la misma pregunta dos veces."""
        question = self.make_question()
        with self.assertRaises(InvariantViolationError):
            Quiz.create(
                name="JS Quiz", description=None,
                theme_id=self.theme_id, difficulty_id=self.difficulty_id,
                questions=self.make_questions(4) + [question, question],
            )


class TestQuizMutations(QuizTestMixin, unittest.TestCase):
    """Alta y baja de preguntas, metadatos."""

    def test_add_question(self):
        quiz = self.make_quiz(5)
        question = self.make_question()
        updated = quiz.add_question(question)

        self.assertEqual(updated.get_question_count(), 6)
        self.assertEqual(updated.question_ids[-1], question.id)
        self.assertEqual(quiz.get_question_count(), 5)

    def test_add_question_over_limit(self):
        with self.assertRaises(InvariantViolationError) as ctx:
            self.make_quiz(20).add_question(self.make_question())
        self.assertIn("more than 20", str(ctx.exception))

    def test_add_question_checks(self):
        """Debe rechazar tema, dificultad, validación y duplicado inválidos."""
        quiz = self.make_quiz(5)
        cases = [
            (self.make_question(theme_id=uuid4()), "theme must match"),
            (self.make_question(difficulty_id=uuid4()), "difficulty must match"),
            (self.make_question(validated=False), "non-validated"),
        ]
        for question, message in cases:
            with self.assertRaises(InvariantViolationError) as ctx:
                quiz.add_question(question)
            self.assertIn(message, str(ctx.exception))

        existing = self.make_question(id=quiz.question_ids[0])
        with self.assertRaises(InvariantViolationError) as ctx:
            quiz.add_question(existing)
        self.assertIn("already exists", str(ctx.exception))

    def test_remove_question(self):
        quiz = self.make_quiz(6)
        removed_id = quiz.question_ids[2]
        updated = quiz.remove_question(removed_id)

        self.assertEqual(updated.get_question_count(), 5)
        self.assertFalse(updated.has_question(removed_id))

    def test_remove_question_at_minimum(self):
        """Debe impedir bajar de 5 preguntas."""
        quiz = self.make_quiz(5)
        with self.assertRaises(InvariantViolationError) as ctx:
            quiz.remove_question(quiz.question_ids[0])
        self.assertIn("minimum 5", str(ctx.exception))

    def test_remove_unknown_question(self):
        with self.assertRaises(InvalidOperationError):
            self.make_quiz(6).remove_question(uuid4())

    def test_update_metadata(self):
        updated = self.make_quiz().update_metadata(name="React Quiz", description="Hooks")
        self.assertEqual(updated.name, "React Quiz")
        self.assertEqual(updated.description, "Hooks")

    def test_update_metadata_invalid_name(self):
        with self.assertRaises(InvariantViolationError):
            self.make_quiz().update_metadata(name=" A ", description=None)

    def test_estimated_duration(self):
        self.assertEqual(self.make_quiz(10).get_estimated_duration(), 450)


class TestQuizPublication(QuizTestMixin, unittest.TestCase):
    """Máquina de estados borrador/publicado."""

    def test_publish_and_unpublish(self):
        quiz = self.make_quiz()
        published = quiz.publish()

        self.assertTrue(published.is_published)
        self.assertFalse(published.can_be_modified())
        self.assertFalse(published.unpublish().is_published)

    def test_publish_twice(self):
        with self.assertRaises(InvalidOperationError) as ctx:
            self.make_quiz().publish().publish()
        self.assertIn("already published", str(ctx.exception))

    def test_unpublish_draft(self):
        with self.assertRaises(InvalidOperationError):
            self.make_quiz().unpublish()

    def test_published_quiz_is_read_only(self):
        """Debe rechazar cualquier modificación una vez publicado."""
        published = self.make_quiz(6).publish()
        operations = [
            lambda: published.add_question(self.make_question()),
            lambda: published.remove_question(published.question_ids[0]),
            lambda: published.update_metadata(name="Other name", description=None),
        ]
        for operation in operations:
            with self.assertRaises(InvalidOperationError) as ctx:
                operation()
            self.assertEqual(str(ctx.exception), "Cannot modify a published quiz")



class TestQuizVerifyQuestions(QuizTestMixin, unittest.TestCase):
    """Revisión de las preguntas recargadas de un quiz ya armado."""

    def setUp(self):
        super().setUp()
        self.questions = self.make_questions(5)
        self.quiz = Quiz.create(
            name="JS Quiz",
            description=None,
            theme_id=self.theme_id,
            difficulty_id=self.difficulty_id,
            questions=self.questions,
        )

    def test_consistent_questions_pass(self):
        self.quiz.verify_questions(self.questions)

    def test_rejected_question(self):
        reloaded = [self.questions[0].mark_as_rejected()] + self.questions[1:]
        with self.assertRaises(InvariantViolationError) as ctx:
            self.quiz.verify_questions(reloaded)
        self.assertEqual(str(ctx.exception), "All questions in a quiz must be validated")

    def test_question_moved_to_other_theme(self):
        reloaded = self.questions[:4] + [replace(self.questions[4], theme_id=uuid4())]
        with self.assertRaises(InvariantViolationError) as ctx:
            self.quiz.verify_questions(reloaded)
        self.assertEqual(str(ctx.exception), "All questions must belong to the same theme")

    def test_loaded_questions_must_match_ids(self):
        with self.assertRaises(InvariantViolationError):
            self.quiz.verify_questions(self.questions[:4] + [self.make_question()])


if __name__ == "__main__":
    unittest.main()
