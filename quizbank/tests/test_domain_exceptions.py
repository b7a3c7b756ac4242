"""
Pruebas de la jerarquía de excepciones del dominio.
"""
import unittest

from quizbank.domain.exceptions import (
    DomainError,
    DomainException,
    DuplicateAnswersError,
    EntityNotFoundError,
    InvalidAnswersCountError,
    InvalidOperationError,
    QuestionValidationError,
    ValidationError,
)


class TestDomainExceptions(unittest.TestCase):
    def test_alias(self):
        self.assertIs(DomainError, DomainException)

    def test_message_is_str(self):
        exc = DomainException(message="Algo salió mal")
        self.assertEqual(str(exc), "Algo salió mal")
        self.assertIsNone(exc.details)

    def test_validation_error_details_from_field(self):
        exc = ValidationError(message="Nombre inválido", field="name")
        self.assertEqual(exc.details, {"field": "name"})
        self.assertEqual(exc.kind, "validation_error")

    def test_explicit_details_are_kept(self):
        exc = ValidationError(message="x", details={"custom": 1}, field="name")
        self.assertEqual(exc.details, {"custom": 1})

    def test_not_found_details(self):
        exc = EntityNotFoundError(message="No existe", entity_type="Quiz", entity_id="42")
        self.assertEqual(exc.details, {"entity_type": "Quiz", "entity_id": "42"})

    def test_invalid_operation_details(self):
        exc = InvalidOperationError(message="No", operation="publish")
        self.assertEqual(exc.details, {"operation": "publish"})


class TestQuestionValidationErrors(unittest.TestCase):
    def test_default_message_and_field(self):
        """Debe poder lanzarse sin argumentos con mensaje y campo por defecto."""
        exc = InvalidAnswersCountError()
        self.assertEqual(str(exc), "A question must have exactly 4 answers")
        self.assertEqual(exc.field, "answers")
        self.assertEqual(exc.details, {"field": "answers"})
        self.assertEqual(exc.kind, "invalid_answers_count")

    def test_custom_message(self):
        exc = DuplicateAnswersError(message="Respuestas repetidas")
        self.assertEqual(str(exc), "Respuestas repetidas")

    def test_hierarchy(self):
        exc = DuplicateAnswersError()
        self.assertIsInstance(exc, QuestionValidationError)
        self.assertIsInstance(exc, ValidationError)
        self.assertIsInstance(exc, DomainException)


if __name__ == "__main__":
    unittest.main()
