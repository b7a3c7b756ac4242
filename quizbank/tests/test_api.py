"""Pruebas de la API HTTP: catálogos, preguntas, moderación y ciclo de vida de un quiz."""

import os
import uuid
from unittest.mock import patch

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core.settings")

import django

django.setup()

from django.conf import settings
from django.core.management import call_command
from django.test import TestCase, override_settings
from rest_framework import status
from rest_framework.test import APIClient

from quizbank.domain.scoring import SpeedBonusScoringPolicy
from quizbank.domain.value_objects import STRICT_CONTENT_POLICY
from quizbank.infrastructure.factories import get_service_factory, reset_service_factory
from quizbank.infrastructure.models import (
    Answer,
    Difficulty,
    Question,
    Quiz,
    Theme,
)

API = "/api/v1"
TOKEN = "test-secret-token"


class QuizbankAPITestCase(TestCase):
    def setUp(self):
        super().setUp()
        if "testserver" not in settings.ALLOWED_HOSTS:
            settings.ALLOWED_HOSTS.append("testserver")
        env_patch = patch.dict(os.environ, {"API_SECRET_TOKEN": TOKEN})
        env_patch.start()
        self.addCleanup(env_patch.stop)
        reset_service_factory()
        self.addCleanup(reset_service_factory)

        self.client = APIClient()
        self.theme = Theme.objects.create(name="[TEST] JavaScript")
        self.difficulty = Difficulty.objects.create(name="[TEST] Facile", level=1)

    def auth(self):
        return {"HTTP_AUTHORIZATION": f"Bearer {TOKEN}"}

    def question_payload(self, content="What is React?", answers=None):
        answers = answers or ["A library", "A database", "An OS", "A CPU"]
        return {
            "content": content,
            "difficulty_id": str(self.difficulty.id),
            "theme_id": str(self.theme.id),
            "author_id": "author-1",
            "answers": [{"content": a, "is_correct": i == 0} for i, a in enumerate(answers)],
        }

    def make_validated_question(self, index):
        question = Question.objects.create(
            content=f"[TEST] Question {index}?",
            difficulty=self.difficulty,
            theme=self.theme,
            author_id="author-1",
            validated=True,
        )
        for position, content in enumerate(("Right", "Wrong 1", "Wrong 2", "Wrong 3")):
            Answer.objects.create(question=question, content=content, is_correct=position == 0, position=position)
        return question


class HealthAndCatalogAPITest(QuizbankAPITestCase):
    def test_health(self):
        response = self.client.get(f"{API}/health/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_list_themes_and_difficulties(self):
        themes = self.client.get(f"{API}/themes/").json()
        difficulties = self.client.get(f"{API}/difficulties").json()

        self.assertIn("[TEST] JavaScript", [t["name"] for t in themes["data"]])
        self.assertEqual(themes["count"], len(themes["data"]))
        self.assertEqual(difficulties["data"][0]["level"], 1)

    def test_theme_detail_not_found(self):
        response = self.client.get(f"{API}/themes/{uuid.uuid4()}/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()["type"], "not_found_error")

    def test_seed_catalog_command_is_idempotent(self):
        call_command("seed_catalog", verbosity=0)
        call_command("seed_catalog", verbosity=0)

        self.assertEqual(Difficulty.objects.filter(level__in=range(1, 6)).count(), 5)
        self.assertTrue(Theme.objects.filter(name="Python").exists())


class QuestionAPITest(QuizbankAPITestCase):
    def test_create_question(self):
        """Debe responder 201 con la pregunta sin validar y sin revelar la correcta."""
        response = self.client.post(f"{API}/questions/", self.question_payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        payload = response.json()
        self.assertFalse(payload["validated"])
        self.assertEqual(len(payload["answers"]), 4)
        self.assertNotIn("is_correct", payload["answers"][0])
        self.assertTrue(Question.objects.filter(id=payload["id"]).exists())

    def test_create_question_with_three_answers(self):
        payload = self.question_payload(answers=["A", "B", "C"])
        response = self.client.post(f"{API}/questions/", payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["type"], "invalid_answers_count")
        self.assertEqual(Question.objects.count(), 0)

    def test_create_question_unknown_theme(self):
        payload = self.question_payload()
        payload["theme_id"] = str(uuid.uuid4())
        response = self.client.post(f"{API}/questions/", payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_preview_collects_errors(self):
        response = self.client.post(
            f"{API}/questions/preview/",
            {"content": "", "answers": [{"content": "A", "is_correct": True}]},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.json()["is_valid"])
        self.assertIn("Question content cannot be empty", response.json()["errors"])

    def test_get_question_reveal_requires_token(self):
        question = self.make_validated_question(1)
        url = f"{API}/questions/{question.id}/?reveal=true"

        public = self.client.get(url).json()
        revealed = self.client.get(url, **self.auth()).json()

        self.assertNotIn("is_correct", public["answers"][0])
        self.assertTrue(revealed["answers"][0]["is_correct"])

    def test_get_question_not_found(self):
        response = self.client.get(f"{API}/questions/{uuid.uuid4()}/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_list_questions_filters_validated(self):
        self.make_validated_question(1)
        self.client.post(f"{API}/questions/", self.question_payload(), format="json")

        all_questions = self.client.get(f"{API}/questions/").json()
        validated = self.client.get(f"{API}/questions/", {"validated": "true"}).json()

        self.assertEqual(all_questions["total"], 2)
        self.assertEqual(validated["total"], 1)
        self.assertEqual(validated["total_pages"], 1)

    def test_validation_requires_token(self):
        """Debe rechazar la moderación sin token (403) y aceptarla con token."""
        created = self.client.post(f"{API}/questions/", self.question_payload(), format="json").json()
        url = f"{API}/questions/{created['id']}/validation/"

        denied = self.client.patch(url, {"validated": True}, format="json")
        self.assertEqual(denied.status_code, status.HTTP_403_FORBIDDEN)

        accepted = self.client.patch(url, {"validated": True}, format="json", **self.auth())
        self.assertEqual(accepted.status_code, status.HTTP_200_OK)
        self.assertTrue(accepted.json()["validated"])

        again = self.client.patch(url, {"validated": True}, format="json", **self.auth())
        self.assertEqual(again.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_validated_question_is_rejected(self):
        question = self.make_validated_question(1)
        response = self.client.put(f"{API}/questions/{question.id}/", self.question_payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["type"], "invalid_operation_error")

    def test_check_answer(self):
        question = self.make_validated_question(1)
        right = question.answers.get(is_correct=True)
        wrong = question.answers.filter(is_correct=False).first()

        response = self.client.post(f"{API}/questions/{question.id}/check/", {"answer_id": str(wrong.id)}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.json()["is_correct"])
        self.assertEqual(response.json()["correct_answer_id"], str(right.id))

    def test_random_questions(self):
        questions = [self.make_validated_question(i) for i in range(3)]
        response = self.client.get(
            f"{API}/questions/random/",
            {"theme_id": str(self.theme.id), "exclude_ids": [str(questions[0].id)]},
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ids = {q["id"] for q in response.json()}
        self.assertEqual(len(ids), 2)
        self.assertNotIn(str(questions[0].id), ids)

    def test_review(self):
        question = self.make_validated_question(1)
        review = self.client.get(f"{API}/questions/{question.id}/review/").json()

        self.assertFalse(review["can_validate"])
        self.assertIn("Question is already validated", review["reasons"])


class QuizAPITest(QuizbankAPITestCase):
    def create_quiz(self, count=5):
        questions = [self.make_validated_question(i) for i in range(count)]
        response = self.client.post(
            f"{API}/quizzes/",
            {
                "name": "[TEST] JS Quiz",
                "theme_id": str(self.theme.id),
                "difficulty_id": str(self.difficulty.id),
                "question_ids": [str(q.id) for q in questions],
            },
            format="json",
            **self.auth(),
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.json(), questions

    def test_create_requires_token(self):
        response = self.client.post(f"{API}/quizzes/", {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_create_with_too_few_questions(self):
        questions = [self.make_validated_question(i) for i in range(4)]
        response = self.client.post(
            f"{API}/quizzes/",
            {
                "name": "[TEST] JS Quiz",
                "theme_id": str(self.theme.id),
                "difficulty_id": str(self.difficulty.id),
                "question_ids": [str(q.id) for q in questions],
            },
            format="json",
            **self.auth(),
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["type"], "invariant_violation_error")
        self.assertEqual(Quiz.objects.count(), 0)

    def test_quiz_lifecycle(self):
        """Debe crear, ampliar, publicar, puntuar y proteger un quiz publicado."""
        quiz, questions = self.create_quiz()
        self.assertEqual(quiz["question_count"], 5)
        self.assertEqual(quiz["question_ids"], [str(q.id) for q in questions])
        self.assertFalse(quiz["is_published"])

        extra = self.make_validated_question(99)
        added = self.client.post(
            f"{API}/quizzes/{quiz['id']}/questions/", {"question_id": str(extra.id)}, format="json", **self.auth()
        )
        self.assertEqual(added.status_code, status.HTTP_200_OK)
        self.assertEqual(added.json()["question_count"], 6)

        removed = self.client.delete(f"{API}/quizzes/{quiz['id']}/questions/{extra.id}/", **self.auth())
        self.assertEqual(removed.json()["question_count"], 5)

        published = self.client.post(f"{API}/quizzes/{quiz['id']}/publish/", format="json", **self.auth())
        self.assertTrue(published.json()["is_published"])

        renamed = self.client.patch(
            f"{API}/quizzes/{quiz['id']}/", {"name": "Other name"}, format="json", **self.auth()
        )
        self.assertEqual(renamed.status_code, status.HTTP_400_BAD_REQUEST)

        answers = [
            {"question_id": str(q.id), "answer_id": str(q.answers.get(is_correct=True).id), "time_spent_seconds": 10}
            for q in questions
        ]
        scored = self.client.post(f"{API}/quizzes/{quiz['id']}/score/", {"answers": answers}, format="json")
        self.assertEqual(scored.status_code, status.HTTP_200_OK)
        report = scored.json()
        self.assertEqual(report["correct_answers"], 5)
        self.assertEqual(report["total_score"], 100 + 110 + 120 + 130 + 140)
        self.assertEqual(report["performance_rating"], "Excellent")
        self.assertEqual(report["longest_streak"], 5)

        deleted = self.client.delete(f"{API}/quizzes/{quiz['id']}/", **self.auth())
        self.assertEqual(deleted.status_code, status.HTTP_400_BAD_REQUEST)

    def test_score_draft_is_rejected(self):
        quiz, _ = self.create_quiz()
        response = self.client.post(f"{API}/quizzes/{quiz['id']}/score/", {"answers": []}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_filters_published(self):
        quiz, _ = self.create_quiz()
        self.client.post(f"{API}/quizzes/{quiz['id']}/publish/", format="json", **self.auth())

        drafts = self.client.get(f"{API}/quizzes/", {"published": "false"}).json()
        published = self.client.get(f"{API}/quizzes/", {"published": "true"}).json()

        self.assertEqual(drafts, [])
        self.assertEqual([q["id"] for q in published], [quiz["id"]])

    def test_publish_after_rejecting_a_question(self):
        """Un borrador con una pregunta rechazada no se publica."""
        quiz, questions = self.create_quiz()
        rejected = self.client.patch(
            f"{API}/questions/{questions[0].id}/validation/", {"validated": False}, format="json", **self.auth()
        )
        self.assertEqual(rejected.status_code, status.HTTP_200_OK)

        response = self.client.post(f"{API}/quizzes/{quiz['id']}/publish/", format="json", **self.auth())

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["type"], "invariant_violation_error")
        self.assertFalse(Quiz.objects.get(id=quiz["id"]).is_published)

    def test_question_of_published_quiz_cannot_be_rejected(self):
        quiz, questions = self.create_quiz()
        self.client.post(f"{API}/quizzes/{quiz['id']}/publish/", format="json", **self.auth())

        response = self.client.patch(
            f"{API}/questions/{questions[0].id}/validation/", {"validated": False}, format="json", **self.auth()
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["type"], "invalid_operation_error")
        self.assertTrue(Question.objects.get(id=questions[0].id).validated)

    def test_delete_draft(self):
        quiz, _ = self.create_quiz()
        response = self.client.delete(f"{API}/quizzes/{quiz['id']}/", **self.auth())
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Quiz.objects.filter(id=quiz["id"]).exists())


class ServiceFactoryTest(TestCase):
    def setUp(self):
        reset_service_factory()
        self.addCleanup(reset_service_factory)

    @override_settings(QUIZBANK_CONTENT_POLICY="strict", QUIZBANK_SCORING_POLICY="speed_bonus")
    def test_policies_come_from_settings(self):
        factory = get_service_factory()

        self.assertIs(factory.get_content_policy(), STRICT_CONTENT_POLICY)
        self.assertEqual(factory.create_quiz_service().scoring_policy.name, "speed_bonus")
        self.assertIs(factory.create_question_service().validator.content_policy, STRICT_CONTENT_POLICY)

    def test_explicit_policies_override_settings(self):
        factory = get_service_factory().with_scoring_policy(SpeedBonusScoringPolicy())
        factory.with_content_policy(STRICT_CONTENT_POLICY)

        self.assertEqual(factory.create_quiz_service().scoring_policy.name, "speed_bonus")
        self.assertIs(factory.get_content_policy(), STRICT_CONTENT_POLICY)
        self.assertIs(get_service_factory(), factory)
