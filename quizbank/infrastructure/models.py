# -*- coding: utf-8 -*-
"""
Modelos de infraestructura (Django ORM).

Objetivo:
- Representar tablas y relaciones persistentes sin lógica de negocio.
- Las invariantes viven en el dominio; aquí sólo hay tipos, índices y
  restricciones de integridad.

Convenciones:
- Llaves primarias UUID generadas en Python.
- Las fechas se asignan desde las entidades (sin `auto_now`), para que el
  `updated_at` que calcula el dominio sea el que se persiste.
- `__str__` devuelve una representación legible para el admin y logs.
"""

import uuid

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone


# ==============================================================================
#   Catálogos
# ==============================================================================

class Theme(models.Model):
    """Tema de preguntas (p. ej. Historia, Geografía)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(null=True, blank=True)
    color = models.CharField(max_length=20, null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "theme"
        ordering = ["name"]

    def __str__(self):
        return self.name


class Difficulty(models.Model):
    """Dificultad de referencia, nivel 1 (fácil) a 5 (experto)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=50, unique=True)
    level = models.PositiveSmallIntegerField(
        unique=True,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )
    color = models.CharField(max_length=20, null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "difficulty"
        ordering = ["level"]

    def __str__(self):
        return f"{self.name} ({self.level})"


class Tag(models.Model):
    """Etiqueta libre para agrupar preguntas."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=50, unique=True)

    class Meta:
        db_table = "tag"
        ordering = ["name"]

    def __str__(self):
        return self.name


# ==============================================================================
#   Preguntas y respuestas
# ==============================================================================

class Question(models.Model):
    """
    Pregunta del banco.

    `validated` indica que un moderador la aprobó; sólo las validadas se
    sirven en partidas y pueden formar parte de un quiz.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    content = models.TextField()
    explanation = models.TextField(null=True, blank=True)
    difficulty = models.ForeignKey("Difficulty", on_delete=models.PROTECT, related_name="questions")
    theme = models.ForeignKey("Theme", on_delete=models.PROTECT, related_name="questions")
    author_id = models.CharField(max_length=64, db_index=True)
    validated = models.BooleanField(default=False)
    tags = models.ManyToManyField("Tag", blank=True, related_name="questions")
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "question"
        indexes = [
            models.Index(fields=["theme", "validated"], name="question_theme_validated_idx"),
        ]
        ordering = ["-created_at"]

    def __str__(self):
        return (self.content or "")[:60]


class Answer(models.Model):
    """Respuesta posible; cada pregunta tiene exactamente 4 (regla de dominio)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    question = models.ForeignKey("Question", on_delete=models.CASCADE, related_name="answers")
    content = models.CharField(max_length=500)
    is_correct = models.BooleanField(default=False)
    position = models.PositiveSmallIntegerField(default=0)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "answer"
        ordering = ["position"]

    def __str__(self):
        mark = "✔" if self.is_correct else "✘"
        return f"{mark} {self.content}"


# ==============================================================================
#   Quizzes
# ==============================================================================

class Quiz(models.Model):
    """Agregado Quiz; el orden de sus preguntas vive en `QuizQuestion`."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    description = models.TextField(null=True, blank=True)
    theme = models.ForeignKey("Theme", on_delete=models.PROTECT, related_name="quizzes")
    difficulty = models.ForeignKey("Difficulty", on_delete=models.PROTECT, related_name="quizzes")
    is_published = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "quiz"
        ordering = ["-created_at"]

    def __str__(self):
        return self.name


class QuizQuestion(models.Model):
    """Referencia ordenada de un quiz a una pregunta."""

    quiz = models.ForeignKey("Quiz", on_delete=models.CASCADE, related_name="entries")
    question = models.ForeignKey("Question", on_delete=models.PROTECT, related_name="quiz_entries")
    position = models.PositiveSmallIntegerField()

    class Meta:
        db_table = "quiz_question"
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(fields=["quiz", "question"], name="uniq_quiz_question"),
        ]

    def __str__(self):
        return f"{self.quiz_id} #{self.position}"
