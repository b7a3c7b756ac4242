from django.urls import path, include, re_path
from rest_framework.routers import DefaultRouter

from quizbank.interfaces.views import (
    HealthAPIView,

    # Catálogos
    ThemeListAPIView,
    ThemeDetailAPIView,
    DifficultyListAPIView,
    DifficultyDetailAPIView,

    # Preguntas / moderación / juego
    QuestionListCreateAPIView,
    QuestionPreviewAPIView,
    RandomQuestionsAPIView,
    QuestionDetailAPIView,
    QuestionValidationAPIView,
    QuestionCheckAPIView,
    QuestionReviewAPIView,

    # Quizzes
    QuizViewSet,
)

API_PREFIX = "api/v1/"
UUID_RE = r"(?P<id>[0-9a-fA-F-]+)"

router = DefaultRouter()
router.trailing_slash = r'/?'  # evita 301/308 por barra final

router.register(r'quizzes', QuizViewSet, basename='quizzes')

urlpatterns = [
    path(API_PREFIX, include(router.urls)),

    # ======== SALUD ========
    re_path(rf'^{API_PREFIX}health/?$', HealthAPIView.as_view(), name='health'),

    # ======== CATÁLOGOS ========
    re_path(rf'^{API_PREFIX}themes/?$', ThemeListAPIView.as_view(), name='themes-list'),
    re_path(rf'^{API_PREFIX}themes/{UUID_RE}/?$', ThemeDetailAPIView.as_view(), name='theme-detail'),
    re_path(rf'^{API_PREFIX}difficulties/?$', DifficultyListAPIView.as_view(), name='difficulties-list'),
    re_path(rf'^{API_PREFIX}difficulties/{UUID_RE}/?$', DifficultyDetailAPIView.as_view(), name='difficulty-detail'),

    # ======== PREGUNTAS ========
    re_path(rf'^{API_PREFIX}questions/?$', QuestionListCreateAPIView.as_view(), name='questions-list'),
    re_path(rf'^{API_PREFIX}questions/preview/?$', QuestionPreviewAPIView.as_view(), name='question-preview'),
    re_path(rf'^{API_PREFIX}questions/random/?$', RandomQuestionsAPIView.as_view(), name='questions-random'),
    re_path(rf'^{API_PREFIX}questions/{UUID_RE}/?$', QuestionDetailAPIView.as_view(), name='question-detail'),
    re_path(rf'^{API_PREFIX}questions/{UUID_RE}/validation/?$', QuestionValidationAPIView.as_view(), name='question-validation'),
    re_path(rf'^{API_PREFIX}questions/{UUID_RE}/check/?$', QuestionCheckAPIView.as_view(), name='question-check'),
    re_path(rf'^{API_PREFIX}questions/{UUID_RE}/review/?$', QuestionReviewAPIView.as_view(), name='question-review'),
]
