from __future__ import annotations

from typing import Optional, Tuple
from uuid import UUID

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import extend_schema, OpenApiTypes, OpenApiParameter
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from quizbank.application.commands import (
    CheckAnswerCommand,
    SetQuestionValidationCommand,
    UpdateQuizMetadataCommand,
)
from quizbank.infrastructure.factories import get_service_factory
from quizbank.infrastructure.permissions import TokenRequiredForWrite
from quizbank.interfaces.entity_serializers import (
    AnswerCheckSerializer,
    DomainDifficultyReadSerializer,
    DomainQuestionReadSerializer,
    DomainQuizReadSerializer,
    DomainThemeReadSerializer,
    QuestionReviewSerializer,
    RoundReportSerializer,
    ValidationResultSerializer,
    serialize_question_page,
)
from quizbank.interfaces.input_serializers import (
    CheckAnswerInputSerializer,
    CreateQuestionInputSerializer,
    CreateQuizInputSerializer,
    QuestionListQuerySerializer,
    QuestionPreviewInputSerializer,
    QuizQuestionInputSerializer,
    RandomQuestionsQuerySerializer,
    ScoreRoundInputSerializer,
    SetValidationInputSerializer,
    UpdateQuestionInputSerializer,
    UpdateQuizMetadataInputSerializer,
)

TRUE_VALUES = {"1", "true", "t", "yes", "y", "si", "sí", "on"}
FALSE_VALUES = {"0", "false", "f", "no", "n", "off"}

# =====================================================================
# Helpers base
# =====================================================================


def _as_bool(value, *, default: Optional[bool] = False) -> Optional[bool]:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    return default


def _parse_uuid(value, *, field: str) -> Tuple[Optional[UUID], Optional[Response]]:
    try:
        return UUID(str(value)), None
    except (ValueError, TypeError):
        return None, Response({field: f"{field} inválido."}, status=status.HTTP_400_BAD_REQUEST)


class _InterfaceMixin:
    """Helpers reutilizables para las vistas."""

    @property
    def factory(self):
        return get_service_factory()

    def question_service(self):
        if not hasattr(self, "_question_service"):
            self._question_service = self.factory.create_question_service()
        return self._question_service

    def quiz_service(self):
        if not hasattr(self, "_quiz_service"):
            self._quiz_service = self.factory.create_quiz_service()
        return self._quiz_service

    def catalog_service(self):
        if not hasattr(self, "_catalog_service"):
            self._catalog_service = self.factory.create_catalog_service()
        return self._catalog_service

    def reveal_context(self, request) -> dict:
        """`is_correct` sólo se expone con `?reveal=true` y token válido."""
        wants = _as_bool(request.query_params.get("reveal"))
        return {"reveal_answers": bool(wants) and TokenRequiredForWrite().has_valid_token(request)}


class _BasePublic(_InterfaceMixin, APIView):
    authentication_classes = []
    permission_classes = [AllowAny]


class _BaseModeration(_InterfaceMixin, APIView):
    authentication_classes = []
    permission_classes = [TokenRequiredForWrite]

# =====================================================================
# Esquema público
# =====================================================================


class PublicSchemaAPIView(SpectacularAPIView):
    authentication_classes = []
    permission_classes = [AllowAny]


class PublicSwaggerUIView(SpectacularSwaggerView):
    authentication_classes = []
    permission_classes = [AllowAny]

# =====================================================================
# Salud
# =====================================================================


class HealthAPIView(_BasePublic):
    @extend_schema(tags=["Health"], responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        return Response({"status": "ok"})

# =====================================================================
# Catálogos
# =====================================================================


class ThemeListAPIView(_BasePublic):
    @extend_schema(tags=["Catalogos"], responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        themes = self.catalog_service().list_themes()
        return Response({"data": [DomainThemeReadSerializer(t).data for t in themes], "count": len(themes)})


class ThemeDetailAPIView(_BasePublic):
    @extend_schema(tags=["Catalogos"], responses={200: DomainThemeReadSerializer, 404: OpenApiTypes.OBJECT})
    def get(self, request, id: str):
        theme_id, error = _parse_uuid(id, field="theme_id")
        if error:
            return error
        return Response(DomainThemeReadSerializer(self.catalog_service().get_theme(theme_id)).data)


class DifficultyListAPIView(_BasePublic):
    @extend_schema(tags=["Catalogos"], responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        difficulties = self.catalog_service().list_difficulties()
        return Response(
            {"data": [DomainDifficultyReadSerializer(d).data for d in difficulties], "count": len(difficulties)}
        )


class DifficultyDetailAPIView(_BasePublic):
    @extend_schema(tags=["Catalogos"], responses={200: DomainDifficultyReadSerializer, 404: OpenApiTypes.OBJECT})
    def get(self, request, id: str):
        difficulty_id, error = _parse_uuid(id, field="difficulty_id")
        if error:
            return error
        difficulty = self.catalog_service().get_difficulty(difficulty_id)
        return Response(DomainDifficultyReadSerializer(difficulty).data)

# =====================================================================
# Preguntas
# =====================================================================


class QuestionListCreateAPIView(_BasePublic):
    @extend_schema(
        parameters=[
            OpenApiParameter("page", OpenApiTypes.INT, required=False),
            OpenApiParameter("limit", OpenApiTypes.INT, required=False, description="1..100 (por defecto 10)"),
            OpenApiParameter("theme_id", OpenApiTypes.UUID, required=False),
            OpenApiParameter("difficulty_id", OpenApiTypes.UUID, required=False),
            OpenApiParameter("validated", OpenApiTypes.BOOL, required=False),
            OpenApiParameter("sort_by", OpenApiTypes.STR, required=False, description="created_at | updated_at"),
            OpenApiParameter("sort_order", OpenApiTypes.STR, required=False, description="asc | desc"),
        ],
        responses={200: OpenApiTypes.OBJECT},
        tags=["Preguntas"],
        description="Listado paginado de preguntas.",
    )
    def get(self, request):
        # `.dict()` evita que BooleanField lea False cuando falta `validated`.
        ser = QuestionListQuerySerializer(data=request.query_params.dict())
        ser.is_valid(raise_exception=True)
        page = self.question_service().list_questions(ser.to_query())
        return Response(serialize_question_page(page))

    @extend_schema(
        request=CreateQuestionInputSerializer,
        responses={201: DomainQuestionReadSerializer, 400: OpenApiTypes.OBJECT, 404: OpenApiTypes.OBJECT},
        tags=["Preguntas"],
        description="Crea una pregunta con exactamente 4 respuestas y una correcta.",
    )
    def post(self, request):
        ser = CreateQuestionInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        created = self.question_service().create_question(ser.to_command())
        data = DomainQuestionReadSerializer(created, context=self.reveal_context(request)).data
        return Response(data, status=status.HTTP_201_CREATED)


class QuestionPreviewAPIView(_BasePublic):
    @extend_schema(
        request=QuestionPreviewInputSerializer,
        responses={200: ValidationResultSerializer},
        tags=["Preguntas"],
        description="Valida un borrador sin guardarlo y devuelve todas las violaciones.",
    )
    def post(self, request):
        ser = QuestionPreviewInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        result = self.question_service().preview_question(ser.validated_data["content"], ser.to_drafts())
        return Response(ValidationResultSerializer(result).data)


class RandomQuestionsAPIView(_BasePublic):
    @extend_schema(
        parameters=[
            OpenApiParameter("theme_id", OpenApiTypes.UUID, required=True),
            OpenApiParameter("limit", OpenApiTypes.INT, required=False, description="1..50 (por defecto 10)"),
            OpenApiParameter("exclude_ids", OpenApiTypes.UUID, required=False, many=True),
        ],
        responses={200: DomainQuestionReadSerializer(many=True)},
        tags=["Preguntas"],
        description="Preguntas validadas al azar de un tema.",
    )
    def get(self, request):
        ser = RandomQuestionsQuerySerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        questions = self.question_service().get_random_questions(ser.to_query())
        context = self.reveal_context(request)
        return Response([DomainQuestionReadSerializer(q, context=context).data for q in questions])


class QuestionDetailAPIView(_BasePublic):
    """Detalle y edición de una pregunta (texto, catálogos, respuestas)."""

    @extend_schema(
        parameters=[OpenApiParameter("reveal", OpenApiTypes.BOOL, required=False)],
        responses={200: DomainQuestionReadSerializer, 404: OpenApiTypes.OBJECT},
        tags=["Preguntas"],
    )
    def get(self, request, id: str):
        question_id, error = _parse_uuid(id, field="question_id")
        if error:
            return error
        found = self.question_service().get_question(question_id)
        return Response(DomainQuestionReadSerializer(found, context=self.reveal_context(request)).data)

    @extend_schema(
        request=UpdateQuestionInputSerializer,
        responses={200: DomainQuestionReadSerializer, 400: OpenApiTypes.OBJECT, 404: OpenApiTypes.OBJECT},
        tags=["Preguntas"],
        description="Reemplaza la pregunta completa. Una pregunta validada no se puede editar.",
    )
    def put(self, request, id: str):
        question_id, error = _parse_uuid(id, field="question_id")
        if error:
            return error
        ser = UpdateQuestionInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        updated = self.question_service().update_question(ser.to_command(question_id))
        return Response(DomainQuestionReadSerializer(updated, context=self.reveal_context(request)).data)


class QuestionValidationAPIView(_BaseModeration):
    @extend_schema(
        request=SetValidationInputSerializer,
        responses={200: DomainQuestionReadSerializer, 400: OpenApiTypes.OBJECT, 403: OpenApiTypes.OBJECT},
        tags=["Moderacion"],
        description="Marca la pregunta como validada o la devuelve a borrador.",
    )
    def patch(self, request, id: str):
        question_id, error = _parse_uuid(id, field="question_id")
        if error:
            return error
        ser = SetValidationInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        question = self.question_service().set_question_validation(
            SetQuestionValidationCommand(id=question_id, validated=ser.validated_data["validated"])
        )
        return Response(DomainQuestionReadSerializer(question).data)


class QuestionCheckAPIView(_BasePublic):
    @extend_schema(
        request=CheckAnswerInputSerializer,
        responses={200: AnswerCheckSerializer, 404: OpenApiTypes.OBJECT},
        tags=["Juego"],
    )
    def post(self, request, id: str):
        question_id, error = _parse_uuid(id, field="question_id")
        if error:
            return error
        ser = CheckAnswerInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        result = self.question_service().check_answer(
            CheckAnswerCommand(question_id=question_id, answer_id=ser.validated_data["answer_id"])
        )
        return Response(AnswerCheckSerializer(result).data)


class QuestionReviewAPIView(_BasePublic):
    @extend_schema(
        responses={200: QuestionReviewSerializer, 404: OpenApiTypes.OBJECT},
        tags=["Moderacion"],
        description="Motivos que impiden validar la pregunta y avisos de calidad.",
    )
    def get(self, request, id: str):
        question_id, error = _parse_uuid(id, field="question_id")
        if error:
            return error
        return Response(QuestionReviewSerializer(self.question_service().review_question(question_id)).data)

# =====================================================================
# Quizzes
# =====================================================================


class QuizViewSet(_InterfaceMixin, viewsets.ViewSet):
    """Gestión de quizzes: las escrituras exigen token, salvo puntuar una ronda."""

    authentication_classes = []
    permission_classes = [TokenRequiredForWrite]

    def _quiz_response(self, quiz, *, status_code: int = status.HTTP_200_OK) -> Response:
        return Response(DomainQuizReadSerializer(quiz).data, status=status_code)

    @extend_schema(
        parameters=[OpenApiParameter("published", OpenApiTypes.BOOL, required=False)],
        responses={200: DomainQuizReadSerializer(many=True)},
        tags=["Quizzes"],
    )
    def list(self, request):
        published = _as_bool(request.query_params.get("published"), default=None)
        quizzes = self.quiz_service().list_quizzes(published=published)
        return Response([DomainQuizReadSerializer(q).data for q in quizzes])

    @extend_schema(
        request=CreateQuizInputSerializer,
        responses={201: DomainQuizReadSerializer, 400: OpenApiTypes.OBJECT, 404: OpenApiTypes.OBJECT},
        tags=["Quizzes"],
        description="Crea un quiz en borrador con 5 a 20 preguntas validadas del mismo tema y dificultad.",
    )
    def create(self, request):
        ser = CreateQuizInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        quiz = self.quiz_service().create_quiz(ser.to_command())
        return self._quiz_response(quiz, status_code=status.HTTP_201_CREATED)

    @extend_schema(responses={200: DomainQuizReadSerializer, 404: OpenApiTypes.OBJECT}, tags=["Quizzes"])
    def retrieve(self, request, pk=None):
        quiz_id, error = _parse_uuid(pk, field="quiz_id")
        if error:
            return error
        return self._quiz_response(self.quiz_service().get_quiz(quiz_id))

    @extend_schema(
        request=UpdateQuizMetadataInputSerializer,
        responses={200: DomainQuizReadSerializer, 400: OpenApiTypes.OBJECT, 404: OpenApiTypes.OBJECT},
        tags=["Quizzes"],
    )
    def partial_update(self, request, pk=None):
        quiz_id, error = _parse_uuid(pk, field="quiz_id")
        if error:
            return error
        ser = UpdateQuizMetadataInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        quiz = self.quiz_service().update_metadata(
            UpdateQuizMetadataCommand(
                id=quiz_id,
                name=ser.validated_data["name"],
                description=ser.validated_data.get("description"),
            )
        )
        return self._quiz_response(quiz)

    @extend_schema(responses={204: None, 400: OpenApiTypes.OBJECT, 404: OpenApiTypes.OBJECT}, tags=["Quizzes"])
    def destroy(self, request, pk=None):
        quiz_id, error = _parse_uuid(pk, field="quiz_id")
        if error:
            return error
        self.quiz_service().delete_quiz(quiz_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=None, responses={200: DomainQuizReadSerializer, 400: OpenApiTypes.OBJECT}, tags=["Quizzes"])
    @action(detail=True, methods=["post"], url_path="publish")
    def publish(self, request, pk=None):
        quiz_id, error = _parse_uuid(pk, field="quiz_id")
        if error:
            return error
        return self._quiz_response(self.quiz_service().publish(quiz_id))

    @extend_schema(request=None, responses={200: DomainQuizReadSerializer, 400: OpenApiTypes.OBJECT}, tags=["Quizzes"])
    @action(detail=True, methods=["post"], url_path="unpublish")
    def unpublish(self, request, pk=None):
        quiz_id, error = _parse_uuid(pk, field="quiz_id")
        if error:
            return error
        return self._quiz_response(self.quiz_service().unpublish(quiz_id))

    @extend_schema(
        request=QuizQuestionInputSerializer,
        responses={200: DomainQuizReadSerializer, 400: OpenApiTypes.OBJECT, 404: OpenApiTypes.OBJECT},
        tags=["Quizzes"],
    )
    @action(detail=True, methods=["post"], url_path="questions")
    def add_question(self, request, pk=None):
        quiz_id, error = _parse_uuid(pk, field="quiz_id")
        if error:
            return error
        ser = QuizQuestionInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        quiz = self.quiz_service().add_question(quiz_id, ser.validated_data["question_id"])
        return self._quiz_response(quiz)

    @extend_schema(responses={200: DomainQuizReadSerializer, 400: OpenApiTypes.OBJECT}, tags=["Quizzes"])
    @action(detail=True, methods=["delete"], url_path=r"questions/(?P<question_id>[0-9a-fA-F-]+)")
    def remove_question(self, request, pk=None, question_id=None):
        quiz_id, error = _parse_uuid(pk, field="quiz_id")
        if error:
            return error
        parsed_question_id, error = _parse_uuid(question_id, field="question_id")
        if error:
            return error
        return self._quiz_response(self.quiz_service().remove_question(quiz_id, parsed_question_id))

    @extend_schema(
        request=ScoreRoundInputSerializer,
        responses={200: RoundReportSerializer, 400: OpenApiTypes.OBJECT, 404: OpenApiTypes.OBJECT},
        tags=["Juego"],
        description="Puntúa una ronda jugada sobre un quiz publicado.",
    )
    @action(detail=True, methods=["post"], url_path="score", permission_classes=[AllowAny])
    def score(self, request, pk=None):
        quiz_id, error = _parse_uuid(pk, field="quiz_id")
        if error:
            return error
        ser = ScoreRoundInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        report = self.quiz_service().score_round(ser.to_command(quiz_id))
        return Response(RoundReportSerializer(report).data)
