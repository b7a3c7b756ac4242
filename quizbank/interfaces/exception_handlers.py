"""
Traductor de excepciones de dominio a respuestas HTTP (capa de interfaces).

- No acopla dominio a DRF: sólo aquí conocemos Response/HTTP.
- Ofrece:
  * DomainExceptionTranslator: mapea DomainException -> Response
  * translate_domain_exception(): helper
  * DomainExceptionMiddleware: captura DomainException a nivel middleware
  * custom_exception_handler: para integrarlo con DRF (REST_FRAMEWORK.EXCEPTION_HANDLER)
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Type

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_default_exception_handler

# Importa únicamente tipos de dominio (vía aplicación); NO modelos ni infra.
from quizbank.application.exceptions import (
    BusinessRuleViolationError,
    DomainException,
    EntityNotFoundError,
    InvalidOperationError,
    InvariantViolationError,
    QuestionValidationError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class DomainExceptionTranslator:
    """
    Traductor centralizado de DomainException -> HTTP Response.

    Notas:
    - La búsqueda recorre el MRO: una subclase hereda el código de su base.
    - Los errores de validación de preguntas exponen su `kind` propio
      (p. ej. `invalid_answers_count`) como `type`.
    - Incluye un `error_id` (UUID) para correlación en logs.
    """

    _STATUS_CODE_MAP: Dict[Type[DomainException], int] = {
        ValidationError: status.HTTP_400_BAD_REQUEST,
        EntityNotFoundError: status.HTTP_404_NOT_FOUND,
        BusinessRuleViolationError: status.HTTP_400_BAD_REQUEST,
        InvalidOperationError: status.HTTP_400_BAD_REQUEST,
        InvariantViolationError: status.HTTP_400_BAD_REQUEST,
    }

    @classmethod
    def translate(cls, exception: DomainException) -> Response:
        status_code = cls._get_status_code(exception)
        error_type = cls._get_error_type(exception)
        error_id = str(uuid.uuid4())

        response_data = cls._build_response_data(exception, error_type, error_id)
        cls._log_exception(exception, status_code, error_id)

        return Response(response_data, status=status_code)

    # ---------- Helpers internos ----------

    @classmethod
    def _get_status_code(cls, exception: DomainException) -> int:
        for klass in type(exception).__mro__:
            if klass in cls._STATUS_CODE_MAP:
                return cls._STATUS_CODE_MAP[klass]
        return status.HTTP_500_INTERNAL_SERVER_ERROR

    @classmethod
    def _get_error_type(cls, exception: DomainException) -> str:
        if isinstance(exception, QuestionValidationError):
            return exception.kind
        for klass in type(exception).__mro__:
            if klass in cls._STATUS_CODE_MAP:
                return klass.kind
        return DomainException.kind

    @classmethod
    def _build_response_data(cls, exception: DomainException, error_type: str, error_id: str) -> Dict[str, Any]:
        """
        Payload estándar:
        {
          "error_id": "<uuid>",
          "type": "validation_error",
          "error": "Mensaje...",
          "details": {...}            # si la excepción los define
        }
        """
        data: Dict[str, Any] = {
            "error_id": error_id,
            "type": error_type,
            "error": str(exception) if str(exception) else type(exception).__name__,
        }

        details = getattr(exception, "details", None)
        if details:
            data["details"] = details

        return data

    @classmethod
    def _log_exception(cls, exception: DomainException, status_code: int, error_id: str) -> None:
        log_level = logging.WARNING if status_code < 500 else logging.ERROR
        logger.log(
            log_level,
            "Domain exception -> HTTP %s [%s]: %s: %s",
            status_code,
            error_id,
            type(exception).__name__,
            str(exception),
            extra={
                "status": status_code,
                "error_id": error_id,
                "ex_type": type(exception).__name__,
                "exception_details": getattr(exception, "details", None),
            },
            exc_info=(status_code >= 500),
        )


# ---------------------------
# API pública del módulo
# ---------------------------

def translate_domain_exception(exception: DomainException) -> Response:
    """Función de conveniencia: DomainException -> Response."""
    return DomainExceptionTranslator.translate(exception)


class DomainExceptionMiddleware:
    """
    Middleware para capturar DomainException fuera de las vistas DRF.

    settings.py:
        MIDDLEWARE = [
            ...,
            "quizbank.interfaces.exception_handlers.DomainExceptionMiddleware",
        ]
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if isinstance(exception, DomainException):
            response = translate_domain_exception(exception)
            # Fuera de APIView la Response no trae renderer asignado.
            from rest_framework.renderers import JSONRenderer

            response.accepted_renderer = JSONRenderer()
            response.accepted_media_type = "application/json"
            response.renderer_context = {}
            response.render()
            return response
        return None


def custom_exception_handler(exc, context):
    """
    Handler para DRF: prioriza DomainException y delega al default para el resto.

    settings.py:
        REST_FRAMEWORK = {
            "EXCEPTION_HANDLER": "quizbank.interfaces.exception_handlers.custom_exception_handler",
        }
    """
    if isinstance(exc, DomainException):
        return translate_domain_exception(exc)
    return drf_default_exception_handler(exc, context)


__all__ = [
    "DomainExceptionTranslator",
    "translate_domain_exception",
    "DomainExceptionMiddleware",
    "custom_exception_handler",
]
