"""Permisos para proteger los endpoints de moderación y gestión de quizzes."""

from __future__ import annotations

import hmac
import os
from typing import Optional

import environ
from rest_framework.permissions import SAFE_METHODS, BasePermission

env = environ.Env()
env.read_env(env_file=os.environ.get("ENV_FILE", ".env"))


class TokenRequiredForWrite(BasePermission):
    """Lectura libre; las escrituras exigen el token compartido `API_SECRET_TOKEN`."""

    message = "Credenciales no validas o ausentes."

    def _expected_token(self) -> Optional[str]:
        return env("API_SECRET_TOKEN", default=None)

    def _provided_token(self, request) -> Optional[str]:
        """Extrae el token de `Authorization: Bearer` o de `X-API-KEY`."""

        auth_header = request.headers.get("Authorization", "")
        if isinstance(auth_header, str) and auth_header.lower().startswith("bearer "):
            return auth_header[7:].strip()

        api_key = request.headers.get("X-API-KEY")
        if isinstance(api_key, str) and api_key.strip():
            return api_key.strip()

        return None

    def has_valid_token(self, request) -> bool:
        """True si la petición trae el token correcto (sin importar el método)."""

        expected = self._expected_token()
        provided = self._provided_token(request)
        if not expected or not provided:
            return False
        return hmac.compare_digest(provided.encode(), expected.encode())

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        if request.method in SAFE_METHODS:
            return True

        expected = self._expected_token()
        provided = self._provided_token(request)

        if not expected:
            self.message = "Servidor sin API_SECRET_TOKEN configurado."
            return False

        if not provided:
            self.message = "Falta Authorization: Bearer <token> o X-API-KEY."
            return False

        if hmac.compare_digest(provided.encode(), expected.encode()):
            return True

        self.message = "Token invalido."
        return False


__all__ = ["TokenRequiredForWrite"]
