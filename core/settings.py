from __future__ import annotations

from pathlib import Path
import os
import socket
from environ import Env

# =============================================================================
# Paths & .env
# =============================================================================
BASE_DIR = Path(__file__).resolve().parent.parent

env = Env()
# Carga .env en BASE_DIR si existe
Env.read_env(os.path.join(BASE_DIR, ".env"))

# =============================================================================
# Seguridad / Debug
# =============================================================================
SECRET_KEY = env("SECRET_KEY", default="quizbank-dev-secret")
DEBUG = env.bool("DEBUG", default=True)

ALLOWED_HOSTS = env.list(
    "ALLOWED_HOSTS",
    default=["localhost", "127.0.0.1", "[::1]", "0.0.0.0", "testserver"],
)

# Amplía hosts locales automáticamente en dev (hostname + IPs reales)
if DEBUG:
    try:
        hostname = socket.gethostname()
        local_ips = list(set(socket.gethostbyname_ex(hostname)[2]))
        ALLOWED_HOSTS = list(set(ALLOWED_HOSTS + [hostname] + local_ips))
    except OSError:
        pass

# =============================================================================
# Apps
# =============================================================================
INSTALLED_APPS = [
    # Django
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # 3rd
    "rest_framework",
    "corsheaders",
    "drf_spectacular",
    # Local
    "quizbank",
]

# =============================================================================
# Middleware
# =============================================================================
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",          # Seguridad primero
    "corsheaders.middleware.CorsMiddleware",                 # CORS antes de Common
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # Traducción de DomainException -> HTTP (interfaces layer)
    "quizbank.interfaces.exception_handlers.DomainExceptionMiddleware",
]

# =============================================================================
# CORS / CSRF (frontend React local)
# =============================================================================
from corsheaders.defaults import default_headers

CORS_ALLOW_CREDENTIALS = env.bool("CORS_ALLOW_CREDENTIALS", default=True)
CORS_ALLOW_ALL_ORIGINS = env.bool("CORS_ALLOW_ALL_ORIGINS", default=DEBUG)

CORS_ALLOWED_ORIGINS = env.list(
    "CORS_ALLOWED_ORIGINS",
    default=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
)

# Token de moderación en cabecera propia
CORS_ALLOW_HEADERS = list(default_headers) + [
    "authorization",
    "x-api-key",
]

CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=CORS_ALLOWED_ORIGINS)

# =============================================================================
# URLs / Templates / WSGI
# =============================================================================
APPEND_SLASH = True
ROOT_URLCONF = "core.urls"
TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]
WSGI_APPLICATION = "core.wsgi.application"

# =============================================================================
# Base de datos (PROD: PostgreSQL)
# =============================================================================

DB_BACKEND = env("DB_BACKEND", default="sqlite").lower()

if DB_BACKEND == "postgres":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": env("DB_NAME"),
            "USER": env("DB_USER"),
            "PASSWORD": env("DB_PASSWORD"),
            "HOST": env("DB_HOST", default="localhost"),
            "PORT": env("DB_PORT", default="5432"),
        }
    }
    # Conexiones persistentes (mejor rendimiento en prod)
    CONN_MAX_AGE = 60
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / env("SQLITE_NAME", default="quizbank.sqlite3"),
        }
    }

# =============================================================================
# Passwords
# =============================================================================
AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

# =============================================================================
# i18n / TZ
# =============================================================================
LANGUAGE_CODE = "fr-fr"
TIME_ZONE = "Europe/Paris"
USE_I18N = True
USE_TZ = True

# =============================================================================
# Static
# =============================================================================
STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# =============================================================================
# Reglas configurables del banco de preguntas
# =============================================================================
# lenient: 1..500 caracteres | strict: 10..500 caracteres y signo "?"
QUIZBANK_CONTENT_POLICY = env("QUIZBANK_CONTENT_POLICY", default="lenient")
# streak: racha y multiplicador por nivel | speed_bonus: base + rapidez + perfecto
QUIZBANK_SCORING_POLICY = env("QUIZBANK_SCORING_POLICY", default="streak")

# =============================================================================
# DRF / OpenAPI (Swagger)
# =============================================================================
REST_FRAMEWORK = {
    # Sin usuarios: las escrituras de moderación usan TokenRequiredForWrite
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "UNAUTHENTICATED_USER": None,
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    # Handler centralizado para DomainException + fallback DRF
    "EXCEPTION_HANDLER": "quizbank.interfaces.exception_handlers.custom_exception_handler",
    "DEFAULT_THROTTLE_CLASSES": [],
    "DEFAULT_THROTTLE_RATES": {},
}

SPECTACULAR_SETTINGS = {
    "TITLE": "API Quizbank",
    "DESCRIPTION": "Backend (Django REST) para el banco de preguntas, la moderación y los quizzes.",
    "VERSION": "0.1.0",
    "SERVE_PERMISSIONS": ["rest_framework.permissions.AllowAny"],
    "SWAGGER_UI_SETTINGS": {"persistAuthorization": True},
    "COMPONENT_SPLIT_REQUEST": True,  # request/response separados
    "SECURITY": [
        {"bearerAuth": []},  # Authorization: Bearer <token>
        {"apiKeyAuth": []},  # X-API-KEY: <token>
    ],
    "COMPONENTS": {
        "securitySchemes": {
            "bearerAuth": {"type": "http", "scheme": "bearer"},
            "apiKeyAuth": {"type": "apiKey", "in": "header", "name": "X-API-KEY"},
        }
    },
    "SERVERS": [
        {"url": "http://localhost:8000", "description": "Local dev"},
        {"url": "http://127.0.0.1:8000", "description": "Loopback"},
    ],
}

# =============================================================================
# Logging (verboso en dev)
# =============================================================================
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {"console": {"class": "logging.StreamHandler"}},
    "root": {"handlers": ["console"], "level": "DEBUG" if DEBUG else "INFO"},
    "loggers": {
        "django.request": {"level": "INFO", "handlers": ["console"], "propagate": False},
        "django.db.backends": {"level": "INFO" if DEBUG else "WARNING", "handlers": ["console"], "propagate": False},
        # Casos de uso y traducción de excepciones de dominio
        "quizbank": {"level": "INFO", "handlers": ["console"], "propagate": False},
    },
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
