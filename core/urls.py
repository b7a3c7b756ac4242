from django.contrib import admin
from django.urls import path, include

# Docs públicas
from quizbank.interfaces.views import PublicSchemaAPIView, PublicSwaggerUIView

urlpatterns = [
    # Admin
    path("admin/", admin.site.urls),

    # API de la app
    path("", include("quizbank.interfaces.urls")),

    # OpenAPI/Swagger
    path("api/schema/", PublicSchemaAPIView.as_view(), name="schema"),
    path("api/docs/", PublicSwaggerUIView.as_view(url_name="schema"), name="swagger-ui"),
]
