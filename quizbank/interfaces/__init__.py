"""Capa de interfaces: vistas DRF, serializers y traducción de errores."""
