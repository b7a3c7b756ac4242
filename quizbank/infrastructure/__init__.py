"""Capa de infraestructura: ORM, repositorios, serializers de entrada y permisos."""
