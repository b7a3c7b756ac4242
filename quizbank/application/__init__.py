"""Capa de aplicación: casos de uso que orquestan dominio y puertos."""
