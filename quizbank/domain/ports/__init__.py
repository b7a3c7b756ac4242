"""Puertos del dominio."""
