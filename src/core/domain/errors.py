"""Errores del dominio.

Jerarquía pequeña y explícita: la sesión (borde del pipeline) los captura y
los transforma en un único mensaje para el usuario.
"""

from __future__ import annotations


class TimeTravelerError(Exception):
    """Base de todos los errores propios de la aplicación."""


class DetectionError(TimeTravelerError):
    """Ningún método (IP ni entorno local) produjo una zona horaria."""


class InvalidTimezoneError(TimeTravelerError):
    """Un identificador de zona está presente pero no es reconocido."""

    def __init__(self, timezone: str, reason: str | None = None) -> None:
        self.timezone = timezone
        message = f"Zona horaria no reconocida: {timezone!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidEventError(TimeTravelerError):
    """La hora de pared del evento no se puede interpretar."""
