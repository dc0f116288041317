"""Detección de la zona horaria del visitante.

Resolución en dos pasos con cortocircuito:
1. Proveedor primario (geolocalización por IP). Si responde una zona no vacía,
   se acepta con procedencia `ip`.
2. Si falla (red, status, JSON, campo ausente) se consulta el entorno local;
   procedencia `browser`.

Devuelve un `DetectionOutcome` etiquetado en vez de encadenar excepciones:
el llamador decide qué hacer con el fallo.
"""

from __future__ import annotations

import logging

from core.config import AppSettings
from core.domain.models import DetectedTimezone, DetectionOutcome
from core.interfaces.timezone_provider import TimezoneProvider

logger = logging.getLogger(__name__)

NO_TIMEZONE_MESSAGE = "No se pudo detectar la zona horaria automáticamente."


async def _ask(provider: TimezoneProvider) -> str | None:
    try:
        value = await provider.lookup()
    except Exception as exc:
        logger.warning("Proveedor de zona %s falló: %s", provider.source.value, exc)
        return None
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


async def detect_timezone(
    primary: TimezoneProvider | None,
    fallback: TimezoneProvider,
) -> DetectionOutcome:
    """Resuelve la zona del visitante: primario y, si no responde, el fallback."""

    if primary is not None:
        name = await _ask(primary)
        if name:
            logger.info("Zona detectada por %s: %s", primary.source.value, name)
            return DetectionOutcome(timezone=DetectedTimezone(name=name, source=primary.source))
        logger.warning("Sin zona desde %s; usando el entorno local", primary.source.value)

    name = await _ask(fallback)
    if name:
        logger.info("Zona detectada por %s: %s", fallback.source.value, name)
        return DetectionOutcome(timezone=DetectedTimezone(name=name, source=fallback.source))

    logger.error(NO_TIMEZONE_MESSAGE)
    return DetectionOutcome(error=NO_TIMEZONE_MESSAGE)


def build_providers(
    settings: AppSettings | None = None,
) -> tuple[TimezoneProvider | None, TimezoneProvider]:
    """Construye (primario, fallback) según la config."""

    # Import local: adapters dependen del Core, no al revés.
    from adapters.geolocation import IPGeolocationProvider  # noqa: PLC0415
    from adapters.local_timezone import LocalTimezoneProvider  # noqa: PLC0415

    settings = settings or AppSettings()
    primary = IPGeolocationProvider(settings) if settings.geolocation_enabled else None
    return primary, LocalTimezoneProvider()


async def detect_viewer_timezone(settings: AppSettings | None = None) -> DetectionOutcome:
    """Atajo: detección con los adaptadores por defecto."""

    primary, fallback = build_providers(settings)
    return await detect_timezone(primary, fallback)
