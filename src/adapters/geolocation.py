"""Proveedor de zona horaria por geolocalización IP.

Una sola consulta `GET` al servicio configurado (por defecto worldtimeapi.org).
Se espera un JSON con al menos el campo `timezone`; el resto se ignora.

Cualquier fallo (red, timeout, status no-2xx, JSON inválido, campo ausente)
se traduce en `None`: es la señal para que el detector use el entorno local.
"""

from __future__ import annotations

import logging

import httpx

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.models import TimezoneSource

logger = logging.getLogger(__name__)


class IPGeolocationProvider:
    """Consulta la zona horaria del visitante según su IP pública."""

    source = TimezoneSource.IP

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    @property
    def url(self) -> str:
        return self._settings.geolocation_url

    async def lookup(self) -> str | None:
        try:
            async with build_async_client(self._settings, transport=self._transport) as client:
                resp = await client.get(self.url)
        except httpx.HTTPError as exc:
            logger.warning("Geolocalización IP no disponible (%s): %s", self.url, exc)
            return None

        if not resp.is_success:
            logger.warning("Geolocalización IP respondió HTTP %s", resp.status_code)
            return None

        try:
            data = resp.json()
        except ValueError:
            logger.warning("Geolocalización IP devolvió JSON inválido")
            return None

        if not isinstance(data, dict):
            return None
        timezone = data.get("timezone")
        if not isinstance(timezone, str) or not timezone.strip():
            logger.warning("Respuesta de geolocalización sin campo `timezone`")
            return None
        return timezone.strip()
