"""Fixtures compartidas.

`src/` se agrega al path desde pyproject (pytest `pythonpath`); aquí viven
relojes falsos, proveedores de zona de prueba y el evento de referencia.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from core.config import AppSettings
from core.domain.models import EventDefinition, TimezoneSource


class FakeClock:
    """Reloj controlable: `advance()` mueve el tiempo, `sleep()` también."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)

    async def sleep(self, seconds: float) -> None:
        self.advance(seconds)
        await asyncio.sleep(0)


class FakeProvider:
    """Proveedor de zona con respuesta fija (o excepción)."""

    def __init__(
        self,
        value: str | None,
        source: TimezoneSource = TimezoneSource.BROWSER,
        *,
        error: Exception | None = None,
    ) -> None:
        self.value = value
        self.source = source
        self.error = error
        self.calls = 0

    async def lookup(self) -> str | None:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.value


@pytest.fixture
def bogota_event() -> EventDefinition:
    return EventDefinition(
        wall_clock="2025-05-26T19:00:00",
        timezone="America/Bogota",
        display_label="Lunes 26 de Mayo de 2025, 7:00 PM",
        title="¡Prepárate para Nuestro Evento!",
        cta_url="https://example.com/registro",
        cta_label="Regístrate",
    )


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(_env_file=None)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 5, 20, 12, 0, tzinfo=timezone.utc))
