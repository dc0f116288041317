"""Contratos de proveedores de zona horaria.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite que adaptadores (geolocalización por IP, entorno local, valores
  fijos en tests) sean intercambiables sin acoplar el Core a implementaciones.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import TimezoneSource


@runtime_checkable
class TimezoneProvider(Protocol):
    """Contrato mínimo para una fuente de zona horaria.

    Reglas de diseño:
    - `lookup` es asíncrono porque típicamente hará I/O (HTTP).
    - Devuelve el identificador IANA tal cual lo reporta la fuente, o None si
      la fuente no pudo responder. Validar la zona es trabajo del conversor.
    """

    source: TimezoneSource

    async def lookup(self) -> str | None:
        """Consulta la fuente y devuelve un identificador de zona (o None)."""

        ...
