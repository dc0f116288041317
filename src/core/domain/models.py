"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- Los renderers (CLI, JSON) consumen un único snapshot serializable.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.domain.errors import DetectionError


class EventDefinition(BaseModel):
    """Evento fijo: hora de pared + zona autoritativa.

    La hora de pared por sí sola es ambigua; solo junto a `timezone` define
    un instante absoluto.
    """

    model_config = ConfigDict(frozen=True)

    wall_clock: str = Field(
        ...,
        min_length=1,
        description="Fecha/hora sin zona, p.ej. '2025-05-26T19:00:00'.",
    )
    timezone: str = Field(
        ...,
        min_length=1,
        description="Identificador IANA de la zona del evento, p.ej. 'America/Bogota'.",
    )
    display_label: str = Field(
        ...,
        min_length=1,
        description="Hora original pre-formateada para mostrar.",
    )
    title: str = Field(default="", description="Título visible del evento.")
    subtitle: str = Field(default="", description="Subtítulo visible del evento.")
    cta_url: str | None = Field(
        default=None,
        description="Enlace de llamada a la acción.",
    )
    cta_label: str = Field(default="", description="Texto del enlace de llamada a la acción.")


class TimezoneSource(str, Enum):
    """Procedencia de la zona detectada (transparencia en la UI)."""

    IP = "ip"
    # Resuelta desde el entorno de ejecución local.
    BROWSER = "browser"


class DetectedTimezone(BaseModel):
    """Zona del visitante, resuelta una vez por vista."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Identificador IANA detectado.")
    source: TimezoneSource = Field(..., description="Método que produjo el valor.")


class DetectionOutcome(BaseModel):
    """Resultado etiquetado de la detección: zona con procedencia, o error."""

    model_config = ConfigDict(frozen=True)

    timezone: DetectedTimezone | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.timezone is not None

    def unwrap(self) -> DetectedTimezone:
        if self.timezone is None:
            raise DetectionError(self.error or "No se pudo detectar la zona horaria.")
        return self.timezone


class ConvertedEventTime(BaseModel):
    """Hora del evento expresada en la zona del visitante.

    Todos los campos salen de una única pasada (mismo instante, mismo par de
    zonas), así el texto formateado y la frase de diferencia son coherentes.
    """

    model_config = ConfigDict(frozen=True)

    instant_utc: datetime = Field(..., description="Instante absoluto del evento (UTC).")
    local_time: datetime = Field(..., description="Instante expresado en la zona del visitante.")
    formatted: str = Field(..., description="Hora local en formato largo.")
    viewer_timezone: str = Field(..., description="Zona IANA del visitante.")
    event_offset_hours: float = Field(..., description="Offset UTC de la zona del evento.")
    viewer_offset_hours: float = Field(..., description="Offset UTC de la zona del visitante.")
    offset_difference: float = Field(
        ...,
        description="viewer - event, redondeado a décimas de hora.",
    )
    offset_sentence: str = Field(..., description="Descripción en lenguaje natural de la diferencia.")


class CountdownState(BaseModel):
    """Tiempo restante hasta el evento; nunca negativo."""

    model_config = ConfigDict(frozen=True)

    days: int = Field(default=0, ge=0)
    # Un día de calendario con cambio de horario puede durar 25 h.
    hours: int = Field(default=0, ge=0)
    minutes: int = Field(default=0, ge=0, le=59)
    seconds: int = Field(default=0, ge=0, le=59)

    @classmethod
    def zero(cls) -> "CountdownState":
        return cls()

    @property
    def is_zero(self) -> bool:
        return self.days == 0 and self.hours == 0 and self.minutes == 0 and self.seconds == 0

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.days, self.hours, self.minutes, self.seconds)


class EventView(BaseModel):
    """Snapshot del estado de una vista, lo que consume el shell de render.

    Regla: si `error` está presente, `converted` es None (nunca se muestra una
    hora inventada junto a un error).
    """

    event: EventDefinition
    detected: DetectedTimezone | None = None
    converted: ConvertedEventTime | None = None
    error: str | None = None
    countdown: CountdownState = Field(default_factory=CountdownState.zero)
    loading: bool = True
