"""Conversión de la hora del evento a la zona del visitante.

Flujo (una sola pasada, mismo instante y mismo par de zonas):
1. La hora de pared del evento se interpreta *dentro* de la zona del evento
   (nunca como si ya fuera UTC).
2. El instante resultante se re-expresa en la zona del visitante.
3. Se calcula la diferencia de offsets (visitante - evento) en décimas de hora.
4. Se formatea la hora local en formato largo según el idioma.
5. Se describe la diferencia en lenguaje natural.

Las zonas se resuelven con `zoneinfo` (base IANA del sistema, o el paquete
`tzdata` cuando el sistema no trae una).
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.domain.errors import InvalidEventError, InvalidTimezoneError
from core.domain.language import Language
from core.domain.models import ConvertedEventTime, EventDefinition

logger = logging.getLogger(__name__)

WALL_CLOCK_FORMAT = "%Y-%m-%dT%H:%M:%S"


def load_zone(name: str) -> ZoneInfo:
    """Resuelve un identificador IANA o lanza `InvalidTimezoneError`."""

    if not isinstance(name, str) or not name.strip():
        raise InvalidTimezoneError(str(name), "vacía")
    try:
        return ZoneInfo(name.strip())
    except ZoneInfoNotFoundError as exc:
        raise InvalidTimezoneError(name, "no existe en la base IANA") from exc
    except (ValueError, OSError) as exc:
        # Claves mal formadas (rutas absolutas, '..') o directorios de la base ('America').
        raise InvalidTimezoneError(name, str(exc)) from exc


def parse_wall_clock(value: str, zone: ZoneInfo) -> datetime:
    """Interpreta una hora de pared ISO-8601 (sin offset) dentro de `zone`."""

    try:
        naive = datetime.fromisoformat(value.strip())
    except ValueError as exc:
        raise InvalidEventError(f"Hora de pared inválida: {value!r}") from exc
    if naive.tzinfo is not None:
        raise InvalidEventError(f"La hora de pared no debe incluir offset: {value!r}")
    return naive.replace(tzinfo=zone)


def offset_hours(zone: ZoneInfo, instant: datetime) -> float:
    """Horas al este de UTC de `zone` en `instant` (fraccionario si aplica)."""

    offset = instant.astimezone(zone).utcoffset()
    if offset is None:
        raise InvalidTimezoneError(str(zone), "sin offset UTC")
    return offset.total_seconds() / 3600


def offset_difference(event_zone: ZoneInfo, viewer_zone: ZoneInfo, instant: datetime) -> float:
    """viewer - event, redondeado a décimas (tolera zonas de media hora)."""

    diff = round(offset_hours(viewer_zone, instant) - offset_hours(event_zone, instant), 1)
    # Normaliza -0.0
    return diff + 0.0


def _format_hours(amount: float) -> str:
    if amount == int(amount):
        return str(int(amount))
    return f"{amount:.1f}"


def describe_offset(difference: float, language: Language = Language.SPANISH) -> str:
    """Frase de diferencia: "misma zona horaria" o "N hora(s) adelante/atrás"."""

    if difference == 0:
        return language.same_zone_sentence
    amount = abs(difference)
    return language.hours_sentence(
        _format_hours(amount),
        singular=amount == 1,
        ahead=difference > 0,
    )


def format_long(local_time: datetime, language: Language = Language.SPANISH) -> str:
    """Formato largo: día de la semana, día, mes, año, hora 12h y abreviatura de zona."""

    hour12 = local_time.hour % 12 or 12
    meridiem = "AM" if local_time.hour < 12 else "PM"
    return language.date_template.format(
        weekday=language.weekday_name(local_time.weekday()),
        day=local_time.day,
        month=language.month_name(local_time.month),
        year=local_time.year,
        time=f"{hour12}:{local_time.minute:02d} {meridiem}",
        zone=local_time.tzname() or "",
    )


def event_instant(event: EventDefinition) -> datetime:
    """Instante absoluto (UTC) del evento."""

    zone = load_zone(event.timezone)
    return parse_wall_clock(event.wall_clock, zone).astimezone(timezone.utc)


def to_wall_clock(instant: datetime, zone_name: str) -> str:
    """Dígitos de hora de pared de `instant` en la zona indicada."""

    return instant.astimezone(load_zone(zone_name)).strftime(WALL_CLOCK_FORMAT)


def convert_event_time(
    event: EventDefinition,
    viewer_timezone: str,
    language: Language = Language.SPANISH,
) -> ConvertedEventTime:
    """Convierte la hora del evento a la zona del visitante.

    Raises:
        InvalidTimezoneError: si alguna de las dos zonas no es reconocida.
        InvalidEventError: si la hora de pared del evento no es válida.
    """

    event_zone = load_zone(event.timezone)
    viewer_zone = load_zone(viewer_timezone)

    instant = parse_wall_clock(event.wall_clock, event_zone).astimezone(timezone.utc)
    local_time = instant.astimezone(viewer_zone)

    event_offset = offset_hours(event_zone, instant)
    viewer_offset = offset_hours(viewer_zone, instant)
    difference = offset_difference(event_zone, viewer_zone, instant)

    converted = ConvertedEventTime(
        instant_utc=instant,
        local_time=local_time,
        formatted=format_long(local_time, language),
        viewer_timezone=viewer_zone.key,
        event_offset_hours=event_offset,
        viewer_offset_hours=viewer_offset,
        offset_difference=difference,
        offset_sentence=describe_offset(difference, language),
    )
    logger.debug(
        "Evento %s (%s) -> %s en %s (%+.1f h)",
        event.wall_clock,
        event.timezone,
        local_time.strftime(WALL_CLOCK_FORMAT),
        viewer_zone.key,
        difference,
    )
    return converted
