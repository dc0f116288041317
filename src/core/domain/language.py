"""Language utilities for time-traveler.

This module centralizes the language options supported across the
application, together with the locale tables the long-form date formatter
and the offset sentences need. Keeping it in the domain layer allows both
CLI and service layers to share a single source of truth without creating
circular imports with adapters.
"""

from __future__ import annotations

from enum import Enum

_WEEKDAYS: dict[str, tuple[str, ...]] = {
    "en": ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"),
    "es": ("lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo"),
}

_MONTHS: dict[str, tuple[str, ...]] = {
    "en": (
        "January",
        "February",
        "March",
        "April",
        "May",
        "June",
        "July",
        "August",
        "September",
        "October",
        "November",
        "December",
    ),
    "es": (
        "enero",
        "febrero",
        "marzo",
        "abril",
        "mayo",
        "junio",
        "julio",
        "agosto",
        "septiembre",
        "octubre",
        "noviembre",
        "diciembre",
    ),
}

# {weekday} {day} {month} {year} {time} {zone}
_DATE_TEMPLATES: dict[str, str] = {
    "en": "{weekday}, {month} {day}, {year}, {time} ({zone})",
    "es": "{weekday} {day} de {month} de {year}, {time} ({zone})",
}

_SAME_ZONE: dict[str, str] = {
    "en": "same timezone",
    "es": "misma zona horaria",
}

# (singular, plural, ahead, behind)
_OFFSET_WORDS: dict[str, tuple[str, str, str, str]] = {
    "en": ("hour", "hours", "ahead", "behind"),
    "es": ("hora", "horas", "adelante", "atrás"),
}

_CONVERSION_ERROR: dict[str, str] = {
    "en": "We couldn't calculate the time for your location. Please check the original time.",
    "es": "No pudimos calcular la hora para tu ubicación. Por favor, verifica la hora original.",
}


class Language(str, Enum):
    """Supported natural-language choices for user-facing output."""

    ENGLISH = "en"
    SPANISH = "es"

    def weekday_name(self, weekday: int) -> str:
        """Full weekday name; `weekday` follows `date.weekday()` (Monday == 0)."""

        return _WEEKDAYS[self.value][weekday]

    def month_name(self, month: int) -> str:
        return _MONTHS[self.value][month - 1]

    @property
    def date_template(self) -> str:
        return _DATE_TEMPLATES[self.value]

    @property
    def same_zone_sentence(self) -> str:
        return _SAME_ZONE[self.value]

    def hours_sentence(self, amount: str, *, singular: bool, ahead: bool) -> str:
        """Build "N hour(s) ahead/behind" with the already formatted amount."""

        one, many, ahead_word, behind_word = _OFFSET_WORDS[self.value]
        unit = one if singular else many
        direction = ahead_word if ahead else behind_word
        return f"{amount} {unit} {direction}"

    @property
    def conversion_error_message(self) -> str:
        return _CONVERSION_ERROR[self.value]
