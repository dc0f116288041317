"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/geolocalización) lean config de forma consistente.
- El evento mostrado vive en config: cambiar de evento no requiere tocar código.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.language import Language
from core.domain.models import EventDefinition


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "time-traveler"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "time-traveler"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "time-traveler"
    return Path.home() / ".config" / "time-traveler"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario.

    Valores `None` se ignoran (no borran la clave existente).
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# time-traveler user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="TIME_TRAVELER_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout de la consulta de geolocalización (segundos).",
    )
    user_agent: str = Field(
        default="time-traveler/0.1 (+https://local)",
        min_length=1,
        description="User-Agent para la consulta de geolocalización.",
    )
    geolocation_url: str = Field(
        default="https://worldtimeapi.org/api/ip",
        min_length=8,
        description="Servicio de hora por IP; debe responder JSON con un campo `timezone`.",
    )
    geolocation_enabled: bool = Field(
        default=True,
        description="Si es False se usa directamente la zona del entorno local.",
    )

    event_wall_clock: str = Field(
        default="2025-05-26T19:00:00",
        min_length=1,
        description="Fecha/hora de pared del evento, sin zona (ISO-8601).",
    )
    event_timezone: str = Field(
        default="America/Bogota",
        min_length=1,
        description="Zona IANA autoritativa del evento.",
    )
    event_display_label: str = Field(
        default="Lunes 26 de Mayo de 2025, 7:00 PM",
        min_length=1,
        description="Etiqueta pre-formateada de la hora original.",
    )
    event_title: str = Field(
        default="¡Prepárate para Nuestro Evento!",
        description="Título de la tarjeta del evento.",
    )
    event_subtitle: str = Field(
        default="La primera clase está a la vuelta de la esquina.",
        description="Subtítulo de la tarjeta del evento.",
    )
    cta_url: str | None = Field(
        default=None,
        description="Enlace de llamada a la acción (registro, sala, etc.).",
    )
    cta_label: str = Field(
        default="Únete al evento",
        description="Texto del enlace de llamada a la acción.",
    )

    tick_interval_seconds: float = Field(
        default=1.0,
        gt=0,
        le=60,
        description="Intervalo del temporizador de la cuenta regresiva (segundos).",
    )
    default_language: Language = Field(
        default=Language.SPANISH,
        description="Idioma por defecto de la salida (es/en).",
    )

    def event_definition(self) -> EventDefinition:
        """Construye el `EventDefinition` inmutable a partir de la config."""

        return EventDefinition(
            wall_clock=self.event_wall_clock,
            timezone=self.event_timezone,
            display_label=self.event_display_label,
            title=self.event_title,
            subtitle=self.event_subtitle,
            cta_url=self.cta_url,
            cta_label=self.cta_label,
        )
