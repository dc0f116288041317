"""Zona horaria resuelta del entorno de ejecución local.

Orden de resolución:
1. Variable `TZ` (se descarta el prefijo ':' de la sintaxis POSIX).
2. `/etc/timezone` (Debian/Ubuntu).
3. Destino del enlace `/etc/localtime` dentro de un directorio `zoneinfo/`.

Si nada aplica devuelve None; el detector lo trata como fallo fatal.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

from core.domain.models import TimezoneSource


class LocalTimezoneProvider:
    """Lee la zona por defecto del sistema/proceso."""

    source = TimezoneSource.BROWSER

    def __init__(
        self,
        *,
        environ: Mapping[str, str] | None = None,
        root: Path = Path("/"),
    ) -> None:
        self._environ = os.environ if environ is None else environ
        self._root = root

    def resolve(self) -> str | None:
        tz = (self._environ.get("TZ") or "").strip().lstrip(":")
        if tz:
            return tz

        timezone_file = self._root / "etc" / "timezone"
        if timezone_file.is_file():
            value = timezone_file.read_text(encoding="utf-8").strip()
            if value:
                return value

        localtime = self._root / "etc" / "localtime"
        if localtime.is_symlink():
            target = os.readlink(localtime)
            marker = "zoneinfo/"
            if marker in target:
                return target.split(marker, 1)[1].strip("/") or None

        return None

    async def lookup(self) -> str | None:
        return self.resolve()


class StaticTimezoneProvider:
    """Zona fija elegida manualmente (p.ej. `--timezone` en la CLI)."""

    source = TimezoneSource.BROWSER

    def __init__(self, name: str) -> None:
        self._name = name

    async def lookup(self) -> str | None:
        return self._name
