"""Estado por vista: detección -> conversión, más la cuenta regresiva.

Este módulo reemplaza el estado global de una página por un objeto explícito
que pertenece a la vista: se inicializa en `mount()` y se descarta en
`unmount()`. Es también el borde del pipeline: los errores de detección y
conversión se capturan aquí y se convierten en un único mensaje para el
usuario; nunca se propagan hacia el shell de render.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable
from zoneinfo import ZoneInfo

from core.domain.errors import TimeTravelerError
from core.domain.language import Language
from core.domain.models import (
    CountdownState,
    DetectedTimezone,
    EventDefinition,
    EventView,
)
from core.interfaces.timezone_provider import TimezoneProvider
from core.services.countdown import Clock, CountdownEngine, remaining_until, utc_now
from core.services.time_converter import convert_event_time, event_instant, load_zone
from core.services.timezone_detector import detect_timezone

logger = logging.getLogger(__name__)


@dataclass
class SessionHooks:
    """Callbacks opcionales para la capa de UI."""

    on_change: Callable[[EventView], None] | None = None
    on_error: Callable[[TimeTravelerError], None] | None = None


@dataclass
class ResolutionResult:
    """Salida de detección + conversión (sin cuenta regresiva)."""

    detected: DetectedTimezone | None
    changes: dict[str, Any]
    failure: TimeTravelerError | None = None


async def resolve_viewer_time(
    event: EventDefinition,
    primary: TimezoneProvider | None,
    fallback: TimezoneProvider,
    language: Language = Language.SPANISH,
) -> ResolutionResult:
    """Detecta la zona y, solo cuando la detección terminó, convierte."""

    outcome = await detect_timezone(primary, fallback)
    detected = outcome.timezone
    try:
        timezone = outcome.unwrap()
        converted = convert_event_time(event, timezone.name, language)
    except TimeTravelerError as exc:
        logger.error("Error detectando la zona o calculando la hora: %s", exc)
        return ResolutionResult(
            detected=detected,
            changes={
                "detected": None,
                "converted": None,
                "error": language.conversion_error_message,
                "loading": False,
            },
            failure=exc,
        )

    return ResolutionResult(
        detected=detected,
        changes={"detected": timezone, "converted": converted, "error": None, "loading": False},
    )


def _event_target(event: EventDefinition) -> tuple[datetime, ZoneInfo] | None:
    """Instante del evento y la zona en la que se cuentan los días de calendario."""

    try:
        return event_instant(event), load_zone(event.timezone)
    except TimeTravelerError as exc:
        # Sin instante válido la cuenta regresiva queda en cero.
        logger.warning("Evento sin instante válido: %s", exc)
        return None


class EventSession:
    """Estado de una vista del evento, propiedad exclusiva de esa vista."""

    def __init__(
        self,
        event: EventDefinition,
        *,
        primary: TimezoneProvider | None,
        fallback: TimezoneProvider,
        language: Language = Language.SPANISH,
        hooks: SessionHooks | None = None,
        clock: Clock = utc_now,
        interval: float = 1.0,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self._event = event
        self._primary = primary
        self._fallback = fallback
        self._language = language
        self._hooks = hooks or SessionHooks()

        self._view = EventView(event=event)
        self._failure: TimeTravelerError | None = None
        self._mounted = False
        self._resolve_task: asyncio.Task[None] | None = None

        resolved = _event_target(event)
        self._countdown: CountdownEngine | None = None
        if resolved is not None:
            target, zone = resolved
            self._countdown = CountdownEngine(
                target,
                self._on_tick,
                zone=zone,
                clock=clock,
                interval=interval,
                sleep=sleep,
            )

    @property
    def view(self) -> EventView:
        return self._view

    @property
    def failure(self) -> TimeTravelerError | None:
        """Error capturado en el borde (None si la conversión fue exitosa)."""

        return self._failure

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def countdown(self) -> CountdownEngine | None:
        return self._countdown

    def mount(self) -> None:
        """Arranca la cuenta regresiva y la resolución de zona (requiere loop activo)."""

        if self._mounted:
            return
        self._mounted = True
        if self._countdown is not None:
            self._countdown.start()
        self._resolve_task = asyncio.get_running_loop().create_task(self._resolve())

    def unmount(self) -> None:
        """Cancela temporizadores y congela el estado; respuestas tardías se ignoran."""

        if not self._mounted:
            return
        self._mounted = False
        if self._countdown is not None:
            self._countdown.stop()
        if self._resolve_task is not None and not self._resolve_task.done():
            self._resolve_task.cancel()

    async def wait_resolved(self) -> EventView:
        """Espera a que termine la detección/conversión y devuelve el snapshot."""

        if self._resolve_task is not None:
            await asyncio.wait({self._resolve_task})
        return self._view

    async def wait_countdown(self) -> None:
        if self._countdown is not None:
            await self._countdown.wait()

    async def _resolve(self) -> None:
        result = await resolve_viewer_time(
            self._event,
            self._primary,
            self._fallback,
            self._language,
        )
        if not self._mounted:
            logger.debug("Resolución tardía ignorada: la vista ya fue desmontada")
            return
        self._failure = result.failure
        self._update(**result.changes)
        if result.failure is not None and self._hooks.on_error is not None:
            self._hooks.on_error(result.failure)

    def _on_tick(self, state: CountdownState) -> None:
        if self._mounted:
            self._update(countdown=state)

    def _update(self, **changes: Any) -> None:
        self._view = self._view.model_copy(update=changes)
        if self._hooks.on_change is not None:
            self._hooks.on_change(self._view)


async def resolve_once(
    event: EventDefinition,
    primary: TimezoneProvider | None,
    fallback: TimezoneProvider,
    language: Language = Language.SPANISH,
    *,
    clock: Clock = utc_now,
) -> EventView:
    """Snapshot único (sin temporizador): detección, conversión y cuenta actual."""

    result = await resolve_viewer_time(event, primary, fallback, language)
    resolved = _event_target(event)
    countdown = CountdownState.zero()
    if resolved is not None:
        target, zone = resolved
        countdown = remaining_until(target, clock(), zone)
    return EventView(event=event, countdown=countdown, **result.changes)
