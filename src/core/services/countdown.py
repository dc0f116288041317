"""Cuenta regresiva hasta un instante fijo.

El motor es una tarea asyncio cancelable que pertenece a la vista: se crea en
`start()`, se cancela en `stop()` y termina sola al llegar a cero. Nada de
hilos en segundo plano: el desmontaje es determinista.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Awaitable, Callable

from core.domain.models import CountdownState

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
TickCallback = Callable[[CountdownState], None]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def remaining_until(target: datetime, now: datetime, zone: tzinfo = timezone.utc) -> CountdownState:
    """Descompone el tiempo restante en días/horas/minutos/segundos.

    Los días son días de calendario en el reloj de pared de `zone` (un día con
    cambio de horario cuenta como uno); el resto es tiempo absoluto. Si el
    objetivo ya pasó, el estado es cero.
    """

    target_utc = target.astimezone(timezone.utc)
    now_utc = now.astimezone(timezone.utc)
    if target_utc <= now_utc:
        return CountdownState.zero()

    local_now = now_utc.astimezone(zone)
    local_target = target_utc.astimezone(zone)

    def shifted(days: int) -> datetime:
        # Aritmética de pared: misma hora local `days` días después.
        return (local_now + timedelta(days=days)).astimezone(timezone.utc)

    days = (local_target.date() - local_now.date()).days
    while days > 0 and shifted(days) > target_utc:
        days -= 1

    rest = target_utc - shifted(days)
    total_seconds = rest // timedelta(seconds=1)
    if total_seconds <= 0 and days == 0:
        return CountdownState.zero()

    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return CountdownState(days=days, hours=hours, minutes=minutes, seconds=seconds)


class CountdownEngine:
    """Temporizador de un segundo que publica `CountdownState` hasta cero."""

    def __init__(
        self,
        target: datetime,
        on_tick: TickCallback | None = None,
        *,
        clock: Clock = utc_now,
        interval: float = 1.0,
        zone: tzinfo = timezone.utc,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        if target.tzinfo is None:
            raise ValueError("target debe ser un datetime con zona")
        self._target = target
        self._on_tick = on_tick
        self._clock = clock
        self._interval = interval
        self._zone = zone
        self._sleep = sleep

        self._state = CountdownState.zero()
        self._task: asyncio.Task[None] | None = None
        self._stopped = False
        self._finished = False

    @property
    def target(self) -> datetime:
        return self._target

    @property
    def state(self) -> CountdownState:
        return self._state

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def finished(self) -> bool:
        """True cuando se alcanzó el estado terminal (todo en cero)."""

        return self._finished

    def tick(self) -> CountdownState:
        """Recalcula el estado y lo publica.

        Tras `stop()` o tras llegar a cero no se publica nada más.
        """

        if self._stopped or self._finished:
            return self._state

        self._state = remaining_until(self._target, self._clock(), self._zone)
        if self._state.is_zero:
            self._finished = True
        if self._on_tick is not None:
            self._on_tick(self._state)
        return self._state

    async def _run(self) -> None:
        while True:
            state = self.tick()
            if state.is_zero or self._stopped:
                logger.debug("Cuenta regresiva terminada")
                return
            await self._sleep(self._interval)

    def start(self) -> None:
        """Programa la tarea periódica en el loop activo (idempotente)."""

        if self.running or self._stopped or self._finished:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run())

    def stop(self) -> None:
        """Cancela la tarea periódica (idempotente)."""

        self._stopped = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def wait(self) -> None:
        """Espera a que la tarea termine (por cero o por cancelación)."""

        if self._task is not None:
            await asyncio.wait({self._task})
