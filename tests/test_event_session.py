from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from conftest import FakeClock, FakeProvider
from core.domain.errors import DetectionError, InvalidTimezoneError
from core.domain.language import Language
from core.domain.models import EventDefinition, EventView, TimezoneSource
from core.services.event_session import EventSession, SessionHooks, resolve_once

ERROR_ES = "No pudimos calcular la hora para tu ubicación. Por favor, verifica la hora original."


def _near_event_clock() -> FakeClock:
    # 3 s antes del evento (2025-05-26 19:00 Bogotá == 2025-05-27 00:00 UTC)
    return FakeClock(datetime(2025, 5, 26, 23, 59, 57, tzinfo=timezone.utc))


async def test_session_converts_after_detection(bogota_event):
    clock = _near_event_clock()
    changes: list[EventView] = []
    session = EventSession(
        bogota_event,
        primary=FakeProvider("America/New_York", TimezoneSource.IP),
        fallback=FakeProvider("Europe/Madrid"),
        hooks=SessionHooks(on_change=changes.append),
        clock=clock,
        sleep=clock.sleep,
    )

    assert session.view.loading
    session.mount()
    view = await session.wait_resolved()
    await session.wait_countdown()
    session.unmount()

    assert not view.loading
    assert view.error is None
    assert view.detected is not None
    assert view.detected.source is TimezoneSource.IP
    assert view.converted is not None
    assert view.converted.offset_difference == 1.0
    assert view.converted.offset_sentence == "1 hora adelante"
    assert session.failure is None
    assert session.view.countdown.is_zero
    assert [v.countdown.as_tuple() for v in changes if v.countdown.seconds][:1] == [(0, 0, 0, 3)]


async def test_unrecognized_zone_shows_error_not_a_time(bogota_event):
    errors = []
    session = EventSession(
        bogota_event,
        primary=FakeProvider("Fake/Zone", TimezoneSource.IP),
        fallback=FakeProvider("America/Bogota"),
        hooks=SessionHooks(on_error=errors.append),
        clock=_near_event_clock(),
    )

    session.mount()
    view = await session.wait_resolved()
    session.unmount()

    assert isinstance(session.failure, InvalidTimezoneError)
    assert errors == [session.failure]
    assert view.error == ERROR_ES
    assert view.converted is None
    assert view.detected is None
    assert not view.loading


async def test_zone_directory_from_ip_shows_error(bogota_event):
    # "America" es un directorio de la base IANA, no una zona.
    session = EventSession(
        bogota_event,
        primary=FakeProvider("America", TimezoneSource.IP),
        fallback=FakeProvider("America/Bogota"),
        clock=_near_event_clock(),
    )

    session.mount()
    view = await session.wait_resolved()
    session.unmount()

    assert isinstance(session.failure, InvalidTimezoneError)
    assert session.failure.timezone == "America"
    assert view.error == ERROR_ES
    assert view.converted is None
    assert not view.loading


async def test_no_timezone_at_all_is_a_detection_error(bogota_event):
    session = EventSession(
        bogota_event,
        primary=None,
        fallback=FakeProvider(None),
        language=Language.ENGLISH,
        clock=_near_event_clock(),
    )

    session.mount()
    view = await session.wait_resolved()
    session.unmount()

    assert isinstance(session.failure, DetectionError)
    assert view.error is not None and view.error.startswith("We couldn't calculate")
    assert view.converted is None


async def test_late_detection_is_ignored_after_unmount(bogota_event):
    release = asyncio.Event()

    class SlowProvider:
        source = TimezoneSource.IP

        async def lookup(self) -> str | None:
            await release.wait()
            return "America/New_York"

    changes: list[EventView] = []
    clock = FakeClock(datetime(2025, 5, 1, tzinfo=timezone.utc))
    session = EventSession(
        bogota_event,
        primary=SlowProvider(),
        fallback=FakeProvider("Europe/Madrid"),
        hooks=SessionHooks(on_change=changes.append),
        clock=clock,
        sleep=clock.sleep,
    )

    session.mount()
    await asyncio.sleep(0)
    session.unmount()
    release.set()
    await session.wait_resolved()
    await session.wait_countdown()
    count = len(changes)
    await asyncio.sleep(0)

    assert not session.mounted
    assert session.view.loading
    assert session.view.converted is None
    assert len(changes) == count
    assert session.countdown is not None and not session.countdown.running


async def test_unmount_between_detection_and_update_is_ignored(bogota_event):
    changes: list[EventView] = []
    session: EventSession

    class UnmountingProvider:
        source = TimezoneSource.IP

        async def lookup(self) -> str | None:
            # La vista se cierra justo cuando la respuesta ya llegó.
            session.unmount()
            return "America/New_York"

    clock = FakeClock(datetime(2025, 5, 1, tzinfo=timezone.utc))
    session = EventSession(
        bogota_event,
        primary=UnmountingProvider(),
        fallback=FakeProvider("Europe/Madrid"),
        hooks=SessionHooks(on_change=changes.append),
        clock=clock,
        sleep=clock.sleep,
    )

    session.mount()
    await session.wait_resolved()
    await session.wait_countdown()

    assert not session.mounted
    assert session.view.loading
    assert session.view.converted is None
    assert session.failure is None
    assert all(view.converted is None for view in changes)


async def test_invalid_event_degrades_countdown_to_zero():
    event = EventDefinition(wall_clock="pronto", timezone="America/Bogota", display_label="pronto")
    session = EventSession(event, primary=None, fallback=FakeProvider("America/Bogota"))

    session.mount()
    view = await session.wait_resolved()
    await session.wait_countdown()
    session.unmount()

    assert session.countdown is None
    assert view.countdown.is_zero
    assert view.error == ERROR_ES


async def test_resolve_once_snapshot(bogota_event):
    clock = FakeClock(datetime(2025, 5, 24, 21, 55, 55, tzinfo=timezone.utc))

    view = await resolve_once(
        bogota_event,
        None,
        FakeProvider("America/Bogota"),
        clock=clock,
    )

    assert view.converted is not None
    assert view.converted.offset_sentence == "misma zona horaria"
    assert view.countdown.as_tuple() == (2, 2, 4, 5)
    assert not view.loading


def _new_york_event() -> EventDefinition:
    # El 2025-03-09 Nueva York pasa a horario de verano (día de 23 h).
    return EventDefinition(
        wall_clock="2025-03-10T12:00:00",
        timezone="America/New_York",
        display_label="10 de marzo, 12:00 PM (EDT)",
    )


async def test_session_countdown_counts_days_in_event_zone():
    # 2025-03-08 12:00 EST
    clock = FakeClock(datetime(2025, 3, 8, 17, 0, tzinfo=timezone.utc))
    session = EventSession(
        _new_york_event(),
        primary=None,
        fallback=FakeProvider("America/New_York"),
        clock=clock,
        sleep=clock.sleep,
    )

    assert session.countdown is not None
    assert session.countdown.tick().as_tuple() == (2, 0, 0, 0)


async def test_resolve_once_counts_days_in_event_zone():
    clock = FakeClock(datetime(2025, 3, 8, 17, 0, tzinfo=timezone.utc))

    view = await resolve_once(
        _new_york_event(),
        None,
        FakeProvider("Europe/Madrid"),
        clock=clock,
    )

    assert view.countdown.as_tuple() == (2, 0, 0, 0)
