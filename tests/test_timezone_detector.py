from __future__ import annotations

import httpx
import pytest

from adapters.geolocation import IPGeolocationProvider
from adapters.local_timezone import LocalTimezoneProvider
from conftest import FakeProvider
from core.domain.errors import DetectionError
from core.domain.models import TimezoneSource
from core.services.time_converter import convert_event_time
from core.services.timezone_detector import (
    NO_TIMEZONE_MESSAGE,
    build_providers,
    detect_timezone,
    detect_viewer_timezone,
)


async def test_ip_answer_wins():
    primary = FakeProvider("America/New_York", TimezoneSource.IP)
    fallback = FakeProvider("Europe/Madrid")

    outcome = await detect_timezone(primary, fallback)

    assert outcome.ok
    assert outcome.unwrap().name == "America/New_York"
    assert outcome.unwrap().source is TimezoneSource.IP
    assert fallback.calls == 0


@pytest.mark.parametrize(
    "primary",
    [
        FakeProvider(None, TimezoneSource.IP),
        FakeProvider("", TimezoneSource.IP),
        FakeProvider("   ", TimezoneSource.IP),
        FakeProvider(None, TimezoneSource.IP, error=httpx.ConnectError("boom")),
        FakeProvider(None, TimezoneSource.IP, error=TimeoutError()),
    ],
)
async def test_fallback_is_tagged_browser(primary):
    outcome = await detect_timezone(primary, FakeProvider("Europe/Madrid"))

    assert outcome.timezone is not None
    assert outcome.timezone.name == "Europe/Madrid"
    assert outcome.timezone.source is TimezoneSource.BROWSER
    assert primary.calls == 1


async def test_no_primary_goes_straight_to_fallback():
    outcome = await detect_timezone(None, FakeProvider("America/Bogota"))

    assert outcome.unwrap().source is TimezoneSource.BROWSER


async def test_nothing_detected_is_a_failure():
    outcome = await detect_timezone(FakeProvider(None, TimezoneSource.IP), FakeProvider(""))

    assert not outcome.ok
    assert outcome.error == NO_TIMEZONE_MESSAGE
    with pytest.raises(DetectionError):
        outcome.unwrap()


async def test_network_failure_falls_back_to_environment(settings, tmp_path, bogota_event):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("network down", request=request)

    primary = IPGeolocationProvider(settings, transport=httpx.MockTransport(handler))
    fallback = LocalTimezoneProvider(environ={"TZ": "Europe/Madrid"}, root=tmp_path)

    outcome = await detect_timezone(primary, fallback)

    detected = outcome.unwrap()
    assert detected.name == "Europe/Madrid"
    assert detected.source is TimezoneSource.BROWSER

    converted = convert_event_time(bogota_event, detected.name)
    assert converted.offset_difference == 7.0
    assert converted.local_time.strftime("%Y-%m-%dT%H:%M") == "2025-05-27T02:00"


def test_build_providers_honours_geolocation_flag(settings):
    primary, fallback = build_providers(settings)
    assert isinstance(primary, IPGeolocationProvider)
    assert isinstance(fallback, LocalTimezoneProvider)

    primary, _ = build_providers(settings.model_copy(update={"geolocation_enabled": False}))
    assert primary is None


async def test_detect_viewer_timezone_uses_environment_without_geolocation(settings, monkeypatch):
    monkeypatch.setenv("TZ", "Europe/Madrid")

    outcome = await detect_viewer_timezone(settings.model_copy(update={"geolocation_enabled": False}))

    detected = outcome.unwrap()
    assert detected.name == "Europe/Madrid"
    assert detected.source is TimezoneSource.BROWSER
