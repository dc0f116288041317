"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.geolocation import IPGeolocationProvider
from adapters.local_timezone import LocalTimezoneProvider
from core.config import AppSettings, write_user_env_vars
from core.domain.errors import TimeTravelerError
from core.domain.models import EventDefinition
from core.services.time_converter import event_instant, load_zone

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_zone(name: str | None) -> tuple[bool, str]:
    if not name:
        return False, "not resolved"
    try:
        load_zone(name)
    except TimeTravelerError as exc:
        return False, str(exc)
    return True, name


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="Time Traveler Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Event
    try:
        instant = event_instant(settings.event_definition())
        table.add_row("Event instant", "OK", instant.isoformat())
    except TimeTravelerError as exc:
        table.add_row("Event instant", "FAIL", str(exc))

    # Timezone database
    ok_db, detail_db = _check_zone("America/Bogota")
    table.add_row("IANA database", "OK" if ok_db else "FAIL", detail_db if ok_db else "install `tzdata`")

    # Local environment
    ok_local, detail_local = _check_zone(LocalTimezoneProvider().resolve())
    table.add_row("Local timezone", "OK" if ok_local else "FAIL", detail_local)

    # Geolocation (best-effort)
    if settings.geolocation_enabled:
        ip_zone = asyncio.run(IPGeolocationProvider(settings).lookup())
        ok_ip, detail_ip = _check_zone(ip_zone)
        table.add_row("IP geolocation", "OK" if ok_ip else "FAIL", f"{settings.geolocation_url} -> {detail_ip}")
    else:
        table.add_row("IP geolocation", "DISABLED", "local timezone only")

    _console.print(table)

    if not ok_local and settings.geolocation_enabled:
        _console.print(
            "\n[yellow]Note:[/yellow] Without a local timezone, detection depends on the IP lookup. "
            "Set `TZ` to be safe."
        )


@app.command(name="setup-event")
def setup_event() -> None:
    """Interactive event setup (stores config in the user config .env)."""

    settings = AppSettings()

    wall_clock = typer.prompt("Event wall clock (ISO-8601, no zone)", default=settings.event_wall_clock).strip()
    zone = typer.prompt("Event timezone (IANA)", default=settings.event_timezone).strip()
    label = typer.prompt("Display label", default=settings.event_display_label).strip()
    cta_url = typer.prompt("Call-to-action URL (optional)", default=settings.cta_url or "", show_default=False).strip()

    try:
        event_instant(EventDefinition(wall_clock=wall_clock, timezone=zone, display_label=label or wall_clock))
    except TimeTravelerError as exc:
        raise typer.BadParameter(str(exc)) from exc

    env_path = write_user_env_vars(
        {
            "TIME_TRAVELER_EVENT_WALL_CLOCK": wall_clock,
            "TIME_TRAVELER_EVENT_TIMEZONE": zone,
            "TIME_TRAVELER_EVENT_DISPLAY_LABEL": label,
            "TIME_TRAVELER_CTA_URL": cta_url or None,
        }
    )

    _console.print(f"[green]Saved event config to:[/green] {env_path}")
