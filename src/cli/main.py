"""CLI principal (Typer).

La CLI es solo el shell de render: arma la sesión del evento, la monta y
redibuja la tarjeta con cada cambio de estado. Toda la lógica vive en `core/`.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler

from adapters.json_exporter import export_event_view_json
from adapters.local_timezone import StaticTimezoneProvider
from cli import doctor
from cli.ui_components import (
    build_error_panel,
    build_event_panel,
    format_countdown,
    print_banner,
)
from core.config import AppSettings
from core.domain.errors import TimeTravelerError
from core.domain.language import Language
from core.domain.models import EventDefinition, EventView
from core.interfaces.timezone_provider import TimezoneProvider
from core.services.event_session import EventSession, SessionHooks, resolve_once
from core.services.time_converter import WALL_CLOCK_FORMAT, convert_event_time
from core.services.timezone_detector import build_providers

app = typer.Typer(
    no_args_is_help=True,
    help="Muestra la hora de un evento en tu zona horaria local, con cuenta regresiva.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    """Logging a stderr vía Rich (WARNING por defecto, DEBUG con --verbose)."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Logs de depuración."),
) -> None:
    configure_logging(verbose)


def _providers(
    settings: AppSettings,
    timezone: Optional[str],
    no_geo: bool,
) -> tuple[Optional[TimezoneProvider], TimezoneProvider]:
    if timezone:
        return None, StaticTimezoneProvider(timezone)
    if no_geo:
        settings = settings.model_copy(update={"geolocation_enabled": False})
    return build_providers(settings)


async def _run_live(
    event: EventDefinition,
    settings: AppSettings,
    primary: Optional[TimezoneProvider],
    fallback: TimezoneProvider,
    language: Language,
) -> EventView:
    with Live(
        build_event_panel(EventView(event=event), language),
        console=_console,
        refresh_per_second=4,
    ) as live:
        hooks = SessionHooks(on_change=lambda view: live.update(build_event_panel(view, language)))
        session = EventSession(
            event,
            primary=primary,
            fallback=fallback,
            language=language,
            hooks=hooks,
            interval=settings.tick_interval_seconds,
        )
        session.mount()
        try:
            await session.wait_resolved()
            await session.wait_countdown()
        finally:
            session.unmount()
        return session.view


@app.command()
def show(
    once: bool = typer.Option(False, "--once", help="Renderiza un solo cuadro y termina."),
    timezone: Optional[str] = typer.Option(
        None,
        "--timezone",
        "-t",
        help="Zona IANA del visitante (omite la detección).",
    ),
    no_geo: bool = typer.Option(False, "--no-geo", help="No consultar la geolocalización por IP."),
    lang: Optional[Language] = typer.Option(None, "--lang", help="Idioma de salida."),
    json_path: Optional[Path] = typer.Option(
        None,
        "--json",
        help="Exporta el snapshot a JSON (implica --once).",
    ),
    banner: bool = typer.Option(True, "--banner/--no-banner"),
) -> None:
    """Muestra la tarjeta del evento con tu hora local y la cuenta regresiva."""

    settings = AppSettings()
    language = lang or settings.default_language
    event = settings.event_definition()
    primary, fallback = _providers(settings, timezone, no_geo)

    if banner and json_path is None:
        print_banner(_console)

    if once or json_path is not None:
        view = asyncio.run(resolve_once(event, primary, fallback, language))
        if json_path is not None:
            out = export_event_view_json(view=view, output_path=json_path)
            _console.print(f"[green]Snapshot exportado a:[/green] {out}")
        else:
            _console.print(build_event_panel(view, language))
        return

    try:
        asyncio.run(_run_live(event, settings, primary, fallback, language))
    except KeyboardInterrupt:
        _console.print("[dim]Hasta pronto.[/dim]")


@app.command()
def convert(
    wall_clock: str = typer.Argument(..., help="Fecha/hora sin zona, p.ej. 2025-05-26T19:00:00."),
    from_zone: str = typer.Option(..., "--from", help="Zona IANA de la hora dada."),
    to_zone: str = typer.Option(..., "--to", help="Zona IANA destino."),
    lang: Optional[Language] = typer.Option(None, "--lang", help="Idioma de salida."),
) -> None:
    """Convierte una hora de pared de una zona a otra."""

    settings = AppSettings()
    language = lang or settings.default_language
    try:
        event = EventDefinition(wall_clock=wall_clock, timezone=from_zone, display_label=wall_clock)
        converted = convert_event_time(event, to_zone, language)
    except (TimeTravelerError, ValidationError) as exc:
        logger.debug("Conversión fallida", exc_info=exc)
        _console.print(build_error_panel(str(exc)))
        raise typer.Exit(code=1) from exc

    _console.print(converted.local_time.strftime(WALL_CLOCK_FORMAT))
    _console.print(converted.formatted)
    _console.print(f"({converted.offset_sentence})")


@app.command()
def countdown(
    lang: Optional[Language] = typer.Option(None, "--lang", help="Idioma de salida."),
) -> None:
    """Muestra solo el tiempo restante hasta el evento."""

    settings = AppSettings()
    language = lang or settings.default_language
    view = asyncio.run(
        resolve_once(
            settings.event_definition(),
            None,
            StaticTimezoneProvider(settings.event_timezone),
            language,
        )
    )
    _console.print(format_countdown(view.countdown, language))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
