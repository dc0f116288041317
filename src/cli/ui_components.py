"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar paneles entre `show`, `convert` y `doctor`.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text

from core.domain.language import Language
from core.domain.models import ConvertedEventTime, CountdownState, EventView, TimezoneSource

_LABELS: dict[Language, dict[str, str]] = {
    Language.SPANISH: {
        "original": "Hora Original del Evento",
        "local": "Tu Hora Local Estimada",
        "detected": "Zona horaria detectada",
        "loading": "Calculando tu hora local…",
        "countdown": "Faltan",
        "started": "¡El evento ya comenzó!",
        "units": "días,horas,min,seg",
        "ip": "por IP",
        "browser": "del sistema",
    },
    Language.ENGLISH: {
        "original": "Original Event Time",
        "local": "Your Estimated Local Time",
        "detected": "Detected timezone",
        "loading": "Calculating your local time…",
        "countdown": "Starts in",
        "started": "The event has started!",
        "units": "days,hours,min,sec",
        "ip": "via IP",
        "browser": "from system",
    },
}


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("Time Traveler", style="bold cyan")
    subtitle = Text("Hora del evento • Tu zona horaria • Cuenta regresiva", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def format_countdown(state: CountdownState, language: Language = Language.SPANISH) -> Text:
    labels = _LABELS[language]
    if state.is_zero:
        return Text(labels["started"], style="bold green")
    units = labels["units"].split(",")
    text = Text(f"{labels['countdown']}: ", style="bold")
    for value, unit in zip(state.as_tuple(), units):
        text.append(f"{value:02d}", style="bold magenta")
        text.append(f" {unit}  ")
    return text


def _source_label(source: TimezoneSource, language: Language) -> str:
    return _LABELS[language][source.value]


def build_conversion_text(converted: ConvertedEventTime) -> Text:
    text = Text(converted.formatted, style="bold yellow")
    text.append(f"\n({converted.offset_sentence})", style="dim")
    return text


def build_event_panel(view: EventView, language: Language = Language.SPANISH) -> Panel:
    """Tarjeta del evento: hora original, hora local, zona detectada y cuenta."""

    labels = _LABELS[language]
    event = view.event

    parts: list[object] = []
    if event.subtitle:
        parts.append(Align.center(Text(event.subtitle, style="dim")))

    parts.append(Rule(labels["original"], style="cyan"))
    parts.append(Align.center(Text(event.display_label)))
    parts.append(Align.center(Text(f"({event.timezone})", style="dim")))

    parts.append(Rule(labels["local"], style="cyan"))
    if view.loading:
        parts.append(Align.center(Text(labels["loading"], style="dim italic")))
    elif view.error:
        parts.append(Align.center(Text(view.error, style="bold red")))
    elif view.converted is not None:
        parts.append(Align.center(build_conversion_text(view.converted)))
        if view.detected is not None:
            detected = (
                f"({labels['detected']}: {view.detected.name}, "
                f"{_source_label(view.detected.source, language)})"
            )
            parts.append(Align.center(Text(detected, style="dim")))

    parts.append(Rule(style="cyan"))
    parts.append(Align.center(format_countdown(view.countdown, language)))

    if event.cta_url:
        cta = Text(f"{event.cta_label or event.cta_url} → ", style="bold")
        cta.append(event.cta_url, style=f"underline blue link {event.cta_url}")
        parts.append(Align.center(cta))

    title = Text(event.title or "Time Traveler", style="bold cyan")
    return Panel(Group(*parts), title=title, border_style="cyan", padding=(1, 2))


def build_error_panel(message: str) -> Panel:
    return Panel(Text(message, style="bold red"), title="Error", border_style="red")
