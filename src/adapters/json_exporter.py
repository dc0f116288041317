"""Exportación JSON del snapshot de la vista.

Por qué JSON:
- Interoperabilidad con otras herramientas (widgets, bots, pipelines).
- Permite persistir el resultado sin depender del render de la terminal.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import EventView


def export_event_view_json(*, view: EventView, output_path: Path) -> Path:
    """Exporta `EventView` a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = view.model_dump(mode="json")
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
