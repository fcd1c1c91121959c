"""Exportación JSON de resultados.

Por qué JSON:
- Interoperabilidad con CI y otras herramientas (el reporte HTML queda fuera).
- Permite guardar evidencia (requests, status, latencias) de cada corrida.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from pydantic import BaseModel


def export_results_json(
    *,
    results: Sequence[BaseModel],
    output_path: Path,
    kind: str = "scenarios",
) -> Path:
    """Exporta resultados (`ScenarioResult`, `ResponseOutcome`, ...) a JSON UTF-8 estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "kind": kind,
        "generated_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        "count": len(results),
        "results": [r.model_dump(mode="json") for r in results],
    }
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
