"""Carga de escenarios JSON (data-driven).

Formato:
- {"scenarios": [{"name": ..., "request": {...}, "expect": {...}, "capture": {...}}]}

Nota:
- El repo incluye `data/scenarios/restful_booker.json` como suite por defecto.
"""

from __future__ import annotations

import json
from pathlib import Path

from adapters.scenarios.models import ScenariosFile


def _project_root() -> Path:
    # adapters/scenarios/loader.py -> scenarios -> adapters -> src -> <project_root>
    return Path(__file__).resolve().parents[3]


def default_scenarios_path() -> Path:
    return _project_root() / "data" / "scenarios" / "restful_booker.json"


def load_scenarios(path: Path) -> ScenariosFile:
    raw = path.read_text(encoding="utf-8")
    data = json.loads(raw)
    return ScenariosFile.model_validate(data)
