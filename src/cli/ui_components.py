"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from typing import Sequence

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from adapters.scenarios.models import ScenarioResult
from core.services.probes import BurstResult


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Evita dependencias circulares (main <-> doctor).
    - Permite desactivar banner en modos no interactivos (JSON/CI).
    """

    title = Text("booker-harness", style="bold cyan")
    subtitle = Text("Contract tests • Latency • Concurrency", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_scenarios_table(results: Sequence[ScenarioResult]) -> Table:
    table = Table(title="Scenarios")
    table.add_column("Scenario", style="cyan", no_wrap=True)
    table.add_column("Result", style="white")
    table.add_column("Status", style="magenta")
    table.add_column("Latency (ms)", justify="right")
    table.add_column("Failures", style="red")

    for r in results:
        table.add_row(
            r.name,
            "[green]PASS[/green]" if r.passed else "[red]FAIL[/red]",
            str(r.status_code) if r.status_code is not None else "-",
            f"{r.elapsed_ms:.0f}" if r.elapsed_ms is not None else "-",
            "\n".join(r.failures),
        )
    return table


def build_burst_panel(result: BurstResult, *, label: str) -> Panel:
    """Panel con distribución de status y latencias de un burst."""

    body = Text()
    body.append(f"Requests: {len(result.outcomes)}\n")
    body.append(f"Wall time: {result.total_ms:.0f}ms\n")
    body.append(f"Average per request: {result.average_ms:.0f}ms\n\n")
    body.append("Status distribution:\n", style="bold")
    for status, count in sorted(result.distribution.items()):
        style = "green" if 200 <= status < 300 else "yellow"
        body.append(f"- {status}: {count}\n", style=style)

    return Panel(body, title=Text(label, style="bold yellow"), border_style="yellow")
