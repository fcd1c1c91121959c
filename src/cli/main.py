"""CLI entry point (Typer).

Commands:
- `doctor run`: config + connectivity + auth diagnostics.
- `probe`: concurrent burst against one endpoint.
- `scenarios`: run a JSON scenario file through the harness.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import NoReturn

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from adapters.harness import ContractHarness
from adapters.json_exporter import export_results_json
from adapters.scenarios import default_scenarios_path, load_scenarios, run_scenarios
from cli import doctor
from cli.ui_components import build_burst_panel, build_scenarios_table, print_banner
from core.config import HarnessSettings
from core.domain.models import RequestSpec
from core.errors import HarnessError
from core.logging_config import setup_logging
from core.services.probes import burst

app = typer.Typer(
    no_args_is_help=True,
    help="Contract-test harness for the Restful-Booker API.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()


def _fail(message: str) -> NoReturn:
    _console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(code=1)


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Override BOOKER_LOG_LEVEL."),
    no_banner: bool = typer.Option(False, "--no-banner", help="Skip the banner."),
) -> None:
    settings = HarnessSettings()
    setup_logging(log_level or settings.log_level)
    if not no_banner:
        print_banner(_console)


@app.command()
def probe(
    path: str = typer.Option("/booking", "--path", help="Endpoint to hit with GET."),
    requests: int | None = typer.Option(None, "--requests", "-n", min=1, help="Burst size."),
    export_json: Path | None = typer.Option(None, "--export-json", help="Write outcomes to JSON."),
) -> None:
    """Fire a concurrent GET burst and show status distribution and latency."""

    settings = HarnessSettings()
    count = requests or settings.concurrent_requests
    spec = RequestSpec(method="GET", path=path, headers={"Accept": "application/json"})

    async def _run():
        async with ContractHarness(settings) as harness:
            return await burst(harness.executor, spec, count)

    try:
        result = asyncio.run(_run())
    except HarnessError as exc:
        _fail(f"Probe aborted: {exc}")
    _console.print(build_burst_panel(result, label=f"GET {path} x{count}"))

    if export_json:
        out = export_results_json(results=result.outcomes, output_path=export_json, kind="probe")
        _console.print(f"[green]Saved:[/green] {out}")


@app.command()
def scenarios(
    path: Path | None = typer.Argument(None, help="Scenario JSON file (defaults to the bundled suite)."),
    export_json: Path | None = typer.Option(None, "--export-json", help="Write results to JSON."),
) -> None:
    """Run a scenario file; exit code 1 if any scenario fails."""

    settings = HarnessSettings()
    scenarios_path = path or default_scenarios_path()
    if not scenarios_path.exists():
        raise typer.BadParameter(f"scenario file not found: {scenarios_path}")

    try:
        suite = load_scenarios(scenarios_path)
    except (ValidationError, ValueError, OSError) as exc:
        # JSONDecodeError es un ValueError.
        _fail(f"Invalid scenario file {scenarios_path}: {exc}")

    async def _run():
        async with ContractHarness(settings) as harness:
            return await run_scenarios(harness, suite.scenarios)

    try:
        results = asyncio.run(_run())
    except HarnessError as exc:
        _fail(f"Scenario run aborted: {exc}")
    _console.print(build_scenarios_table(results))

    if export_json:
        out = export_results_json(results=results, output_path=export_json)
        _console.print(f"[green]Saved:[/green] {out}")

    failed = [r for r in results if not r.passed]
    if failed:
        _console.print(f"[red]{len(failed)} of {len(results)} scenario(s) failed.[/red]")
        raise typer.Exit(code=1)
    _console.print(f"[green]All {len(results)} scenario(s) passed.[/green]")


def run() -> None:
    app()
