"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.harness import ContractHarness
from core.config import HarnessSettings
from core.errors import AuthFailure, HarnessError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_ping(settings: HarnessSettings) -> tuple[bool, str]:
    try:
        async with ContractHarness(settings) as harness:
            outcome = await harness.booking.ping()
    except HarnessError as exc:
        return False, str(exc)
    ok = outcome.status_code in settings.ping_success_statuses
    return ok, f"HTTP {outcome.status_code} in {outcome.elapsed_ms:.0f}ms"


async def _check_auth(settings: HarnessSettings) -> tuple[bool, str]:
    try:
        async with ContractHarness(settings) as harness:
            token = await harness.authenticate()
    except AuthFailure as exc:
        return False, f"rejected (HTTP {exc.status_code})"
    except HarnessError as exc:
        return False, str(exc)
    return True, f"token received ({len(token)} chars)"


@app.command()
def run() -> None:
    """Run baseline diagnostics against the configured booking API."""

    settings = HarnessSettings()

    table = Table(title="booker-harness Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Base URL", "OK", settings.base_url)
    table.add_row("Username", "OK", settings.username)
    table.add_row("Transport timeout", "OK", f"{settings.http_timeout_seconds:.1f}s")
    table.add_row(
        "Live suite",
        "ENABLED" if settings.live else "DISABLED",
        "set BOOKER_LIVE=1 to run tests/contract",
    )

    ok_ping, detail_ping = asyncio.run(_check_ping(settings))
    table.add_row("Ping", "OK" if ok_ping else "FAIL", detail_ping)

    ok_auth, detail_auth = asyncio.run(_check_auth(settings))
    table.add_row("Auth", "OK" if ok_auth else "FAIL", detail_auth)

    _console.print(table)

    if not (ok_ping and ok_auth):
        raise typer.Exit(code=1)
