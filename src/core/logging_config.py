"""Logging centralizado (Rich).

Por qué aquí:
- Los módulos solo hacen `logging.getLogger(__name__)`; la configuración de
  handlers se hace una vez, desde el callback de la CLI.
- RichHandler da salida legible en terminal sin formatters propios.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_configured = False


def setup_logging(level: str | int = "INFO", *, console: Console | None = None) -> None:
    """Configura el logger raíz con un `RichHandler` (idempotente)."""

    global _configured

    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    if _configured:
        return

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)

    # httpx/httpcore loguean cada request en INFO; ya lo hace el executor.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    _configured = True
