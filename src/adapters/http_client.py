"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza base URL, timeouts y headers para todo el harness.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

from typing import Any

import httpx

from core.config import HarnessSettings


def build_async_client(
    settings: HarnessSettings | None = None,
    *,
    base_url: str | None = None,
    timeout_seconds: float | None = None,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` apuntando a la API bajo prueba.

    Por qué un builder:
    - Centraliza timeouts/headers para que todas las llamadas se comporten igual.
    - `transport` permite sustituir la red por un stub en tests.
    """

    settings = settings or HarnessSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=base_url or settings.base_url,
        timeout=httpx.Timeout(timeout_seconds or settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def decode_body(response: httpx.Response) -> Any:
    """Decodifica el cuerpo: JSON si se puede, texto si no, None si está vacío."""

    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
