"""Contrato del ejecutor de requests.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Los probes (`core.services.probes`) y la sesión solo necesitan `execute`,
  así que se pueden testear con un ejecutor falso sin levantar httpx.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import RequestSpec, ResponseOutcome


@runtime_checkable
class RequestExecutor(Protocol):
    """Contrato mínimo para ejecutar un `RequestSpec`.

    Reglas de diseño:
    - `execute` es asíncrono porque hace I/O (HTTP).
    - Un status no-2xx es un resultado válido, no una excepción.
    - Los fallos de transporte se señalan con `NetworkFailure`.
    """

    async def execute(self, spec: RequestSpec) -> ResponseOutcome:
        """Ejecuta la petición y devuelve el resultado observado."""

        ...
