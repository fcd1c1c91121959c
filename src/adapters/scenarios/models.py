"""Modelos para escenarios data-driven.

Idea:
- En vez de escribir un test por cada llamada a la API, leemos un JSON de
  escenarios (request + expectativas + capturas) y lo ejecuta un motor genérico.
- Las capturas (`capture`) guardan valores del body (p.ej. `bookingid`) para
  usarlos como `{variable}` en escenarios posteriores.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

from core.domain.models import AuthScheme, ResponseOutcome, RetryPolicy


class ScenarioRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    method: str = Field(default="GET", min_length=1)
    path: str = Field(..., min_length=1)
    headers: dict[str, str] = Field(default_factory=dict)
    params: dict[str, Any] = Field(default_factory=dict)
    json_body: Any = Field(default=None, alias="json")
    content: str | None = Field(default=None, description="Cuerpo crudo (p.ej. JSON mal formado).")
    auth: AuthScheme = AuthScheme.NONE

    retry: RetryPolicy | None = None
    timeout_ms: float | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _exclusive_options(self) -> ScenarioRequest:
        if self.retry is not None and self.timeout_ms is not None:
            raise ValueError("a scenario request takes either 'retry' or 'timeout_ms', not both")
        if self.json_body is not None and self.content is not None:
            raise ValueError("a scenario request takes either 'json' or 'content', not both")
        return self


class ScenarioExpect(BaseModel):
    statuses: list[int] = Field(default_factory=list)
    max_latency_ms: float | None = Field(default=None, gt=0)
    fields: list[str] = Field(default_factory=list)
    lacks: list[str] = Field(default_factory=list)
    equals: dict[str, Any] = Field(default_factory=dict)
    is_list: bool = False


class Scenario(BaseModel):
    name: str = Field(..., min_length=1)
    request: ScenarioRequest
    expect: ScenarioExpect = Field(default_factory=ScenarioExpect)
    capture: dict[str, str] = Field(
        default_factory=dict,
        description="variable -> ruta en el body de la respuesta.",
    )


class ScenariosFile(BaseModel):
    scenarios: list[Scenario] = Field(default_factory=list)


class ScenarioResult(BaseModel):
    name: str
    passed: bool
    failures: list[str] = Field(default_factory=list)
    captured: dict[str, Any] = Field(default_factory=dict)
    outcome: ResponseOutcome | None = None

    @property
    def status_code(self) -> int | None:
        return self.outcome.status_code if self.outcome else None

    @property
    def elapsed_ms(self) -> float | None:
        return self.outcome.elapsed_ms if self.outcome else None
