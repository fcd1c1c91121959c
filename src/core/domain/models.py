"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- `frozen=True` hace que RequestSpec/ResponseOutcome/RetryPolicy sean valores
  inmutables: se construyen una vez por llamada y nadie los muta después.

Nota:
- Estos modelos describen *qué* se envía y *qué* se observó, no *cómo*.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.config import ConfigDict


class AuthScheme(str, Enum):
    """Credential attached to a request."""

    NONE = "none"
    TOKEN = "token"
    BASIC = "basic"
    # Token si hay, si no basic.
    ANY = "any"


class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str
    password: str


class RequestSpec(BaseModel):
    """Una petición HTTP a ejecutar (valor inmutable)."""

    model_config = ConfigDict(frozen=True)

    method: str = Field(default="GET", min_length=1)
    path: str = Field(..., min_length=1, description="Ruta relativa a la base URL.")
    headers: dict[str, str] = Field(default_factory=dict)
    params: dict[str, Any] = Field(default_factory=dict)
    json_body: Any = Field(default=None, description="Cuerpo JSON (None = sin cuerpo).")
    content: str | bytes | None = Field(
        default=None,
        description="Cuerpo crudo (p.ej. JSON mal formado); excluyente con `json_body`.",
    )
    expected_statuses: frozenset[int] = Field(default_factory=frozenset)
    auth: AuthScheme = Field(default=AuthScheme.NONE)
    name: str | None = Field(default=None, description="Etiqueta legible para reportes.")

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        return value.strip().upper()

    @model_validator(mode="after")
    def _one_body(self) -> RequestSpec:
        if self.json_body is not None and self.content is not None:
            raise ValueError("a request takes either 'json_body' or 'content', not both")
        return self

    @property
    def label(self) -> str:
        return self.name or f"{self.method} {self.path}"


class ResponseOutcome(BaseModel):
    """Resultado registrado de un intercambio HTTP."""

    model_config = ConfigDict(frozen=True)

    request: RequestSpec
    status_code: int = Field(..., ge=100, le=599)
    body: Any = None
    headers: dict[str, str] = Field(default_factory=dict)
    elapsed_ms: float = Field(..., ge=0)
    attempts: int = Field(default=1, ge=1)

    @property
    def is_expected(self) -> bool:
        """True si el status pertenece a `request.expected_statuses` (vacío = cualquiera)."""

        expected = self.request.expected_statuses
        return not expected or self.status_code in expected


class RetryPolicy(BaseModel):
    """Reintentos ante fallos de transporte (nunca ante status inesperados)."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1, le=50)
    delay_ms: float = Field(default=1000.0, ge=0)

    @property
    def delay_seconds(self) -> float:
        return self.delay_ms / 1000.0


class BookingDates(BaseModel):
    checkin: str = Field(..., description="Fecha ISO (YYYY-MM-DD).")
    checkout: str = Field(..., description="Fecha ISO (YYYY-MM-DD).")


class Booking(BaseModel):
    """Registro de reserva tal como lo define la API Restful-Booker."""

    model_config = ConfigDict(extra="allow")

    firstname: str
    lastname: str
    totalprice: int
    depositpaid: bool
    bookingdates: BookingDates
    additionalneeds: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
