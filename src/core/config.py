"""Configuración del harness.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI
  ni los tests.
- Permite que adaptadores (sesión/executor/booking API) lean config de forma
  consistente. Nada de URLs o credenciales hardcodeadas en el harness.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class HarnessSettings(BaseSettings):
    """Configuración central del harness de contratos.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core.
    - Un único contrato de configuración para CLI, tests y adaptadores.
    """

    model_config = SettingsConfigDict(
        env_prefix="BOOKER_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    base_url: str = Field(
        default="https://restful-booker.herokuapp.com",
        min_length=8,
        description="Base URL de la API de reservas bajo prueba.",
    )
    username: str = Field(
        default="admin",
        description="Usuario por defecto para /auth.",
    )
    password: str = Field(
        default="password123",
        description="Password por defecto para /auth.",
    )
    http_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Timeout de transporte por request (segundos).",
    )
    user_agent: str = Field(
        default="booker-harness/0.1",
        min_length=1,
        description="User-Agent enviado en cada request.",
    )

    auth_path: str = Field(default="/auth", min_length=1)
    auth_success_statuses: set[int] = Field(
        default_factory=lambda: {200},
        description="Status que cuentan como auth exitosa (además de un token presente).",
    )
    delete_success_statuses: set[int] = Field(
        default_factory=lambda: {201},
        description="Restful-Booker responde 201 (no 204) a un DELETE correcto.",
    )
    ping_success_statuses: set[int] = Field(default_factory=lambda: {201})
    invalid_payload_statuses: set[int] = Field(
        default_factory=lambda: {400, 500},
        description="Status aceptados ante payloads malformados (la API no es consistente).",
    )

    # Umbrales de rendimiento (ms)
    latency_threshold_ms: float = Field(default=3000.0, gt=0)
    slow_latency_threshold_ms: float = Field(default=5000.0, gt=0)
    request_timeout_ms: float = Field(
        default=5000.0,
        gt=0,
        description="Límite de la carrera request-vs-timer del harness.",
    )

    # Carga / concurrencia
    concurrent_requests: int = Field(default=5, ge=1, le=500)
    burst_requests: int = Field(default=20, ge=1, le=1000)
    sustained_requests: int = Field(default=10, ge=1, le=1000)
    sustained_delay_ms: float = Field(default=500.0, ge=0)
    rate_limit_cooldown_ms: float = Field(default=5000.0, ge=0)

    # Reintentos ante fallos de transporte
    retry_max_attempts: int = Field(default=3, ge=1, le=10)
    retry_delay_ms: float = Field(default=1000.0, ge=0)

    log_level: str = Field(default="INFO")
    live: bool = Field(
        default=False,
        description="Habilita la suite de contratos contra la API real.",
    )
