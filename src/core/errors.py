"""Taxonomía de errores del harness.

Dos familias:
- `HarnessError`: fallos del propio harness o del transporte (auth, red,
  timeout). Algunos se reintentan según `RetryPolicy`.
- `ContractViolation`: el servicio respondió, pero no como se esperaba. Hereda
  de `AssertionError` para que pytest lo reporte como fallo de test normal.
  Nunca se reintenta.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable

if TYPE_CHECKING:
    from core.domain.models import RequestSpec, ResponseOutcome


def _describe(spec: RequestSpec | None) -> str:
    if spec is None:
        return "<unknown request>"
    return f"{spec.method} {spec.path}"


class HarnessError(Exception):
    """Base exception for harness failures."""


class AuthFailure(HarnessError):
    """Raised when the auth endpoint rejects the credentials or omits the token."""

    def __init__(self, status_code: int, body: Any = None):
        super().__init__(f"authentication failed with HTTP {status_code}: {body!r}")
        self.status_code = status_code
        self.body = body


class NotAuthenticated(HarnessError):
    """Raised when an authorized call is attempted with no credential available."""

    def __init__(self, message: str = "no auth token or basic credentials available"):
        super().__init__(message)


class NetworkFailure(HarnessError):
    """Transport-level failure (connection refused, DNS, transport timeout...)."""

    def __init__(self, spec: RequestSpec, cause: BaseException, attempts: int = 1):
        super().__init__(f"{_describe(spec)} failed after {attempts} attempt(s): {cause}")
        self.spec = spec
        self.cause = cause
        self.attempts = attempts


class TimeoutFailure(HarnessError):
    """The client-side timer won the race against the request.

    The remote operation may still have completed: treat as "unknown outcome".
    """

    def __init__(self, spec: RequestSpec, limit_ms: float, elapsed_ms: float):
        super().__init__(
            f"{_describe(spec)} did not complete within {limit_ms:.0f}ms "
            f"(gave up after {elapsed_ms:.0f}ms)"
        )
        self.spec = spec
        self.limit_ms = limit_ms
        self.elapsed_ms = elapsed_ms


class ContractViolation(AssertionError):
    """Base class for assertion failures over a `ResponseOutcome`."""

    def __init__(self, message: str, outcome: ResponseOutcome | None = None):
        if outcome is not None:
            message = f"{_describe(outcome.request)} -> HTTP {outcome.status_code}: {message}"
        super().__init__(message)
        self.outcome = outcome


class UnexpectedStatus(ContractViolation):
    def __init__(self, outcome: ResponseOutcome, allowed: Iterable[int]):
        self.allowed = frozenset(allowed)
        super().__init__(
            f"status {outcome.status_code} not in {sorted(self.allowed)}",
            outcome,
        )


class BodyMismatch(ContractViolation):
    def __init__(
        self,
        outcome: ResponseOutcome,
        path: str,
        expected: Any,
        actual: Any,
        reason: str | None = None,
    ):
        self.path = path
        self.expected = expected
        self.actual = actual
        detail = reason or f"expected {expected!r}, got {actual!r}"
        super().__init__(f"body at '{path or '$'}': {detail}", outcome)


class LatencyExceeded(ContractViolation):
    def __init__(self, outcome: ResponseOutcome, bound_ms: float):
        self.bound_ms = bound_ms
        super().__init__(
            f"took {outcome.elapsed_ms:.0f}ms, bound is {bound_ms:.0f}ms",
            outcome,
        )


class ContractViolations(ContractViolation):
    """Aggregate of every violation found in a batch of outcomes."""

    def __init__(self, failures: list[ContractViolation], indices: list[int] | None = None):
        self.failures = list(failures)
        self.indices = list(indices) if indices is not None else list(range(len(self.failures)))
        lines = [f"{len(self.failures)} contract violation(s):"]
        lines.extend(f"  [{i}] {failure}" for i, failure in zip(self.indices, self.failures))
        super().__init__("\n".join(lines))
