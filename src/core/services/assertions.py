"""Contract assertions over `ResponseOutcome`s.

Pure functions: no I/O, no retries. Each helper returns the outcome on success
so calls can be chained, and raises a `ContractViolation` subclass otherwise.
Field paths are dotted (`booking.bookingdates.checkin`); integer segments
index into lists (`0.bookingid`).
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from core.domain.models import ResponseOutcome
from core.errors import (
    BodyMismatch,
    ContractViolation,
    ContractViolations,
    LatencyExceeded,
    UnexpectedStatus,
)

_MISSING = object()


def resolve_path(body: Any, field_path: str | None) -> Any:
    """Return the value at `field_path`, or a sentinel when any segment is absent."""

    if not field_path:
        return body
    current = body
    for segment in field_path.split("."):
        if isinstance(current, dict):
            if segment not in current:
                return _MISSING
            current = current[segment]
        elif isinstance(current, list):
            if not (segment.isascii() and segment.isdigit()) or int(segment) >= len(current):
                return _MISSING
            current = current[int(segment)]
        else:
            return _MISSING
    return current


def has_path(body: Any, field_path: str) -> bool:
    return resolve_path(body, field_path) is not _MISSING


def _json_equal(a: Any, b: Any) -> bool:
    """Equality under JSON typing: `true` is never `1`, `false` is never `0`."""

    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if isinstance(a, dict) and isinstance(b, dict):
        return a.keys() == b.keys() and all(_json_equal(a[k], b[k]) for k in a)
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        return len(a) == len(b) and all(_json_equal(x, y) for x, y in zip(a, b))
    return a == b


def assert_status_in(outcome: ResponseOutcome, allowed: Iterable[int]) -> ResponseOutcome:
    allowed = frozenset(allowed)
    if outcome.status_code not in allowed:
        raise UnexpectedStatus(outcome, allowed)
    return outcome


def assert_within_latency(outcome: ResponseOutcome, bound_ms: float) -> ResponseOutcome:
    if outcome.elapsed_ms > bound_ms:
        raise LatencyExceeded(outcome, bound_ms)
    return outcome


def assert_body_has_field(outcome: ResponseOutcome, field_path: str) -> ResponseOutcome:
    if not has_path(outcome.body, field_path):
        raise BodyMismatch(
            outcome,
            field_path,
            expected="<present>",
            actual="<missing>",
            reason=f"field missing (body: {outcome.body!r})",
        )
    return outcome


def assert_body_lacks_field(outcome: ResponseOutcome, field_path: str) -> ResponseOutcome:
    value = resolve_path(outcome.body, field_path)
    if value is not _MISSING:
        raise BodyMismatch(
            outcome,
            field_path,
            expected="<absent>",
            actual=value,
            reason=f"field should be absent but is {value!r}",
        )
    return outcome


def assert_body_equals(
    outcome: ResponseOutcome,
    expected: Any,
    field_path: str | None = None,
) -> ResponseOutcome:
    actual = resolve_path(outcome.body, field_path)
    if actual is _MISSING:
        raise BodyMismatch(outcome, field_path or "", expected, "<missing>")
    if not _json_equal(actual, expected):
        raise BodyMismatch(outcome, field_path or "", expected, actual)
    return outcome


def assert_body_is_list(outcome: ResponseOutcome) -> ResponseOutcome:
    if not isinstance(outcome.body, list):
        raise BodyMismatch(
            outcome,
            "",
            expected="<list>",
            actual=type(outcome.body).__name__,
            reason=f"expected a JSON array, got {type(outcome.body).__name__}",
        )
    return outcome


def assert_all_succeed(
    outcomes: Sequence[ResponseOutcome],
    allowed: Iterable[int],
) -> Sequence[ResponseOutcome]:
    """Check every outcome; report all violations at once, not just the first."""

    allowed = frozenset(allowed)
    failures: list[ContractViolation] = []
    indices: list[int] = []
    for index, outcome in enumerate(outcomes):
        try:
            assert_status_in(outcome, allowed)
        except UnexpectedStatus as exc:
            failures.append(exc)
            indices.append(index)
    if failures:
        raise ContractViolations(failures, indices)
    return outcomes
