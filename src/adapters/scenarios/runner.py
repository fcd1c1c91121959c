"""Generic engine that runs data-defined scenarios through a harness.

Scenarios run sequentially because later ones may use values captured from
earlier responses. A failing scenario never stops the run: its violations (or
transport/timeout/auth failure) are recorded in its `ScenarioResult`.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable

from adapters.harness import ContractHarness
from adapters.scenarios.models import Scenario, ScenarioResult
from core.domain.models import AuthScheme, RequestSpec, ResponseOutcome
from core.errors import ContractViolation, HarnessError
from core.services import assertions

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


class UnresolvedVariable(KeyError):
    pass


def substitute(template: str, variables: dict[str, Any]) -> str:
    """Replace `{name}` placeholders; unknown names raise `UnresolvedVariable`."""

    def repl(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in variables:
            raise UnresolvedVariable(key)
        return str(variables[key])

    return _PLACEHOLDER_RE.sub(repl, template)


def substitute_value(value: Any, variables: dict[str, Any]) -> Any:
    """Substitute placeholders in every string leaf of a JSON value.

    A leaf that is exactly one placeholder (`"{booking_id}"`) takes the
    captured value as-is, so integers stay integers.
    """

    if isinstance(value, str):
        whole = _PLACEHOLDER_RE.fullmatch(value)
        if whole is not None:
            key = whole.group(1)
            if key not in variables:
                raise UnresolvedVariable(key)
            return variables[key]
        return substitute(value, variables)
    if isinstance(value, dict):
        return {k: substitute_value(v, variables) for k, v in value.items()}
    if isinstance(value, list):
        return [substitute_value(v, variables) for v in value]
    return value


def build_request_spec(scenario: Scenario, variables: dict[str, Any]) -> RequestSpec:
    req = scenario.request
    return RequestSpec(
        method=req.method,
        path=substitute(req.path, variables),
        headers={k: substitute(v, variables) for k, v in req.headers.items()},
        params={
            k: substitute(v, variables) if isinstance(v, str) else v
            for k, v in req.params.items()
        },
        json_body=substitute_value(req.json_body, variables),
        content=substitute(req.content, variables) if req.content is not None else None,
        expected_statuses=frozenset(scenario.expect.statuses),
        auth=req.auth,
        name=scenario.name,
    )


def check_expectations(scenario: Scenario, outcome: ResponseOutcome) -> list[str]:
    """Apply every expectation and collect all violations."""

    expect = scenario.expect
    checks: list[tuple[Any, tuple[Any, ...]]] = []
    if expect.statuses:
        checks.append((assertions.assert_status_in, (expect.statuses,)))
    if expect.max_latency_ms is not None:
        checks.append((assertions.assert_within_latency, (expect.max_latency_ms,)))
    if expect.is_list:
        checks.append((assertions.assert_body_is_list, ()))
    checks.extend((assertions.assert_body_has_field, (path,)) for path in expect.fields)
    checks.extend((assertions.assert_body_lacks_field, (path,)) for path in expect.lacks)
    checks.extend(
        (assertions.assert_body_equals, (value, path)) for path, value in expect.equals.items()
    )

    failures: list[str] = []
    for check, args in checks:
        try:
            check(outcome, *args)
        except ContractViolation as exc:
            failures.append(str(exc))
    return failures


async def _execute(harness: ContractHarness, scenario: Scenario, spec: RequestSpec) -> ResponseOutcome:
    req = scenario.request
    if req.retry is not None:
        return await harness.execute_with_retry(spec, req.retry)
    if req.timeout_ms is not None:
        return await harness.execute_with_timeout(spec, req.timeout_ms)
    return await harness.execute(spec)


async def run_scenario(
    harness: ContractHarness,
    scenario: Scenario,
    variables: dict[str, Any],
) -> ScenarioResult:
    try:
        spec = build_request_spec(scenario, variables)
    except UnresolvedVariable as exc:
        return ScenarioResult(
            name=scenario.name,
            passed=False,
            failures=[f"unresolved variable {exc.args[0]!r}"],
        )

    try:
        if spec.auth is AuthScheme.TOKEN and not harness.session.is_authenticated:
            await harness.authenticate()
        outcome = await _execute(harness, scenario, spec)
    except HarnessError as exc:
        logger.warning("Scenario %r failed before assertions: %s", scenario.name, exc)
        return ScenarioResult(name=scenario.name, passed=False, failures=[str(exc)])

    failures = check_expectations(scenario, outcome)

    captured: dict[str, Any] = {}
    for var, path in scenario.capture.items():
        if assertions.has_path(outcome.body, path):
            captured[var] = assertions.resolve_path(outcome.body, path)
        else:
            failures.append(f"capture {var!r}: no value at '{path}'")

    return ScenarioResult(
        name=scenario.name,
        passed=not failures,
        failures=failures,
        captured=captured,
        outcome=outcome,
    )


async def run_scenarios(
    harness: ContractHarness,
    scenarios: Iterable[Scenario],
    *,
    variables: dict[str, Any] | None = None,
) -> list[ScenarioResult]:
    context: dict[str, Any] = dict(variables or {})
    results: list[ScenarioResult] = []
    for scenario in scenarios:
        result = await run_scenario(harness, scenario, context)
        context.update(result.captured)
        logger.info(
            "%s %s (%s)",
            "PASS" if result.passed else "FAIL",
            scenario.name,
            result.status_code,
        )
        results.append(result)
    return results
