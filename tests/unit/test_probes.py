"""Load/resilience probes and their statistics."""

from __future__ import annotations

import time

import pytest

from core.domain.models import RequestSpec, ResponseOutcome
from core.services.probes import (
    average_latency_ms,
    batch_average_ms,
    burst,
    recover_after_burst,
    status_distribution,
    sustained_load,
)

LIST_SPEC = RequestSpec(path="/booking", headers={"Accept": "application/json"})


def outcome(status: int, elapsed_ms: float) -> ResponseOutcome:
    return ResponseOutcome(request=LIST_SPEC, status_code=status, elapsed_ms=elapsed_ms)


class CountingExecutor:
    """Only implements `execute`, like any third-party RequestExecutor."""

    def __init__(self, statuses):
        self.statuses = list(statuses)
        self.calls = 0

    async def execute(self, spec):
        status = self.statuses[self.calls % len(self.statuses)]
        self.calls += 1
        return ResponseOutcome(request=spec, status_code=status, elapsed_ms=1.0)


class TestStatistics:
    def test_status_distribution(self):
        outcomes = [outcome(200, 1), outcome(429, 1), outcome(200, 1)]
        assert status_distribution(outcomes) == {200: 2, 429: 1}

    def test_average_latency(self):
        assert average_latency_ms([outcome(200, 100), outcome(200, 300)]) == 200
        assert average_latency_ms([]) == 0.0

    def test_batch_average(self):
        assert batch_average_ms(1000, 5) == 200
        assert batch_average_ms(1000, 0) == 0.0


class TestProbes:
    @pytest.mark.asyncio
    async def test_burst_against_harness(self, make_harness, settings):
        async with make_harness() as harness:
            result = await burst(harness.executor, LIST_SPEC, settings.burst_requests)

        assert len(result.outcomes) == 20
        assert result.distribution == {200: 20}
        assert result.average_ms == pytest.approx(result.total_ms / 20)

    @pytest.mark.asyncio
    async def test_burst_with_minimal_executor(self):
        executor = CountingExecutor([200, 429])
        result = await burst(executor, LIST_SPEC, 4)

        assert executor.calls == 4
        assert result.distribution == {200: 2, 429: 2}

    @pytest.mark.asyncio
    async def test_sustained_load_spaces_requests(self):
        executor = CountingExecutor([200])
        started = time.perf_counter()
        outcomes = await sustained_load(executor, LIST_SPEC, total=5, delay_ms=20)
        elapsed = time.perf_counter() - started

        assert len(outcomes) == 5
        # four gaps, none after the last request
        assert elapsed >= 0.075

    @pytest.mark.asyncio
    async def test_recover_after_burst(self, make_harness, fake_api, settings):
        async with make_harness() as harness:
            final = await recover_after_burst(
                harness.executor,
                LIST_SPEC,
                count=settings.burst_requests,
                cooldown_ms=settings.rate_limit_cooldown_ms,
            )

        assert final.status_code == 200
        assert len(fake_api.calls) == settings.burst_requests + 1
