"""Load and resilience probes.

These helpers drive a `RequestExecutor` the way the performance suite does
(bursts, sustained sequential load, recovery after a burst) and summarize the
outcomes. They never assert: callers decide what the numbers must satisfy.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from core.domain.models import RequestSpec, ResponseOutcome
from core.interfaces.executor import RequestExecutor

logger = logging.getLogger(__name__)


@dataclass
class BurstResult:
    """Outcome of firing `count` copies of a request at once."""

    outcomes: list[ResponseOutcome]
    total_ms: float
    distribution: dict[int, int] = field(default_factory=dict)

    @property
    def average_ms(self) -> float:
        """Wall time divided by request count (the suite's "average" metric)."""

        return batch_average_ms(self.total_ms, len(self.outcomes))


def status_distribution(outcomes: Iterable[ResponseOutcome]) -> dict[int, int]:
    return dict(Counter(o.status_code for o in outcomes))


def average_latency_ms(outcomes: Sequence[ResponseOutcome]) -> float:
    if not outcomes:
        return 0.0
    return sum(o.elapsed_ms for o in outcomes) / len(outcomes)


def batch_average_ms(total_ms: float, count: int) -> float:
    if count <= 0:
        return 0.0
    return total_ms / count


async def _gather(executor: RequestExecutor, specs: Sequence[RequestSpec]) -> list[ResponseOutcome]:
    concurrent = getattr(executor, "execute_concurrent", None)
    if concurrent is not None:
        return await concurrent(specs)
    return list(await asyncio.gather(*(executor.execute(s) for s in specs)))


async def burst(executor: RequestExecutor, spec: RequestSpec, count: int) -> BurstResult:
    """Fire `count` identical requests without waiting between them."""

    started = time.perf_counter()
    outcomes = await _gather(executor, [spec] * count)
    total_ms = (time.perf_counter() - started) * 1000.0

    result = BurstResult(
        outcomes=outcomes,
        total_ms=total_ms,
        distribution=status_distribution(outcomes),
    )
    logger.info(
        "Burst of %d x %s: %s in %.0fms (avg %.0fms)",
        count,
        spec.label,
        result.distribution,
        total_ms,
        result.average_ms,
    )
    return result


async def sustained_load(
    executor: RequestExecutor,
    spec: RequestSpec,
    total: int,
    delay_ms: float,
) -> list[ResponseOutcome]:
    """Issue `total` requests one after another, `delay_ms` apart."""

    outcomes: list[ResponseOutcome] = []
    for i in range(total):
        outcomes.append(await executor.execute(spec))
        if i < total - 1:
            await asyncio.sleep(delay_ms / 1000.0)

    logger.info(
        "Sustained load %d x %s: avg %.0fms",
        total,
        spec.label,
        average_latency_ms(outcomes),
    )
    return outcomes


async def recover_after_burst(
    executor: RequestExecutor,
    spec: RequestSpec,
    count: int,
    cooldown_ms: float,
) -> ResponseOutcome:
    """Saturate with a burst, wait `cooldown_ms`, then send one more request."""

    await burst(executor, spec, count)
    await asyncio.sleep(cooldown_ms / 1000.0)
    return await executor.execute(spec)
