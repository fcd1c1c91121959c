"""HTTP request executor.

Runs `RequestSpec`s through an `httpx.AsyncClient` and records
`ResponseOutcome`s. All four execution modes share one event loop: the
"concurrent" mode means several in-flight requests, not threads.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Sequence

import httpx

from adapters.http_client import decode_body
from adapters.session import Session
from core.domain.models import AuthScheme, RequestSpec, ResponseOutcome, RetryPolicy
from core.errors import NetworkFailure, TimeoutFailure

logger = logging.getLogger(__name__)


class HttpExecutor:
    """Implements `core.interfaces.executor.RequestExecutor` over httpx."""

    def __init__(self, client: httpx.AsyncClient, session: Session) -> None:
        self._client = client
        self._session = session

    @property
    def session(self) -> Session:
        return self._session

    def _headers_for(self, spec: RequestSpec) -> httpx.Headers:
        headers = httpx.Headers(spec.headers)
        if spec.auth is not AuthScheme.NONE:
            # Headers explícitos del spec ganan (p.ej. un token caducado a propósito),
            # sin importar mayúsculas: `cookie` bloquea el `Cookie` de la sesión.
            for key, value in self._session.auth_headers(spec.auth).items():
                if key not in headers:
                    headers[key] = value
        return headers

    async def execute(self, spec: RequestSpec) -> ResponseOutcome:
        """Send one request and time it from send to fully-read response.

        Raises:
            NotAuthenticated: the request needs a credential the session lacks.
            NetworkFailure: transport-level error. Any HTTP status is a valid outcome.
        """

        headers = self._headers_for(spec)
        kwargs: dict[str, object] = {"headers": headers}
        if spec.params:
            kwargs["params"] = spec.params
        if spec.json_body is not None:
            kwargs["json"] = spec.json_body
        elif spec.content is not None:
            kwargs["content"] = spec.content

        started = time.perf_counter()
        try:
            response = await self._client.request(spec.method, spec.path, **kwargs)
        except httpx.TransportError as exc:
            logger.debug("%s failed at transport level: %s", spec.label, exc)
            raise NetworkFailure(spec, exc) from exc
        elapsed_ms = (time.perf_counter() - started) * 1000.0

        logger.debug("%s -> %s in %.0fms", spec.label, response.status_code, elapsed_ms)
        return ResponseOutcome(
            request=spec,
            status_code=response.status_code,
            body=decode_body(response),
            headers=dict(response.headers),
            elapsed_ms=elapsed_ms,
        )

    async def execute_with_retry(self, spec: RequestSpec, policy: RetryPolicy) -> ResponseOutcome:
        """Re-attempt on `NetworkFailure` only, sleeping `policy.delay_ms` between tries.

        The returned outcome's `attempts` says how many tries it took. After the
        last attempt the final `NetworkFailure` propagates with the total count.
        """

        last: NetworkFailure | None = None
        for attempt in range(1, policy.max_attempts + 1):
            try:
                outcome = await self.execute(spec)
            except NetworkFailure as exc:
                last = exc
                if attempt >= policy.max_attempts:
                    break
                logger.warning(
                    "Network error, retrying (%d/%d) in %.0fms: %s - %s",
                    attempt,
                    policy.max_attempts,
                    policy.delay_ms,
                    spec.label,
                    exc.cause,
                )
                await asyncio.sleep(policy.delay_seconds)
                continue

            if attempt > 1:
                logger.info("%s succeeded on attempt %d", spec.label, attempt)
                outcome = outcome.model_copy(update={"attempts": attempt})
            return outcome

        assert last is not None
        logger.error("%s failed after %d attempts", spec.label, policy.max_attempts)
        raise NetworkFailure(spec, last.cause, attempts=policy.max_attempts) from last.cause

    async def execute_concurrent(
        self,
        specs: Sequence[RequestSpec],
        *,
        max_concurrency: int | None = None,
    ) -> list[ResponseOutcome]:
        """Issue every request before awaiting any; results follow input order.

        The whole batch is allowed to finish. If some requests failed at
        transport level, the first failure in input order is raised afterwards.
        """

        sem = asyncio.Semaphore(max(1, max_concurrency)) if max_concurrency else None

        async def run_one(spec: RequestSpec) -> ResponseOutcome:
            if sem is None:
                return await self.execute(spec)
            async with sem:
                return await self.execute(spec)

        results = await asyncio.gather(*(run_one(s) for s in specs), return_exceptions=True)

        outcomes: list[ResponseOutcome] = []
        for result in results:
            if isinstance(result, BaseException):
                raise result
            outcomes.append(result)
        return outcomes

    async def execute_with_timeout(self, spec: RequestSpec, limit_ms: float) -> ResponseOutcome:
        """Race the request against a timer; first to finish wins.

        When the timer wins, local waiting stops and `TimeoutFailure` is raised.
        The request is abandoned on our side only: the server may still have
        applied it, so callers must treat a timeout as an unknown outcome.
        """

        started = time.perf_counter()
        request_task = asyncio.ensure_future(self.execute(spec))
        timer_task = asyncio.ensure_future(asyncio.sleep(limit_ms / 1000.0))

        try:
            done, _ = await asyncio.wait(
                {request_task, timer_task},
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            timer_task.cancel()
            if not request_task.done():
                request_task.cancel()

        if request_task in done:
            return request_task.result()

        elapsed_ms = (time.perf_counter() - started) * 1000.0
        logger.warning("%s abandoned after %.0fms (limit %.0fms)", spec.label, elapsed_ms, limit_ms)
        raise TimeoutFailure(spec, limit_ms=limit_ms, elapsed_ms=elapsed_ms)
