"""Contract test harness.

One harness = one httpx client + one `Session` + one `HttpExecutor`. Use it as
an async context manager so the client is always closed:

    async with ContractHarness(settings) as harness:
        await harness.authenticate()
        outcome = await harness.booking.delete_booking(42)
"""

from __future__ import annotations

from typing import Sequence

import httpx

from adapters.booking_api import BookingApi
from adapters.executor import HttpExecutor
from adapters.http_client import build_async_client
from adapters.session import Session
from core.config import HarnessSettings
from core.domain.models import Credentials, RequestSpec, ResponseOutcome, RetryPolicy


class ContractHarness:
    def __init__(
        self,
        settings: HarnessSettings | None = None,
        *,
        credentials: Credentials | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or HarnessSettings()
        if credentials is None:
            credentials = Credentials(
                username=self.settings.username,
                password=self.settings.password,
            )
        self.session = Session(
            base_url=self.settings.base_url,
            timeout_seconds=self.settings.http_timeout_seconds,
            credentials=credentials,
            auth_path=self.settings.auth_path,
            auth_success_statuses=self.settings.auth_success_statuses,
        )
        self._client = build_async_client(
            self.settings,
            base_url=self.session.base_url,
            timeout_seconds=self.session.timeout_seconds,
            transport=transport,
        )
        self.executor = HttpExecutor(self._client, self.session)
        self.booking = BookingApi(self.executor, self.settings)

    async def __aenter__(self) -> ContractHarness:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def default_retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.settings.retry_max_attempts,
            delay_ms=self.settings.retry_delay_ms,
        )

    async def authenticate(self, username: str | None = None, password: str | None = None) -> str:
        return await self.session.authenticate(self.executor, username, password)

    async def execute(self, spec: RequestSpec) -> ResponseOutcome:
        return await self.executor.execute(spec)

    async def execute_with_retry(
        self,
        spec: RequestSpec,
        policy: RetryPolicy | None = None,
    ) -> ResponseOutcome:
        return await self.executor.execute_with_retry(spec, policy or self.default_retry_policy())

    async def execute_concurrent(
        self,
        specs: Sequence[RequestSpec],
        *,
        max_concurrency: int | None = None,
    ) -> list[ResponseOutcome]:
        return await self.executor.execute_concurrent(specs, max_concurrency=max_concurrency)

    async def execute_with_timeout(
        self,
        spec: RequestSpec,
        limit_ms: float | None = None,
    ) -> ResponseOutcome:
        limit = self.settings.request_timeout_ms if limit_ms is None else limit_ms
        return await self.executor.execute_with_timeout(spec, limit)
