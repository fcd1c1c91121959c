"""Latency, concurrency and resilience checks against the real API."""

from __future__ import annotations

import logging

import pytest

from core.domain.models import RequestSpec, RetryPolicy
from core.errors import TimeoutFailure
from core.services.assertions import (
    assert_all_succeed,
    assert_body_has_field,
    assert_body_is_list,
    assert_status_in,
    assert_within_latency,
)
from core.services.probes import (
    average_latency_ms,
    batch_average_ms,
    burst,
    recover_after_burst,
    sustained_load,
)

pytestmark = pytest.mark.live

logger = logging.getLogger(__name__)

LIST_SPEC = RequestSpec(method="GET", path="/booking", headers={"Accept": "application/json"})


@pytest.mark.asyncio
async def test_health_endpoints_respond_quickly(live_harness, live_settings):
    async with live_harness() as harness:
        ping = await harness.booking.ping()
        listing = await harness.booking.list_bookings()

    assert_status_in(ping, live_settings.ping_success_statuses)
    assert_within_latency(ping, live_settings.latency_threshold_ms)
    assert_body_is_list(listing)
    assert_within_latency(listing, live_settings.latency_threshold_ms)


@pytest.mark.asyncio
async def test_crud_latency(live_harness, live_settings, new_booking):
    async with live_harness() as harness:
        await harness.authenticate()
        created = await harness.booking.create_booking(new_booking)
        booking_id = created.body["bookingid"]
        outcomes = [
            created,
            await harness.booking.get_booking(booking_id),
            await harness.booking.update_booking(booking_id, {**new_booking, "firstname": "Updated"}),
            await harness.booking.delete_booking(booking_id),
        ]

    for outcome in outcomes:
        assert_within_latency(outcome, live_settings.slow_latency_threshold_ms)


@pytest.mark.asyncio
async def test_concurrent_reads_and_writes(live_harness, live_settings, new_booking):
    count = live_settings.concurrent_requests
    async with live_harness() as harness:
        reads = await burst(harness.executor, LIST_SPEC, count)
        create = harness.booking.requests.create_booking(new_booking)
        writes = await burst(harness.executor, create, count)

    assert_all_succeed(reads.outcomes, {200})
    assert_all_succeed(writes.outcomes, {200})
    for outcome in writes.outcomes:
        assert_body_has_field(outcome, "bookingid")
    assert reads.average_ms < live_settings.latency_threshold_ms
    assert batch_average_ms(writes.total_ms, count) < live_settings.latency_threshold_ms


@pytest.mark.asyncio
async def test_burst_then_recovery(live_harness, live_settings):
    async with live_harness() as harness:
        result = await burst(harness.executor, LIST_SPEC, live_settings.burst_requests)
        recovered = await recover_after_burst(
            harness.executor,
            LIST_SPEC,
            count=live_settings.burst_requests,
            cooldown_ms=live_settings.rate_limit_cooldown_ms,
        )

    logger.info("Burst distribution: %s", result.distribution)
    assert result.distribution.get(200, 0) > 0
    assert_status_in(recovered, {200})


@pytest.mark.asyncio
async def test_retry_and_timeout(live_harness, live_settings):
    async with live_harness() as harness:
        retried = await harness.execute_with_retry(LIST_SPEC, RetryPolicy(max_attempts=3, delay_ms=1000))
        assert_status_in(retried, {200})

        try:
            raced = await harness.execute_with_timeout(LIST_SPEC)
        except TimeoutFailure as exc:
            assert exc.elapsed_ms < live_settings.request_timeout_ms + 1000
        else:
            assert_status_in(raced, {200})


@pytest.mark.asyncio
async def test_sustained_load(live_harness, live_settings):
    async with live_harness() as harness:
        outcomes = await sustained_load(
            harness.executor,
            LIST_SPEC,
            total=live_settings.sustained_requests,
            delay_ms=live_settings.sustained_delay_ms,
        )

    logger.info("Average latency under sustained load: %.0fms", average_latency_ms(outcomes))
    assert_all_succeed(outcomes, {200, 418})
    for outcome in outcomes:
        assert_within_latency(outcome, live_settings.slow_latency_threshold_ms)
