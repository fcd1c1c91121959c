"""Restful-Booker endpoints as typed request builders.

Builders return `RequestSpec`s (so tests can batch them through
`execute_concurrent`), and `BookingApi` wraps builder + executor for the
common single-call case. Expected status sets come from `HarnessSettings`.
"""

from __future__ import annotations

from typing import Any

from adapters.executor import HttpExecutor
from core.config import HarnessSettings
from core.domain.models import AuthScheme, Booking, RequestSpec, ResponseOutcome

_JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}

BookingPayload = Booking | dict[str, Any]


def _payload(booking: BookingPayload) -> dict[str, Any]:
    if isinstance(booking, Booking):
        return booking.to_payload()
    return dict(booking)


class BookingRequests:
    """Builds `RequestSpec`s for each booking endpoint."""

    def __init__(self, settings: HarnessSettings) -> None:
        self._settings = settings

    def ping(self) -> RequestSpec:
        return RequestSpec(
            method="GET",
            path="/ping",
            expected_statuses=frozenset(self._settings.ping_success_statuses),
            name="ping",
        )

    def list_bookings(self, **filters: Any) -> RequestSpec:
        params = {k: v for k, v in filters.items() if v is not None}
        return RequestSpec(
            method="GET",
            path="/booking",
            headers={"Accept": "application/json"},
            params=params,
            expected_statuses=frozenset({200}),
            name="list bookings",
        )

    def get_booking(self, booking_id: int | str) -> RequestSpec:
        return RequestSpec(
            method="GET",
            path=f"/booking/{booking_id}",
            headers={"Accept": "application/json"},
            expected_statuses=frozenset({200}),
        )

    def create_booking(self, booking: BookingPayload) -> RequestSpec:
        return RequestSpec(
            method="POST",
            path="/booking",
            headers=dict(_JSON_HEADERS),
            json_body=_payload(booking),
            expected_statuses=frozenset({200}),
            name="create booking",
        )

    def update_booking(
        self,
        booking_id: int | str,
        booking: BookingPayload,
        *,
        scheme: AuthScheme = AuthScheme.TOKEN,
    ) -> RequestSpec:
        return RequestSpec(
            method="PUT",
            path=f"/booking/{booking_id}",
            headers=dict(_JSON_HEADERS),
            json_body=_payload(booking),
            expected_statuses=frozenset({200}),
            auth=scheme,
        )

    def patch_booking(
        self,
        booking_id: int | str,
        fields: dict[str, Any],
        *,
        scheme: AuthScheme = AuthScheme.TOKEN,
    ) -> RequestSpec:
        return RequestSpec(
            method="PATCH",
            path=f"/booking/{booking_id}",
            headers=dict(_JSON_HEADERS),
            json_body=dict(fields),
            expected_statuses=frozenset({200}),
            auth=scheme,
        )

    def delete_booking(
        self,
        booking_id: int | str,
        *,
        scheme: AuthScheme = AuthScheme.TOKEN,
    ) -> RequestSpec:
        return RequestSpec(
            method="DELETE",
            path=f"/booking/{booking_id}",
            headers={"Content-Type": "application/json"},
            expected_statuses=frozenset(self._settings.delete_success_statuses),
            auth=scheme,
        )


class BookingApi:
    """Single-call helpers over `BookingRequests` + `HttpExecutor`."""

    def __init__(self, executor: HttpExecutor, settings: HarnessSettings) -> None:
        self._executor = executor
        self.requests = BookingRequests(settings)

    async def ping(self) -> ResponseOutcome:
        return await self._executor.execute(self.requests.ping())

    async def list_bookings(self, **filters: Any) -> ResponseOutcome:
        return await self._executor.execute(self.requests.list_bookings(**filters))

    async def get_booking(self, booking_id: int | str) -> ResponseOutcome:
        return await self._executor.execute(self.requests.get_booking(booking_id))

    async def create_booking(self, booking: BookingPayload) -> ResponseOutcome:
        return await self._executor.execute(self.requests.create_booking(booking))

    async def update_booking(
        self,
        booking_id: int | str,
        booking: BookingPayload,
        *,
        scheme: AuthScheme = AuthScheme.TOKEN,
    ) -> ResponseOutcome:
        spec = self.requests.update_booking(booking_id, booking, scheme=scheme)
        return await self._executor.execute(spec)

    async def patch_booking(
        self,
        booking_id: int | str,
        fields: dict[str, Any],
        *,
        scheme: AuthScheme = AuthScheme.TOKEN,
    ) -> ResponseOutcome:
        spec = self.requests.patch_booking(booking_id, fields, scheme=scheme)
        return await self._executor.execute(spec)

    async def delete_booking(
        self,
        booking_id: int | str,
        *,
        scheme: AuthScheme = AuthScheme.TOKEN,
    ) -> ResponseOutcome:
        spec = self.requests.delete_booking(booking_id, scheme=scheme)
        return await self._executor.execute(spec)
