"""Shared fixtures: an in-memory Restful-Booker served through httpx.MockTransport."""

import asyncio
import base64
import json

import httpx
import pytest

from adapters.harness import ContractHarness
from core.config import HarnessSettings

VALID_USERNAME = "admin"
VALID_PASSWORD = "password123"
VALID_TOKEN = "abc123def456"

_REQUIRED_FIELDS = ("firstname", "lastname", "totalprice", "depositpaid", "bookingdates")


def _text(status: int, text: str) -> httpx.Response:
    return httpx.Response(status, text=text)


class FakeBookerApi:
    """Behaves like restful-booker.herokuapp.com for the endpoints we exercise.

    Knobs for resilience tests:
    - `transport_failures`: next N requests raise httpx.ConnectError.
    - `fail_paths`: requests to these paths always raise httpx.ConnectError.
    - `hang`: every request sleeps (practically) forever.
    - `/echo?tag=..&delay=..` sleeps `delay` seconds and returns the tag.
    """

    def __init__(self) -> None:
        self.bookings: dict[int, dict] = {}
        self.next_id = 1
        self.calls: list[httpx.Request] = []
        self.completed: list[str] = []
        self.transport_failures = 0
        self.fail_paths: set[str] = set()
        self.hang = False

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    # -- auth helpers -------------------------------------------------------

    def _authorized(self, request: httpx.Request) -> bool:
        cookie = request.headers.get("cookie", "")
        for part in cookie.split(";"):
            key, _, value = part.strip().partition("=")
            if key == "token" and value == VALID_TOKEN:
                return True
        auth = request.headers.get("authorization", "")
        if auth.startswith("Basic "):
            try:
                decoded = base64.b64decode(auth[6:]).decode("utf-8")
            except ValueError:
                return False
            return decoded == f"{VALID_USERNAME}:{VALID_PASSWORD}"
        return False

    # -- routing ------------------------------------------------------------

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        path = request.url.path

        if self.transport_failures > 0:
            self.transport_failures -= 1
            raise httpx.ConnectError("connection refused", request=request)
        if path in self.fail_paths:
            raise httpx.ConnectError("connection reset", request=request)
        if self.hang:
            await asyncio.sleep(3600)

        params = dict(request.url.params)
        body = None
        if request.content:
            try:
                body = json.loads(request.content)
            except ValueError:
                return _text(400, "Bad Request")

        if path == "/echo":
            await asyncio.sleep(float(params.get("delay", "0")))
            self.completed.append(params.get("tag", ""))
            return httpx.Response(200, json={"tag": params.get("tag")})
        if path == "/ping":
            return _text(201, "Created")
        if path == "/auth" and request.method == "POST":
            return self._auth(body)
        if path == "/booking":
            if request.method == "GET":
                return self._list(params)
            if request.method == "POST":
                return self._create(body)
        if path.startswith("/booking/"):
            try:
                booking_id = int(path.rsplit("/", 1)[1])
            except ValueError:
                return _text(404, "Not Found")
            return self._item(request, booking_id, body)
        return _text(404, "Not Found")

    def _auth(self, body) -> httpx.Response:
        if not isinstance(body, dict):
            return _text(400, "Bad Request")
        if body.get("username") == VALID_USERNAME and body.get("password") == VALID_PASSWORD:
            return httpx.Response(200, json={"token": VALID_TOKEN})
        return httpx.Response(200, json={"reason": "Bad credentials"})

    def _list(self, params: dict) -> httpx.Response:
        out = []
        for booking_id, booking in self.bookings.items():
            if "firstname" in params and booking.get("firstname") != params["firstname"]:
                continue
            if "lastname" in params and booking.get("lastname") != params["lastname"]:
                continue
            out.append({"bookingid": booking_id})
        return httpx.Response(200, json=out)

    def _valid_booking(self, body) -> bool:
        if not isinstance(body, dict) or any(f not in body for f in _REQUIRED_FIELDS):
            return False
        dates = body["bookingdates"]
        if not isinstance(dates, dict):
            return False
        return all(
            isinstance(dates.get(k), str) and len(dates[k].split("-")) == 3
            for k in ("checkin", "checkout")
        )

    def _create(self, body) -> httpx.Response:
        if not self._valid_booking(body):
            return _text(500, "Internal Server Error")
        booking_id = self.next_id
        self.next_id += 1
        self.bookings[booking_id] = dict(body)
        return httpx.Response(200, json={"bookingid": booking_id, "booking": body})

    def _item(self, request: httpx.Request, booking_id: int, body) -> httpx.Response:
        if request.method == "GET":
            if booking_id not in self.bookings:
                return _text(404, "Not Found")
            return httpx.Response(200, json=self.bookings[booking_id])

        if not self._authorized(request):
            return _text(403, "Forbidden")
        if booking_id not in self.bookings:
            return _text(405, "Method Not Allowed")

        if request.method == "PUT":
            if not self._valid_booking(body):
                return _text(400, "Bad Request")
            self.bookings[booking_id] = dict(body)
            return httpx.Response(200, json=self.bookings[booking_id])
        if request.method == "PATCH":
            self.bookings[booking_id].update(body or {})
            return httpx.Response(200, json=self.bookings[booking_id])
        if request.method == "DELETE":
            del self.bookings[booking_id]
            return _text(201, "Created")
        return _text(405, "Method Not Allowed")


@pytest.fixture
def settings():
    """Settings isolated from the developer's .env and BOOKER_* variables."""
    return HarnessSettings(
        _env_file=None,
        base_url="https://booker.test",
        username=VALID_USERNAME,
        password=VALID_PASSWORD,
        http_timeout_seconds=5.0,
        retry_max_attempts=3,
        retry_delay_ms=50.0,
        request_timeout_ms=500.0,
        sustained_delay_ms=10.0,
        rate_limit_cooldown_ms=10.0,
        live=False,
    )


@pytest.fixture
def fake_api():
    return FakeBookerApi()


@pytest.fixture
def make_harness(settings, fake_api):
    """Factory so each test owns its harness (and closes it with `async with`)."""

    def _make(**kwargs) -> ContractHarness:
        return ContractHarness(kwargs.pop("settings", settings), transport=fake_api.transport(), **kwargs)

    return _make


@pytest.fixture
def valid_booking():
    return {
        "firstname": "John",
        "lastname": "Doe",
        "totalprice": 150,
        "depositpaid": True,
        "bookingdates": {"checkin": "2024-01-01", "checkout": "2024-01-02"},
        "additionalneeds": "Breakfast",
    }
