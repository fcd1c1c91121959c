"""Session / auth manager.

A `Session` is owned by exactly one harness. Its token starts empty and is
only ever set by a successful `authenticate` call; `reset` clears it. Nothing
else writes it, so two harnesses never race on a shared token.
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Iterable

from core.domain.models import AuthScheme, Credentials, RequestSpec
from core.errors import AuthFailure, NotAuthenticated
from core.interfaces.executor import RequestExecutor

logger = logging.getLogger(__name__)


class Session:
    """Base URL, default timeout, explicit credentials and the current token."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: float,
        credentials: Credentials | None = None,
        auth_path: str = "/auth",
        auth_success_statuses: Iterable[int] = (200,),
    ) -> None:
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds
        self.credentials = credentials
        self.auth_path = auth_path
        self.auth_success_statuses = frozenset(auth_success_statuses)
        self._token: str | None = None

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def reset(self) -> None:
        self._token = None

    async def authenticate(
        self,
        executor: RequestExecutor,
        username: str | None = None,
        password: str | None = None,
    ) -> str:
        """POST the credentials to the auth endpoint and keep the returned token.

        Falls back to the session's explicit credentials when `username` or
        `password` is omitted. Any previous token is dropped before the call,
        so a rejected attempt leaves the session unauthenticated.

        Raises:
            AuthFailure: status outside the success set, or no usable token.
            NetworkFailure: transport error while talking to the auth endpoint.
        """

        if self.credentials is not None:
            username = self.credentials.username if username is None else username
            password = self.credentials.password if password is None else password

        self._token = None
        spec = RequestSpec(
            method="POST",
            path=self.auth_path,
            headers={"Content-Type": "application/json"},
            json_body={"username": username, "password": password},
            expected_statuses=self.auth_success_statuses,
            name="authenticate",
        )
        outcome = await executor.execute(spec)

        token = _extract_token(outcome.body)
        if outcome.status_code not in self.auth_success_statuses or token is None:
            logger.info("Auth rejected for %r (HTTP %s)", username, outcome.status_code)
            raise AuthFailure(outcome.status_code, outcome.body)

        self._token = token
        logger.debug("Authenticated as %r", username)
        return token

    def auth_headers(self, scheme: AuthScheme | None = None) -> dict[str, str]:
        """Credential header for an authorized request.

        `TOKEN` sends the token cookie, `BASIC` an Authorization header built
        from the explicit credentials. `None`/`ANY` prefers the token and falls
        back to basic credentials. `NONE` yields no header.
        """

        scheme = scheme or AuthScheme.ANY
        if scheme is AuthScheme.NONE:
            return {}

        if scheme in (AuthScheme.TOKEN, AuthScheme.ANY) and self._token:
            return {"Cookie": f"token={self._token}"}

        if scheme in (AuthScheme.BASIC, AuthScheme.ANY) and self.credentials is not None:
            return {"Authorization": basic_auth_value(self.credentials)}

        if scheme is AuthScheme.TOKEN:
            raise NotAuthenticated("token auth requested but the session has no token")
        if scheme is AuthScheme.BASIC:
            raise NotAuthenticated("basic auth requested but no credentials were supplied")
        raise NotAuthenticated()


def basic_auth_value(credentials: Credentials) -> str:
    raw = f"{credentials.username}:{credentials.password}".encode("utf-8")
    return "Basic " + base64.b64encode(raw).decode("ascii")


def _extract_token(body: Any) -> str | None:
    if not isinstance(body, dict):
        return None
    token = body.get("token")
    if isinstance(token, str) and token:
        return token
    return None
