"""Async HTTP client for Ubiquiti EdgeMAX devices.

The device authenticates with a form login that sets a ``PHPSESSID``
cookie.  That cookie keeps the HTTP API usable and is also the session id
the stats websocket expects in its subscription requests.
"""

from __future__ import annotations

import logging
import ssl
import time
from typing import TYPE_CHECKING, Any

import httpx

from edgemax.api.errors import ApiError, AuthError, ConfigError
from edgemax.models.session import HeartbeatStatus

if TYPE_CHECKING:
    from types import TracebackType

    from edgemax.models.stats import StatType
    from edgemax.telemetry.session import StatsSession

logger = logging.getLogger(__name__)

USER_AGENT = "edgemax-python"
SESSION_COOKIE = "PHPSESSID"
HEARTBEAT_PATH = "/api/edge/heartbeat.json"

_DEFAULT_TIMEOUT = 10.0


class EdgeMaxClient:
    """Client for a single EdgeMAX device.

    :meth:`login` must succeed before any other call is made.  For a
    self-hosted device without a valid TLS certificate, pass
    ``verify=False`` or use :func:`insecure_client`.
    """

    def __init__(
        self,
        addr: str,
        *,
        timeout: float = _DEFAULT_TIMEOUT,
        verify: bool | str | ssl.SSLContext = True,
        user_agent: str = USER_AGENT,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        # Trailing slash trimmed so endpoint paths join cleanly.
        base_url = addr.rstrip("/")
        url = httpx.URL(base_url)
        if not url.scheme or not url.host:
            raise ConfigError(f"Invalid device address: {addr!r}")

        self._base_url = base_url
        self._verify = verify
        self.user_agent = user_agent
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=timeout,
            verify=verify,
            follow_redirects=True,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def verify(self) -> bool | str | ssl.SSLContext:
        """TLS verification setting, shared with the stats websocket."""
        return self._verify

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    # -- requests -------------------------------------------------------------

    async def _request(self, method: str, endpoint: str, **kwargs: Any) -> httpx.Response:
        """Send a request to *endpoint*, relative to the device address."""
        url = httpx.URL(self._base_url).join(endpoint)
        headers = {
            # Needed to authenticate against many of the device's endpoints.
            "Referer": self._base_url,
            "User-Agent": self.user_agent,
        }
        try:
            resp = await self._client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            raise ApiError(f"{method} {url} failed: {exc}") from exc

        if resp.status_code in (401, 403):
            raise AuthError(
                f"{method} {url} was rejected (HTTP {resp.status_code})",
                status_code=resp.status_code,
            )
        if resp.status_code >= 400:
            raise ApiError(
                f"{method} {url} failed (HTTP {resp.status_code})",
                status_code=resp.status_code,
            )
        return resp

    async def get(self, endpoint: str, **kwargs: Any) -> dict[str, Any]:
        """GET *endpoint* and return the decoded JSON body."""
        resp = await self._request("GET", endpoint, **kwargs)
        try:
            result: dict[str, Any] = resp.json()
        except ValueError as exc:
            raise ApiError(f"GET {endpoint} returned invalid JSON: {exc}") from exc
        return result

    # -- operations -----------------------------------------------------------

    async def login(self, username: str, password: str) -> None:
        """Authenticate with *username* and *password*.

        Must succeed before any other operation is performed.
        """
        try:
            await self._request(
                "POST", self._base_url, data={"username": username, "password": password}
            )
        except AuthError:
            raise
        except ApiError as exc:
            raise AuthError(f"Login failed: {exc}", status_code=exc.status_code) from exc
        logger.debug("Logged in to %s as %s", self._base_url, username)

    def session_id(self) -> str:
        """Return the session cookie value, or ``""`` before login."""
        return self._client.cookies.get(SESSION_COOKIE) or ""

    async def heartbeat(self) -> HeartbeatStatus:
        """Ping the device to keep the current session alive."""
        data = await self.get(HEARTBEAT_PATH, params={"_": str(time.time_ns())})
        return HeartbeatStatus.model_validate(data)

    async def stats(
        self,
        *stat_types: StatType | str,
        keepalive_interval: float | None = None,
    ) -> StatsSession:
        """Open the stats websocket and start streaming *stat_types*.

        All categories are streamed when none are given.  The returned
        session must be closed with :meth:`StatsSession.close`.
        """
        from edgemax.telemetry.session import KEEPALIVE_INTERVAL, StatsSession

        session = StatsSession(
            self,
            stat_types or None,
            keepalive_interval=keepalive_interval or KEEPALIVE_INTERVAL,
        )
        await session.start()
        return session

    # -- lifecycle ------------------------------------------------------------

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> EdgeMaxClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


def insecure_client(addr: str, timeout: float = _DEFAULT_TIMEOUT) -> EdgeMaxClient:
    """Build a client that does not verify the device's certificate chain or hostname.

    Only use this with self-hosted, internal devices.
    """
    return EdgeMaxClient(addr, timeout=timeout, verify=False)
