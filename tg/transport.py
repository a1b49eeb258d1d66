"""Pluggable HTTP transport for :class:`tg.client.Client`.

The client needs exactly one capability: send a prepared request and return
the response.  Anything with a matching ``send`` method satisfies
:class:`HTTPClient`, including a bare :class:`requests.Session`.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

import requests
from requests.adapters import HTTPAdapter

DEFAULT_TIMEOUT: float = 10
DEFAULT_POOL_SIZE: int = 10


@runtime_checkable
class HTTPClient(Protocol):
    """Performs a single prepared HTTP exchange.

    ``timeout`` is the per-call bound in seconds; ``None`` means the
    implementation's own default.
    """

    def send(self, request: requests.PreparedRequest, timeout: Optional[float] = None) -> requests.Response:
        ...


class SessionTransport:
    """Default transport: a pooled :class:`requests.Session` with a default timeout."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        pool_maxsize: int = DEFAULT_POOL_SIZE,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Create the transport.

        Args:
            timeout: Seconds allowed for connect and for each read.
            pool_maxsize: Idle connections kept per host.
            session: Existing session to mount the pool on; a new one by default.
        """
        self._timeout = timeout
        self._session = session or requests.Session()
        adapter = HTTPAdapter(pool_connections=pool_maxsize, pool_maxsize=pool_maxsize)
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)

    @property
    def timeout(self) -> float:
        return self._timeout

    def send(self, request: requests.PreparedRequest, timeout: Optional[float] = None) -> requests.Response:
        """Send *request*; *timeout* overrides the transport default for this call."""
        return self._session.send(request, timeout=self._timeout if timeout is None else timeout)

    def close(self) -> None:
        """Release pooled connections."""
        self._session.close()


_default_transport: Optional[SessionTransport] = None


def default_transport() -> SessionTransport:
    """Return (and lazily create) the shared module-level transport."""
    global _default_transport
    if _default_transport is None:
        _default_transport = SessionTransport()
    return _default_transport
