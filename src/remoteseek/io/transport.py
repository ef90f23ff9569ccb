"""Concrete HTTP clients for RemoteRangeReader."""

from typing import Optional

import httpx
import requests

from .base import DEFAULT_TIMEOUT, HTTPClient, Request


# Module-level session for connection pooling
_session = None


def _get_session():
    """Get or create the global requests session."""
    global _session
    if _session is None:
        _session = requests.Session()
    return _session


class RequestsClient:
    """HTTPClient backed by requests; the default transport."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = DEFAULT_TIMEOUT):
        self.session = session or _get_session()
        self.timeout = timeout

    def do(self, request: Request) -> requests.Response:
        # stream=True defers the body so the caller decides when to read/close it
        return self.session.request(
            request.method,
            request.url,
            headers=request.headers,
            stream=True,
            timeout=self.timeout,
        )

    def close(self):
        # The global session is shared, don't close it here
        pass


class HTTPXClient:
    """HTTPClient backed by a synchronous httpx.Client."""

    def __init__(self, client: Optional[httpx.Client] = None, timeout: float = DEFAULT_TIMEOUT):
        self._external_client = client is not None
        self.client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def do(self, request: Request) -> httpx.Response:
        return self.client.request(request.method, request.url, headers=request.headers)

    def close(self):
        if not self._external_client:
            self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def make_client(name: str, timeout: float = DEFAULT_TIMEOUT) -> HTTPClient:
    """Build a client by transport name ("requests" or "httpx")."""
    if name == "requests":
        return RequestsClient(timeout=timeout)
    if name == "httpx":
        return HTTPXClient(timeout=timeout)
    raise ValueError(f"Unknown transport: {name}")
