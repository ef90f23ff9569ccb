"""Base protocols and shared types for I/O layer."""

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol, runtime_checkable


MIN_FETCH_SIZE = 1024 * 1024  # 1 MB, smallest window fetched on a cache miss
DEFAULT_TIMEOUT = 30.0  # seconds, per HTTP exchange


class EndOfData(EOFError):
    """Raised when no bytes can be served at the requested offset."""


class SeekFromEndUnsupported(NotImplementedError):
    """Raised for whence=SEEK_END; call size() and seek absolutely instead."""


class ContentLengthError(IOError):
    """Raised when a HEAD response carries no usable Content-Length."""


class InvalidURLError(ValueError):
    """Raised when the target is not an absolute http(s) URL."""


@dataclass(slots=True)
class Request:
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)


@runtime_checkable
class HTTPResponse(Protocol):
    """What the reader needs from a response; requests and httpx both fit."""

    status_code: int
    headers: Mapping[str, str]

    @property
    def content(self) -> bytes:
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class HTTPClient(Protocol):
    """Protocol for the pluggable HTTP exchange."""

    def do(self, request: Request) -> HTTPResponse:
        """Send `request` and return the response; transport errors propagate."""
        ...


@runtime_checkable
class Logger(Protocol):
    """Two-level, printf-style diagnostic sink. logging.Logger satisfies it."""

    def info(self, msg: str, *args: Any) -> None:
        ...

    def debug(self, msg: str, *args: Any) -> None:
        ...
