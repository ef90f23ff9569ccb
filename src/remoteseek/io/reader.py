"""Seekable, random-access reader over a remote HTTP(S) resource.

Reads are translated into single ``Range`` GET requests. The most recent
response body is kept as a one-slot cache, so the small forward and
backward probes archive parsers make are mostly served without another
round-trip.
"""

import io
import logging
from typing import Optional
from urllib.parse import urlsplit

from .base import (
    ContentLengthError,
    EndOfData,
    HTTPClient,
    InvalidURLError,
    Logger,
    MIN_FETCH_SIZE,
    Request,
    SeekFromEndUnsupported,
)
from .transport import RequestsClient


LOG = logging.getLogger("remoteseek.reader")

_OK_STATUSES = (200, 206)
_RANGE_NOT_SATISFIABLE = 416

# Compressed bodies would not line up with the requested byte offsets
_BASE_HEADERS = {"Accept-Encoding": "identity"}


def format_range(start: int, length: int) -> str:
    """Return a ``Range`` header value for `length` bytes at `start` (inclusive end)."""
    end = start if length == 0 else start + length - 1
    return f"bytes={start}-{end}"


class RemoteRangeReader(io.RawIOBase):
    """File-like view of a remote resource using HTTP byte-range requests.

    `client` may be replaced any time before the first read; if it is still
    None then, a RequestsClient is created. Not safe for concurrent use.
    """

    def __init__(self, url: str, client: Optional[HTTPClient] = None, logger: Optional[Logger] = None):
        self.url = url
        self.client = client
        self.logger: Logger = logger if logger is not None else LOG
        self.requests_made = 0
        self.bytes_fetched = 0
        self._parsed_url: Optional[str] = None
        self._owns_client = False
        self._offset = 0
        self._cache: Optional[bytes] = None
        self._cache_start = 0

    # io.RawIOBase
    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def tell(self) -> int:
        return self._offset

    def close(self) -> None:
        try:
            if self._owns_client:
                self.client.close()
                self._owns_client = False
        finally:
            super().close()

    # internals
    def _target(self) -> str:
        """Validate the URL once, on first use."""
        if self._parsed_url is None:
            parts = urlsplit(self.url)
            if parts.scheme not in ("http", "https") or not parts.netloc:
                raise InvalidURLError(f"Not an absolute http(s) URL: {self.url!r}")
            self._parsed_url = parts.geturl()
        return self._parsed_url

    def _client(self) -> HTTPClient:
        if self.client is None:
            self.client = RequestsClient()
            self._owns_client = True
        return self.client

    def _do(self, method: str, headers: Optional[dict] = None):
        request = Request(method, self._target(), {**_BASE_HEADERS, **(headers or {})})
        client = self._client()
        self.requests_made += 1
        return client.do(request)

    def _cached(self, off: int, length: int) -> Optional[bytes]:
        if self._cache is None or off <= self._cache_start:
            return None
        cache_end = self._cache_start + len(self._cache)
        if off + length > cache_end:
            return None
        start = off - self._cache_start
        return self._cache[start:start + length]

    # public API
    def read_at(self, buf, off: int) -> int:
        """Fill `buf` with bytes starting at absolute offset `off`.

        Returns the number of bytes copied, which is less than len(buf) only
        when the resource has fewer bytes at `off`; 0 means clean end.
        A 416 answer means the offset is at or past the end and also gives 0.
        Raises EndOfData for a negative offset or any other non-200/206 response.
        Does not move the cursor.
        """
        view = memoryview(buf).cast("B")
        length = len(view)
        self.logger.debug("read_at len %d off %d", length, off)

        if off < 0:
            raise EndOfData(f"Negative offset {off}")

        hit = self._cached(off, length)
        if hit is not None:
            self.logger.debug(
                "cache hit: range (%d-%d) is within cache (%d-%d)",
                off, off + length, self._cache_start, self._cache_start + len(self._cache),
            )
            view[:length] = hit
            return length

        if self._cache is not None:
            self.logger.debug(
                "cache miss: range (%d-%d) is NOT within cache (%d-%d)",
                off, off + length, self._cache_start, self._cache_start + len(self._cache),
            )
        else:
            self.logger.debug("cache miss: cache empty")

        wanted = max(length, MIN_FETCH_SIZE)
        rng = format_range(off, wanted)

        # The old window is dropped before fetching so a failed request never
        # leaves stale bytes behind.
        self._cache = None

        self.logger.info("Start HTTP GET with Range: %s", rng)
        response = self._do("GET", {"Range": rng})
        try:
            self.logger.info("Response status: %d", response.status_code)
            if response.status_code == _RANGE_NOT_SATISFIABLE:
                return 0
            if response.status_code not in _OK_STATUSES:
                raise EndOfData(f"Range request failed with status {response.status_code}")
            body = response.content
        finally:
            response.close()

        self.bytes_fetched += len(body)
        self._cache = body
        self._cache_start = off
        self.logger.debug("loaded %d bytes into cache", len(body))

        n = min(len(body), length)
        view[:n] = body[:n]
        return n

    def readinto(self, buf) -> int:
        self.logger.debug("got read len %d", len(memoryview(buf).cast("B")))
        n = self.read_at(buf, self._offset)
        self._offset += n
        return n

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """Set the cursor for the next read; no bounds checking is done."""
        self.logger.debug("got seek %d %d", offset, whence)
        if whence == io.SEEK_SET:
            self._offset = offset
        elif whence == io.SEEK_CUR:
            self._offset += offset
        elif whence == io.SEEK_END:
            raise SeekFromEndUnsupported("whence relative to end is not supported; use size()")
        else:
            raise ValueError(f"Invalid whence: {whence}")
        return self._offset

    def size(self) -> int:
        """Return the total resource size reported by an HTTP HEAD."""
        response = self._do("HEAD")
        try:
            if response.status_code >= 400:
                raise IOError(f"HEAD request failed with status {response.status_code}")
            header = response.headers.get("content-length")
        finally:
            response.close()

        try:
            length = int(header) if header is not None else -1
        except ValueError:
            length = -1
        if length < 0:
            raise ContentLengthError(f"No content length for {self.url}")

        self.logger.debug("url: %s, size %d", self.url, length)
        return length


def open_remote_reader(url: str, client: Optional[HTTPClient] = None, logger: Optional[Logger] = None) -> RemoteRangeReader:
    """Create a RemoteRangeReader; no network traffic happens until first use."""
    return RemoteRangeReader(url, client=client, logger=logger)
