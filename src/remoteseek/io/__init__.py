"""I/O layer for remoteseek - random access over HTTP byte ranges."""

# Re-export these for import convenience
from .base import (
    ContentLengthError,
    DEFAULT_TIMEOUT,
    EndOfData,
    HTTPClient,
    HTTPResponse,
    InvalidURLError,
    Logger,
    MIN_FETCH_SIZE,
    Request,
    SeekFromEndUnsupported,
)
from .reader import RemoteRangeReader, format_range, open_remote_reader
from .transport import HTTPXClient, RequestsClient, make_client
