"""remoteseek - treat a remote HTTP(S) resource as a seekable file."""

from .io import (  # re-export
    ContentLengthError,
    EndOfData,
    HTTPClient,
    HTTPXClient,
    InvalidURLError,
    Logger,
    RemoteRangeReader,
    Request,
    RequestsClient,
    SeekFromEndUnsupported,
    open_remote_reader,
)
from .lister import UnsupportedArchiveError, detect_format, list_entries


__version__ = "0.1.0"
