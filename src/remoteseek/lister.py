"""List tar/zip entries from a remote archive without downloading it."""

import io
import logging
import tarfile
import zipfile
from typing import Iterator
from urllib.parse import urlsplit

from .io.reader import RemoteRangeReader


LOG = logging.getLogger("remoteseek.lister")

FORMATS = ("tar", "zip")


class UnsupportedArchiveError(ValueError):
    """Raised when the URL does not name a .tar or .zip archive."""


def detect_format(url: str) -> str:
    """Pick the archive format from the URL path suffix."""
    path = urlsplit(url).path.lower()
    for fmt in FORMATS:
        if path.endswith("." + fmt):
            return fmt
    raise UnsupportedArchiveError("Unknown file type. URL does not end in .tar or .zip")


class SizedRangeView(io.RawIOBase):
    """Fully seekable view over a RemoteRangeReader whose size is known.

    zipfile locates the end-of-central-directory record with SEEK_END, which
    the reader itself refuses; this view resolves it against `size` and
    reads through read_at.
    """

    def __init__(self, reader: RemoteRangeReader, size: int):
        self.reader = reader
        self.size = size
        self.pos = 0

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def tell(self) -> int:
        return self.pos

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if whence == io.SEEK_SET:
            new_pos = offset
        elif whence == io.SEEK_CUR:
            new_pos = self.pos + offset
        elif whence == io.SEEK_END:
            new_pos = self.size + offset
        else:
            raise ValueError(f"Invalid whence: {whence}")
        if new_pos < 0:
            raise OSError(f"Negative seek position {new_pos}")
        self.pos = new_pos
        return self.pos

    def readinto(self, b) -> int:
        mv = memoryview(b).cast("B")
        if self.pos >= self.size or len(mv) == 0:
            return 0
        n = self.reader.read_at(mv[: self.size - self.pos], self.pos)
        self.pos += n
        return n


def iter_tar_names(reader: RemoteRangeReader) -> Iterator[str]:
    """Yield member names as the tar stream is decoded front to back."""
    with tarfile.open(fileobj=reader, mode="r|") as tar:
        for member in tar:
            yield member.name


def iter_zip_names(reader: RemoteRangeReader) -> Iterator[str]:
    """Yield member names once the zip central directory has been loaded."""
    size = reader.size()
    LOG.debug("zip archive size %d", size)
    with zipfile.ZipFile(SizedRangeView(reader, size)) as zf:
        names = zf.namelist()
    yield from names


def list_entries(reader: RemoteRangeReader, url: str) -> Iterator[str]:
    """Yield entry names of the archive at `url`, read through `reader`."""
    fmt = detect_format(url)
    LOG.debug("listing %s as %s", url, fmt)
    if fmt == "tar":
        return iter_tar_names(reader)
    return iter_zip_names(reader)
