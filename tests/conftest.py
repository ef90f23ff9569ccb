"""Shared fixtures: an in-memory HTTP client and a Range-aware server handler."""

import pytest
from requests.structures import CaseInsensitiveDict
from werkzeug import Request, Response


class MockResponse:
    """Minimal stand-in for requests.Response / httpx.Response."""

    def __init__(self, status_code, body=b"", headers=None, body_error=None):
        self.status_code = status_code
        self.headers = CaseInsensitiveDict(headers or {})
        self._body = body
        self._body_error = body_error
        self.closed = False

    @property
    def content(self):
        if self._body_error is not None:
            raise self._body_error
        return self._body

    def close(self):
        self.closed = True


class MockHTTPClient:
    """Serves `data` for GET ranges and HEAD, recording every request.

    Out-of-range GETs answer 200 with an empty body, like a server that
    ignores the tail of an unsatisfiable range; with `strict_ranges` they
    answer 416 the way real servers do.
    """

    def __init__(self, data, status=200, content_length="auto", error=None, body_error=None, strict_ranges=False):
        self.data = data
        self.status = status
        self.content_length = content_length
        self.error = error
        self.body_error = body_error
        self.strict_ranges = strict_ranges
        self.requests = []
        self.responses = []

    @property
    def num_requests(self):
        return len(self.requests)

    def do(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error

        if request.method == "HEAD":
            headers = {}
            if self.content_length == "auto":
                headers["Content-Length"] = str(len(self.data))
            elif self.content_length is not None:
                headers["Content-Length"] = str(self.content_length)
            resp = MockResponse(self.status, headers=headers)
        else:
            range_spec = request.headers["Range"].replace("bytes=", "")
            start, end = map(int, range_spec.split("-"))
            if self.strict_ranges and start >= len(self.data):
                resp = MockResponse(416)
            else:
                resp = MockResponse(self.status, self.data[start:end + 1], body_error=self.body_error)

        self.responses.append(resp)
        return resp


class RecordingLogger:
    """Logger that keeps the formatted messages per level."""

    def __init__(self):
        self.infos = []
        self.debugs = []

    def info(self, msg, *args):
        self.infos.append(msg % args)

    def debug(self, msg, *args):
        self.debugs.append(msg % args)


def range_handler(data):
    """Build a werkzeug handler serving `data` with Range support."""

    def handle(request: Request) -> Response:
        if request.method == "HEAD":
            return Response(
                status=200,
                headers={
                    "Content-Length": str(len(data)),
                    "Accept-Ranges": "bytes",
                },
            )

        range_header = request.headers.get("Range")
        if not range_header:
            return Response(data, status=200)

        # Parse range header: bytes=start-end
        start, end = map(int, range_header.replace("bytes=", "").split("-"))
        if start >= len(data):
            return Response(status=416, headers={"Content-Range": f"bytes */{len(data)}"})
        end = min(end, len(data) - 1)
        chunk = data[start:end + 1]
        return Response(
            chunk,
            status=206,
            headers={
                "Content-Range": f"bytes {start}-{end}/{len(data)}",
                "Content-Length": str(len(chunk)),
            },
        )

    return handle


@pytest.fixture
def mock_client():
    """Factory for MockHTTPClient instances."""
    return MockHTTPClient


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def serve_bytes(httpserver):
    """Serve `data` at `path` on the pytest-httpserver and return its URL."""

    def _serve(path, data):
        httpserver.expect_request(path).respond_with_handler(range_handler(data))
        return httpserver.url_for(path)

    return _serve
