"""Tests for the httpx transport agent and network responses."""

import httpx
import pytest

from anyfetch import Fetcher, Request, TransportAgent, TransportError
from anyfetch.core.router import _response_headers


@pytest.fixture
async def fetcher():
    agent = TransportAgent(timeout=5.0, user_agent="anyfetch-tests")
    fetcher = Fetcher(agent=agent)
    yield fetcher
    await fetcher.close()


class TestTransportAgent:
    async def test_send_resolves_with_unread_body(self, httpx_mock):
        """send() returns once headers arrive, leaving the body to stream."""
        httpx_mock.add_response(url="http://example.com/", content=b"streamed")
        agent = TransportAgent()
        try:
            raw = await agent.send(Request("http://example.com"))
            assert raw.status_code == 200
            assert await raw.aread() == b"streamed"
        finally:
            await agent.close()

    async def test_preserves_query_string(self, httpx_mock, fetcher):
        """The full path plus query reaches the server."""
        httpx_mock.add_response(url="http://example.com/search?q=test&page=2")
        await fetcher.fetch("http://example.com/search?q=test&page=2")

        sent = httpx_mock.get_request()
        assert sent.url.path == "/search"
        assert sent.url.query == b"q=test&page=2"

    async def test_forces_host_header(self, httpx_mock, fetcher):
        httpx_mock.add_response(url="http://example.com:8080/")
        await fetcher.fetch("http://example.com:8080/", headers={"Host": "spoofed.invalid"})

        assert httpx_mock.get_request().headers["host"] == "example.com:8080"

    async def test_sends_method_headers_and_body(self, httpx_mock, fetcher):
        httpx_mock.add_response(url="http://example.com/items", method="POST", status_code=201)
        response = await fetcher.fetch(
            "http://example.com/items",
            method="post",
            headers={"Content-Type": "application/json", "X-Trace": "abc"},
            body='{"a": 1}',
        )

        sent = httpx_mock.get_request()
        assert sent.method == "POST"
        assert sent.headers["content-type"] == "application/json"
        assert sent.headers["x-trace"] == "abc"
        assert sent.content == b'{"a": 1}'
        assert response.status == 201

    async def test_default_user_agent(self, httpx_mock, fetcher):
        httpx_mock.add_response(url="http://example.com/")
        await fetcher.fetch("http://example.com/")
        assert httpx_mock.get_request().headers["user-agent"] == "anyfetch-tests"

    async def test_caller_headers_not_mutated(self, httpx_mock, fetcher):
        httpx_mock.add_response(url="http://example.com/")
        request = Request("http://example.com/", headers={"accept": "*/*"})
        await fetcher.fetch(request)
        assert request.headers.to_dict() == {"accept": "*/*"}

    async def test_connect_error_is_transport_error(self, httpx_mock, fetcher):
        """Connection failures surface as TransportError."""
        httpx_mock.add_exception(httpx.ConnectError("Connection refused"), url="http://example.com/")
        with pytest.raises(TransportError) as excinfo:
            await fetcher.fetch("http://example.com/")
        assert isinstance(excinfo.value.__cause__, httpx.ConnectError)

    async def test_timeout_is_transport_error(self, httpx_mock, fetcher):
        httpx_mock.add_exception(httpx.ReadTimeout("timed out"), url="http://example.com/")
        with pytest.raises(TransportError):
            await fetcher.fetch("http://example.com/")


class TestNetworkResponse:
    async def test_wraps_status_headers_and_body(self, httpx_mock, fetcher):
        """Status, reason and headers are copied; the body drains lazily."""
        httpx_mock.add_response(
            url="https://example.com/data",
            status_code=404,
            headers={"Content-Type": "application/json"},
            json={"error": "missing"},
        )
        response = await fetcher.fetch("https://example.com/data")

        assert response.status == 404
        assert response.status_text == "Not Found"
        assert response.ok is False
        assert response.redirected is False
        assert response.url == "https://example.com/data"
        assert response.headers.get("content-type") == "application/json"
        assert await response.json() == {"error": "missing"}

    async def test_drops_unrepresentable_header_names(self, httpx_mock, fetcher):
        httpx_mock.add_response(url="http://example.com/", headers={"X_Legacy": "1", "X-Ok": "2"})
        response = await fetcher.fetch("http://example.com/")
        assert response.headers.get("x-ok") == "2"
        assert all("_" not in name for name in response.headers.keys())

    async def test_safe_fetch_returns_none_on_failure(self, httpx_mock, fetcher):
        httpx_mock.add_exception(httpx.ConnectError("Connection refused"), url="http://example.com/")
        assert await fetcher.safe_fetch("http://example.com/") is None

    async def test_safe_fetch_returns_response(self, httpx_mock, fetcher):
        httpx_mock.add_response(url="http://example.com/", text="ok")
        response = await fetcher.safe_fetch("http://example.com/")
        assert response is not None
        assert await response.text() == "ok"

    def test_content_coding_headers_not_copied(self):
        """The streamed body is decoded, so its coding and length are dropped."""
        raw = httpx.Response(
            200,
            headers={"Content-Encoding": "gzip", "Content-Length": "31", "Content-Type": "text/plain"},
            request=httpx.Request("GET", "http://example.com/"),
        )
        headers = _response_headers(raw)
        assert headers.to_dict() == {"content-type": "text/plain"}

    def test_identity_coding_keeps_length(self):
        raw = httpx.Response(
            200,
            headers={"Content-Encoding": "identity", "Content-Length": "5"},
            request=httpx.Request("GET", "http://example.com/"),
        )
        assert _response_headers(raw).get("content-length") == "5"


class BytesSink:
    def __init__(self):
        self.data = bytearray()

    def write(self, data: bytes):
        self.data.extend(data)

    async def drain(self):
        pass

    def close(self):
        pass

    async def wait_closed(self):
        pass


def dechunk(data: bytes) -> bytes:
    """Decode a chunked transfer-encoded body."""
    body = bytearray()
    while True:
        size_line, _, data = data.partition(b"\r\n")
        size = int(size_line, 16)
        if size == 0:
            assert data == b"\r\n"
            return bytes(body)
        body.extend(data[:size])
        assert data[size:size + 2] == b"\r\n"
        data = data[size + 2:]


class TestNetworkWriteOut:
    async def test_chunked_upstream_is_reframed(self, httpx_mock, fetcher):
        """Upstream framing is replaced with chunking of the decoded bytes."""
        httpx_mock.add_response(
            url="http://example.com/",
            content=b"hello",
            headers={"Transfer-Encoding": "chunked", "Content-Type": "text/plain"},
        )
        response = await fetcher.fetch("http://example.com/")
        sink = BytesSink()
        await response.write_response(sink)

        head, _, body = bytes(sink.data).partition(b"\r\n\r\n")
        lines = head.split(b"\r\n")
        assert lines[0] == b"HTTP/1.1 200 OK"
        assert lines.count(b"transfer-encoding: chunked") == 1
        assert b"content-type: text/plain" in lines
        assert not any(line.startswith(b"content-length:") for line in lines)
        assert dechunk(body) == b"hello"

    async def test_drained_response_uses_content_length(self, httpx_mock, fetcher):
        httpx_mock.add_response(
            url="http://example.com/",
            content=b"hello",
            headers={"Transfer-Encoding": "chunked"},
        )
        response = await fetcher.fetch("http://example.com/")
        assert await response.buffer() == b"hello"
        sink = BytesSink()
        await response.write_response(sink)

        head, _, body = bytes(sink.data).partition(b"\r\n\r\n")
        assert head.split(b"\r\n")[1:] == [b"content-length: 5"]
        assert body == b"hello"
