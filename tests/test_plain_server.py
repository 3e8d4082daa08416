"""Standard-Library Listener — same response table over a real socket.

Design Decisions:
    - Server bound to 127.0.0.1:0 in a background thread; httpx.Client talks to it
    - Framing tests write raw bytes on one connection to pin keep-alive behaviour
"""

import socket
import threading

import httpx
import pytest

from healthd import plain_server
from healthd.plain_server import HealthRequestHandler, create_server


@pytest.fixture
def server():
    srv = create_server("127.0.0.1", 0)
    thread = threading.Thread(target=srv.serve_forever, daemon=True)
    thread.start()
    try:
        yield srv
    finally:
        srv.shutdown()
        srv.server_close()
        thread.join(timeout=5)


@pytest.fixture
def base_url(server):
    return f"http://127.0.0.1:{server.server_port}"


def _exchange(server, payload: bytes) -> bytes:
    """Send raw bytes on one connection and read until the server closes it."""
    with socket.create_connection(("127.0.0.1", server.server_port), timeout=5) as sock:
        sock.sendall(payload)
        sock.shutdown(socket.SHUT_WR)
        chunks = []
        while True:
            data = sock.recv(4096)
            if not data:
                break
            chunks.append(data)
    return b"".join(chunks)


@pytest.fixture
def http(base_url):
    with httpx.Client(base_url=base_url, timeout=5) as c:
        yield c


def test_get_health_returns_ok(http):
    res = http.get("/health")
    assert res.status_code == 200
    assert res.text == "OK\n"
    assert res.headers["content-type"] == "text/plain"
    assert res.headers["content-length"] == "3"
    assert res.http_version == "HTTP/1.1"


def test_query_string_ignored(http):
    res = http.get("/health?check=1")
    assert res.status_code == 200
    assert res.text == "OK\n"


@pytest.mark.parametrize("path", ["/", "/health/", "/HEALTH", "/health/x"])
def test_other_paths_return_404(http, path):
    res = http.get(path)
    assert res.status_code == 404
    assert res.text == "Not Found\n"
    assert res.headers["content-type"] == "text/plain"


@pytest.mark.parametrize("method", ["POST", "PUT", "DELETE", "PATCH", "OPTIONS", "BREW"])
def test_other_methods_return_404(http, method):
    res = http.request(method, "/health")
    assert res.status_code == 404
    assert res.text == "Not Found\n"


def test_head_has_no_body(http):
    res = http.head("/health")
    assert res.status_code == 404
    assert res.content == b""


def test_keep_alive_after_request_with_body(http):
    """A drained POST body must not corrupt the next request on the connection."""
    first = http.post("/health", content=b"x" * 1024)
    second = http.get("/health")
    assert first.status_code == 404
    assert second.status_code == 200
    assert second.text == "OK\n"


def test_run_prints_bound_address(monkeypatch, capsys):
    monkeypatch.setenv("HEALTHD_HOST", "127.0.0.1")
    monkeypatch.setenv("HEALTHD_PORT", "0")

    def interrupt(self, poll_interval=0.5):
        raise KeyboardInterrupt

    monkeypatch.setattr(plain_server.ThreadingHTTPServer, "serve_forever", interrupt)
    plain_server.run()

    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 1
    assert lines[0].startswith("Server listening on http://127.0.0.1:")
    assert not lines[0].endswith(":0")


def test_percent_encoded_path_is_not_decoded(http):
    res = http.get("/%68ealth")
    assert res.status_code == 404
    assert res.text == "Not Found\n"


def test_chunked_body_is_drained_on_keep_alive(server):
    raw = _exchange(server, (
        b"POST /health HTTP/1.1\r\nHost: t\r\nTransfer-Encoding: chunked\r\n\r\n"
        b"4\r\nping\r\n0\r\n\r\n"
        b"GET /health HTTP/1.1\r\nHost: t\r\n\r\n"
    ))
    assert raw.count(b"HTTP/1.1 ") == 2
    first, second = raw.split(b"HTTP/1.1 ")[1:]
    assert first.startswith(b"404 ")
    assert first.endswith(b"\r\n\r\nNot Found\n")
    assert second.startswith(b"200 ")
    assert second.endswith(b"\r\n\r\nOK\n")
    assert b"400 Bad" not in raw


def test_chunked_body_with_trailer_is_drained(server):
    raw = _exchange(server, (
        b"POST /x HTTP/1.1\r\nHost: t\r\nTransfer-Encoding: chunked\r\n\r\n"
        b"3;ext=1\r\nabc\r\n0\r\nX-Sum: 1\r\n\r\n"
        b"GET /health HTTP/1.1\r\nHost: t\r\n\r\n"
    ))
    assert raw.count(b"HTTP/1.1 ") == 2
    assert raw.endswith(b"\r\n\r\nOK\n")


def test_chunked_request_via_client(http):
    first = http.post("/health", content=iter([b"ping", b"pong"]))
    second = http.get("/health")
    assert first.status_code == 404
    assert first.text == "Not Found\n"
    assert second.status_code == 200


@pytest.mark.parametrize("framing", [
    b"Content-Length: -5\r\n\r\n",
    b"Content-Length: abc\r\n\r\n",
    b"Transfer-Encoding: gzip\r\n\r\n",
    b"Transfer-Encoding: chunked\r\n\r\nzz\r\n",
])
def test_unframeable_body_closes_connection_after_reply(server, framing):
    raw = _exchange(server, b"POST /health HTTP/1.1\r\nHost: t\r\n" + framing)
    assert raw.count(b"HTTP/1.1 ") == 1
    assert raw.startswith(b"HTTP/1.1 404 ")
    assert b"Connection: close\r\n" in raw
    assert raw.endswith(b"\r\n\r\nNot Found\n")


def test_framed_body_keeps_connection_open(server):
    raw = _exchange(server, (
        b"POST /health HTTP/1.1\r\nHost: t\r\nContent-Length: 4\r\n\r\nping"
        b"GET /health HTTP/1.1\r\nHost: t\r\n\r\n"
    ))
    assert b"Connection: close" not in raw
    assert raw.count(b"HTTP/1.1 ") == 2
    assert raw.endswith(b"\r\n\r\nOK\n")


def test_known_verbs_are_explicit_handlers():
    for verb in ("GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"):
        assert getattr(HealthRequestHandler, f"do_{verb}") is HealthRequestHandler._reply
