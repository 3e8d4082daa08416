"""Standard-Library Listener — the same health endpoint on http.server.

Invariants:
    - Every method, known or not, is answered through core.routing.dispatch
      (404, never 501 or 405, for anything but GET /health)
    - HTTP/1.1 with Content-Length on every reply; HEAD replies carry no body
    - Request bodies (Content-Length or chunked) are drained before replying;
      a body that cannot be framed ends the connection after the reply
    - Access log goes through logging, not raw stderr

Design Decisions:
    - ThreadingHTTPServer: one thread per connection, no shared state, no limit
    - Startup line printed after bind, so it names the port actually bound
"""

import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

from healthd.config import get_settings
from healthd.core.routing import dispatch
from healthd.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)

_MAX_LINE = 65537


class HealthRequestHandler(BaseHTTPRequestHandler):
    protocol_version = "HTTP/1.1"
    server_version = "healthd"

    def _reply(self):
        self._discard_body()
        reply = dispatch(self.command, self.path)
        body = reply.encoded()
        self.send_response(reply.status)
        self.send_header("Content-Type", reply.content_type)
        self.send_header("Content-Length", str(len(body)))
        if self.close_connection:
            self.send_header("Connection", "close")
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(body)

    do_GET = do_HEAD = do_POST = do_PUT = do_DELETE = do_PATCH = do_OPTIONS = _reply

    def __getattr__(self, name):
        # Unknown verbs get the 404 reply instead of http.server's 501
        if name.startswith("do_"):
            return self._reply
        raise AttributeError(name)

    def _discard_body(self):
        """Drain a request body so it is not parsed as the next request.

        Bodies that cannot be framed end the connection after the reply.
        """
        encoding = self.headers.get("Transfer-Encoding")
        if encoding is not None:
            if encoding.strip().lower() == "chunked":
                self._discard_chunked()
            else:
                self.close_connection = True
            return
        try:
            length = int(self.headers.get("Content-Length") or 0)
        except ValueError:
            self.close_connection = True
            return
        if length < 0:
            self.close_connection = True
        elif length > 0:
            self.rfile.read(length)

    def _discard_chunked(self):
        while True:
            line = self.rfile.readline(_MAX_LINE)
            try:
                size = int(line.split(b";", 1)[0].strip(), 16)
            except ValueError:
                self.close_connection = True
                return
            if size < 0:
                self.close_connection = True
                return
            if size == 0:
                break
            self.rfile.read(size + 2)
        # trailer section ends with an empty line
        while True:
            line = self.rfile.readline(_MAX_LINE)
            if line in (b"\r\n", b"\n", b""):
                return

    def log_message(self, format, *args):
        logger.info(
            format % args, extra={"client": self.address_string()},
        )


def create_server(host: str, port: int) -> ThreadingHTTPServer:
    """Bind the listener. Port 0 picks a free port."""
    return ThreadingHTTPServer((host, port), HealthRequestHandler)


def run() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    server = create_server(settings.host, settings.port)
    host, port = server.server_address[:2]
    print(f"Server listening on http://{host}:{port}", flush=True)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("healthd shutting down")
    finally:
        server.server_close()


if __name__ == "__main__":
    run()
