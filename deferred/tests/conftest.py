"""
Shared fixtures: controllable deferred values and a local HTTP server.
"""

import gzip
import json
import logging
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, urlparse

import pytest

from deferred.core import DeferredValue


@pytest.fixture
def controlled():
    """
    Factory for pending values settled by the test.

    Returns (value, resolve, reject).
    """

    def make():
        box = {}

        def executor(resolve, reject):
            box["resolve"] = resolve
            box["reject"] = reject

        value = DeferredValue(executor)
        return value, box["resolve"], box["reject"]

    return make


@pytest.fixture(autouse=True)
def restore_root_logging():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class _Handler(BaseHTTPRequestHandler):
    def log_message(self, format, *args):
        pass

    def _send(self, status, body, content_type="text/plain; charset=utf-8", extra=None):
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        for key, value in (extra or {}).items():
            self.send_header(key, value)
        self.end_headers()
        self.wfile.write(body)

    def _echo(self):
        length = int(self.headers.get("Content-Length") or 0)
        raw = self.rfile.read(length) if length else b""
        payload = {
            "method": self.command,
            "content_type": self.headers.get("Content-Type"),
            "user_agent": self.headers.get("User-Agent"),
            "accept_encoding": self.headers.get("Accept-Encoding"),
            "x_custom": self.headers.get("X-Custom"),
            "body": raw.decode("utf-8", errors="replace"),
        }
        self._send(200, json.dumps(payload), "application/json")

    def do_GET(self):
        url = urlparse(self.path)
        if url.path == "/text":
            self._send(200, "hello")
        elif url.path == "/json":
            self._send(200, json.dumps({"name": "deferred", "items": [1, 2, 3]}), "application/json")
        elif url.path == "/gzip":
            self._send(200, gzip.compress(b"compressed hello"), extra={"Content-Encoding": "gzip"})
        elif url.path == "/missing":
            self._send(404, "not found")
        elif url.path == "/redirect":
            self._send(302, "moved", extra={"Location": "/text"})
        elif url.path == "/slow":
            delay = float(parse_qs(url.query).get("delay", ["0.5"])[0])
            time.sleep(delay)
            self._send(200, "slow")
        elif url.path == "/echo":
            self._echo()
        else:
            self._send(404, "unknown path")

    def do_POST(self):
        self._echo()

    def do_PUT(self):
        self._echo()


@pytest.fixture
def http_server():
    """Serve _Handler on an ephemeral port; yields the base URL."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    try:
        yield f"http://{host}:{port}"
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)
