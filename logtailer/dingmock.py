"""A mock DingTalk robot endpoint that prints the text of received messages."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Sequence
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any

DEFAULT_PORT = 55321

logger = logging.getLogger(__name__)


def _message_content(data: bytes) -> str:
    """Return ``text.content`` of a DingTalk message; raise ValueError if malformed."""
    message: Any = json.loads(data)
    if message is None:
        return ""
    if not isinstance(message, dict):
        raise ValueError(f"cannot unmarshal {type(message).__name__} into message")

    text = message.get("text")
    if text is None:
        return ""
    if not isinstance(text, dict):
        raise ValueError(f"cannot unmarshal {type(text).__name__} into text")

    content = text.get("content")
    if content is None:
        return ""
    if not isinstance(content, str):
        raise ValueError(f"cannot unmarshal {type(content).__name__} into content")
    return content


class DingMockHandler(BaseHTTPRequestHandler):
    """Print the content of each posted message to stdout and answer ``ok``."""

    def _reply(self, body: bytes) -> None:
        self.send_response(200)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def do_POST(self) -> None:
        try:
            length = int(self.headers.get("Content-Length") or 0)
            data = self.rfile.read(length) if length > 0 else b""
        except (OSError, ValueError) as exc:
            self._reply(f"error: {exc}".encode())
            return

        try:
            content = _message_content(data)
        except ValueError as exc:
            text = data.decode("utf-8", errors="replace")
            sys.stderr.write(f"json unmarshal error: {exc}, data: {text}\n")
            sys.stderr.flush()
            self._reply(b"")
            return

        sys.stdout.write(f"{content}\n")
        sys.stdout.flush()
        self._reply(b"ok")

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002 - base signature
        """Send request logging to the module logger at debug level, off the console."""
        logger.debug("%s - " + format, self.address_string(), *args)


def make_server(host: str, port: int) -> ThreadingHTTPServer:
    """Create (but do not start) the mock server bound to ``host:port``."""
    return ThreadingHTTPServer((host, port), DingMockHandler)


def main(argv: Sequence[str] | None = None) -> int:
    """Serve the mock endpoint on port 55321 until interrupted."""
    try:
        with make_server("", DEFAULT_PORT) as server:
            server.serve_forever()
    except KeyboardInterrupt:
        pass
    except OSError as exc:
        sys.stderr.write(f"error: {exc}")
        sys.stderr.flush()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())