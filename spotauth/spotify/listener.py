"""
One-shot loopback listener for the OAuth redirect.

The provider redirects the browser to the registered redirect URI
(e.g. http://127.0.0.1:3000/callback?code=...). This module binds that
host/port with a plain TCP socket, accepts exactly one connection, reads the
HTTP request line and pulls the `code` query parameter out of it.

Lifecycle:
    IDLE -> LISTENING -> CODE_RECEIVED | DENIED | TIMEOUT | CANCELLED
    IDLE -> BIND_FAILED

The wait is bounded by a mandatory timeout and polls in short slices, so
cancel() from another thread stops it promptly. The listening socket is
closed on every exit path; a later flow can bind the same port again.
"""

import select
import socket
import threading
import time
from enum import Enum
from typing import Dict, Optional, Tuple
from urllib.parse import parse_qs, urlsplit

from spotauth.core.logging_utils import log_info, log_step, log_warning
from spotauth.errors import (
    AuthorizationCancelled,
    CallbackDenied,
    CallbackTimeout,
    ConfigurationError,
    PortUnavailable,
)

_POLL_INTERVAL = 0.2
_READ_TIMEOUT = 5.0
_MAX_LINE = 8192
_MAX_HEADER_LINES = 100

SUCCESS_PAGE = (
    "<html><body><h1>Spotify authorization complete</h1>"
    "<p>You can close this window and return to the application.</p>"
    "</body></html>"
)
FAILURE_PAGE = (
    "<html><body><h1>Spotify authorization failed</h1>"
    "<p>No authorization code was received. You can close this window "
    "and start the login again from the application.</p>"
    "</body></html>"
)


class ListenerState(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"
    CODE_RECEIVED = "code_received"
    DENIED = "denied"
    TIMEOUT = "timeout"
    BIND_FAILED = "bind_failed"
    CANCELLED = "cancelled"


def listen_address(redirect_uri: str) -> Tuple[str, int]:
    """Host and port the listener must bind for `redirect_uri`."""
    parsed = urlsplit(redirect_uri)
    if parsed.scheme != "http":
        raise ConfigurationError(
            f"Redirect URI must be a plain http loopback URL, got {redirect_uri!r}"
        )
    try:
        port = parsed.port or 80
    except ValueError as e:
        raise ConfigurationError(f"Invalid port in redirect URI {redirect_uri!r}") from e
    return parsed.hostname or "127.0.0.1", port


def parse_callback_query(request_line: str) -> Dict[str, str]:
    """
    Query parameters of a raw HTTP request line.

    "GET /callback?code=ABC&state=s1 HTTP/1.1" -> {"code": "ABC", "state": "s1"}

    Only the first value of a repeated key is kept. Raises ValueError if the
    line is not "METHOD TARGET HTTP/x".
    """
    parts = request_line.strip().split()
    if len(parts) != 3 or not parts[2].startswith("HTTP/"):
        raise ValueError(f"not an HTTP request line: {request_line[:80]!r}")

    query = urlsplit(parts[1]).query
    parsed = parse_qs(query, keep_blank_values=True)
    return {key: values[0] for key, values in parsed.items()}


def _http_response(status: str, body: str) -> bytes:
    payload = body.encode("utf-8")
    head = (
        f"HTTP/1.1 {status}\r\n"
        "Content-Type: text/html; charset=utf-8\r\n"
        f"Content-Length: {len(payload)}\r\n"
        "Connection: close\r\n"
        "\r\n"
    )
    return head.encode("ascii") + payload


class RedirectListener:
    """
    Single-use callback listener.

    Usage:
        with RedirectListener(redirect_uri, timeout=180) as listener:
            launch_browser(url)
            code = listener.wait_for_code()

    Entering the context binds the port (PortUnavailable if it is taken), so
    callers can fail before opening the browser.
    """

    def __init__(
        self,
        redirect_uri: str,
        timeout: float,
        *,
        expected_state: Optional[str] = None,
    ) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be a positive number of seconds")
        self.redirect_uri = redirect_uri
        self.host, self.port = listen_address(redirect_uri)
        self.timeout = timeout
        self.expected_state = expected_state
        self.state = ListenerState.IDLE

        self._sock: Optional[socket.socket] = None
        self._sock_lock = threading.Lock()
        self._cancelled = threading.Event()

    def __enter__(self) -> "RedirectListener":
        self.bind()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def bind(self) -> None:
        if self.state is not ListenerState.IDLE:
            raise RuntimeError(f"RedirectListener is single-use (state={self.state.value})")
        try:
            sock = socket.create_server((self.host, self.port), backlog=1)
        except OSError as e:
            self.state = ListenerState.BIND_FAILED
            raise PortUnavailable(self.host, self.port, e.strerror or str(e)) from e

        with self._sock_lock:
            self._sock = sock
        self.state = ListenerState.LISTENING
        log_step(f"Waiting for the authorization callback on {self.redirect_uri}")

    def wait_for_code(self) -> str:
        """
        Block until the single callback arrives and return its code.

        Raises CallbackDenied, CallbackTimeout or AuthorizationCancelled.
        """
        if self.state is ListenerState.IDLE:
            self.bind()
        if self.state is not ListenerState.LISTENING:
            raise RuntimeError(f"RedirectListener is single-use (state={self.state.value})")

        try:
            conn = self._accept_one()
            return self._handle_callback(conn)
        finally:
            self.close()

    def cancel(self) -> None:
        """
        Abort a pending wait_for_code(); safe to call from any thread.

        Calling close() from another thread aborts the wait the same way.
        """
        self._cancelled.set()

    def close(self) -> None:
        with self._sock_lock:
            sock, self._sock = self._sock, None
        if sock is not None:
            sock.close()

    def _accept_one(self) -> socket.socket:
        deadline = time.monotonic() + self.timeout
        while True:
            with self._sock_lock:
                sock = self._sock
            if self._cancelled.is_set() or sock is None:
                self._abort()

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                self.state = ListenerState.TIMEOUT
                raise CallbackTimeout(self.timeout)

            # close() from another thread may invalidate the socket mid-poll
            try:
                readable, _, _ = select.select(
                    [sock], [], [], min(_POLL_INTERVAL, remaining)
                )
                if readable:
                    conn, _ = sock.accept()
                    return conn
            except (OSError, ValueError) as e:
                self._abort(e)

    def _abort(self, cause: Optional[Exception] = None) -> None:
        self.state = ListenerState.CANCELLED
        raise AuthorizationCancelled(
            "Authorization was cancelled while waiting for the callback."
        ) from cause

    def _handle_callback(self, conn: socket.socket) -> str:
        with conn:
            conn.settimeout(_READ_TIMEOUT)
            try:
                params = parse_callback_query(self._read_request_line(conn))
            except (OSError, ValueError) as e:
                self._deny(conn)
                raise CallbackDenied(f"Malformed authorization callback: {e}") from e

            code = params.get("code")
            if not code:
                self._deny(conn)
                error = params.get("error")
                if error:
                    raise CallbackDenied(f"Authorization denied: {error}", error=error)
                raise CallbackDenied("Authorization callback carried no code.")

            if self.expected_state is not None and params.get("state") != self.expected_state:
                self._deny(conn)
                raise CallbackDenied("Authorization callback state does not match the request.")

            self._send(conn, _http_response("200 OK", SUCCESS_PAGE))
            self.state = ListenerState.CODE_RECEIVED
            log_info("Authorization callback received.")
            return code

    def _read_request_line(self, conn: socket.socket) -> str:
        with conn.makefile("rb") as reader:
            line = reader.readline(_MAX_LINE + 1)
            if not line:
                raise ValueError("connection closed before a request was sent")
            if len(line) > _MAX_LINE:
                raise ValueError("request line too long")

            # Consume the headers: closing with unread input resets the
            # browser's connection before it renders the page.
            try:
                for _ in range(_MAX_HEADER_LINES):
                    if reader.readline(_MAX_LINE) in (b"\r\n", b"\n", b""):
                        break
            except OSError:
                pass
        return line.decode("latin-1")

    def _deny(self, conn: socket.socket) -> None:
        self.state = ListenerState.DENIED
        self._send(conn, _http_response("400 Bad Request", FAILURE_PAGE))

    @staticmethod
    def _send(conn: socket.socket, payload: bytes) -> None:
        try:
            conn.sendall(payload)
        except OSError as e:
            log_warning(f"Could not answer the browser ({e}).")


def listen_for_code(
    redirect_uri: str,
    timeout: float,
    *,
    expected_state: Optional[str] = None,
) -> str:
    """Bind, wait for one callback and return its authorization code."""
    with RedirectListener(redirect_uri, timeout, expected_state=expected_state) as listener:
        return listener.wait_for_code()
