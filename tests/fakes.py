import json
import socket
from typing import Any, Dict, List, Optional

import requests


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self._payload = payload
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text

    def json(self) -> Any:
        if self._payload is None:
            return json.loads(self.text)
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class RecordingHttp:
    """Stand-in for requests.post / requests.get returning queued responses."""

    def __init__(self, *responses: Any):
        self.responses: List[Any] = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def send_callback(port: int, target: str) -> socket.socket:
    """Connect to the listener and send a browser-like GET for `target`."""
    client = socket.create_connection(("127.0.0.1", port), timeout=5)
    client.sendall(
        (
            f"GET {target} HTTP/1.1\r\n"
            f"Host: 127.0.0.1:{port}\r\n"
            "User-Agent: pytest\r\n"
            "\r\n"
        ).encode("ascii")
    )
    return client


def read_all(client: socket.socket) -> bytes:
    chunks = []
    while True:
        chunk = client.recv(4096)
        if not chunk:
            break
        chunks.append(chunk)
    client.close()
    return b"".join(chunks)
