import socket

import pytest

from spotauth.core import ClientCredentials, RedirectTarget


@pytest.fixture
def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def redirect_uri(free_port: int) -> str:
    return f"http://127.0.0.1:{free_port}/callback"


@pytest.fixture
def credentials() -> ClientCredentials:
    return ClientCredentials(client_id="client123", client_secret="s3cret")


@pytest.fixture
def redirect_target(redirect_uri: str) -> RedirectTarget:
    return RedirectTarget(uri=redirect_uri, scope="user-top-read user-read-private")
