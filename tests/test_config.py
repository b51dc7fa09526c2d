import pytest

from spotauth.config import (
    DEFAULT_CALLBACK_TIMEOUT,
    DEFAULT_REDIRECT_URI,
    DEFAULT_SCOPE,
    load_settings,
)
from spotauth.errors import ConfigurationError


def test_load_settings_defaults() -> None:
    settings = load_settings({"SPOTIFY_CLIENT_ID": "id", "SPOTIFY_CLIENT_SECRET": "secret"})

    assert settings.credentials.client_id == "id"
    assert settings.credentials.client_secret == "secret"
    assert settings.redirect.uri == DEFAULT_REDIRECT_URI
    assert settings.redirect.scope == DEFAULT_SCOPE
    assert settings.callback_timeout == DEFAULT_CALLBACK_TIMEOUT
    assert settings.token_file is None


def test_load_settings_overrides() -> None:
    settings = load_settings(
        {
            "SPOTIFY_CLIENT_ID": " id ",
            "SPOTIFY_CLIENT_SECRET": "secret",
            "SPOTIFY_REDIRECT_URI": "http://127.0.0.1:8888/callback",
            "SPOTIFY_SCOPE": "user-read-private",
            "SPOTIFY_CALLBACK_TIMEOUT": "30",
            "SPOTIFY_REQUEST_TIMEOUT": "2.5",
            "SPOTIFY_TOKEN_FILE": "/tmp/spotauth/token.json",
        }
    )

    assert settings.credentials.client_id == "id"
    assert settings.redirect.uri == "http://127.0.0.1:8888/callback"
    assert settings.redirect.scope == "user-read-private"
    assert settings.callback_timeout == 30.0
    assert settings.request_timeout == 2.5
    assert settings.token_file == "/tmp/spotauth/token.json"


def test_load_settings_reports_every_missing_credential() -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        load_settings({"SPOTIFY_CLIENT_ID": ""})

    message = str(exc_info.value)
    assert "SPOTIFY_CLIENT_ID" in message
    assert "SPOTIFY_CLIENT_SECRET" in message


@pytest.mark.parametrize("value", ["abc", "0", "-1"])
def test_load_settings_rejects_bad_timeouts(value: str) -> None:
    env = {
        "SPOTIFY_CLIENT_ID": "id",
        "SPOTIFY_CLIENT_SECRET": "secret",
        "SPOTIFY_CALLBACK_TIMEOUT": value,
    }

    with pytest.raises(ConfigurationError):
        load_settings(env)


def test_settings_repr_hides_secret() -> None:
    settings = load_settings({"SPOTIFY_CLIENT_ID": "id", "SPOTIFY_CLIENT_SECRET": "hunter2"})

    assert "hunter2" not in repr(settings)
