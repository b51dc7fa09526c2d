import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from spotauth.core.models import ClientCredentials, RedirectTarget
from spotauth.errors import ConfigurationError

load_dotenv()

# Spotify endpoints
SPOTIFY_AUTH_URL = "https://accounts.spotify.com/authorize"
SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"
SPOTIFY_API_BASE = "https://api.spotify.com/v1"

# Defaults (the redirect URI must match one registered in the Spotify dashboard)
DEFAULT_REDIRECT_URI = "http://127.0.0.1:3000/callback"
DEFAULT_SCOPE = "user-top-read"
DEFAULT_CALLBACK_TIMEOUT = 180.0
DEFAULT_REQUEST_TIMEOUT = 15.0


@dataclass(frozen=True)
class AuthSettings:
    credentials: ClientCredentials
    redirect: RedirectTarget
    callback_timeout: float = DEFAULT_CALLBACK_TIMEOUT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    token_file: Optional[str] = None


def _float_setting(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number of seconds, got {raw!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> AuthSettings:
    """
    Build AuthSettings from environment variables (.env is loaded at import).

    Required: SPOTIFY_CLIENT_ID, SPOTIFY_CLIENT_SECRET.
    Optional: SPOTIFY_REDIRECT_URI, SPOTIFY_SCOPE, SPOTIFY_CALLBACK_TIMEOUT,
    SPOTIFY_REQUEST_TIMEOUT, SPOTIFY_TOKEN_FILE.
    """
    if env is None:
        env = os.environ

    client_id = (env.get("SPOTIFY_CLIENT_ID") or "").strip()
    client_secret = (env.get("SPOTIFY_CLIENT_SECRET") or "").strip()
    missing = [
        name
        for name, value in (
            ("SPOTIFY_CLIENT_ID", client_id),
            ("SPOTIFY_CLIENT_SECRET", client_secret),
        )
        if not value
    ]
    if missing:
        raise ConfigurationError(
            f"Missing required setting(s): {', '.join(missing)}. "
            "Set them in the environment or in a .env file."
        )

    token_file = (env.get("SPOTIFY_TOKEN_FILE") or "").strip() or None
    if token_file:
        token_file = os.path.expanduser(token_file)

    return AuthSettings(
        credentials=ClientCredentials(client_id=client_id, client_secret=client_secret),
        redirect=RedirectTarget(
            uri=env.get("SPOTIFY_REDIRECT_URI") or DEFAULT_REDIRECT_URI,
            scope=env.get("SPOTIFY_SCOPE") or DEFAULT_SCOPE,
        ),
        callback_timeout=_float_setting(
            env, "SPOTIFY_CALLBACK_TIMEOUT", DEFAULT_CALLBACK_TIMEOUT
        ),
        request_timeout=_float_setting(
            env, "SPOTIFY_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT
        ),
        token_file=token_file,
    )
