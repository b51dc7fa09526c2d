"""Spotify Authorization Code flow with a loopback redirect listener."""

from .config import AuthSettings, load_settings
from .core.models import ClientCredentials, RedirectTarget, TokenSet
from .errors import (
    AuthorizationCancelled,
    CallbackDenied,
    CallbackTimeout,
    ConfigurationError,
    MalformedResponse,
    NetworkFailure,
    NotAuthenticated,
    PortUnavailable,
    SpotifyAuthError,
    TokenExchangeRejected,
    TokenRefreshRejected,
    TokenRequestRejected,
)
from .spotify import OAuthSession, TokenCache

__all__ = [
    "AuthSettings",
    "load_settings",
    "ClientCredentials",
    "RedirectTarget",
    "TokenSet",
    "OAuthSession",
    "TokenCache",
    "SpotifyAuthError",
    "ConfigurationError",
    "PortUnavailable",
    "CallbackDenied",
    "CallbackTimeout",
    "AuthorizationCancelled",
    "TokenRequestRejected",
    "TokenExchangeRejected",
    "TokenRefreshRejected",
    "NetworkFailure",
    "MalformedResponse",
    "NotAuthenticated",
]
