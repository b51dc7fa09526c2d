"""Exception types raised by the authorization flow.

Every failure of the flow is one of these; callers can catch
``SpotifyAuthError`` to handle all of them, or a subclass to pick a recovery:
a fresh ``authorize()`` after a denied/timed-out callback or a rejected
exchange, a fresh ``authorize()`` after a rejected refresh, a retry of the
whole flow after a network failure.
"""

from typing import Optional


class SpotifyAuthError(Exception):
    """Base class for every authorization error."""


class ConfigurationError(SpotifyAuthError):
    """Required settings (client id/secret...) are missing or invalid."""


class PortUnavailable(SpotifyAuthError):
    def __init__(self, host: str, port: int, reason: str = "") -> None:
        self.host = host
        self.port = port
        message = f"Cannot listen on {host}:{port}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class CallbackDenied(SpotifyAuthError):
    """
    The redirect did not carry an authorization code.

    `error` holds the provider's error parameter (e.g. "access_denied") when
    there was one; it is None for malformed callbacks.
    """

    def __init__(self, reason: str, error: Optional[str] = None) -> None:
        self.reason = reason
        self.error = error
        super().__init__(reason)


class CallbackTimeout(SpotifyAuthError):
    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"No authorization callback received within {timeout:g}s")


class AuthorizationCancelled(SpotifyAuthError):
    """The pending callback wait was aborted with cancel()."""


class TokenRequestRejected(SpotifyAuthError):
    """The token endpoint answered with a non-2xx status."""

    action = "Token request"

    def __init__(self, status: int, body: str = "") -> None:
        self.status = status
        self.body = body
        super().__init__(f"{self.action} rejected with HTTP {status}")


class TokenExchangeRejected(TokenRequestRejected):
    action = "Authorization code exchange"


class TokenRefreshRejected(TokenRequestRejected):
    action = "Token refresh"


class NetworkFailure(SpotifyAuthError):
    """DNS failure, connection reset or timeout while talking to the provider."""


class MalformedResponse(SpotifyAuthError):
    """The token endpoint body is not JSON or misses required fields."""


class NotAuthenticated(SpotifyAuthError):
    """A token was requested before any successful authorize/refresh."""
