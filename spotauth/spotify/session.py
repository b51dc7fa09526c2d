import secrets
import threading
import time
from typing import Callable, Optional

from spotauth.config import (
    DEFAULT_CALLBACK_TIMEOUT,
    DEFAULT_REQUEST_TIMEOUT,
    SPOTIFY_AUTH_URL,
    SPOTIFY_TOKEN_URL,
    AuthSettings,
)
from spotauth.core.logging_utils import log_info, log_step
from spotauth.core.models import ClientCredentials, RedirectTarget, TokenSet
from spotauth.errors import NotAuthenticated
from spotauth.spotify.authorize_url import build_authorize_url
from spotauth.spotify.browser import launch_browser
from spotauth.spotify.listener import RedirectListener
from spotauth.spotify.token_cache import TokenCache
from spotauth.spotify.tokens import exchange_code_for_token, refresh_access_token


class OAuthSession:
    """
    Owns the Spotify tokens of one user session.

    Usage:
        session = OAuthSession(credentials, RedirectTarget(uri, scope))
        token = session.ensure_valid_token()   # browser login on first call
        ...
        token = session.refresh()              # e.g. after a 401

    Nothing is retried here: on CallbackDenied / CallbackTimeout /
    TokenExchangeRejected call authorize() again, on TokenRefreshRejected
    fall back to authorize().

    The stored TokenSet is immutable and replaced under a lock, so
    concurrent readers see either the old or the new set. The lock is never
    held across network calls.
    """

    def __init__(
        self,
        credentials: ClientCredentials,
        redirect: RedirectTarget,
        *,
        callback_timeout: float = DEFAULT_CALLBACK_TIMEOUT,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        authorize_url: str = SPOTIFY_AUTH_URL,
        token_url: str = SPOTIFY_TOKEN_URL,
        open_browser: Callable[[str], bool] = launch_browser,
        token_cache: Optional[TokenCache] = None,
        use_state: bool = True,
    ) -> None:
        self.credentials = credentials
        self.redirect = redirect
        self.callback_timeout = callback_timeout
        self.request_timeout = request_timeout
        self.authorize_url = authorize_url
        self.token_url = token_url
        self.use_state = use_state
        self._open_browser = open_browser
        self._cache = token_cache

        self._lock = threading.Lock()
        self._tokens: Optional[TokenSet] = None
        self._issued_at: Optional[float] = None
        self._listener: Optional[RedirectListener] = None
        self._pending_url: Optional[str] = None

        if token_cache is not None:
            cached = token_cache.load()
            if cached is not None:
                self._tokens = cached.tokens
                self._issued_at = cached.issued_at
                log_info(f"Loaded Spotify tokens from {token_cache.path}.")

    @classmethod
    def from_settings(cls, settings: AuthSettings, **kwargs) -> "OAuthSession":
        if settings.token_file and "token_cache" not in kwargs:
            kwargs["token_cache"] = TokenCache(settings.token_file)
        return cls(
            settings.credentials,
            settings.redirect,
            callback_timeout=settings.callback_timeout,
            request_timeout=settings.request_timeout,
            **kwargs,
        )

    # Authorization flow -----------------------------------------------

    def build_authorize_url(self, state: Optional[str] = None) -> str:
        return build_authorize_url(
            self.credentials.client_id,
            self.redirect.uri,
            self.redirect.scope,
            authorize_url=self.authorize_url,
            state=state,
        )

    def authorize(self) -> str:
        """
        Run the interactive login and return the new access token.

        The callback port is bound before the browser is opened, so a busy
        port fails fast with PortUnavailable.
        """
        state = secrets.token_urlsafe(16) if self.use_state else None
        listener = RedirectListener(
            self.redirect.uri,
            self.callback_timeout,
            expected_state=state,
        )

        url = self.build_authorize_url(state)
        with listener:
            with self._lock:
                self._listener = listener
                self._pending_url = url
            try:
                self._open_browser(url)
                code = listener.wait_for_code()
            finally:
                with self._lock:
                    if self._listener is listener:
                        self._listener = None
                        self._pending_url = None

        log_step("Exchanging authorization code for tokens...")
        tokens = exchange_code_for_token(
            self.credentials,
            self.redirect.uri,
            code,
            token_url=self.token_url,
            timeout=self.request_timeout,
        )
        self._store(tokens)
        return tokens.access_token

    def pending_authorize_url(self) -> Optional[str]:
        """
        URL of the authorize() call currently waiting for its callback,
        including its state. None when no login is in progress.
        """
        with self._lock:
            return self._pending_url

    def cancel(self) -> bool:
        """
        Abort a running authorize() from another thread.

        Returns False when no callback wait is in progress.
        """
        with self._lock:
            listener = self._listener
        if listener is None:
            return False
        listener.cancel()
        return True

    # Token access -----------------------------------------------------

    def ensure_valid_token(self) -> str:
        """Current access token, or a full authorize() when there is none."""
        with self._lock:
            tokens = self._tokens
        if tokens is not None:
            return tokens.access_token
        return self.authorize()

    def refresh(self) -> str:
        """
        Exchange the stored refresh token for a new access token.

        The stored TokenSet is swapped only once the new one is complete; on
        failure the previous set stays in place.
        """
        with self._lock:
            tokens = self._tokens
        if tokens is None:
            raise NotAuthenticated("No Spotify tokens yet: run authorize() first.")
        if not tokens.refresh_token:
            raise NotAuthenticated("No refresh token available: run authorize() again.")

        log_step("Refreshing Spotify access token...")
        new_tokens = refresh_access_token(
            self.credentials,
            tokens.refresh_token,
            token_url=self.token_url,
            timeout=self.request_timeout,
        )
        self._store(new_tokens)
        return new_tokens.access_token

    def access_token(self) -> str:
        return self.token_set().access_token

    def token_set(self) -> TokenSet:
        with self._lock:
            tokens = self._tokens
        if tokens is None:
            raise NotAuthenticated("Not authenticated with Spotify.")
        return tokens

    @property
    def is_authenticated(self) -> bool:
        with self._lock:
            return self._tokens is not None

    def expires_at(self) -> Optional[float]:
        """Epoch seconds at which the current access token expires."""
        with self._lock:
            if self._tokens is None or self._issued_at is None:
                return None
            return self._issued_at + self._tokens.expires_in

    def is_expired(self, leeway: float = 60.0) -> bool:
        expires_at = self.expires_at()
        if expires_at is None:
            return True
        return time.time() >= expires_at - leeway

    def logout(self) -> None:
        """Forget the tokens (and the cache file, if any)."""
        with self._lock:
            self._tokens = None
            self._issued_at = None
        if self._cache is not None:
            self._cache.clear()

    def _store(self, tokens: TokenSet) -> None:
        issued_at = time.time()
        with self._lock:
            self._tokens = tokens
            self._issued_at = issued_at
        if self._cache is not None:
            self._cache.save(tokens, issued_at)
