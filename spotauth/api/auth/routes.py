from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException

from spotauth.api.auth.schemas import (
    AuthResultResponse,
    AuthStatusResponse,
    AuthUrlResponse,
)
from spotauth.config import load_settings
from spotauth.core.logging_utils import log_warning
from spotauth.errors import (
    AuthorizationCancelled,
    CallbackDenied,
    CallbackTimeout,
    ConfigurationError,
    MalformedResponse,
    NetworkFailure,
    NotAuthenticated,
    PortUnavailable,
    SpotifyAuthError,
    TokenRequestRejected,
)
from spotauth.spotify import OAuthSession

router = APIRouter()

# Most specific first
_ERROR_STATUS = (
    (NotAuthenticated, 401),
    (TokenRequestRejected, 401),
    (CallbackDenied, 400),
    (CallbackTimeout, 408),
    (AuthorizationCancelled, 409),
    (PortUnavailable, 409),
    (NetworkFailure, 502),
    (MalformedResponse, 502),
    (ConfigurationError, 500),
)


@lru_cache(maxsize=1)
def get_session() -> OAuthSession:
    """Process-wide session built from the environment (.env)."""
    return OAuthSession.from_settings(load_settings())


def _http_error(e: SpotifyAuthError) -> HTTPException:
    status_code = next(
        (status for kind, status in _ERROR_STATUS if isinstance(e, kind)),
        500,
    )
    log_warning(f"Spotify auth request failed: {e}")
    return HTTPException(
        status_code=status_code,
        detail={"error": type(e).__name__, "message": str(e)},
    )


@router.get("/url", response_model=AuthUrlResponse)
def get_auth_url(session: OAuthSession = Depends(get_session)) -> AuthUrlResponse:
    """
    Authorization URL of the login started by POST /auth/login, for clients
    that open the browser themselves. 409 when no login is waiting.
    """
    url = session.pending_authorize_url()
    if url is None:
        raise HTTPException(
            status_code=409,
            detail={
                "error": "NoPendingLogin",
                "message": "Start a login with POST /auth/login first.",
            },
        )
    return AuthUrlResponse(auth_url=url)


@router.get("/status", response_model=AuthStatusResponse)
def auth_status(session: OAuthSession = Depends(get_session)) -> AuthStatusResponse:
    try:
        tokens = session.token_set()
    except NotAuthenticated:
        return AuthStatusResponse(authenticated=False)

    return AuthStatusResponse(
        authenticated=True,
        token_type=tokens.token_type,
        scope=tokens.scope,
        expires_at=session.expires_at(),
        expired=session.is_expired(leeway=0),
    )


@router.post("/login", response_model=AuthResultResponse)
def auth_login(session: OAuthSession = Depends(get_session)) -> AuthResultResponse:
    """
    Run the browser login on the host machine and wait for the callback.

    Blocks until the callback arrives or the session's callback timeout
    elapses.
    """
    try:
        session.authorize()
        tokens = session.token_set()
    except SpotifyAuthError as e:
        raise _http_error(e) from e
    return AuthResultResponse(authenticated=True, expires_in=tokens.expires_in)


@router.post("/refresh", response_model=AuthResultResponse)
def auth_refresh(session: OAuthSession = Depends(get_session)) -> AuthResultResponse:
    try:
        session.refresh()
        tokens = session.token_set()
    except SpotifyAuthError as e:
        raise _http_error(e) from e
    return AuthResultResponse(authenticated=True, expires_in=tokens.expires_in)


@router.post("/cancel")
def auth_cancel(session: OAuthSession = Depends(get_session)) -> dict:
    return {"cancelled": session.cancel()}
