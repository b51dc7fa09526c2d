from typing import Any, Dict, Type

import requests
from pydantic import ValidationError
from requests.auth import HTTPBasicAuth

from spotauth.config import DEFAULT_REQUEST_TIMEOUT, SPOTIFY_TOKEN_URL
from spotauth.core.logging_utils import log_success
from spotauth.core.models import ClientCredentials, TokenSet
from spotauth.errors import (
    MalformedResponse,
    NetworkFailure,
    TokenExchangeRejected,
    TokenRefreshRejected,
    TokenRequestRejected,
)


def _post_token_request(
    credentials: ClientCredentials,
    form: Dict[str, str],
    *,
    token_url: str,
    timeout: float,
    rejected: Type[TokenRequestRejected],
) -> Dict[str, Any]:
    """
    POST `form` to the token endpoint with HTTP Basic client authentication.

    Single attempt. Non-2xx -> `rejected(status)`, transport errors ->
    NetworkFailure, non-JSON body -> MalformedResponse.
    """
    try:
        r = requests.post(
            token_url,
            data=form,
            auth=HTTPBasicAuth(credentials.client_id, credentials.client_secret),
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            timeout=timeout,
        )
    except requests.RequestException as e:
        raise NetworkFailure(f"Token endpoint unreachable: {e}") from e

    if not 200 <= r.status_code < 300:
        raise rejected(r.status_code, r.text[:500])

    try:
        data = r.json()
    except ValueError as e:
        raise MalformedResponse("Token endpoint returned a non-JSON body.") from e
    if not isinstance(data, dict):
        raise MalformedResponse("Token endpoint returned JSON that is not an object.")
    return data


def _parse_token_set(data: Dict[str, Any]) -> TokenSet:
    payload = dict(data)
    # Spotify sends null or omits the field when it does not rotate the token.
    if payload.get("refresh_token") is None:
        payload["refresh_token"] = ""
    try:
        return TokenSet.model_validate(payload)
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
        raise MalformedResponse(f"Invalid token response (fields: {fields or '?'}).") from e


def exchange_code_for_token(
    credentials: ClientCredentials,
    redirect_uri: str,
    code: str,
    *,
    token_url: str = SPOTIFY_TOKEN_URL,
    timeout: float = DEFAULT_REQUEST_TIMEOUT,
) -> TokenSet:
    """
    Trade a one-shot authorization code for a TokenSet.

    `redirect_uri` must be the exact value sent in the authorization URL.
    Never retried: a rejected code is burnt and needs a new authorization
    round.
    """
    data = _post_token_request(
        credentials,
        {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri,
        },
        token_url=token_url,
        timeout=timeout,
        rejected=TokenExchangeRejected,
    )
    tokens = _parse_token_set(data)
    log_success("Spotify access token obtained.")
    return tokens


def refresh_access_token(
    credentials: ClientCredentials,
    refresh_token: str,
    *,
    token_url: str = SPOTIFY_TOKEN_URL,
    timeout: float = DEFAULT_REQUEST_TIMEOUT,
) -> TokenSet:
    """
    Get a fresh access token from a refresh token.

    If the response carries no refresh token, the one passed in is kept, so
    a successful refresh never leaves the caller without one. A rejection
    (revoked or expired refresh token) raises TokenRefreshRejected; the
    caller falls back to a full authorization.
    """
    data = _post_token_request(
        credentials,
        {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        },
        token_url=token_url,
        timeout=timeout,
        rejected=TokenRefreshRejected,
    )
    tokens = _parse_token_set(data)
    if not tokens.refresh_token:
        tokens = tokens.with_refresh_token(refresh_token)
    log_success("Spotify access token refreshed.")
    return tokens
