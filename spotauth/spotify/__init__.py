"""Public façade for the spotauth.spotify package.

This module exposes the Spotify authorization flow (URL builder, browser
launcher, loopback listener, token exchange/refresh, session) and the small
bearer-token consumers built on top of it. Callers should import these
symbols from this façade instead of the internal modules.
"""

from .authorize_url import build_authorize_url
from .browser import launch_browser
from .listener import (
    ListenerState,
    RedirectListener,
    listen_for_code,
    parse_callback_query,
)
from .resources import (
    format_track,
    get_current_user_id,
    get_top_tracks,
    spotify_headers,
)
from .session import OAuthSession
from .token_cache import CachedTokens, TokenCache
from .tokens import exchange_code_for_token, refresh_access_token

__all__ = [
    "build_authorize_url",
    "launch_browser",
    "ListenerState",
    "RedirectListener",
    "listen_for_code",
    "parse_callback_query",
    "exchange_code_for_token",
    "refresh_access_token",
    "TokenCache",
    "CachedTokens",
    "OAuthSession",
    "spotify_headers",
    "get_current_user_id",
    "get_top_tracks",
    "format_track",
]
