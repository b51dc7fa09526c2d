from typing import Any, Dict, List, Optional

import requests

from spotauth.config import DEFAULT_REQUEST_TIMEOUT, SPOTIFY_API_BASE
from spotauth.spotify.session import OAuthSession

TIME_RANGES = ("short_term", "medium_term", "long_term")


def spotify_headers(access_token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {access_token}"}


def _get(
    session: OAuthSession,
    path: str,
    params: Optional[Dict[str, Any]] = None,
    *,
    timeout: float = DEFAULT_REQUEST_TIMEOUT,
) -> Dict[str, Any]:
    url = f"{SPOTIFY_API_BASE}/{path.lstrip('/')}"
    r = requests.get(
        url,
        headers=spotify_headers(session.access_token()),
        params=params,
        timeout=timeout,
    )

    # Expired access token: refresh once and retry
    if r.status_code == 401:
        r = requests.get(
            url,
            headers=spotify_headers(session.refresh()),
            params=params,
            timeout=timeout,
        )

    r.raise_for_status()
    return r.json()


def get_current_user_id(session: OAuthSession) -> str:
    return _get(session, "me")["id"]


def get_top_tracks(
    session: OAuthSession,
    time_range: str = "medium_term",
    limit: int = 10,
) -> List[Dict[str, Any]]:
    """
    The user's top tracks (needs the "user-top-read" scope).

    Returns the raw track objects from /me/top/tracks.
    """
    if time_range not in TIME_RANGES:
        raise ValueError(f"time_range must be one of {', '.join(TIME_RANGES)}")
    if not 1 <= limit <= 50:
        raise ValueError("limit must be between 1 and 50")

    data = _get(session, "me/top/tracks", params={"time_range": time_range, "limit": limit})
    return data.get("items", [])


def format_track(track: Dict[str, Any]) -> str:
    artists = ", ".join(a.get("name", "?") for a in track.get("artists", []))
    return f"{track.get('name', '?')} by {artists or '?'}"
