import sys

import requests

from spotauth import (
    ConfigurationError,
    NotAuthenticated,
    OAuthSession,
    SpotifyAuthError,
    TokenRefreshRejected,
    load_settings,
)
from spotauth.core import (
    configure_logging,
    log_error,
    log_info,
    log_section,
    log_step,
    log_success,
)
from spotauth.spotify import format_track, get_current_user_id, get_top_tracks


def main() -> int:
    configure_logging()

    try:
        settings = load_settings()
    except ConfigurationError as e:
        log_error(str(e))
        return 1

    log_section("Spotify login")
    session = OAuthSession.from_settings(settings)

    try:
        session.ensure_valid_token()
        if session.is_expired():
            try:
                session.refresh()
            except (TokenRefreshRejected, NotAuthenticated):
                log_step("Stored refresh token is no longer valid, logging in again...")
                session.authorize()

        log_step("Fetching current Spotify user...")
        user_id = get_current_user_id(session)
        log_success(f"Logged in as {user_id}")

        log_section("Top tracks")
        for i, track in enumerate(get_top_tracks(session, limit=10), start=1):
            log_info(f"{i}. {format_track(track)}")
    except SpotifyAuthError as e:
        log_error(f"Spotify authorization failed: {e}")
        return 1
    except requests.RequestException as e:
        log_error(f"Spotify API request failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
