import pytest
import requests

from fakes import FakeResponse, RecordingHttp
from spotauth.config import SPOTIFY_API_BASE
from spotauth.core import TokenSet
from spotauth.errors import NotAuthenticated
from spotauth.spotify import (
    OAuthSession,
    format_track,
    get_current_user_id,
    get_top_tracks,
    spotify_headers,
)

TRACK = {"name": "Everything In Its Right Place", "artists": [{"name": "Radiohead"}]}


@pytest.fixture
def session(credentials, redirect_target) -> OAuthSession:
    s = OAuthSession(credentials, redirect_target, open_browser=lambda url: True)
    s._store(TokenSet(access_token="AT1", expires_in=3600, refresh_token="RT1"))
    return s


def test_spotify_headers() -> None:
    assert spotify_headers("AT1") == {"Authorization": "Bearer AT1"}


def test_get_current_user_id_uses_bearer_token(session, monkeypatch) -> None:
    get = RecordingHttp(FakeResponse(200, {"id": "user42"}))
    monkeypatch.setattr("spotauth.spotify.resources.requests.get", get)

    assert get_current_user_id(session) == "user42"
    assert get.calls[0]["url"] == f"{SPOTIFY_API_BASE}/me"
    assert get.calls[0]["headers"] == {"Authorization": "Bearer AT1"}


def test_get_top_tracks_passes_query(session, monkeypatch) -> None:
    get = RecordingHttp(FakeResponse(200, {"items": [TRACK]}))
    monkeypatch.setattr("spotauth.spotify.resources.requests.get", get)

    tracks = get_top_tracks(session, time_range="short_term", limit=5)

    assert tracks == [TRACK]
    assert get.calls[0]["url"] == f"{SPOTIFY_API_BASE}/me/top/tracks"
    assert get.calls[0]["params"] == {"time_range": "short_term", "limit": 5}


def test_unauthorized_call_refreshes_once_and_retries(session, monkeypatch) -> None:
    get = RecordingHttp(FakeResponse(401, {"error": "expired"}), FakeResponse(200, {"id": "u"}))
    post = RecordingHttp(FakeResponse(200, {"access_token": "AT2", "expires_in": 3600}))
    monkeypatch.setattr("spotauth.spotify.resources.requests.get", get)
    monkeypatch.setattr("spotauth.spotify.tokens.requests.post", post)

    assert get_current_user_id(session) == "u"

    assert len(post.calls) == 1
    assert get.calls[1]["headers"] == {"Authorization": "Bearer AT2"}
    assert session.token_set().refresh_token == "RT1"


def test_second_unauthorized_is_raised(session, monkeypatch) -> None:
    get = RecordingHttp(FakeResponse(401, {}), FakeResponse(401, {}))
    post = RecordingHttp(FakeResponse(200, {"access_token": "AT2", "expires_in": 3600}))
    monkeypatch.setattr("spotauth.spotify.resources.requests.get", get)
    monkeypatch.setattr("spotauth.spotify.tokens.requests.post", post)

    with pytest.raises(requests.HTTPError):
        get_current_user_id(session)


def test_requires_authentication(credentials, redirect_target) -> None:
    session = OAuthSession(credentials, redirect_target, open_browser=lambda url: True)

    with pytest.raises(NotAuthenticated):
        get_current_user_id(session)


@pytest.mark.parametrize("kwargs", [{"time_range": "forever"}, {"limit": 0}, {"limit": 51}])
def test_get_top_tracks_validates_arguments(session, kwargs) -> None:
    with pytest.raises(ValueError):
        get_top_tracks(session, **kwargs)


def test_format_track() -> None:
    assert format_track(TRACK) == "Everything In Its Right Place by Radiohead"
    assert format_track({"name": "Solo", "artists": []}) == "Solo by ?"
