import json
import time
from pathlib import Path

import pytest
import requests

from spopify.core import MalformedInput, NotFound, PlaylistMutationError
from spopify.spotify import (
    SpotifyArtistGenreSource,
    SpotifyAuthError,
    SpotifyTokenMissing,
    build_spotify_auth_url,
    get_playlist_entries,
    load_spotify_token,
    parse_artist_ids,
    remove_positions,
    spotify_request,
)

TOKEN = {"access_token": "token"}


def _response(payload) -> requests.Response:
    r = requests.Response()
    r.status_code = 200
    r._content = json.dumps(payload).encode("utf-8")
    return r


# --- Artist ids ------------------------------------------------------------


def test_parse_artist_ids_accepts_encoded_json_list() -> None:
    raw = "%5B%7B%22artistId%22%3A%22a1%22%7D%2C%7B%22artistId%22%3A%22a2%22%7D%5D"

    assert parse_artist_ids(raw) == ["a1", "a2"]
    assert parse_artist_ids('["a3"]') == ["a3"]


@pytest.mark.parametrize("raw", ["not json", '{"artistId": "a1"}', '[{"id": "a1"}]', "[1]"])
def test_parse_artist_ids_rejects_invalid_format(raw: str) -> None:
    with pytest.raises(MalformedInput, match="Invalid artist_ids format"):
        parse_artist_ids(raw)


def test_artist_genre_source_skips_null_artists(monkeypatch) -> None:
    calls = []

    def fake_request(method, url, token_info, **kwargs):
        calls.append(kwargs["params"])
        return _response(
            {"artists": [{"id": "a1", "genres": ["indie pop"]}, None, {"id": "a3", "genres": []}]}
        )

    monkeypatch.setattr("spopify.spotify.artists.spotify_request", fake_request)

    genres = SpotifyArtistGenreSource(TOKEN).get_genres_by_artist_ids(["a1", "a2", "a3"])

    assert genres == {"a1": ["indie pop"], "a3": []}
    assert calls == [{"ids": "a1,a2,a3"}]


# --- Playlist entries ------------------------------------------------------


def test_get_playlist_entries_paginates_and_keeps_positions(monkeypatch) -> None:
    pages = [
        {
            "items": [
                {"track": {"id": "t1", "name": "One", "uri": "spotify:track:t1", "type": "track",
                           "artists": [{"id": "a1", "name": "Artist"}]}},
                {"track": {"id": None, "name": "Local", "uri": "spotify:local:x", "is_local": True,
                           "type": "track", "artists": [{"id": None, "name": "Me"}]}},
            ],
            "next": "https://api.spotify.com/v1/next-page",
            "total": 3,
        },
        {
            "items": [{"track": None}],
            "next": None,
            "total": 3,
        },
    ]

    def fake_request(method, url, token_info, **kwargs):
        return _response(pages.pop(0))

    monkeypatch.setattr("spopify.spotify.playlists.spotify_request", fake_request)

    entries = get_playlist_entries(TOKEN, "p1")

    assert [e.position for e in entries] == [0, 1, 2]
    assert [e.track_id for e in entries] == ["t1", None, None]
    assert entries[0].artist_ids == ["a1"]
    assert entries[1].uri == "spotify:local:x"


def test_get_playlist_entries_unknown_playlist(monkeypatch) -> None:
    def fake_request(method, url, token_info, **kwargs):
        raise NotFound("spotify: playlist not found")

    monkeypatch.setattr("spopify.spotify.playlists.spotify_request", fake_request)

    assert get_playlist_entries(TOKEN, "missing") is None


# --- Removal ---------------------------------------------------------------


def test_remove_positions_descending_batches_chain_snapshots(monkeypatch) -> None:
    deletes = []

    def fake_request(method, url, token_info, **kwargs):
        if method == "GET":
            return _response({"snapshot_id": "s0"})
        deletes.append(kwargs["json"])
        return _response({"snapshot_id": f"s{len(deletes)}"})

    monkeypatch.setattr("spopify.spotify.playlists.spotify_request", fake_request)

    removed = remove_positions(TOKEN, "p1", list(range(150)))

    assert removed == 150
    assert len(deletes) == 2
    assert deletes[0]["positions"] == list(range(149, 49, -1))
    assert deletes[0]["snapshot_id"] == "s0"
    assert deletes[1]["positions"] == list(range(49, -1, -1))
    assert deletes[1]["snapshot_id"] == "s1"


def test_remove_positions_failure_reports_progress(monkeypatch) -> None:
    deletes = []

    def fake_request(method, url, token_info, **kwargs):
        if method == "GET":
            return _response({"snapshot_id": "s0"})
        deletes.append(kwargs["json"])
        if len(deletes) == 2:
            raise requests.HTTPError("400 Bad Request")
        return _response({"snapshot_id": "s1"})

    monkeypatch.setattr("spopify.spotify.playlists.spotify_request", fake_request)

    with pytest.raises(PlaylistMutationError) as excinfo:
        remove_positions(TOKEN, "p1", list(range(120)))

    assert excinfo.value.removed_before_failure == 100


# --- Token -----------------------------------------------------------------


def test_load_spotify_token_missing(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(
        "spopify.spotify.auth.SPOTIFY_TOKEN_FILE",
        str(tmp_path / "token.json"),
        raising=False,
    )

    with pytest.raises(SpotifyTokenMissing):
        load_spotify_token()


def test_load_spotify_token_refreshes_when_expired(tmp_path: Path, monkeypatch) -> None:
    token_path = tmp_path / "token.json"
    token_path.write_text(
        json.dumps(
            {
                "access_token": "old",
                "refresh_token": "refresh",
                "expires_in": 3600,
                "timestamp": int(time.time()) - 3590,
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setattr("spopify.spotify.auth.SPOTIFY_TOKEN_FILE", str(token_path), raising=False)
    refreshed = []

    def fake_refresh(refresh_token):
        refreshed.append(refresh_token)
        return {"access_token": "new", "refresh_token": refresh_token}

    monkeypatch.setattr("spopify.spotify.auth.refresh_spotify_token", fake_refresh)

    assert load_spotify_token()["access_token"] == "new"
    assert refreshed == ["refresh"]


def test_build_spotify_auth_url_carries_scopes_and_state() -> None:
    url = build_spotify_auth_url(state="xyz")

    assert url.startswith("https://accounts.spotify.com/authorize?")
    assert "playlist-modify-private" in url
    assert "state=xyz" in url


def test_spotify_request_maps_revoked_token_to_auth_error(monkeypatch) -> None:
    def fake_request(method, url, **kwargs):
        r = _response({"error": {"status": 401, "message": "The access token expired"}})
        r.status_code = 401
        return r

    monkeypatch.setattr("spopify.spotify.auth.requests.request", fake_request)

    with pytest.raises(SpotifyAuthError):
        spotify_request("GET", "https://api.spotify.com/v1/me", TOKEN)
