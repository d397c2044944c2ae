import pytest

from spopify.config import UNKNOWN_GENRE
from spopify.core import EnrichedTrack, MalformedInput, TrackEntry
from spopify.pipeline import (
    collect_genres,
    create_playlist_from_tracks,
    filter_by_genres,
    genres_status,
    playlist_name_for,
)

from fakes import FakePlaylistProvider, make_track


def _enriched(track_id, position, genres):
    return EnrichedTrack(entry=make_track(track_id, position), genres=list(genres))


def test_collect_genres_sorted_case_insensitively() -> None:
    tracks = [
        _enriched("t1", 0, ["rock", "Bollywood"]),
        _enriched("t2", 1, ["ambient drone", "Rock"]),
    ]

    assert collect_genres(tracks) == ["ambient drone", "Bollywood", "rock"]
    assert collect_genres(tracks, main_only=True) == ["rock"]


def test_genres_status() -> None:
    assert genres_status([]) == "no_genres"
    assert genres_status([UNKNOWN_GENRE]) == "unrecognized"
    assert genres_status(["pop", UNKNOWN_GENRE]) == "ok"


def test_filter_by_genres_matches_any_selected_genre() -> None:
    tracks = [
        _enriched("t1", 0, ["rock"]),
        _enriched("t2", 1, ["Pop", "jazz"]),
        _enriched("t3", 2, [UNKNOWN_GENRE]),
    ]

    selected = filter_by_genres(tracks, ["pop", "rock"])

    assert [t.track_id for t in selected] == ["t1", "t2"]
    assert filter_by_genres(tracks, []) == []


def test_playlist_name_for() -> None:
    assert playlist_name_for(["rock", "pop"]) == "My rock, pop Playlist"
    assert playlist_name_for([]) == "My Filtered Playlist"
    assert playlist_name_for(["rock"], "  Road trip ") == "Road trip"


def test_create_playlist_from_tracks_skips_entries_without_uri() -> None:
    provider = FakePlaylistProvider()
    local = EnrichedTrack(
        entry=TrackEntry(track_id=None, track_name="local", position=2),
        genres=["rock"],
    )
    tracks = [_enriched("t1", 0, ["rock"]), _enriched("t2", 1, ["rock"]), local]

    created = create_playlist_from_tracks(provider, "user1", tracks, ["rock"])

    assert created["name"] == "My rock Playlist"
    assert created["tracks_added"] == 2
    assert created["url"] == "https://open.spotify.com/playlist/new1"
    assert provider.added[created["id"]] == ["spotify:track:t1", "spotify:track:t2"]
    assert provider.created[0]["user_id"] == "user1"


def test_create_playlist_without_tracks_is_rejected() -> None:
    provider = FakePlaylistProvider()

    with pytest.raises(MalformedInput):
        create_playlist_from_tracks(provider, "user1", [], ["rock"])

    assert provider.created == []
