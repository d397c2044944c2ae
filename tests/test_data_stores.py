from concurrent.futures import ThreadPoolExecutor
import json
from pathlib import Path

import pytest

from spopify.core import FallbackGenreRecord, MalformedInput
from spopify.data import (
    JsonFallbackGenreStore,
    JsonUserGenreStore,
    load_fallback_genres,
    load_user_genres,
    save_fallback_genres,
)


@pytest.fixture
def fallback_file(tmp_path: Path, monkeypatch) -> Path:
    path = tmp_path / "fallback_genres.json"
    monkeypatch.setattr(
        "spopify.data.fallback_genres.FALLBACK_GENRES_FILE",
        str(path),
        raising=False,
    )
    return path


@pytest.fixture
def user_genres_file(tmp_path: Path, monkeypatch) -> Path:
    path = tmp_path / "user_genres.json"
    monkeypatch.setattr(
        "spopify.data.user_genres.USER_GENRES_FILE",
        str(path),
        raising=False,
    )
    return path


# --- Fallback genres -------------------------------------------------------


def test_fallback_genres_roundtrip(fallback_file: Path) -> None:
    save_fallback_genres(
        [
            FallbackGenreRecord(name="Arijit Singh", genres=("world", "bollywood")),
            FallbackGenreRecord(name="Ritviz", genres=("electronic",)),
        ]
    )

    loaded = load_fallback_genres()

    assert [r.name for r in loaded] == ["Arijit Singh", "Ritviz"]
    assert loaded[0].genres == ("world", "bollywood")


def test_fallback_genres_skip_invalid_records(fallback_file: Path) -> None:
    fallback_file.write_text(
        json.dumps(
            [
                {"name": "Valid", "genres": ["rock", 3, ""]},
                {"name": "", "genres": ["pop"]},
                {"name": "No genres"},
                "not a record",
            ]
        ),
        encoding="utf-8",
    )

    loaded = load_fallback_genres()

    assert loaded == [FallbackGenreRecord(name="Valid", genres=("rock",))]


def test_fallback_genres_corrupted_file_yields_no_records(fallback_file: Path) -> None:
    fallback_file.write_text("{ not json", encoding="utf-8")

    assert load_fallback_genres() == []


def test_fallback_store_find_by_names_is_case_insensitive(fallback_file: Path) -> None:
    store = JsonFallbackGenreStore()
    store.upsert("AP Dhillon", ["world", "hip hop"])
    store.upsert("Anuv Jain", ["indie"])

    found = store.find_by_names(["ap dhillon", "Unknown"])

    assert found == [FallbackGenreRecord(name="AP Dhillon", genres=("world", "hip hop"))]
    assert store.find_by_names([]) == []


def test_fallback_store_find_by_names_ignores_surrounding_whitespace(fallback_file: Path) -> None:
    store = JsonFallbackGenreStore()
    store.upsert("Some Artist", ["rock"])

    found = store.find_by_names(["  Some Artist ", "   "])

    assert found == [FallbackGenreRecord(name="Some Artist", genres=("rock",))]


def test_fallback_store_concurrent_upserts_keep_every_record(fallback_file: Path) -> None:
    store = JsonFallbackGenreStore()
    names = [f"Artist {i}" for i in range(20)]

    with ThreadPoolExecutor(max_workers=8) as executor:
        list(executor.map(lambda n: store.upsert(n, ["rock"]), names))

    assert sorted(r.name for r in store.list_records()) == sorted(names)


def test_fallback_store_upsert_replaces_same_name(fallback_file: Path) -> None:
    store = JsonFallbackGenreStore()
    store.upsert("Ritviz", ["electronic"])
    record = store.upsert("ritviz", ["World", "world", "electronic"])

    assert record.genres == ("World", "electronic")
    assert [r.name for r in store.list_records()] == ["ritviz"]

    with pytest.raises(MalformedInput):
        store.upsert("  ", ["rock"])


# --- User genres -----------------------------------------------------------


def test_user_genre_add_is_idempotent(user_genres_file: Path) -> None:
    store = JsonUserGenreStore()

    assert store.add("user1", "track1", "Lo-Fi") == ["Lo-Fi"]
    assert store.add("user1", "track1", "lo-fi") == ["Lo-Fi"]
    assert store.add("user1", "track1", "study") == ["Lo-Fi", "study"]

    assert load_user_genres() == {"user1": {"track1": ["Lo-Fi", "study"]}}


def test_user_genre_remove_cleans_empty_entries(user_genres_file: Path) -> None:
    store = JsonUserGenreStore()
    store.add("user1", "track1", "rock")
    store.add("user1", "track2", "jazz")

    assert store.remove("user1", "track1", "ROCK") == []
    assert store.list_for_user("user1") == {"track2": ["jazz"]}

    store.remove("user1", "track2", "jazz")
    assert load_user_genres() == {}


def test_user_genre_rejects_empty_genre(user_genres_file: Path) -> None:
    store = JsonUserGenreStore()

    with pytest.raises(MalformedInput):
        store.add("user1", "track1", "  ")

    assert store.get("user1", "track1") == []
    assert not user_genres_file.exists()
