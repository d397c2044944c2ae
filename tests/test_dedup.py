import pytest

from spopify.core import MalformedInput, RemovalSelection
from spopify.pipeline import (
    apply_dedup_plan,
    deduplicate,
    deduplicate_playlist,
    find_duplicates,
    group_duplicates,
    remove_selected,
)

from fakes import FakePlaylistProvider, make_track


def _playlist(*track_ids):
    return [make_track(tid, pos, [("a", "Artist")]) for pos, tid in enumerate(track_ids)]


def test_deduplicate_keeps_first_occurrence() -> None:
    plan = deduplicate(_playlist("A", "B", "A"))

    assert plan.keep_uris == ["spotify:track:A", "spotify:track:B"]
    assert plan.remove_list == [RemovalSelection(uri="spotify:track:A", position=2)]


def test_deduplicate_without_duplicates_removes_nothing() -> None:
    plan = deduplicate(_playlist("A", "B", "C"))

    assert plan.keep_uris == ["spotify:track:A", "spotify:track:B", "spotify:track:C"]
    assert plan.remove_list == []


def test_remove_list_is_sorted_descending() -> None:
    plan = deduplicate(_playlist("A", "B", "A", "B", "A"))

    assert [s.position for s in plan.remove_list] == [4, 3, 2]


def test_entries_without_track_id_are_ignored() -> None:
    tracks = _playlist("A", None, "A", None)

    plan = deduplicate(tracks)

    assert plan.keep_uris == ["spotify:track:A"]
    assert [s.position for s in plan.remove_list] == [2]
    assert len(plan.keep_uris) + len(plan.remove_list) == 2


def test_keep_plus_remove_counts_entries_with_track_id() -> None:
    tracks = _playlist("A", "B", None, "A", "C", "B", "B")

    plan = deduplicate(tracks)

    assert len(plan.keep_uris) + len(plan.remove_list) == 6
    assert len(plan.keep_uris) == len({t.track_id for t in tracks if t.track_id})


def test_find_duplicates_and_groups() -> None:
    tracks = _playlist("A", "B", "A", "B", "C", "A")

    duplicates = find_duplicates(tracks)

    assert [(d.track_id, d.position) for d in duplicates] == [("A", 2), ("A", 5), ("B", 3)]
    assert duplicates[0].uri == "spotify:track:A"
    assert group_duplicates(tracks) == {"A": [0, 2, 5], "B": [1, 3]}


def test_find_duplicates_uses_positions_not_input_order() -> None:
    tracks = [
        make_track("A", 7, [("a", "Artist")]),
        make_track("A", 3, [("a", "Artist")]),
    ]

    assert [d.position for d in find_duplicates(tracks)] == [7]
    assert deduplicate(tracks).remove_list[0].position == 7


def test_apply_plan_removes_descending_and_is_idempotent() -> None:
    provider = FakePlaylistProvider({"p1": _playlist("A", "B", "A", "C", "B")})

    result = deduplicate_playlist(provider, "p1")

    assert result is not None
    plan, removed = result
    assert removed == 2
    assert provider.removal_calls == [[4, 2]]
    assert [t.track_id for t in provider.playlists["p1"]] == ["A", "B", "C"]

    # A second run finds nothing left to remove.
    plan, removed = deduplicate_playlist(provider, "p1")
    assert removed == 0
    assert plan.remove_list == []
    assert provider.removal_calls == [[4, 2]]


def test_deduplicate_playlist_unknown_playlist() -> None:
    provider = FakePlaylistProvider()

    assert deduplicate_playlist(provider, "missing") is None


def test_apply_empty_plan_makes_no_remote_call() -> None:
    provider = FakePlaylistProvider({"p1": _playlist("A")})

    assert apply_dedup_plan(provider, "p1", deduplicate(provider.playlists["p1"])) == 0
    assert provider.removal_calls == []


def test_remove_selected_removes_exact_positions_descending() -> None:
    tracks = _playlist("A", "B", "A", "B")
    provider = FakePlaylistProvider({"p1": list(tracks)})
    selections = [
        RemovalSelection(uri="spotify:track:A", position=0),
        RemovalSelection(uri="spotify:track:B", position=3),
    ]

    removed = remove_selected(provider, "p1", selections, tracks)

    assert removed == 2
    assert provider.removal_calls == [[3, 0]]
    assert [t.track_id for t in provider.playlists["p1"]] == ["B", "A"]


def test_remove_selected_rejects_mismatched_selection() -> None:
    tracks = _playlist("A", "B")
    provider = FakePlaylistProvider({"p1": list(tracks)})

    with pytest.raises(MalformedInput):
        remove_selected(
            provider, "p1", [RemovalSelection(uri="spotify:track:A", position=1)], tracks
        )
    with pytest.raises(MalformedInput):
        remove_selected(
            provider, "p1", [RemovalSelection(uri="spotify:track:A", position=9)], tracks
        )
    with pytest.raises(MalformedInput):
        remove_selected(provider, "p1", [RemovalSelection(uri="spotify:track:A", position=-1)])

    assert provider.removal_calls == []


def test_remove_selected_with_nothing_selected() -> None:
    provider = FakePlaylistProvider({"p1": _playlist("A")})

    assert remove_selected(provider, "p1", []) == 0
    assert provider.removal_calls == []
