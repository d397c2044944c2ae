"""Duplicate detection and removal for playlist entries.

Duplicates are keyed strictly by track id. Entries without a track id
(local files, unavailable tracks) are ignored: they are neither kept nor
removed. Within a group of entries sharing a track id, the lowest position
is kept and every other position is a removal candidate.

Removals are always sent in descending position order so that, when they
are applied one request after another against the live remote playlist,
the positions of the entries still to be removed do not shift.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from spopify.core import (
    DedupPlan,
    DuplicateEntry,
    MalformedInput,
    RemovalSelection,
    TrackEntry,
    log_info,
    log_section,
    log_step,
    log_success,
)

from .providers import PlaylistProvider


def _grouped(tracks: Sequence[TrackEntry]) -> Dict[str, List[TrackEntry]]:
    """track_id -> entries by ascending position, groups in first-occurrence order."""
    groups: Dict[str, List[TrackEntry]] = {}
    for track in sorted(tracks, key=lambda t: t.position):
        if not track.track_id:
            continue
        groups.setdefault(track.track_id, []).append(track)
    return groups


def group_duplicates(tracks: Sequence[TrackEntry]) -> Dict[str, List[int]]:
    """track_id -> positions, only for track ids that occur more than once."""
    return {
        track_id: [t.position for t in entries]
        for track_id, entries in _grouped(tracks).items()
        if len(entries) > 1
    }


def find_duplicates(tracks: Sequence[TrackEntry]) -> List[DuplicateEntry]:
    """Every occurrence beyond the first one of each track id."""
    duplicates: List[DuplicateEntry] = []
    for track_id, entries in _grouped(tracks).items():
        for entry in entries[1:]:
            duplicates.append(
                DuplicateEntry(
                    track_id=track_id,
                    position=entry.position,
                    name=entry.track_name,
                    artists=entry.artists,
                    uri=entry.track_uri,
                )
            )
    return duplicates


def deduplicate(tracks: Sequence[TrackEntry]) -> DedupPlan:
    """
    Compute which URIs stay and which positions go.

    len(keep_uris) + len(remove_list) equals the number of entries that
    carry a track id.
    """
    plan = DedupPlan()
    for entries in _grouped(tracks).values():
        plan.keep_uris.append(entries[0].track_uri)
        for entry in entries[1:]:
            plan.remove_list.append(
                RemovalSelection(uri=entry.track_uri, position=entry.position)
            )
    plan.remove_list.sort(key=lambda s: s.position, reverse=True)
    return plan


def _check_selections(
    selections: Sequence[RemovalSelection],
    tracks: Optional[Sequence[TrackEntry]],
) -> List[int]:
    positions: List[int] = []
    by_position = {t.position: t for t in tracks} if tracks is not None else None

    for selection in selections:
        if not isinstance(selection.position, int) or selection.position < 0:
            raise MalformedInput(f"invalid position {selection.position!r}")
        if by_position is not None:
            entry = by_position.get(selection.position)
            if entry is None:
                raise MalformedInput(f"no playlist entry at position {selection.position}")
            if selection.uri and entry.track_uri != selection.uri:
                raise MalformedInput(
                    f"position {selection.position} holds {entry.track_uri}, "
                    f"not {selection.uri}"
                )
        if selection.position not in positions:
            positions.append(selection.position)

    return sorted(positions, reverse=True)


def remove_selected(
    provider: PlaylistProvider,
    playlist_id: str,
    selections: Sequence[RemovalSelection],
    tracks: Optional[Sequence[TrackEntry]] = None,
) -> int:
    """
    Remove exactly the selected positions, without recomputing duplicates.

    When `tracks` (the playlist state the selections were made against) is
    given, every selection must point at an existing entry with the same
    URI; otherwise MalformedInput is raised and nothing is removed.
    """
    positions = _check_selections(selections, tracks)
    if not positions:
        return 0
    log_step(f"Removing {len(positions)} selected entries from playlist {playlist_id}...")
    removed = provider.remove_positions(playlist_id, positions)
    log_success(f"Removed {removed} entries from playlist {playlist_id}.")
    return removed


def apply_dedup_plan(
    provider: PlaylistProvider,
    playlist_id: str,
    plan: DedupPlan,
) -> int:
    positions = sorted({s.position for s in plan.remove_list}, reverse=True)
    if not positions:
        log_info(f"No duplicates in playlist {playlist_id}.")
        return 0
    log_step(f"Removing {len(positions)} duplicate entries from playlist {playlist_id}...")
    removed = provider.remove_positions(playlist_id, positions)
    log_success(f"Removed {removed} duplicate entries from playlist {playlist_id}.")
    return removed


def deduplicate_playlist(
    provider: PlaylistProvider,
    playlist_id: str,
    tracks: Optional[Sequence[TrackEntry]] = None,
) -> Optional[Tuple[DedupPlan, int]]:
    """
    Fetch (unless `tracks` is given), plan and apply the deduplication of a
    playlist. Returns None when the playlist is unknown.
    """
    log_section(f"Deduplicating playlist {playlist_id}")
    if tracks is None:
        tracks = provider.get_playlist_entries(playlist_id)
        if tracks is None:
            return None
    plan = deduplicate(tracks)
    removed = apply_dedup_plan(provider, playlist_id, plan)
    return plan, removed
