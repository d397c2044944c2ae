from fastapi import APIRouter, Depends

from spopify.core import log_info
from spopify.pipeline import (
    PlaylistProvider,
    deduplicate_playlist,
    find_duplicates,
    group_duplicates,
    remove_selected,
)

from ..deps import get_playlist_provider
from .enrich import load_request_tracks
from .schemas import (
    DeduplicateRequest,
    DeduplicateResponse,
    DuplicatesResponse,
    RemoveSelectedRequest,
    RemoveSelectedResponse,
    TracksRequest,
    duplicate_out,
    groups_out,
    plan_out,
    to_entries,
    to_selections,
)

router = APIRouter()


@router.post("/duplicates", response_model=DuplicatesResponse)
def duplicates(
    body: TracksRequest,
    provider: PlaylistProvider = Depends(get_playlist_provider),
) -> DuplicatesResponse:
    """Read-only: every occurrence of a track id seen more than once."""
    tracks = load_request_tracks(body, provider)
    if tracks is None:
        return DuplicatesResponse(status="not_found")

    found = find_duplicates(tracks)
    log_info(f"Duplicates: {len(found)} occurrences.")
    return DuplicatesResponse(
        status="done",
        duplicates=[duplicate_out(d) for d in found],
        groups=groups_out(group_duplicates(tracks)),
    )


@router.post("/deduplicate", response_model=DeduplicateResponse)
def deduplicate_endpoint(
    body: DeduplicateRequest,
    provider: PlaylistProvider = Depends(get_playlist_provider),
) -> DeduplicateResponse:
    """
    Keep the first occurrence of every track id and remove the others from
    the remote playlist (positions in descending order).
    """
    tracks = to_entries(body.tracks) if body.tracks is not None else None
    result = deduplicate_playlist(provider, body.playlist_id, tracks)
    if result is None:
        return DeduplicateResponse(status="not_found")

    plan, removed = result
    return plan_out(plan, removed)


@router.post("/remove-selected", response_model=RemoveSelectedResponse)
def remove_selected_endpoint(
    body: RemoveSelectedRequest,
    provider: PlaylistProvider = Depends(get_playlist_provider),
) -> RemoveSelectedResponse:
    """Remove exactly the selected (uri, position) pairs."""
    tracks = None
    if body.verify:
        tracks = provider.get_playlist_entries(body.playlist_id)
        if tracks is None:
            return RemoveSelectedResponse(status="not_found")

    removed = remove_selected(provider, body.playlist_id, to_selections(body.selections), tracks)
    return RemoveSelectedResponse(status="done", removed=removed)
