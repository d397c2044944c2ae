from typing import List

from fastapi import APIRouter, Depends

from spopify.core import MalformedInput, TrackEntry, log_info, log_step
from spopify.pipeline import (
    GenreEnrichmentPipeline,
    PlaylistProvider,
    collect_genres,
    genres_status,
)

from ..deps import get_enrichment_pipeline, get_playlist_provider
from .schemas import EnrichResponse, TracksRequest, enriched_out, to_entries

router = APIRouter()


def load_request_tracks(body: TracksRequest, provider: PlaylistProvider) -> List[TrackEntry] | None:
    """Inline tracks win over the playlist id; None means the playlist is unknown."""
    if body.tracks is not None:
        return to_entries(body.tracks)
    if not body.playlist_id:
        raise MalformedInput("Either 'tracks' or 'playlistId' is required.")
    return provider.get_playlist_entries(body.playlist_id)


@router.post("/enrich", response_model=EnrichResponse)
def enrich(
    body: TracksRequest,
    provider: PlaylistProvider = Depends(get_playlist_provider),
    pipeline: GenreEnrichmentPipeline = Depends(get_enrichment_pipeline),
) -> EnrichResponse:
    """
    Resolve genres for every track of a playlist.

    The answer always carries one entry per input track, in input order;
    tracks nothing could be resolved for carry the "Unknown Genre" sentinel.
    """
    tracks = load_request_tracks(body, provider)
    if tracks is None:
        return EnrichResponse(status="not_found")

    log_step(f"Enrich step ({len(tracks)} tracks)...")
    enriched = pipeline.enrich(tracks)
    genres = collect_genres(enriched)
    log_info(f"Enrich step done: {len(genres)} distinct genres.")

    return EnrichResponse(
        status=genres_status(genres) if enriched else "empty",
        tracks=[enriched_out(t) for t in enriched],
        genres=genres,
        main_genres=collect_genres(enriched, main_only=True),
    )
