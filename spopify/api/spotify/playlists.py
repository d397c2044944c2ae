from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query

from spopify.core import log_info, log_step
from spopify.pipeline import PlaylistProvider, create_playlist_from_tracks
from spopify.spotify import SpotifyArtistGenreSource, parse_artist_ids

from ..deps import get_current_user, get_playlist_provider, get_token_info
from ..pipeline.schemas import (
    ArtistOut,
    CreatePlaylistRequest,
    CreatePlaylistResponse,
    EnrichedTrackOut,
    to_enriched,
)
from .schemas import ArtistGenresResponse, PlaylistSummary

router = APIRouter()


@router.get("/playlists", response_model=List[PlaylistSummary])
def get_spotify_playlists(
    provider: PlaylistProvider = Depends(get_playlist_provider),
) -> List[PlaylistSummary]:
    """
    List the current user's Spotify playlists.

    This endpoint requires a valid Spotify token.
    """
    log_step("Fetching Spotify playlists for current user...")
    raw_playlists = provider.list_playlists()
    log_info(f"Spotify playlists: {len(raw_playlists)} playlists found.")

    return [
        PlaylistSummary(
            id=p["id"],
            name=p["name"],
            tracks_total=(p.get("tracks") or {}).get("total"),
        )
        for p in raw_playlists
        if "id" in p and "name" in p
    ]


@router.get("/playlists/{playlist_id}/tracks", response_model=List[EnrichedTrackOut])
def get_spotify_playlist_tracks(
    playlist_id: str,
    provider: PlaylistProvider = Depends(get_playlist_provider),
) -> List[EnrichedTrackOut]:
    """Playlist entries with their positions; genres are left empty here."""
    entries = provider.get_playlist_entries(playlist_id)
    if entries is None:
        raise HTTPException(status_code=404, detail="Playlist not found.")

    return [
        EnrichedTrackOut(
            track_id=e.track_id,
            name=e.track_name,
            artists=[ArtistOut(artist_id=a.artist_id, artist_name=a.artist_name) for a in e.artists],
            position=e.position,
            uri=e.track_uri,
            genres=[],
        )
        for e in entries
    ]


@router.get("/artist-genres", response_model=ArtistGenresResponse)
def get_artist_genres(
    artist_ids: str = Query(..., description='JSON list of {"artistId": ...} objects'),
    token_info: Dict = Depends(get_token_info),
) -> ArtistGenresResponse:
    """Raw (not normalized) Spotify genres per artist id."""
    ids = parse_artist_ids(artist_ids)
    source = SpotifyArtistGenreSource(token_info)

    genres: Dict[str, List[str]] = {}
    for start in range(0, len(ids), 50):
        genres.update(source.get_genres_by_artist_ids(ids[start:start + 50]))
    return ArtistGenresResponse(genres=genres)


@router.post("/create-playlist", response_model=CreatePlaylistResponse)
def create_spotify_playlist(
    body: CreatePlaylistRequest,
    provider: PlaylistProvider = Depends(get_playlist_provider),
    user_id: str = Depends(get_current_user),
) -> CreatePlaylistResponse:
    """Create a playlist from (usually genre-filtered) enriched tracks."""
    created = create_playlist_from_tracks(
        provider,
        user_id,
        to_enriched(body.tracks),
        selected_genres=body.genres,
        custom_name=body.name,
    )
    return CreatePlaylistResponse(**created)
