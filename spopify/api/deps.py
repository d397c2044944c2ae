"""FastAPI dependencies wiring the HTTP layer to Spotify, Last.fm and the stores.

Tests replace these through app.dependency_overrides.
"""

from typing import Dict, NoReturn

from fastapi import Depends, HTTPException

from spopify.config import LASTFM_API_KEY
from spopify.data import JsonFallbackGenreStore, JsonUserGenreStore
from spopify.lastfm import LastFmTagSource
from spopify.pipeline import GenreEnrichmentPipeline, PlaylistProvider
from spopify.spotify import (
    SpotifyArtistGenreSource,
    SpotifyPlaylistProvider,
    SpotifyTokenMissing,
    build_spotify_auth_url,
    get_current_user_id,
    load_spotify_token,
)


def raise_unauth(e: SpotifyTokenMissing) -> NoReturn:
    raise HTTPException(
        status_code=401,
        detail={
            "status": "unauthenticated",
            "message": str(e) or "Spotify authorization required.",
            "auth_url": build_spotify_auth_url(),
        },
    )


def get_token_info() -> Dict:
    try:
        return load_spotify_token()
    except SpotifyTokenMissing as e:
        raise_unauth(e)


def get_playlist_provider(token_info: Dict = Depends(get_token_info)) -> PlaylistProvider:
    return SpotifyPlaylistProvider(token_info)


def get_current_user(token_info: Dict = Depends(get_token_info)) -> str:
    return get_current_user_id(token_info)


def get_fallback_store() -> JsonFallbackGenreStore:
    return JsonFallbackGenreStore()


def get_user_genre_store() -> JsonUserGenreStore:
    return JsonUserGenreStore()


def get_enrichment_pipeline(
    token_info: Dict = Depends(get_token_info),
    fallback_store: JsonFallbackGenreStore = Depends(get_fallback_store),
) -> GenreEnrichmentPipeline:
    return GenreEnrichmentPipeline(
        primary=SpotifyArtistGenreSource(token_info),
        secondary=LastFmTagSource() if LASTFM_API_KEY else None,
        fallback_store=fallback_store,
    )
