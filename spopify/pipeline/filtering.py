"""Genre filtering of enriched tracks and playlist creation from the result.

Pure helpers except create_playlist_from_tracks(), whose only side effect
is the Spotify playlist it creates.
"""

from typing import Dict, Iterable, List, Optional, Sequence

from spopify.config import DEFAULT_PLAYLIST_NAME, UNKNOWN_GENRE
from spopify.core import (
    DEFAULT_TAXONOMY,
    EnrichedTrack,
    GenreTaxonomy,
    MalformedInput,
    log_step,
    log_success,
)

from .genre_normalizer import merge_genres
from .providers import PlaylistProvider


def collect_genres(
    enriched: Iterable[EnrichedTrack],
    main_only: bool = False,
    taxonomy: GenreTaxonomy = DEFAULT_TAXONOMY,
) -> List[str]:
    """All genres present in the playlist, sorted case-insensitively."""
    genres = merge_genres(*(t.genres for t in enriched))
    if main_only:
        genres = [g for g in genres if taxonomy.is_main_genre(g)]
    return sorted(genres, key=lambda g: (g.casefold(), g))


def genres_status(genres: Sequence[str]) -> str:
    """
    "ok", or why the genre list is useless for filtering:
    "no_genres" (nothing at all) or "unrecognized" (only the sentinel).
    """
    if not genres:
        return "no_genres"
    if len(genres) == 1 and genres[0] == UNKNOWN_GENRE:
        return "unrecognized"
    return "ok"


def filter_by_genres(
    enriched: Iterable[EnrichedTrack],
    selected: Sequence[str],
) -> List[EnrichedTrack]:
    """Tracks carrying at least one of the selected genres; none selected -> none."""
    wanted = {g.lower() for g in selected if g}
    if not wanted:
        return []
    return [t for t in enriched if any(g.lower() in wanted for g in t.genres)]


def playlist_name_for(selected: Sequence[str], custom_name: Optional[str] = None) -> str:
    if custom_name and custom_name.strip():
        return custom_name.strip()
    if selected:
        return f"My {', '.join(selected)} Playlist"
    return DEFAULT_PLAYLIST_NAME


def create_playlist_from_tracks(
    provider: PlaylistProvider,
    user_id: str,
    tracks: Sequence[EnrichedTrack],
    selected_genres: Sequence[str] = (),
    custom_name: Optional[str] = None,
) -> Dict:
    """
    Create a playlist holding `tracks` (entries without a URI are skipped).

    Returns {"id", "name", "url", "tracks_added"}.
    """
    uris = [t.entry.track_uri for t in tracks if t.entry.track_uri]
    if not uris:
        raise MalformedInput("No songs selected for the playlist.")

    name = playlist_name_for(selected_genres, custom_name)
    log_step(f"Creating playlist '{name}' with {len(uris)} tracks...")

    playlist = provider.create_playlist(
        user_id,
        name,
        description=f"Filtered by genre: {', '.join(selected_genres) or 'custom selection'}",
    )
    provider.add_tracks(playlist["id"], uris)

    url = (playlist.get("external_urls") or {}).get("spotify") or ""
    log_success(f"Playlist '{name}' created ({len(uris)} tracks).")
    return {
        "id": playlist["id"],
        "name": name,
        "url": url,
        "tracks_added": len(uris),
    }
