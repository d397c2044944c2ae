"""Public façade for the spopify.spotify package.

This module exposes the Spotify Web API integration: authentication, the
artist-genre source used as primary metadata source, and the playlist
provider. Callers should import these symbols from this façade instead of
the internal auth, artists or playlists modules.
"""

from .artists import SpotifyArtistGenreSource, parse_artist_ids
from .auth import (
    SpotifyAuthError,
    SpotifyTokenMissing,
    build_spotify_auth_url,
    exchange_code_for_token,
    get_current_user_id,
    load_spotify_token,
    refresh_spotify_token,
    spotify_headers,
    spotify_request,
)
from .playlists import (
    SpotifyPlaylistProvider,
    add_tracks,
    create_playlist,
    get_playlist_entries,
    list_user_playlists,
    remove_positions,
)

__all__ = [
    "build_spotify_auth_url",
    "exchange_code_for_token",
    "refresh_spotify_token",
    "load_spotify_token",
    "spotify_headers",
    "spotify_request",
    "get_current_user_id",
    "SpotifyAuthError",
    "SpotifyTokenMissing",
    "SpotifyArtistGenreSource",
    "parse_artist_ids",
    "SpotifyPlaylistProvider",
    "list_user_playlists",
    "get_playlist_entries",
    "create_playlist",
    "add_tracks",
    "remove_positions",
]
