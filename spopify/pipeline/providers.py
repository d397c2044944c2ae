"""Interfaces of the external collaborators used by the pipeline.

The pipeline only talks to these abstract classes; the Spotify, Last.fm and
JSON-file implementations live in spopify.spotify, spopify.lastfm and
spopify.data, and tests substitute in-memory fakes.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Sequence

from spopify.core import FallbackGenreRecord, TrackEntry


class PrimaryMetadataSource(ABC):
    """Artist genres keyed by artist id (Spotify artist objects)."""

    id: str = "primary"

    @abstractmethod
    def get_genres_by_artist_ids(self, ids: Sequence[str]) -> Dict[str, List[str]]:
        """Return artist_id -> raw genre tags for the ids the source knows."""
        raise NotImplementedError


class SecondaryTagSource(ABC):
    """Free-text tags looked up by artist name, one artist per call."""

    id: str = "secondary"

    @abstractmethod
    def get_top_tags(self, artist_name: str) -> List[str]:
        """
        Return raw tags for the artist. Implementations raise RateLimited
        on HTTP 429 so that the caller's retry policy applies.
        """
        raise NotImplementedError


class FallbackGenreStore(ABC):
    """Curated artist-name -> genres records."""

    @abstractmethod
    def find_by_names(self, names: Iterable[str]) -> List[FallbackGenreRecord]:
        """Case-insensitive exact match on artist names."""
        raise NotImplementedError


class UserGenreStore(ABC):
    """Custom genre tags a user attached to tracks."""

    @abstractmethod
    def get(self, user_id: str, track_id: str) -> List[str]:
        raise NotImplementedError

    @abstractmethod
    def add(self, user_id: str, track_id: str, genre: str) -> List[str]:
        """Idempotent: adding an existing tag leaves the list unchanged."""
        raise NotImplementedError

    @abstractmethod
    def remove(self, user_id: str, track_id: str, genre: str) -> List[str]:
        raise NotImplementedError


class PlaylistProvider(ABC):
    """Read and mutate remote playlists."""

    @abstractmethod
    def list_playlists(self) -> List[Dict]:
        raise NotImplementedError

    @abstractmethod
    def get_playlist_entries(self, playlist_id: str) -> Optional[List[TrackEntry]]:
        """All entries in playlist order, or None if the playlist is unknown."""
        raise NotImplementedError

    @abstractmethod
    def create_playlist(
        self,
        user_id: str,
        name: str,
        description: str = "",
        public: bool = True,
    ) -> Dict:
        """Create an empty playlist and return the remote playlist object."""
        raise NotImplementedError

    @abstractmethod
    def add_tracks(self, playlist_id: str, uris: Sequence[str]) -> None:
        raise NotImplementedError

    @abstractmethod
    def remove_positions(self, playlist_id: str, positions: Sequence[int]) -> int:
        """
        Remove the entries at `positions`, which callers pass sorted in
        descending order. Returns the number of removed entries; raises
        PlaylistMutationError when the remote side rejects a request.
        """
        raise NotImplementedError
