from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class ArtistRef:
    artist_id: Optional[str]
    artist_name: Optional[str] = None


@dataclass(frozen=True)
class TrackEntry:
    """
    One row of a playlist, as fetched from Spotify.

    - track_id : Spotify track id (None for local files / unavailable tracks)
    - position : index in the playlist, the ordering key for removals
    - uri      : explicit URI; defaults to spotify:track:<track_id>
    """

    track_id: Optional[str]
    track_name: str
    artists: Tuple[ArtistRef, ...] = ()
    position: int = 0
    uri: Optional[str] = None

    @property
    def track_uri(self) -> Optional[str]:
        if self.uri:
            return self.uri
        if self.track_id:
            return f"spotify:track:{self.track_id}"
        return None

    @property
    def artist_ids(self) -> List[str]:
        return [a.artist_id for a in self.artists if a.artist_id]


@dataclass
class EnrichedTrack:
    entry: TrackEntry
    genres: List[str] = field(default_factory=list)

    @property
    def track_id(self) -> Optional[str]:
        return self.entry.track_id

    @property
    def position(self) -> int:
        return self.entry.position


@dataclass(frozen=True)
class RemovalSelection:
    uri: str
    position: int


@dataclass(frozen=True)
class DuplicateEntry:
    """A playlist entry repeating a track id already seen at a lower position."""

    track_id: str
    position: int
    name: str
    artists: Tuple[ArtistRef, ...]
    uri: str


@dataclass
class DedupPlan:
    """
    keep_uris   : one URI per distinct track id, first-occurrence order
    remove_list : the other occurrences, sorted by descending position
    """

    keep_uris: List[str] = field(default_factory=list)
    remove_list: List[RemovalSelection] = field(default_factory=list)


@dataclass(frozen=True)
class FallbackGenreRecord:
    name: str
    genres: Tuple[str, ...] = ()
