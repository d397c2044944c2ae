from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from spopify.core import (
    ArtistRef,
    DedupPlan,
    DuplicateEntry,
    EnrichedTrack,
    RemovalSelection,
    TrackEntry,
)


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire; both accepted on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Inputs ----------------------------------------------------------------


class ArtistIn(CamelModel):
    artist_id: Optional[str] = None
    artist_name: Optional[str] = None


class TrackIn(CamelModel):
    track_id: Optional[str] = None
    name: str = ""
    artists: List[ArtistIn] = []
    position: Optional[int] = None
    uri: Optional[str] = None


class EnrichedTrackIn(TrackIn):
    genres: List[str] = []


class TracksRequest(CamelModel):
    """Either inline tracks or a playlist id to fetch them from."""

    tracks: Optional[List[TrackIn]] = None
    playlist_id: Optional[str] = None


class DeduplicateRequest(CamelModel):
    playlist_id: str
    tracks: Optional[List[TrackIn]] = None


class RemovalIn(CamelModel):
    uri: str
    position: int


class RemoveSelectedRequest(CamelModel):
    playlist_id: str
    selections: List[RemovalIn]
    # Check the selections against the current playlist before removing.
    verify: bool = True


class FilterRequest(CamelModel):
    tracks: List[EnrichedTrackIn]
    genres: List[str]


class CreatePlaylistRequest(CamelModel):
    tracks: List[EnrichedTrackIn]
    genres: List[str] = []
    name: Optional[str] = None


# --- Outputs ---------------------------------------------------------------


class ArtistOut(CamelModel):
    artist_id: Optional[str] = None
    artist_name: Optional[str] = None


class EnrichedTrackOut(CamelModel):
    track_id: Optional[str] = None
    name: str
    artists: List[ArtistOut]
    position: int
    uri: Optional[str] = None
    genres: List[str]


class EnrichResponse(CamelModel):
    step: str = "enrich"
    status: str
    tracks: List[EnrichedTrackOut] = []
    genres: List[str] = []
    main_genres: List[str] = []


class DuplicateOut(CamelModel):
    track_id: str
    position: int
    name: str
    artists: List[ArtistOut]
    uri: str


class DuplicateGroupOut(CamelModel):
    track_id: str
    positions: List[int]


class DuplicatesResponse(CamelModel):
    step: str = "duplicates"
    status: str
    duplicates: List[DuplicateOut] = []
    groups: List[DuplicateGroupOut] = []


class RemovalOut(CamelModel):
    uri: str
    position: int


class DeduplicateResponse(CamelModel):
    step: str = "deduplicate"
    status: str
    removed: int = 0
    keep_uris: List[str] = []
    remove_list: List[RemovalOut] = []


class RemoveSelectedResponse(CamelModel):
    status: str
    removed: int = 0


class FilterResponse(CamelModel):
    tracks: List[EnrichedTrackOut]
    count: int


class CreatePlaylistResponse(CamelModel):
    id: str
    name: str
    url: str
    tracks_added: int


# --- Conversions -----------------------------------------------------------


def to_entries(tracks: List[TrackIn]) -> List[TrackEntry]:
    """Inline tracks without a position take their index in the request."""
    return [
        TrackEntry(
            track_id=t.track_id or None,
            track_name=t.name,
            artists=tuple(
                ArtistRef(artist_id=a.artist_id or None, artist_name=a.artist_name)
                for a in t.artists
            ),
            position=t.position if t.position is not None else index,
            uri=t.uri,
        )
        for index, t in enumerate(tracks)
    ]


def to_enriched(tracks: List[EnrichedTrackIn]) -> List[EnrichedTrack]:
    entries = to_entries(list(tracks))
    return [EnrichedTrack(entry=e, genres=list(t.genres)) for e, t in zip(entries, tracks)]


def _artists_out(artists) -> List[ArtistOut]:
    return [ArtistOut(artist_id=a.artist_id, artist_name=a.artist_name) for a in artists]


def enriched_out(track: EnrichedTrack) -> EnrichedTrackOut:
    entry = track.entry
    return EnrichedTrackOut(
        track_id=entry.track_id,
        name=entry.track_name,
        artists=_artists_out(entry.artists),
        position=entry.position,
        uri=entry.track_uri,
        genres=list(track.genres),
    )


def duplicate_out(dup: DuplicateEntry) -> DuplicateOut:
    return DuplicateOut(
        track_id=dup.track_id,
        position=dup.position,
        name=dup.name,
        artists=_artists_out(dup.artists),
        uri=dup.uri,
    )


def groups_out(groups: Dict[str, List[int]]) -> List[DuplicateGroupOut]:
    return [DuplicateGroupOut(track_id=k, positions=v) for k, v in groups.items()]


def plan_out(plan: DedupPlan, removed: int, status: str = "done") -> DeduplicateResponse:
    return DeduplicateResponse(
        status=status,
        removed=removed,
        keep_uris=plan.keep_uris,
        remove_list=[RemovalOut(uri=s.uri, position=s.position) for s in plan.remove_list],
    )


def to_selections(items: List[RemovalIn]) -> List[RemovalSelection]:
    return [RemovalSelection(uri=i.uri, position=i.position) for i in items]
