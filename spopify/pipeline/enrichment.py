"""Multi-source genre enrichment for playlist tracks.

Genres are resolved per artist and then unioned per track, in stages that
each only touch what earlier stages left unresolved:

  1. distinct artist ids of the playlist
  2. primary source (Spotify artist genres, 25 ids per call), normalized
  3. local fallback store, by case-insensitive artist name, taken verbatim
  4. per-track union of artist genres
  5. secondary source (Last.fm top tags) for the artists of tracks that are
     still empty, normalized
  6. per-track union again
  7. propagation: every track crediting an artist receives the largest
     genre list seen on any track of that artist
  8. tracks still empty get the "Unknown Genre" sentinel

The ArtistGenreMap accumulator belongs to a single enrich() call and is
handed explicitly from stage to stage; nothing is shared between calls.
External failures only ever empty the affected artist: enrich() returns one
EnrichedTrack per input entry, in input order.
"""

import time
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from spopify.config import (
    ENRICH_DEADLINE_SECONDS,
    PRIMARY_BATCH_DELAY_SECONDS,
    PRIMARY_BATCH_SIZE,
    SECONDARY_BATCH_DELAY_SECONDS,
    SECONDARY_BATCH_SIZE_LARGE,
    SECONDARY_BATCH_SIZE_SMALL,
    SECONDARY_BATCH_THRESHOLD,
    UNKNOWN_GENRE,
)
from spopify.core import (
    ArtistRef,
    EnrichedTrack,
    MalformedInput,
    TrackEntry,
    log_info,
    log_section,
    log_step,
    log_warning,
)

from .batch_fetcher import RateLimitedBatchFetcher
from .genre_normalizer import GenreNormalizer, merge_genres
from .providers import FallbackGenreStore, PrimaryMetadataSource, SecondaryTagSource
from .retry import DEFAULT_RETRY_POLICY, RetryPolicy


class ArtistGenreMap:
    """artist_id -> genres, filled by successive sources."""

    def __init__(self) -> None:
        self._genres: Dict[str, List[str]] = {}

    def __len__(self) -> int:
        return sum(1 for genres in self._genres.values() if genres)

    def get(self, artist_id: str) -> List[str]:
        return list(self._genres.get(artist_id, []))

    def has_genres(self, artist_id: str) -> bool:
        return bool(self._genres.get(artist_id))

    def fill(self, artist_id: str, genres: Iterable[str]) -> bool:
        """Store `genres` only if the entry is missing or empty."""
        if self.has_genres(artist_id):
            return False
        merged = merge_genres(genres)
        if not merged:
            return False
        self._genres[artist_id] = merged
        return True

    def widen(self, artist_id: str, genres: Iterable[str]) -> None:
        """Union `genres` into the entry; never drops existing genres."""
        self._genres[artist_id] = merge_genres(self._genres.get(artist_id, []), genres)

    def unresolved(self, artist_ids: Iterable[str]) -> List[str]:
        return [a for a in artist_ids if not self.has_genres(a)]

    def genres_for(self, artist_ids: Iterable[str]) -> List[str]:
        return merge_genres(*(self._genres.get(a, []) for a in artist_ids))


def secondary_batch_size(artist_count: int) -> int:
    """Smaller concurrent batches when many artists need a secondary lookup."""
    if artist_count > SECONDARY_BATCH_THRESHOLD:
        return SECONDARY_BATCH_SIZE_LARGE
    return SECONDARY_BATCH_SIZE_SMALL


def validate_tracks(tracks: Sequence[TrackEntry]) -> List[TrackEntry]:
    """Reject structurally invalid input before any external call."""
    if tracks is None or isinstance(tracks, (str, bytes, dict)):
        raise MalformedInput("tracks must be a sequence of TrackEntry")
    validated: List[TrackEntry] = []
    for index, track in enumerate(tracks):
        if not isinstance(track, TrackEntry):
            raise MalformedInput(f"tracks[{index}] is not a TrackEntry")
        if not isinstance(track.artists, (tuple, list)) or not all(
            isinstance(a, ArtistRef) for a in track.artists
        ):
            raise MalformedInput(f"tracks[{index}].artists must contain ArtistRef items")
        validated.append(track)
    return validated


def collect_artists(tracks: Sequence[TrackEntry]) -> Dict[str, Optional[str]]:
    """Distinct artist ids in first-seen order, with the first known name."""
    artists: Dict[str, Optional[str]] = {}
    for track in tracks:
        for artist in track.artists:
            if not artist.artist_id:
                continue
            if artists.get(artist.artist_id) is None:
                artists[artist.artist_id] = artist.artist_name or None
    return artists


def _report_unmapped(source: str, unmapped: Iterable[str]) -> None:
    tags = sorted(set(unmapped))
    if tags:
        log_warning(f"Unmapped {source} genres ({len(tags)}): {', '.join(tags)}")


def resolve_primary(
    source: PrimaryMetadataSource,
    fetcher: RateLimitedBatchFetcher,
    normalizer: GenreNormalizer,
    artist_ids: Sequence[str],
    genre_map: ArtistGenreMap,
    deadline: Optional[float] = None,
) -> int:
    """Stage 2. Returns the number of artists resolved."""
    raw = fetcher.fetch_grouped(
        artist_ids,
        source.get_genres_by_artist_ids,
        deadline=deadline,
    )
    unmapped: List[str] = []
    resolved = 0
    for artist_id, tags in raw.items():
        genres, misses = normalizer.normalize_tags(tags or [])
        unmapped.extend(misses)
        if genre_map.fill(artist_id, genres):
            resolved += 1
    _report_unmapped(source.id, unmapped)
    return resolved


def resolve_from_fallback_store(
    store: FallbackGenreStore,
    artists: Dict[str, Optional[str]],
    genre_map: ArtistGenreMap,
) -> int:
    """Stage 3. Curated genres are adopted as stored, without normalization."""
    ids_by_name: Dict[str, List[str]] = {}
    for artist_id in genre_map.unresolved(artists):
        name = artists.get(artist_id)
        if name and name.strip():
            ids_by_name.setdefault(name.strip().lower(), []).append(artist_id)
    if not ids_by_name:
        return 0

    records = store.find_by_names(list(ids_by_name))
    resolved = 0
    for record in records:
        for artist_id in ids_by_name.get(record.name.strip().lower(), []):
            if genre_map.fill(artist_id, record.genres):
                resolved += 1
    return resolved


def union_track_genres(
    tracks: Sequence[TrackEntry],
    genre_map: ArtistGenreMap,
) -> List[List[str]]:
    """Stages 4 and 6."""
    return [genre_map.genres_for(track.artist_ids) for track in tracks]


def resolve_secondary(
    source: SecondaryTagSource,
    fetcher_factory: Callable[[int], RateLimitedBatchFetcher],
    normalizer: GenreNormalizer,
    tracks: Sequence[TrackEntry],
    track_genres: List[List[str]],
    artists: Dict[str, Optional[str]],
    genre_map: ArtistGenreMap,
    deadline: Optional[float] = None,
) -> int:
    """Stage 5, limited to artists of tracks that are still empty."""
    candidates: List[str] = []
    for track, genres in zip(tracks, track_genres):
        if genres:
            continue
        for artist_id in track.artist_ids:
            if artist_id not in candidates and not genre_map.has_genres(artist_id):
                candidates.append(artist_id)

    ids_by_name: Dict[str, List[str]] = {}
    for artist_id in candidates:
        name = artists.get(artist_id)
        if name:
            ids_by_name.setdefault(name, []).append(artist_id)
    if not ids_by_name:
        return 0

    log_info(f"Looking up {len(ids_by_name)} artists on {source.id}.")
    fetcher = fetcher_factory(secondary_batch_size(len(ids_by_name)))
    raw = fetcher.fetch(list(ids_by_name), source.get_top_tags, deadline=deadline)

    unmapped: List[str] = []
    resolved = 0
    for name, tags in raw.items():
        genres, misses = normalizer.normalize_tags(tags or [])
        unmapped.extend(misses)
        for artist_id in ids_by_name[name]:
            if genre_map.fill(artist_id, genres):
                resolved += 1
    _report_unmapped(source.id, unmapped)
    return resolved


def propagate_artist_genres(
    tracks: Sequence[TrackEntry],
    track_genres: List[List[str]],
    genre_map: ArtistGenreMap,
) -> List[List[str]]:
    """
    Stage 7. For each artist keep the largest genre list observed on one of
    its tracks (the first one on ties) and union it into every track that
    credits the artist.
    """
    best: Dict[str, List[str]] = {}
    for track, genres in zip(tracks, track_genres):
        if not genres:
            continue
        for artist_id in track.artist_ids:
            if artist_id not in best or len(genres) > len(best[artist_id]):
                best[artist_id] = genres

    for artist_id, genres in best.items():
        genre_map.widen(artist_id, genres)

    return [
        merge_genres(genres, *(best.get(a, []) for a in track.artist_ids))
        for track, genres in zip(tracks, track_genres)
    ]


class GenreEnrichmentPipeline:
    """
    Resolve a genre list for every track of a playlist.

    `secondary` and `fallback_store` are optional; a missing collaborator
    simply skips its stage.
    """

    def __init__(
        self,
        primary: PrimaryMetadataSource,
        secondary: Optional[SecondaryTagSource] = None,
        fallback_store: Optional[FallbackGenreStore] = None,
        normalizer: Optional[GenreNormalizer] = None,
        *,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        deadline_seconds: Optional[float] = ENRICH_DEADLINE_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.primary = primary
        self.secondary = secondary
        self.fallback_store = fallback_store
        self.normalizer = normalizer or GenreNormalizer()
        self.retry_policy = retry_policy
        self.deadline_seconds = deadline_seconds
        self._sleep = sleep
        self._clock = clock

    def _primary_fetcher(self) -> RateLimitedBatchFetcher:
        return RateLimitedBatchFetcher(
            PRIMARY_BATCH_SIZE,
            PRIMARY_BATCH_DELAY_SECONDS,
            self.retry_policy,
            name=self.primary.id,
            sleep=self._sleep,
            clock=self._clock,
        )

    def _secondary_fetcher(self, batch_size: int) -> RateLimitedBatchFetcher:
        return RateLimitedBatchFetcher(
            batch_size,
            SECONDARY_BATCH_DELAY_SECONDS,
            self.retry_policy,
            name=self.secondary.id if self.secondary else "secondary",
            sleep=self._sleep,
            clock=self._clock,
        )

    def enrich(self, tracks: Sequence[TrackEntry]) -> List[EnrichedTrack]:
        tracks = validate_tracks(tracks)
        if not tracks:
            return []

        log_section("Genre enrichment")
        deadline = None
        if self.deadline_seconds is not None:
            deadline = self._clock() + self.deadline_seconds

        genre_map = ArtistGenreMap()
        artists = collect_artists(tracks)
        log_step(f"Resolving genres for {len(tracks)} tracks / {len(artists)} artists...")

        if artists:
            resolved = resolve_primary(
                self.primary,
                self._primary_fetcher(),
                self.normalizer,
                list(artists),
                genre_map,
                deadline,
            )
            log_info(f"{self.primary.id}: genres for {resolved}/{len(artists)} artists.")

        if self.fallback_store is not None and genre_map.unresolved(artists):
            resolved = resolve_from_fallback_store(self.fallback_store, artists, genre_map)
            log_info(f"Fallback store: genres for {resolved} more artists.")

        track_genres = union_track_genres(tracks, genre_map)

        if self.secondary is not None and not all(track_genres):
            resolve_secondary(
                self.secondary,
                self._secondary_fetcher,
                self.normalizer,
                tracks,
                track_genres,
                artists,
                genre_map,
                deadline,
            )
            track_genres = union_track_genres(tracks, genre_map)

        track_genres = propagate_artist_genres(tracks, track_genres, genre_map)

        enriched = [
            EnrichedTrack(entry=track, genres=genres or [UNKNOWN_GENRE])
            for track, genres in zip(tracks, track_genres)
        ]
        unknown = sum(1 for genres in track_genres if not genres)
        log_info(
            f"Genres resolved for {len(enriched) - unknown}/{len(enriched)} tracks "
            f"({unknown} marked '{UNKNOWN_GENRE}')."
        )
        return enriched
