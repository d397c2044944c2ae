"""Public façade for the spopify.pipeline package.

This module exposes the genre enrichment pipeline, the genre normalizer, the
rate-limited batch fetcher and retry policy, duplicate detection/removal,
genre filtering helpers and the collaborator interfaces. Other packages
should import pipeline behaviour from this façade instead of the internal
pipeline submodules.
"""

from .batch_fetcher import RateLimitedBatchFetcher, chunked
from .dedup import (
    apply_dedup_plan,
    deduplicate,
    deduplicate_playlist,
    find_duplicates,
    group_duplicates,
    remove_selected,
)
from .enrichment import ArtistGenreMap, GenreEnrichmentPipeline, secondary_batch_size
from .filtering import (
    collect_genres,
    create_playlist_from_tracks,
    filter_by_genres,
    genres_status,
    playlist_name_for,
)
from .genre_normalizer import GenreNormalizer, merge_genres
from .providers import (
    FallbackGenreStore,
    PlaylistProvider,
    PrimaryMetadataSource,
    SecondaryTagSource,
    UserGenreStore,
)
from .retry import DEFAULT_RETRY_POLICY, RetryPolicy, call_with_retry

__all__ = [
    "GenreEnrichmentPipeline",
    "ArtistGenreMap",
    "secondary_batch_size",
    "GenreNormalizer",
    "merge_genres",
    "RateLimitedBatchFetcher",
    "chunked",
    "RetryPolicy",
    "DEFAULT_RETRY_POLICY",
    "call_with_retry",
    "find_duplicates",
    "group_duplicates",
    "deduplicate",
    "remove_selected",
    "apply_dedup_plan",
    "deduplicate_playlist",
    "collect_genres",
    "genres_status",
    "filter_by_genres",
    "playlist_name_for",
    "create_playlist_from_tracks",
    "PrimaryMetadataSource",
    "SecondaryTagSource",
    "FallbackGenreStore",
    "UserGenreStore",
    "PlaylistProvider",
]
