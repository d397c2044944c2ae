"""Public façade for the spopify.core package.

This module exposes logging helpers, filesystem utilities, error kinds, the
genre taxonomy and the base models that are safe to import from other
packages. Callers should import these cross-cutting concerns from this façade
instead of the internal submodules.
"""

from .errors import (
    ExternalSourceUnavailable,
    MalformedInput,
    NotFound,
    PlaylistMutationError,
    RateLimited,
    SpopifyError,
)
from .fs_utils import ensure_parent_dir, read_json, write_json
from .http import check_response, parse_retry_after
from .logging_config import configure_logging
from .logging_utils import (
    log_debug,
    log_error,
    log_info,
    log_progress,
    log_section,
    log_step,
    log_success,
    log_warning,
)
from .models import (
    ArtistRef,
    DedupPlan,
    DuplicateEntry,
    EnrichedTrack,
    FallbackGenreRecord,
    RemovalSelection,
    TrackEntry,
)
from .taxonomy import DEFAULT_TAXONOMY, GENRE_ALIASES, MAIN_GENRES, GenreTaxonomy

__all__ = [
    "configure_logging",
    "log_section",
    "log_info",
    "log_step",
    "log_success",
    "log_warning",
    "log_error",
    "log_debug",
    "log_progress",
    "ensure_parent_dir",
    "write_json",
    "read_json",
    "check_response",
    "parse_retry_after",
    "SpopifyError",
    "ExternalSourceUnavailable",
    "RateLimited",
    "MalformedInput",
    "NotFound",
    "PlaylistMutationError",
    "ArtistRef",
    "TrackEntry",
    "EnrichedTrack",
    "DuplicateEntry",
    "DedupPlan",
    "RemovalSelection",
    "FallbackGenreRecord",
    "GenreTaxonomy",
    "DEFAULT_TAXONOMY",
    "MAIN_GENRES",
    "GENRE_ALIASES",
]
