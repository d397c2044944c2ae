"""Error kinds shared by the Spotify/Last.fm clients and the pipeline.

Per-item failures against external sources (ExternalSourceUnavailable,
RateLimited) are absorbed by the batch fetcher; MalformedInput aborts the
whole call; NotFound is turned into a "no data" result by providers;
PlaylistMutationError is the single aggregate failure of a remote removal.
"""

from typing import Optional


class SpopifyError(Exception):
    """Base class for all application errors."""


class ExternalSourceUnavailable(SpopifyError):
    """Network error, timeout or 5xx answer from an external source."""

    def __init__(self, source: str, message: str = "", status_code: Optional[int] = None):
        self.source = source
        self.status_code = status_code
        super().__init__(message or f"{source} is unavailable")


class RateLimited(SpopifyError):
    """HTTP 429 from an external source; `retry_after` is the server hint in seconds."""

    def __init__(self, source: str, retry_after: Optional[float] = None):
        self.source = source
        self.retry_after = retry_after
        hint = f" (retry after {retry_after}s)" if retry_after is not None else ""
        super().__init__(f"{source} rate limit reached{hint}")


class MalformedInput(SpopifyError):
    """Structurally invalid input; nothing is processed."""


class NotFound(SpopifyError):
    """Unknown playlist, track or artist on the remote side."""


class PlaylistMutationError(SpopifyError):
    """
    A remote playlist mutation failed part-way.

    `removed_before_failure` counts positions confirmed removed before the
    failing request; the remote state should be re-queried.
    """

    def __init__(self, message: str, removed_before_failure: int = 0):
        self.removed_before_failure = removed_before_failure
        super().__init__(message)
