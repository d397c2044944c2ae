from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

import requests

from .errors import ExternalSourceUnavailable, NotFound, RateLimited


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """
    Parse a Retry-After header: delta-seconds or an HTTP date.
    Returns None when absent or unparsable.
    """
    if not value:
        return None
    value = value.strip()
    try:
        return max(0.0, float(value))
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(0.0, (when - datetime.now(timezone.utc)).total_seconds())


def check_response(r: requests.Response, source: str) -> requests.Response:
    """
    Map an HTTP answer onto the application error kinds.

      429 -> RateLimited (with the Retry-After hint)
      404 -> NotFound
      5xx -> ExternalSourceUnavailable
      other 4xx -> requests.HTTPError via raise_for_status
    """
    if r.status_code == 429:
        raise RateLimited(source, parse_retry_after(r.headers.get("Retry-After")))
    if r.status_code == 404:
        raise NotFound(f"{source}: {r.url} not found")
    if r.status_code >= 500:
        raise ExternalSourceUnavailable(
            source,
            f"{source} answered HTTP {r.status_code}",
            status_code=r.status_code,
        )
    r.raise_for_status()
    return r
