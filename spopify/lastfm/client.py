from typing import Any, Dict, List, Optional

import requests

from spopify.config import HTTP_TIMEOUT_SECONDS, LASTFM_API_BASE, LASTFM_API_KEY
from spopify.core import (
    ExternalSourceUnavailable,
    NotFound,
    RateLimited,
    check_response,
    log_debug,
)
from spopify.pipeline import SecondaryTagSource

SOURCE = "lastfm"

# Last.fm error codes that mean "slow down" / "try later".
RATE_LIMIT_ERROR = 29
TEMPORARY_ERRORS = {8, 11, 16}
UNKNOWN_ARTIST_ERROR = 6

# Listening-habit tags that say nothing about the genre.
EXCLUDED_TAGS = {
    "seen live", "favorite", "favorites", "favourites", "albums i own",
    "love", "loved", "beautiful", "awesome", "great", "amazing",
}


class LastFmTagSource(SecondaryTagSource):
    """Top tags of an artist from the Last.fm artist.gettoptags method."""

    id = "lastfm"

    def __init__(
        self,
        api_key: Optional[str] = LASTFM_API_KEY,
        max_tags: int = 5,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key
        self.max_tags = max_tags
        self.session = session or requests.Session()

    def _request(self, method: str, params: Dict[str, Any]) -> Dict:
        request_params = {
            "method": method,
            "api_key": self.api_key,
            "format": "json",
            **params,
        }
        try:
            r = self.session.get(
                LASTFM_API_BASE, params=request_params, timeout=HTTP_TIMEOUT_SECONDS
            )
        except requests.RequestException as e:
            raise ExternalSourceUnavailable(SOURCE, f"Last.fm request failed: {e}") from e

        check_response(r, SOURCE)
        data = r.json()

        # Last.fm reports most failures as HTTP 200 with an error payload.
        error = data.get("error") if isinstance(data, dict) else None
        if error == RATE_LIMIT_ERROR:
            raise RateLimited(SOURCE)
        if error in TEMPORARY_ERRORS:
            raise ExternalSourceUnavailable(SOURCE, data.get("message", ""))
        if error == UNKNOWN_ARTIST_ERROR:
            raise NotFound(data.get("message", "artist not found"))
        if error:
            raise ExternalSourceUnavailable(SOURCE, f"Last.fm error {error}: {data.get('message')}")
        return data

    def get_top_tags(self, artist_name: str) -> List[str]:
        if not self.api_key or not artist_name:
            return []

        try:
            data = self._request(
                "artist.gettoptags", {"artist": artist_name, "autocorrect": 1}
            )
        except NotFound:
            log_debug(f"Last.fm does not know artist {artist_name!r}.")
            return []

        tags = (data.get("toptags") or {}).get("tag", [])
        if isinstance(tags, dict):
            tags = [tags]

        names: List[str] = []
        for tag in tags:
            name = (tag.get("name") or "").strip() if isinstance(tag, dict) else ""
            if name and name.lower() not in EXCLUDED_TAGS and name not in names:
                names.append(name)
            if len(names) >= self.max_tags:
                break
        return names
