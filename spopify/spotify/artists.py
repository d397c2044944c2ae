import json
from typing import Dict, List, Sequence
from urllib.parse import unquote

from spopify.config import SPOTIFY_API_BASE
from spopify.core import MalformedInput
from spopify.pipeline import PrimaryMetadataSource

from .auth import spotify_request

# Hard limit of GET /v1/artists.
MAX_IDS_PER_REQUEST = 50


def parse_artist_ids(raw: str) -> List[str]:
    """
    Parse the `artist_ids` query parameter: a (possibly URL-encoded) JSON
    list of {"artistId": "..."} objects. Bare id strings are accepted too.
    """
    try:
        items = json.loads(unquote(raw or ""))
    except ValueError as e:
        raise MalformedInput("Invalid artist_ids format") from e
    if not isinstance(items, list):
        raise MalformedInput("Invalid artist_ids format")

    ids: List[str] = []
    for item in items:
        artist_id = item.get("artistId") if isinstance(item, dict) else item
        if not isinstance(artist_id, str) or not artist_id.strip():
            raise MalformedInput("Invalid artist_ids format")
        ids.append(artist_id.strip())
    return ids


class SpotifyArtistGenreSource(PrimaryMetadataSource):
    """Genres of Spotify artist objects, fetched with GET /v1/artists?ids=."""

    id = "spotify"

    def __init__(self, token_info: Dict) -> None:
        self.token_info = token_info

    def get_genres_by_artist_ids(self, ids: Sequence[str]) -> Dict[str, List[str]]:
        if not ids:
            return {}
        if len(ids) > MAX_IDS_PER_REQUEST:
            raise MalformedInput(f"at most {MAX_IDS_PER_REQUEST} artist ids per request")

        r = spotify_request(
            "GET",
            f"{SPOTIFY_API_BASE}/artists",
            self.token_info,
            params={"ids": ",".join(ids)},
        )
        # Unknown ids come back as null entries.
        return {
            artist["id"]: list(artist.get("genres") or [])
            for artist in r.json().get("artists", [])
            if artist and artist.get("id")
        }
