from typing import Dict, List

from spopify.config import USER_GENRES_FILE
from spopify.core import log_warning, read_json, write_json

UserGenres = Dict[str, Dict[str, List[str]]]


def load_user_genres() -> UserGenres:
    """
    Load custom genre tags.

    Structure:
      {
        "user_id": {
          "track_id": ["genre", ...],
          ...
        },
        ...
      }
    """

    def _on_error(e: Exception) -> None:
        log_warning("User genres file is corrupted; ignoring it.")

    data = read_json(USER_GENRES_FILE, default={}, on_error=_on_error)
    if not isinstance(data, dict):
        log_warning("User genres file has invalid structure; using empty dict.")
        return {}

    result: UserGenres = {}
    for user_id, tracks in data.items():
        if not isinstance(tracks, dict):
            continue
        cleaned = {
            str(track_id): [g for g in genres if isinstance(g, str)]
            for track_id, genres in tracks.items()
            if isinstance(genres, list)
        }
        result[str(user_id)] = {k: v for k, v in cleaned.items() if v}
    return result


def save_user_genres(data: UserGenres) -> None:
    payload = {
        user_id: {track_id: genres for track_id, genres in tracks.items() if genres}
        for user_id, tracks in data.items()
    }
    write_json(USER_GENRES_FILE, payload)
