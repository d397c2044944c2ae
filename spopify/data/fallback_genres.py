from typing import Any, Dict, List

from spopify.config import FALLBACK_GENRES_FILE
from spopify.core import FallbackGenreRecord, log_warning, read_json, write_json


def load_fallback_genres() -> List[FallbackGenreRecord]:
    """
    Load the curated artist genre records.

    Expected JSON structure:
      [
        {"name": "Artist", "genres": ["rock", "indie"]},
        ...
      ]
    Malformed records are skipped.
    """

    def _on_error(e: Exception) -> None:
        log_warning(f"Fallback genres file is corrupted; ignoring it ({e}).")

    data = read_json(FALLBACK_GENRES_FILE, default=[], on_error=_on_error)
    if not isinstance(data, list):
        log_warning("Fallback genres file has invalid structure; using no records.")
        return []

    records: List[FallbackGenreRecord] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        name = item.get("name")
        genres = item.get("genres")
        if not isinstance(name, str) or not name.strip():
            continue
        if not isinstance(genres, list):
            continue
        records.append(
            FallbackGenreRecord(
                name=name.strip(),
                genres=tuple(g for g in genres if isinstance(g, str) and g.strip()),
            )
        )
    return records


def save_fallback_genres(records: List[FallbackGenreRecord]) -> None:
    payload: List[Dict[str, Any]] = [
        {"name": r.name, "genres": list(r.genres)} for r in records
    ]
    write_json(FALLBACK_GENRES_FILE, payload)
