import threading
from typing import Dict, Iterable, List

from spopify.core import FallbackGenreRecord, MalformedInput
from spopify.pipeline import FallbackGenreStore, UserGenreStore, merge_genres

from .fallback_genres import load_fallback_genres, save_fallback_genres
from .user_genres import load_user_genres, save_user_genres

# Serialises read-modify-write cycles on the JSON files; FastAPI runs sync
# routes on a thread pool.
_write_lock = threading.Lock()


class JsonFallbackGenreStore(FallbackGenreStore):
    """Fallback genre store backed by the curated JSON file."""

    def list_records(self) -> List[FallbackGenreRecord]:
        return load_fallback_genres()

    def find_by_names(self, names: Iterable[str]) -> List[FallbackGenreRecord]:
        wanted = {n.strip().lower() for n in names if n and n.strip()}
        if not wanted:
            return []
        return [r for r in load_fallback_genres() if r.name.strip().lower() in wanted]

    def upsert(self, name: str, genres: Iterable[str]) -> FallbackGenreRecord:
        """Replace the record with the same (case-insensitive) name, or add one."""
        if not name or not name.strip():
            raise MalformedInput("artist name is required")
        record = FallbackGenreRecord(name=name.strip(), genres=tuple(merge_genres(genres)))
        with _write_lock:
            records = [
                r for r in load_fallback_genres() if r.name.lower() != record.name.lower()
            ]
            records.append(record)
            save_fallback_genres(records)
        return record


class JsonUserGenreStore(UserGenreStore):
    """Custom per-user track genres backed by a JSON file."""

    def get(self, user_id: str, track_id: str) -> List[str]:
        return list(load_user_genres().get(user_id, {}).get(track_id, []))

    def list_for_user(self, user_id: str) -> Dict[str, List[str]]:
        return dict(load_user_genres().get(user_id, {}))

    def add(self, user_id: str, track_id: str, genre: str) -> List[str]:
        genre = (genre or "").strip()
        if not genre:
            raise MalformedInput("genre must be a non-empty string")
        with _write_lock:
            data = load_user_genres()
            tracks = data.setdefault(user_id, {})
            tracks[track_id] = merge_genres(tracks.get(track_id, []), [genre])
            save_user_genres(data)
            return list(tracks[track_id])

    def remove(self, user_id: str, track_id: str, genre: str) -> List[str]:
        key = (genre or "").strip().lower()
        with _write_lock:
            data = load_user_genres()
            tracks = data.get(user_id, {})
            remaining = [g for g in tracks.get(track_id, []) if g.lower() != key]
            if remaining:
                tracks[track_id] = remaining
            else:
                tracks.pop(track_id, None)
            if user_id in data and not tracks:
                data.pop(user_id)
            save_user_genres(data)
            return remaining
