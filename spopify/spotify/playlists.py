"""Spotify playlist reads and mutations.

Playlist entries are turned into TrackEntry objects whose position is the
index in the playlist, counting every item (local files and unavailable
tracks included) so that positions match the remote list.
"""

from typing import Any, Dict, List, Optional, Sequence

from spopify.config import PLAYLIST_WRITE_BATCH_SIZE, SPOTIFY_API_BASE
from spopify.core import (
    ArtistRef,
    NotFound,
    PlaylistMutationError,
    SpopifyError,
    TrackEntry,
    log_info,
    log_progress,
    log_step,
)
from spopify.pipeline import DEFAULT_RETRY_POLICY, PlaylistProvider, call_with_retry

from .auth import spotify_request

ITEM_FIELDS = (
    "items(track(id,name,uri,type,is_local,artists(id,name))),next,total"
)


def _get_json(token_info: Dict, url: str, params: Optional[Dict] = None) -> Dict:
    return call_with_retry(
        lambda: spotify_request("GET", url, token_info, params=params).json(),
        DEFAULT_RETRY_POLICY,
        label=f"GET {url}",
    )


def list_user_playlists(token_info: Dict) -> List[Dict]:
    playlists: List[Dict] = []
    url: Optional[str] = f"{SPOTIFY_API_BASE}/me/playlists"
    params: Optional[Dict] = {"limit": 50}

    while url:
        data = _get_json(token_info, url, params)
        playlists.extend(p for p in data.get("items", []) if p)
        url = data.get("next")
        params = None  # next URL already includes params

    log_info(f"{len(playlists)} playlists found.")
    return playlists


def _entry_from_item(item: Dict[str, Any], position: int) -> TrackEntry:
    track = item.get("track") or {}
    is_track = track.get("type", "track") == "track" and not track.get("is_local")
    artists = tuple(
        ArtistRef(artist_id=a.get("id"), artist_name=a.get("name"))
        for a in track.get("artists") or []
        if a
    )
    return TrackEntry(
        track_id=track.get("id") if is_track else None,
        track_name=track.get("name") or "",
        artists=artists,
        position=position,
        uri=track.get("uri"),
    )


def get_playlist_entries(token_info: Dict, playlist_id: str) -> Optional[List[TrackEntry]]:
    """All entries of a playlist, or None when Spotify does not know it."""
    log_step(f"Fetching tracks of playlist {playlist_id}...")
    entries: List[TrackEntry] = []
    url: Optional[str] = f"{SPOTIFY_API_BASE}/playlists/{playlist_id}/tracks"
    params: Optional[Dict] = {"limit": 100, "fields": ITEM_FIELDS}
    page = 0

    while url:
        page += 1
        try:
            data = _get_json(token_info, url, params)
        except NotFound:
            log_info(f"Playlist {playlist_id} not found.")
            return None

        for item in data.get("items", []):
            entries.append(_entry_from_item(item or {}, len(entries)))

        total = data.get("total") or 0
        if total:
            log_progress(page, (total + 99) // 100, prefix="  Fetching pages")
        url = data.get("next")
        params = None

    log_info(f"{len(entries)} entries fetched from playlist {playlist_id}.")
    return entries


def create_playlist(
    token_info: Dict,
    user_id: str,
    name: str,
    description: str = "",
    public: bool = True,
) -> Dict:
    r = spotify_request(
        "POST",
        f"{SPOTIFY_API_BASE}/users/{user_id}/playlists",
        token_info,
        json={"name": name, "description": description, "public": public},
    )
    playlist = r.json()
    log_info(f"Playlist created: {name} ({playlist.get('id')})")
    return playlist


def add_tracks(token_info: Dict, playlist_id: str, uris: Sequence[str]) -> None:
    url = f"{SPOTIFY_API_BASE}/playlists/{playlist_id}/tracks"
    for i in range(0, len(uris), PLAYLIST_WRITE_BATCH_SIZE):
        batch = list(uris[i : i + PLAYLIST_WRITE_BATCH_SIZE])
        call_with_retry(
            lambda b=batch: spotify_request("POST", url, token_info, json={"uris": b}),
            DEFAULT_RETRY_POLICY,
            label=f"add tracks to {playlist_id}",
        )


def _snapshot_id(token_info: Dict, playlist_id: str) -> Optional[str]:
    data = _get_json(
        token_info,
        f"{SPOTIFY_API_BASE}/playlists/{playlist_id}",
        {"fields": "snapshot_id"},
    )
    return data.get("snapshot_id")


def remove_positions(token_info: Dict, playlist_id: str, positions: Sequence[int]) -> int:
    """
    Remove entries by position, highest positions first, in requests of at
    most 100 positions. Each request carries the snapshot returned by the
    previous one. Any failure aborts with PlaylistMutationError.
    """
    ordered = sorted(set(positions), reverse=True)
    if not ordered:
        return 0

    url = f"{SPOTIFY_API_BASE}/playlists/{playlist_id}/tracks"
    removed = 0
    try:
        snapshot = _snapshot_id(token_info, playlist_id)
        for i in range(0, len(ordered), PLAYLIST_WRITE_BATCH_SIZE):
            batch = ordered[i : i + PLAYLIST_WRITE_BATCH_SIZE]
            body: Dict[str, Any] = {"positions": batch}
            if snapshot:
                body["snapshot_id"] = snapshot
            r = call_with_retry(
                lambda b=body: spotify_request("DELETE", url, token_info, json=b),
                DEFAULT_RETRY_POLICY,
                label=f"remove positions from {playlist_id}",
            )
            snapshot = r.json().get("snapshot_id", snapshot)
            removed += len(batch)
    except SpopifyError as e:
        raise PlaylistMutationError(
            f"Removing tracks from playlist {playlist_id} failed after "
            f"{removed} of {len(ordered)} removals; re-query the playlist. ({e})",
            removed_before_failure=removed,
        ) from e
    except Exception as e:
        raise PlaylistMutationError(
            f"Removing tracks from playlist {playlist_id} failed: {e}",
            removed_before_failure=removed,
        ) from e

    return removed


class SpotifyPlaylistProvider(PlaylistProvider):
    def __init__(self, token_info: Dict) -> None:
        self.token_info = token_info

    def list_playlists(self) -> List[Dict]:
        return list_user_playlists(self.token_info)

    def get_playlist_entries(self, playlist_id: str) -> Optional[List[TrackEntry]]:
        return get_playlist_entries(self.token_info, playlist_id)

    def create_playlist(
        self,
        user_id: str,
        name: str,
        description: str = "",
        public: bool = True,
    ) -> Dict:
        return create_playlist(self.token_info, user_id, name, description, public)

    def add_tracks(self, playlist_id: str, uris: Sequence[str]) -> None:
        add_tracks(self.token_info, playlist_id, uris)

    def remove_positions(self, playlist_id: str, positions: Sequence[int]) -> int:
        return remove_positions(self.token_info, playlist_id, positions)
