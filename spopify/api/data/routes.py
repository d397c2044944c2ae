from typing import Dict, List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from spopify.data import JsonFallbackGenreStore, JsonUserGenreStore

from ..deps import get_fallback_store, get_user_genre_store

router = APIRouter()


class GenreBody(BaseModel):
    genre: str


class TrackGenresResponse(BaseModel):
    user_id: str
    track_id: str
    genres: List[str]


class FallbackRecordModel(BaseModel):
    name: str
    genres: List[str]


# --- User genres -----------------------------------------------------------


@router.get("/user-genres/{user_id}")
def list_user_genres(
    user_id: str,
    store: JsonUserGenreStore = Depends(get_user_genre_store),
) -> Dict[str, List[str]]:
    """All custom genres of a user, indexed by track id."""
    return store.list_for_user(user_id)


@router.get("/user-genres/{user_id}/{track_id}", response_model=TrackGenresResponse)
def get_track_genres(
    user_id: str,
    track_id: str,
    store: JsonUserGenreStore = Depends(get_user_genre_store),
) -> TrackGenresResponse:
    return TrackGenresResponse(
        user_id=user_id, track_id=track_id, genres=store.get(user_id, track_id)
    )


@router.post("/user-genres/{user_id}/{track_id}", response_model=TrackGenresResponse)
def add_track_genre(
    user_id: str,
    track_id: str,
    body: GenreBody,
    store: JsonUserGenreStore = Depends(get_user_genre_store),
) -> TrackGenresResponse:
    """Add a custom genre; adding one already present changes nothing."""
    genres = store.add(user_id, track_id, body.genre)
    return TrackGenresResponse(user_id=user_id, track_id=track_id, genres=genres)


@router.delete("/user-genres/{user_id}/{track_id}/{genre}", response_model=TrackGenresResponse)
def remove_track_genre(
    user_id: str,
    track_id: str,
    genre: str,
    store: JsonUserGenreStore = Depends(get_user_genre_store),
) -> TrackGenresResponse:
    genres = store.remove(user_id, track_id, genre)
    return TrackGenresResponse(user_id=user_id, track_id=track_id, genres=genres)


# --- Fallback genres -------------------------------------------------------


@router.get("/fallback-genres", response_model=List[FallbackRecordModel])
def list_fallback_genres(
    store: JsonFallbackGenreStore = Depends(get_fallback_store),
) -> List[FallbackRecordModel]:
    return [
        FallbackRecordModel(name=r.name, genres=list(r.genres))
        for r in store.list_records()
    ]


@router.put("/fallback-genres", response_model=FallbackRecordModel)
def upsert_fallback_genres(
    body: FallbackRecordModel,
    store: JsonFallbackGenreStore = Depends(get_fallback_store),
) -> FallbackRecordModel:
    """Create or replace the curated genres of an artist (matched by name)."""
    record = store.upsert(body.name, body.genres)
    return FallbackRecordModel(name=record.name, genres=list(record.genres))
