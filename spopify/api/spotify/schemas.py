from typing import Dict, List

from pydantic import BaseModel


class PlaylistSummary(BaseModel):
    id: str
    name: str
    tracks_total: int | None = None


class ArtistGenresResponse(BaseModel):
    genres: Dict[str, List[str]]
