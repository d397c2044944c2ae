from fastapi import APIRouter

from spopify.pipeline import filter_by_genres

from .schemas import FilterRequest, FilterResponse, enriched_out, to_enriched

router = APIRouter()


@router.post("/filter", response_model=FilterResponse)
def filter_tracks(body: FilterRequest) -> FilterResponse:
    """Enriched tracks carrying at least one of the selected genres."""
    selected = filter_by_genres(to_enriched(body.tracks), body.genres)
    return FilterResponse(tracks=[enriched_out(t) for t in selected], count=len(selected))
