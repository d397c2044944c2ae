from fastapi import APIRouter

from spopify.config import LASTFM_API_KEY, SPOTIFY_CLIENT_ID

router = APIRouter()


@router.get("/health")
def pipeline_health() -> dict:
    return {
        "status": "ok",
        "sources": {
            "spotify": bool(SPOTIFY_CLIENT_ID),
            "lastfm": bool(LASTFM_API_KEY),
        },
    }
