from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from spopify import __version__
from spopify.api.auth.routes import router as auth_router
from spopify.api.data.routes import router as data_router
from spopify.api.pipeline.dedup import router as pipeline_dedup_router
from spopify.api.pipeline.enrich import router as pipeline_enrich_router
from spopify.api.pipeline.genres import router as pipeline_genres_router
from spopify.api.pipeline.health import router as pipeline_health_router
from spopify.api.spotify.playlists import router as spotify_playlists_router
from spopify.core import (
    ExternalSourceUnavailable,
    MalformedInput,
    PlaylistMutationError,
    RateLimited,
    configure_logging,
    log_error,
    log_warning,
)
from spopify.spotify import SpotifyAuthError, build_spotify_auth_url

configure_logging()

app = FastAPI(
    title="Spopify API",
    version=__version__,
    description="Genre enrichment, genre filtering and duplicate cleanup for Spotify playlists.",
)


# --- Error mapping ---------------------------------------------------------


@app.exception_handler(MalformedInput)
def malformed_input_handler(request: Request, exc: MalformedInput) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(SpotifyAuthError)
def spotify_auth_handler(request: Request, exc: SpotifyAuthError) -> JSONResponse:
    return JSONResponse(
        status_code=401,
        content={
            "detail": {
                "status": "unauthenticated",
                "message": str(exc),
                "auth_url": build_spotify_auth_url(),
            }
        },
    )


@app.exception_handler(PlaylistMutationError)
def playlist_mutation_handler(request: Request, exc: PlaylistMutationError) -> JSONResponse:
    log_error(f"Playlist mutation failed: {exc}")
    return JSONResponse(
        status_code=502,
        content={
            "detail": str(exc),
            "removedBeforeFailure": exc.removed_before_failure,
        },
    )


@app.exception_handler(RateLimited)
def rate_limited_handler(request: Request, exc: RateLimited) -> JSONResponse:
    log_warning(str(exc))
    headers = {}
    if exc.retry_after is not None:
        headers["Retry-After"] = str(int(exc.retry_after))
    return JSONResponse(status_code=503, content={"detail": str(exc)}, headers=headers)


@app.exception_handler(ExternalSourceUnavailable)
def source_unavailable_handler(request: Request, exc: ExternalSourceUnavailable) -> JSONResponse:
    log_error(f"{exc.source}: {exc}")
    return JSONResponse(status_code=502, content={"detail": str(exc), "source": exc.source})


# Pipeline routes
app.include_router(pipeline_health_router, prefix="/pipeline", tags=["pipeline"])
app.include_router(pipeline_enrich_router, prefix="/pipeline", tags=["pipeline"])
app.include_router(pipeline_dedup_router, prefix="/pipeline", tags=["pipeline"])
app.include_router(pipeline_genres_router, prefix="/pipeline", tags=["pipeline"])

# Spotify routes
app.include_router(spotify_playlists_router, prefix="/spotify", tags=["spotify"])

# Data routes
app.include_router(data_router, prefix="/data", tags=["data"])

# Auth routes
app.include_router(auth_router, prefix="/auth", tags=["auth"])
