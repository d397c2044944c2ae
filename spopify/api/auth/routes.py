from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import HTMLResponse

from spopify.spotify import (
    SpotifyAuthError,
    build_spotify_auth_url,
    exchange_code_for_token,
    load_spotify_token,
)

from ..deps import get_current_user

router = APIRouter()


@router.get("/url")
def get_auth_url() -> dict:
    """Spotify authorization URL the front end redirects the user to."""
    return {"auth_url": build_spotify_auth_url()}


@router.get("/status")
def auth_status() -> dict:
    try:
        token_info = load_spotify_token()
    except SpotifyAuthError:
        return {
            "authenticated": False,
            "reason": "missing_or_invalid_token",
            "expires_at": None,
        }

    return {
        "authenticated": True,
        "reason": None,
        "expires_at": token_info.get("timestamp", 0) + token_info.get("expires_in", 3600),
    }


@router.get("/profile")
def auth_profile(user_id: str = Depends(get_current_user)) -> dict:
    return {
        "authenticated": True,
        "user": {"id": user_id},
    }


@router.get("/callback", response_class=HTMLResponse)
def auth_callback(
    code: str | None = Query(default=None),
    error: str | None = Query(default=None),
):
    """
    Spotify redirect target: exchange the code for a token and persist it.
    """
    if error:
        raise HTTPException(
            status_code=400,
            detail=f"Spotify authorization failed: {error}",
        )

    if code is None:
        raise HTTPException(status_code=400, detail="Missing 'code' parameter.")

    try:
        exchange_code_for_token(code)
    except SpotifyAuthError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return """
    <html>
      <body>
        <h1>Spotify authorization complete</h1>
        <p>You can close this window and return to Spopify.</p>
      </body>
    </html>
    """
