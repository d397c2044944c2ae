import base64
import time
from typing import Dict, Optional
from urllib.parse import urlencode

import requests

from spopify.config import (
    HTTP_TIMEOUT_SECONDS,
    SCOPES,
    SPOTIFY_API_BASE,
    SPOTIFY_AUTH_URL,
    SPOTIFY_CLIENT_ID,
    SPOTIFY_CLIENT_SECRET,
    SPOTIFY_REDIRECT_URI,
    SPOTIFY_TOKEN_URL,
    SPOTIFY_TOKEN_FILE,
)
from spopify.core import (
    ExternalSourceUnavailable,
    SpopifyError,
    check_response,
    log_info,
    log_step,
    read_json,
    write_json,
)

SOURCE = "spotify"


class SpotifyAuthError(SpopifyError):
    """The token endpoint rejected a code or refresh token."""


class SpotifyTokenMissing(SpotifyAuthError):
    """No usable token: the user must go through the authorization flow."""


def build_spotify_auth_url(state: Optional[str] = None) -> str:
    params = {
        "response_type": "code",
        "client_id": SPOTIFY_CLIENT_ID or "",
        "scope": " ".join(SCOPES),
        "redirect_uri": SPOTIFY_REDIRECT_URI,
    }
    if state:
        params["state"] = state
    return f"{SPOTIFY_AUTH_URL}?{urlencode(params)}"


def _client_auth_header() -> Dict[str, str]:
    raw = f"{SPOTIFY_CLIENT_ID}:{SPOTIFY_CLIENT_SECRET}".encode("utf-8")
    return {"Authorization": "Basic " + base64.b64encode(raw).decode("ascii")}


def _token_request(data: Dict[str, str]) -> Dict:
    try:
        r = requests.post(
            SPOTIFY_TOKEN_URL,
            data=data,
            headers=_client_auth_header(),
            timeout=HTTP_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        raise ExternalSourceUnavailable(SOURCE, f"Token request failed: {e}") from e

    if r.status_code in (400, 401):
        raise SpotifyAuthError(f"Spotify rejected the token request: {r.text}")
    check_response(r, SOURCE)

    token_info = r.json()
    token_info["timestamp"] = int(time.time())
    return token_info


def exchange_code_for_token(code: str) -> Dict:
    """Authorization-code grant; the resulting token is persisted on disk."""
    log_step("Exchanging Spotify authorization code for a token...")
    token_info = _token_request(
        {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": SPOTIFY_REDIRECT_URI,
        }
    )
    write_json(SPOTIFY_TOKEN_FILE, token_info)
    return token_info


def refresh_spotify_token(refresh_token: str) -> Dict:
    token_info = _token_request(
        {"grant_type": "refresh_token", "refresh_token": refresh_token}
    )
    # Spotify only sometimes rotates the refresh token.
    token_info.setdefault("refresh_token", refresh_token)
    write_json(SPOTIFY_TOKEN_FILE, token_info)
    log_info("Spotify access token refreshed.")
    return token_info


def load_spotify_token() -> Dict:
    """
    Load the persisted token, refreshing it when it expires within a minute.
    Raises SpotifyTokenMissing if no token was ever obtained.
    """
    token_info = read_json(SPOTIFY_TOKEN_FILE, default=None)
    if not isinstance(token_info, dict) or "access_token" not in token_info:
        raise SpotifyTokenMissing("Spotify authorization required.")

    now = int(time.time())
    expires_in = token_info.get("expires_in", 3600)
    if now - token_info.get("timestamp", 0) > expires_in - 60:
        refresh_token = token_info.get("refresh_token")
        if not refresh_token:
            raise SpotifyTokenMissing("Spotify token expired and cannot be refreshed.")
        token_info = refresh_spotify_token(refresh_token)
    return token_info


def spotify_headers(token_info: Dict) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token_info['access_token']}"}


def spotify_request(
    method: str,
    url: str,
    token_info: Dict,
    **kwargs,
) -> requests.Response:
    """
    Authenticated Web API call mapped onto the application error kinds.

    401 (expired or revoked token) raises SpotifyAuthError; 429, 404 and 5xx
    go through check_response.
    """
    kwargs.setdefault("timeout", HTTP_TIMEOUT_SECONDS)
    try:
        r = requests.request(method, url, headers=spotify_headers(token_info), **kwargs)
    except requests.RequestException as e:
        raise ExternalSourceUnavailable(SOURCE, f"{method} {url} failed: {e}") from e
    if r.status_code == 401:
        raise SpotifyAuthError("Spotify rejected the access token; authorize again.")
    return check_response(r, SOURCE)


def get_current_user_id(token_info: Dict) -> str:
    r = spotify_request("GET", f"{SPOTIFY_API_BASE}/me", token_info)
    return r.json()["id"]
