from dotenv import load_dotenv
import os

load_dotenv()

# Base & cache directories
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
CACHE_DIR = os.getenv("SPOPIFY_CACHE_DIR", os.path.join(BASE_DIR, "cache"))
DATA_DIR = os.path.join(BASE_DIR, "data")

# Persistent files
SPOTIFY_TOKEN_FILE = os.path.join(CACHE_DIR, "spotify_token.json")
USER_GENRES_FILE = os.path.join(CACHE_DIR, "user_genres.json")
FALLBACK_GENRES_FILE = os.getenv(
    "SPOPIFY_FALLBACK_GENRES_FILE",
    os.path.join(DATA_DIR, "fallback_genres.json"),
)

# Spotify credentials (REQUIRED)
SPOTIFY_CLIENT_ID = os.getenv("SPOTIFY_CLIENT_ID")
SPOTIFY_CLIENT_SECRET = os.getenv("SPOTIFY_CLIENT_SECRET")
SPOTIFY_REDIRECT_URI = os.getenv(
    "SPOTIFY_REDIRECT_URI", "http://127.0.0.1:5000/auth/callback"
)

# Spotify API constants
SPOTIFY_AUTH_URL = "https://accounts.spotify.com/authorize"
SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"
SPOTIFY_API_BASE = "https://api.spotify.com/v1"

SCOPES = [
    "user-read-private",
    "playlist-read-private",
    "playlist-modify-public",
    "playlist-modify-private",
]

# Last.fm (secondary tag source, optional)
LASTFM_API_KEY = os.getenv("LASTFM_API_KEY")
LASTFM_API_BASE = "https://ws.audioscrobbler.com/2.0/"

HTTP_TIMEOUT_SECONDS = float(os.getenv("SPOPIFY_HTTP_TIMEOUT", "10"))

# Genre enrichment
UNKNOWN_GENRE = "Unknown Genre"

PRIMARY_BATCH_SIZE = 25
PRIMARY_BATCH_DELAY_SECONDS = 0.5

SECONDARY_BATCH_SIZE_SMALL = 5
SECONDARY_BATCH_SIZE_LARGE = 3
SECONDARY_BATCH_THRESHOLD = 20
SECONDARY_BATCH_DELAY_SECONDS = 1.0

RETRY_MAX_ATTEMPTS = 3
RETRY_BASE_DELAY_SECONDS = 2.0
# Cap on a single wait, Retry-After hints included.
RETRY_MAX_DELAY_SECONDS = float(os.getenv("SPOPIFY_RETRY_MAX_DELAY_SECONDS", "30"))

# Overall time budget for one enrichment call; unset means no budget.
_deadline = os.getenv("SPOPIFY_ENRICH_DEADLINE_SECONDS")
ENRICH_DEADLINE_SECONDS = float(_deadline) if _deadline else None

# Playlist mutation
PLAYLIST_WRITE_BATCH_SIZE = 100
DEFAULT_PLAYLIST_NAME = "My Filtered Playlist"
