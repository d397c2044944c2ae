"""Public façade for the spopify.data package.

This module exposes the JSON-backed fallback genre store and user genre
store, plus their low-level loaders/savers. Callers should use this façade
instead of importing from the internal modules directly.
"""

from .fallback_genres import load_fallback_genres, save_fallback_genres
from .repositories import JsonFallbackGenreStore, JsonUserGenreStore
from .user_genres import load_user_genres, save_user_genres

__all__ = [
    "load_fallback_genres",
    "save_fallback_genres",
    "load_user_genres",
    "save_user_genres",
    "JsonFallbackGenreStore",
    "JsonUserGenreStore",
]
