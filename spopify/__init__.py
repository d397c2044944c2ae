"""Spopify: genre enrichment, filtering and deduplication for Spotify playlists."""

__version__ = "0.1.0"
