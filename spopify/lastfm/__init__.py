"""Public façade for the spopify.lastfm package (secondary tag source)."""

from .client import LastFmTagSource

__all__ = ["LastFmTagSource"]
