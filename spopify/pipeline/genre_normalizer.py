from typing import Iterable, List, Optional, Tuple

from spopify.core import DEFAULT_TAXONOMY, GenreTaxonomy


def add_genre(genres: List[str], seen: set, genre: str) -> bool:
    """
    Append `genre` unless a case-insensitive equal is already present.
    `seen` holds the lowercase keys of `genres`. Returns True when added.
    """
    key = genre.lower()
    if not key or key in seen:
        return False
    seen.add(key)
    genres.append(genre)
    return True


def merge_genres(*groups: Iterable[str]) -> List[str]:
    """Union of genre lists, case-insensitive, first spelling wins."""
    merged: List[str] = []
    seen: set = set()
    for group in groups:
        for genre in group:
            if genre:
                add_genre(merged, seen, genre)
    return merged


class GenreNormalizer:
    """
    Fold free-text tags into the taxonomy's main genres.

    Lookup order for a lowercased tag:
      1. alias table            ("indie pop" -> "pop")
      2. exact main genre       ("k-pop" -> "k-pop")
      3. first main genre found as a substring, in taxonomy order
                                ("synth-pop" -> "pop")
      4. the lowercased tag itself (kept, reported as unmapped)
    """

    def __init__(self, taxonomy: GenreTaxonomy = DEFAULT_TAXONOMY) -> None:
        self.taxonomy = taxonomy

    def _lookup(self, tag: str) -> Optional[str]:
        alias = self.taxonomy.aliases.get(tag)
        if alias:
            return alias
        if tag in self.taxonomy.main_genres:
            return tag
        for main in self.taxonomy.main_genres:
            if main in tag:
                return main
        return None

    def normalize(self, raw_tag: Optional[str]) -> Optional[str]:
        if not raw_tag:
            return None
        tag = raw_tag.strip().lower()
        if not tag:
            return None
        return self._lookup(tag) or tag

    def is_mapped(self, raw_tag: Optional[str]) -> bool:
        if not raw_tag or not raw_tag.strip():
            return False
        return self._lookup(raw_tag.strip().lower()) is not None

    def normalize_tags(self, raw_tags: Iterable[str]) -> Tuple[List[str], List[str]]:
        """
        Normalize a list of raw tags.

        Returns (genres, unmapped): the deduplicated normalized genres in
        first-seen order, and the raw tags that fell through unmapped.
        """
        genres: List[str] = []
        seen: set = set()
        unmapped: List[str] = []
        for raw in raw_tags or []:
            genre = self.normalize(raw)
            if genre is None:
                continue
            if not self.is_mapped(raw):
                unmapped.append(raw)
            add_genre(genres, seen, genre)
        return genres, unmapped
