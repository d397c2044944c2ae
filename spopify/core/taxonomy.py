"""Static genre taxonomy used to fold raw tags into main genres."""

from dataclasses import dataclass, field
from typing import Dict, Tuple

MAIN_GENRES: Tuple[str, ...] = (
    "pop", "rock", "hip hop", "r&b", "soul", "jazz", "blues", "country", "folk",
    "electronic", "dance", "indie", "alternative", "metal", "punk", "reggae",
    "classical", "funk", "disco", "rap", "latin", "k-pop", "world",
)

GENRE_ALIASES: Dict[str, str] = {
    "indie pop": "pop",
    "pop rock": "pop",
    "electropop": "pop",
    "synthpop": "pop",
    "art pop": "pop",
    "folk pop": "pop",
    "dream pop": "pop",
    "bedroom pop": "pop",
    "hyperpop": "pop",
    "indie rock": "rock",
    "alternative rock": "rock",
    "psychedelic rock": "rock",
    "post-punk": "rock",
    "grunge": "rock",
    "shoegaze": "rock",
    "underground hip hop": "hip hop",
    "lo-fi hip hop": "hip hop",
    "alternative hip hop": "hip hop",
    "chillhop": "hip hop",
    "cloud rap": "rap",
    "gangsta rap": "rap",
    "trap": "rap",
    "boom bap": "rap",
    "mumble rap": "rap",
    "drill": "rap",
    "neo soul": "soul",
    "indie r&b": "r&b",
    "alt r&b": "r&b",
    "chill r&b": "r&b",
    "contemporary r&b": "r&b",
    "smooth jazz": "jazz",
    "fusion jazz": "jazz",
    "bluegrass": "country",
    "alt-country": "country",
    "indie folk": "folk",
    "folk rock": "folk",
    "techno": "electronic",
    "house": "electronic",
    "trance": "electronic",
    "dubstep": "electronic",
    "drum and bass": "electronic",
    "ambient": "electronic",
    "edm": "electronic",
    "future bass": "electronic",
    "synthwave": "electronic",
    "vaporwave": "electronic",
    "chillout": "electronic",
    "downtempo": "electronic",
    "trip hop": "electronic",
    "dance pop": "dance",
    "disco house": "dance",
    "garage": "dance",
    "ska": "punk",
    "emo": "punk",
    "hardcore punk": "punk",
    "death metal": "metal",
    "thrash metal": "metal",
    "black metal": "metal",
    "doom metal": "metal",
    "neo-psychedelia": "alternative",
    "experimental pop": "alternative",
    "lo-fi": "electronic",
    "latin pop": "latin",
    "reggaeton": "latin",
    "salsa": "latin",
    "bachata": "latin",
    "cumbia": "latin",
    "tropical": "latin",
    "korean pop": "k-pop",
    "j-pop": "world",
    "afrobeats": "world",
    "bollywood": "world",
    "bhangra": "world",
    "flamenco": "world",
    "samba": "world",
    "afrobeat": "world",
}


@dataclass(frozen=True)
class GenreTaxonomy:
    """
    Closed set of main genres plus an alias table.

    Keys of `aliases` and entries of `main_genres` are lowercase. The order
    of `main_genres` decides which one wins when a tag contains several.
    """

    main_genres: Tuple[str, ...] = MAIN_GENRES
    aliases: Dict[str, str] = field(default_factory=lambda: dict(GENRE_ALIASES))

    def is_main_genre(self, genre: str) -> bool:
        return genre.lower() in self.main_genres


DEFAULT_TAXONOMY = GenreTaxonomy()
