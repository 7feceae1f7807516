"""Fixed genre vocabulary and its catalog (TMDB) genre ids per media type."""
import re
from typing import Optional

# canonical genre -> catalog genre id, per media type
GENRE_IDS = {
    "movie": {
        "action": 28,
        "adventure": 12,
        "animation": 16,
        "comedy": 35,
        "crime": 80,
        "documentary": 99,
        "drama": 18,
        "family": 10751,
        "fantasy": 14,
        "history": 36,
        "horror": 27,
        "music": 10402,
        "mystery": 9648,
        "romance": 10749,
        "science fiction": 878,
        "tv movie": 10770,
        "thriller": 53,
        "war": 10752,
        "western": 37,},
    # tv folds some genres together e.g. 'Action & Adventure'
    "tv": {
        "action": 10759,
        "adventure": 10759,
        "animation": 16,
        "comedy": 35,
        "crime": 80,
        "documentary": 99,
        "drama": 18,
        "family": 10751,
        "kids": 10762,
        "mystery": 9648,
        "news": 10763,
        "reality": 10764,
        "science fiction": 10765,
        "fantasy": 10765,
        "soap": 10766,
        "talk": 10767,
        "war": 10768,
        "western": 37,},}

# every canonical name, longest first so 'science fiction' wins over 'fiction'
KNOWN_GENRES = sorted(
    set(GENRE_IDS["movie"]) | set(GENRE_IDS["tv"]),
    key=len,
    reverse=True)

# alias -> canonical genre
GENRE_ALIASES = {
    "actions": "action",
    "action-packed": "action",
    "adventures": "adventure",
    "animated": "animation",
    "cartoon": "animation",
    "cartoons": "animation",
    "anime": "animation",
    "comedies": "comedy",
    "funny": "comedy",
    "crimes": "crime",
    "documentaries": "documentary",
    "docs": "documentary",
    "dramas": "drama",
    "fantasies": "fantasy",
    "historical": "history",
    "horrors": "horror",
    "scary": "horror",
    "musical": "music",
    "musicals": "music",
    "mysteries": "mystery",
    "romantic": "romance",
    "romances": "romance",
    "rom-com": "romance",
    "romcom": "romance",
    "sci-fi": "science fiction",
    "scifi": "science fiction",
    "sci fi": "science fiction",
    "science-fiction": "science fiction",
    "thrillers": "thriller",
    "westerns": "western",
    "kid": "kids",
    "children": "kids",
    "reality tv": "reality",}

# words too common in chat to be read as a genre from free text
SCAN_EXCLUDED = {"talk", "news", "soap", "kid"}

# aliases plus canonical names, longest first for text scanning
GENRE_KEYWORDS = sorted(
    [keyword for keyword in list(GENRE_ALIASES) + KNOWN_GENRES if keyword not in SCAN_EXCLUDED],
    key=len,
    reverse=True)


def lookup_genre(text) -> Optional[str]:
    """Case-insensitive match of a genre name or alias.

    Returns:
        canonical genre name or None when the text is not in the vocabulary.
    """
    if not isinstance(text, str):
        return None
    key = re.sub(r"\s+", " ", text.strip().lower())
    # tolerate 'Action & Adventure' style catalog names
    key = key.split(" & ")[0]
    if key in GENRE_ALIASES:
        return GENRE_ALIASES[key]
    if key in GENRE_IDS["movie"] or key in GENRE_IDS["tv"]:
        return key
    return None


def genre_id_for(genre: Optional[str], media_type: str) -> Optional[int]:
    """Catalog genre id for a canonical genre, or None when the media type has no such genre."""
    if not genre:
        return None
    return GENRE_IDS.get(media_type, {}).get(genre)


def find_genre_in_text(text: str) -> Optional[str]:
    """Earliest genre keyword found in free text (word boundaries respected)."""
    lowered = (text or "").lower()
    best_position, best_keyword = None, None
    # keywords are longest first, so on a tie the longer phrase is kept
    for keyword in GENRE_KEYWORDS:
        match = re.search(r"(?<![a-z\-])" + re.escape(keyword) + r"(?![a-z\-])", lowered)
        if match and (best_position is None or match.start() < best_position):
            best_position, best_keyword = match.start(), keyword
    return lookup_genre(best_keyword) if best_keyword else None
