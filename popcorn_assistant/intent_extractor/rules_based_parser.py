"""Script for Rule-based Parser"""
import re
import logging
from typing import Any, Dict, Optional, Tuple
from popcorn_assistant.utilities import query_preprocessing
from popcorn_assistant.filter_normalizer.genre_vocabulary import find_genre_in_text, lookup_genre
# basic log info
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
# define single logger for the rule based parser
logger = logging.getLogger("Query_Rule_Based_Parser")

# words that start a lower bound, inclusive of the year
SINCE_WORDS = ("since",)
# words after "from YEAR" that make it a lower bound
ONWARDS_WORDS = ("on", "onwards", "onward", "forward", "forwards", "later")
# words that end an upper bound, inclusive of the year
UNTIL_WORDS = ("until", "till", "through", "thru")

# rating words that read 'at least'
RATING_WORDS = ("rating", "rated", "score", "imdb", "stars")
AT_LEAST_PHRASES = (
    ("at", "least"), ("greater", "than"), ("more", "than"), ("higher", "than"),
    ("over",), ("above",), (">",), (">=",), ("min",), ("minimum",), ("of",), ("is",),)

# vague quality phrases and the rating they mean
QUALITY_PHRASES = {
    "highly rated": 7.5,
    "top rated": 7.5,
    "top-rated": 7.5,
    "critically acclaimed": 7.5,
    "well rated": 7.0,
    "well-rated": 7.0,
    "good rating": 7.0,}

# cue phrases before a cast member name, strong cues accept a lower-case name
ACTOR_CUES = (
    ("starring", True), ("featuring", True), ("acted by", True), ("played by", True),
    ("with actor", True), ("with actress", True), ("stars", False), ("with", False),)
# cue phrases before a director name
DIRECTOR_CUES = (
    ("directed by", True), ("direct by", True), ("by director", True),
    ("from director", True), ("director", True), ("filmmaker", True),)

# words that end a captured person name
NAME_STOP_WORDS = {
    "from", "in", "after", "before", "since", "until", "till", "between", "and", "or",
    "rated", "rating", "with", "that", "which", "who", "where", "released", "made",
    "movies", "movie", "films", "film", "shows", "show", "series", "only", "please",
    "directed", "starring", "featuring", "above", "over", "at", "under", "during",
    "the", "a", "an", "of", "for", "to", "on", "by", "but", "like", "sorted", "ratings",}

# capitalised words that are not names
NON_NAME_WORDS = {
    "I", "Me", "My", "Show", "Find", "Give", "Recommend", "Suggest", "List", "Please",
    "Top", "Best", "Any", "Some", "Good", "Great", "Movies", "Movie", "Films", "Film",
    "Shows", "Show", "Series", "TV", "Tv", "The", "A", "An", "What", "Which", "Can",
    "Could", "Would", "Want", "Looking", "Need", "Get", "Latest", "New", "Old", "Classic",
    "Popular", "Trending", "Rated", "Netflix", "Hollywood", "Bollywood", "English",}

# media type words
TV_WORDS = ("tv", "series", "shows", "tv-show", "tv-shows", "sitcom", "sitcoms")


# parse user text
def user_query_parser(text: str) -> Dict[str, Any]:
    """Function to parse a user query into a raw (partial) filter dict.

    Args:
        text (str): Incoming user's query text.

    Steps:
        - collect years (exact, range, decade, since/after/before/until)
        - collect minimal rating
        - collect genre and media type
        - collect director, then actor names
        - explicit count is left to the normalizer

    Returns:
        dict: only the fields found in the text, never raises.
    """
    try:
        return _parse(text or "")
    except Exception:
        # the parser must degrade to an empty filter for any input
        logger.exception(f"Rule based parser failed, returning empty filter.")
        return {}


def _parse(text: str) -> Dict[str, Any]:
    raw_filter: Dict[str, Any] = {}

    logger.info(f"Collecting year values from text.")
    year, year_after, year_before = get_years_from_text(text)
    if year is not None:
        raw_filter["year"] = year
    if year_after is not None:
        raw_filter["year_after"] = year_after
    if year_before is not None:
        raw_filter["year_before"] = year_before

    logger.info(f"Collecting rating values from text.")
    minimal_rating = get_min_rating_from_text(text)
    if minimal_rating is not None:
        raw_filter["min_rating"] = minimal_rating

    logger.info(f"Collecting genre from text.")
    genre = get_genre_from_text(text)
    if genre:
        raw_filter["genre"] = genre

    media_type = get_media_type_from_text(text)
    if media_type:
        raw_filter["media_type"] = media_type

    logger.info(f"Collecting people from text.")
    director = get_director_from_text(text)
    if director:
        raw_filter["director"] = director
    actor = get_actor_from_text(text, exclude=director)
    if actor:
        raw_filter["actor"] = actor

    logger.info(f"Rule based parser output: {raw_filter}")
    return raw_filter


# 1. find years value
def get_years_from_text(text: str) -> Tuple[Optional[int], Optional[int], Optional[int]]:
    """Function to extract year info from text.
        - detects a single year (e.g., '2010')
        - detects '2010-2015', '2010 to 2015', 'between 2010 and 2015' (range)
        - detects decades '90s', '1990s'
        - detects 'since/from 2015' (inclusive) and 'after 2015' (2016 onwards)
        - detects 'until 2015' (inclusive) and 'before 2015' (up to 2014)

    Args:
        text (str): Incoming text from user's query.

    Returns:
        Tuple: (single_year, year_after, year_before).
    """
    word_list = query_preprocessing.split_text_into_words_corpus(text)
    is_year = query_preprocessing.is_four_digit_year

    single_year = None
    year_after = None
    year_before = None

    # hyphenated range like '2010-2015'
    for word in word_list:
        parts = word.split("-")
        if len(parts) == 2 and is_year(parts[0]) and is_year(parts[1]):
            y1, y2 = int(parts[0]), int(parts[1])
            return (None, min(y1, y2), max(y1, y2))

    # 'Y to Z' / 'between Y and Z' / 'from Y to Z'
    for i in range(len(word_list) - 2):
        a, b, c = word_list[i], word_list[i + 1], word_list[i + 2]
        if is_year(a) and b in ("to", "and", "through", "until", "till") and is_year(c):
            y1, y2 = int(a), int(c)
            return (None, min(y1, y2), max(y1, y2))

    # decades '90s', '1990s', '2000s'
    for word in word_list:
        decade = _decade_from_word(word)
        if decade is not None:
            return (None, decade, decade + 9)

    # relative bounds
    for i in range(len(word_list) - 1):
        word, next_word = word_list[i], word_list[i + 1]
        if not is_year(next_word):
            continue
        value = int(next_word)
        after_year = word_list[i + 2] if i + 2 < len(word_list) else ""
        if word == "after":
            year_after = value + 1
        elif word in SINCE_WORDS:
            year_after = value
        # 'from 2015 onwards', a bare 'from 2015' is an exact year
        elif word == "from" and after_year in ONWARDS_WORDS:
            year_after = value
        elif word == "before":
            year_before = value - 1
        elif word in UNTIL_WORDS:
            year_before = value
        # 'up to 2015'
        elif word == "to" and i > 0 and word_list[i - 1] == "up":
            year_before = value

    # if we still do not have a bound, try to capture a single year
    if year_after is None and year_before is None:
        all_years = [int(word) for word in word_list if is_year(word)]
        # if exactly one year is present, assign it to single_year
        if len(all_years) == 1:
            single_year = all_years[0]

    return (single_year, year_after, year_before)


def _decade_from_word(word: str) -> Optional[int]:
    # '1990s' / "1990's"
    match = re.fullmatch(r"((?:19|20)\d0)'?s", word)
    if match:
        return int(match.group(1))
    # '90s' / "90's" -> 1990, '00s' -> 2000
    match = re.fullmatch(r"(\d)0'?s", word)
    if match:
        digit = int(match.group(1))
        return 2000 + digit * 10 if digit <= 2 else 1900 + digit * 10
    return None


# 2. find minimal movie ratings
def get_min_rating_from_text(text: str) -> Optional[float]:
    """Find a minimal rating threshold (0..10) from user text.
    Supports:
      - "rating > 7" / "rating above 7" / "rated at least 7" / "rating of 7"
      - "7+ rating" / "rated 8+" / "8/10"
      - "minimum rating 6.5" / "min rating 6"
      - "highly rated" / "well rated"
    Returns: rating value or None
    """
    lower_text = query_preprocessing.convert_text_to_lower_case(text).replace("atleast", "at least")
    word_list = query_preprocessing.split_text_into_words_corpus(lower_text)
    token_count = len(word_list)
    parse = query_preprocessing.parse_float_safe

    for index, word in enumerate(word_list):
        # '8/10'
        if word.endswith("/10"):
            rating_value = parse(word[: -len("/10")])
            if rating_value is not None:
                return _clamp_rating(rating_value)

        # 'minimum rating 6.5' / 'min rating of 6'
        if word in ("min", "minimum") and index + 1 < token_count and word_list[index + 1] in RATING_WORDS:
            for candidate in word_list[index + 2 : index + 4]:
                rating_value = parse(candidate)
                if rating_value is not None:
                    return _clamp_rating(rating_value)

        if word not in RATING_WORDS:
            continue

        # 'rating 7' / 'rated 8+'
        if index + 1 < token_count:
            rating_value = parse(word_list[index + 1])
            if rating_value is not None and not query_preprocessing.is_four_digit_year(word_list[index + 1]):
                return _clamp_rating(rating_value)

        # 'rating above 7' / 'rated at least 7' / 'rating > 7'
        for phrase in AT_LEAST_PHRASES:
            end = index + 1 + len(phrase)
            if tuple(word_list[index + 1 : end]) == phrase and end < token_count:
                rating_value = parse(word_list[end])
                if rating_value is not None:
                    return _clamp_rating(rating_value)

        # '7+ rating' / '7 stars' - number right before the rating word
        if index > 0:
            previous_word = word_list[index - 1]
            rating_value = parse(previous_word)
            if rating_value is not None and not query_preprocessing.is_four_digit_year(previous_word):
                return _clamp_rating(rating_value)

    # 'above 7' without a rating word only when it cannot be a year
    for index in range(token_count - 1):
        if word_list[index] in ("above", "over") and word_list[index + 1].replace(".", "", 1).isdigit():
            rating_value = parse(word_list[index + 1])
            if rating_value is not None and rating_value <= 10:
                return _clamp_rating(rating_value)

    for phrase, rating_value in QUALITY_PHRASES.items():
        if phrase in lower_text:
            return rating_value

    return None


def _clamp_rating(value: float) -> float:
    # clamp to 0..10
    return max(0.0, min(10.0, value))


# 3. find genre
def get_genre_from_text(text: str) -> Optional[str]:
    """Function to find the first known genre mentioned in the text.

    Returns:
        canonical genre name or None.
    """
    return find_genre_in_text(text)


# 4. find media type
def get_media_type_from_text(text: str) -> Optional[str]:
    """Return 'tv' when the user asks for shows/series, 'movie' when explicit, else None."""
    word_list = query_preprocessing.split_text_into_words_corpus(text)
    if any(word in TV_WORDS for word in word_list):
        return "tv"
    if any(word in ("movie", "movies", "film", "films") for word in word_list):
        return "movie"
    return None


# 5. find director
def get_director_from_text(text: str) -> Optional[str]:
    """Function to capture a director name after cues like 'directed by' or 'director'.

    Returns:
        name with its original casing or None.
    """
    return _name_after_cues(text, DIRECTOR_CUES)


# 6. find actor
def get_actor_from_text(text: str, exclude: Optional[str] = None) -> Optional[str]:
    """Function to capture an actor name.
        1) after 'starring', 'featuring', 'with' ...
        2) otherwise the first run of 2+ capitalised words that is not a genre or a director

    Returns:
        name with its original casing or None.
    """
    name = _name_after_cues(text, ACTOR_CUES)
    if name and name != exclude:
        return name
    return _capitalised_name(text, exclude)


def _name_after_cues(text: str, cues) -> Optional[str]:
    """Return the name that follows the first matching cue phrase."""
    for cue, strong in cues:
        pattern = r"(?<![A-Za-z])" + re.escape(cue) + r"\s+([A-Za-z][\w.'\-]*(?:\s+[A-Za-z][\w.'\-]*){0,3})"
        for match in re.finditer(pattern, text, flags=re.IGNORECASE):
            name = _trim_name(match.group(1), allow_lower_case=strong)
            if name:
                return name
    return None


def _trim_name(candidate: str, allow_lower_case: bool = False) -> Optional[str]:
    """Cut a captured phrase at the first stop word and reject genres and numbers."""
    words = []
    for word in candidate.split():
        clean = word.strip(".,;:!?\"'")
        if not clean or clean.lower() in NAME_STOP_WORDS or any(ch.isdigit() for ch in clean):
            break
        # possessive 'Nolan's' ends the name
        if clean.lower().endswith("'s"):
            words.append(clean[:-2])
            break
        words.append(clean)
    name = " ".join(words).strip()
    if not name or lookup_genre(name):
        return None
    # after a weak cue like 'with' only a capitalised name counts
    if not name[0].isupper() and not allow_lower_case:
        return None
    return " ".join(word[:1].upper() + word[1:] for word in words)


def _capitalised_name(text: str, exclude: Optional[str]) -> Optional[str]:
    """First run of two or more capitalised words that is neither a genre nor excluded."""
    run = []
    candidates = []
    for word in re.findall(r"[A-Za-z][\w.'\-]*", text):
        if word[0].isupper() and word not in NON_NAME_WORDS and not lookup_genre(word):
            run.append(word[:-2] if word.endswith("'s") else word)
            continue
        if len(run) >= 2:
            candidates.append(" ".join(run))
        run = []
    if len(run) >= 2:
        candidates.append(" ".join(run))
    for candidate in candidates:
        if not exclude or candidate not in exclude:
            return candidate
    return None
