"""Coerce a loosely-typed filter object into a MovieFilter, merging onto a previous filter."""
import logging
from typing import Any, Dict, Optional
from popcorn_assistant.utilities import query_preprocessing
from popcorn_assistant.filter_normalizer.genre_vocabulary import lookup_genre
from popcorn_assistant.basemodel_response_validator.assistant_model import (
    MovieFilter, DEFAULT_LIMIT, MIN_LIMIT, MAX_LIMIT)
# basic log info
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
logger = logging.getLogger("Filter_Normalizer")

# accepted spellings per filter field (model output and rule-based output differ)
FIELD_KEYS = {
    "media_type": ("media_type", "mediaType", "type"),
    "genre": ("genre", "genres"),
    "actor": ("actor", "cast"),
    "director": ("director",),
    "year": ("year",),
    "year_after": ("year_after", "yearAfter", "year_from", "start_year"),
    "year_before": ("year_before", "yearBefore", "year_to", "end_year"),
    "min_rating": ("min_rating", "minRating", "rating"),
    "limit": ("limit", "count", "top_n"),
    "summary": ("summary",),}

MEDIA_TYPE_WORDS = {
    "movie": "movie", "movies": "movie", "film": "movie", "films": "movie",
    "tv": "tv", "tv show": "tv", "tv shows": "tv", "show": "tv", "shows": "tv",
    "series": "tv", "tv series": "tv",}

# strings a model uses to mean 'not set'
NULL_STRINGS = ("", "null", "none", "n/a", "any", "unknown")

MAX_SUMMARY_LENGTH = 240


def _pick(raw: Dict[str, Any], field: str):
    """Return the first present, non-null value for a field across its spellings."""
    for key in FIELD_KEYS[field]:
        if key in raw:
            value = raw[key]
            if value is None:
                continue
            if isinstance(value, str) and value.strip().lower() in NULL_STRINGS:
                continue
            return value
    return None


# field coercers - each returns None for anything invalid
def coerce_media_type(value) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return MEDIA_TYPE_WORDS.get(value.strip().lower())


def coerce_genre(value) -> Optional[str]:
    # a model may answer with a list of genres, the first known one wins
    if isinstance(value, (list, tuple)):
        for item in value:
            genre = lookup_genre(item)
            if genre:
                return genre
        return None
    return lookup_genre(value)


def coerce_person(value) -> Optional[str]:
    if not isinstance(value, str):
        return None
    name = " ".join(value.split())
    return name or None


def coerce_year(value) -> Optional[int]:
    year = query_preprocessing.parse_int_safe(value)
    if year is None or not query_preprocessing.is_four_digit_year(str(year)):
        return None
    return year


def coerce_rating(value) -> Optional[float]:
    rating = query_preprocessing.parse_float_safe(value)
    if rating is None:
        return None
    # clamp to 0..10
    return max(0.0, min(10.0, rating))


def clamp_limit(value: int) -> int:
    """Clamp a requested count into [1, 50]."""
    return max(MIN_LIMIT, min(MAX_LIMIT, int(value)))


def coerce_limit(value) -> Optional[int]:
    limit = query_preprocessing.parse_int_safe(value)
    if limit is None:
        return None
    return clamp_limit(limit)


COERCERS = {
    "media_type": coerce_media_type,
    "genre": coerce_genre,
    "actor": coerce_person,
    "director": coerce_person,
    "year": coerce_year,
    "year_after": coerce_year,
    "year_before": coerce_year,
    "min_rating": coerce_rating,
    "limit": coerce_limit,}


# main normalizer
def normalize(
        raw,
        previous: Optional[MovieFilter] = None,
        raw_text: Optional[str] = None) -> MovieFilter:
    """Function to coerce a raw filter object into a MovieFilter.

    Every field is independently optional. Missing or invalid fields keep the
    previous filter's value (last non-null wins) or the type default. Never raises.

    Args:
        raw (dict): Loosely-typed filter from the rule-based parser or the language model.
        previous (MovieFilter): Active filter of the conversation, if any.
        raw_text (str): Original utterance, used to detect an explicit count when limit is absent.

    Returns:
        MovieFilter: structurally valid filter.
    """
    if not isinstance(raw, dict):
        logger.warning(f"Raw filter is {type(raw).__name__}, treating as empty.")
        raw = {}

    # start from the previous values or the defaults
    base = previous if previous is not None else MovieFilter()
    values = base.model_dump()

    # fields explicitly set by this raw object
    provided = {}
    for field, coercer in COERCERS.items():
        raw_value = _pick(raw, field)
        if raw_value is None:
            continue
        try:
            coerced = coercer(raw_value)
        except (TypeError, ValueError, OverflowError) as coerce_error:
            logger.warning(f"Could not coerce {field} from {raw_value!r}: {coerce_error}")
            continue
        if coerced is None:
            logger.info(f"Ignoring invalid value for {field}: {raw_value!r}")
            continue
        provided[field] = coerced

    # limit heuristic from the utterance itself
    if "limit" not in provided and raw_text:
        count = query_preprocessing.get_count_from_text(raw_text)
        if count is not None:
            provided["limit"] = clamp_limit(count)

    values.update(provided)

    # an exact year and year bounds never coexist after a merge
    if "year" in provided:
        values["year_after"] = None
        values["year_before"] = None
    elif "year_after" in provided or "year_before" in provided:
        values["year"] = None

    if values["year_after"] is not None and values["year_before"] is not None \
            and values["year_after"] > values["year_before"]:
        if "year_after" in provided and "year_before" in provided:
            # inverted bounds in one message e.g. 'before 2010 after 2015'
            values["year_after"], values["year_before"] = values["year_before"], values["year_after"]
        elif "year_after" in provided:
            # the new bound replaces a previous bound it contradicts
            values["year_before"] = None
        else:
            values["year_after"] = None

    # summary - model summary, else describe the new filter, else keep the previous one
    raw_summary = _pick(raw, "summary")
    changed = previous is None or any(values[key] != getattr(base, key) for key in COERCERS)
    if isinstance(raw_summary, str) and raw_summary.strip():
        values["summary"] = " ".join(raw_summary.split())[:MAX_SUMMARY_LENGTH]
    elif changed or not values.get("summary"):
        values["summary"] = describe_filter(values)

    try:
        return MovieFilter(**values)
    except Exception as validation_error:
        # coercers keep values in range, so this is only reached on an unexpected shape
        logger.error(f"Normalised filter failed validation: {validation_error}")
        return base if previous is not None else MovieFilter(summary=describe_filter(MovieFilter().model_dump()))


# build summary
def describe_filter(values: Dict[str, Any]) -> str:
    """Function to build a short human-readable description of a filter.

    Args:
        values (dict): MovieFilter fields.

    Returns:
        str: e.g. 'Top 10 action movies starring Tom Cruise from 2010 to 2015 rated 7+'.
    """
    noun = "TV shows" if values.get("media_type") == "tv" else "movies"
    parts = [f"Top {values.get('limit') or DEFAULT_LIMIT}"]
    if values.get("genre"):
        parts.append(values["genre"])
    parts.append(noun)
    if values.get("actor"):
        parts.append(f"starring {values['actor']}")
    if values.get("director"):
        parts.append(f"directed by {values['director']}")

    year, year_after, year_before = values.get("year"), values.get("year_after"), values.get("year_before")
    if year:
        parts.append(f"from {year}")
    elif year_after and year_before:
        parts.append(f"from {year_after} to {year_before}")
    elif year_after:
        parts.append(f"from {year_after} onwards")
    elif year_before:
        parts.append(f"up to {year_before}")

    if values.get("min_rating") is not None:
        parts.append(f"rated {values['min_rating']:g}+")
    return " ".join(parts)
