"""Client-side filtering, ranking and shaping of raw catalog results."""
import logging
from typing import Any, Dict, Iterable, List, Optional
from popcorn_assistant.utilities import app_config, query_preprocessing
from popcorn_assistant.filter_normalizer.genre_vocabulary import genre_id_for
from popcorn_assistant.basemodel_response_validator.assistant_model import CatalogItem, MovieFilter
# basic log info
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
logger = logging.getLogger("Result_Post_Processor")


def release_date_of(raw_item: Dict[str, Any]) -> Optional[str]:
    """Movie release date, falling back to the tv first air date."""
    return raw_item.get("release_date") or raw_item.get("first_air_date") or None


def poster_url_for(poster_path: Optional[str]) -> Optional[str]:
    """Full image url for a catalog poster path, None when the item has no poster."""
    if not poster_path or not isinstance(poster_path, str):
        return None
    return f"{app_config.TMDB_IMAGE_BASE_URL.rstrip('/')}/{poster_path.lstrip('/')}"


def release_year_of(raw_item: Dict[str, Any]) -> int:
    """Release year or 0 when the item has no date."""
    return query_preprocessing.extract_year_from_text(release_date_of(raw_item))


def _number(value) -> float:
    parsed = query_preprocessing.parse_float_safe(value)
    return parsed if parsed is not None else 0.0


# 1. deduplicate
def deduplicate_items(raw_items: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Keep the first occurrence of each catalog id, drop items with no id."""
    seen_ids = set()
    unique_items = []
    for raw_item in raw_items or []:
        if not isinstance(raw_item, dict):
            continue
        item_id = raw_item.get("id")
        if item_id is None or item_id in seen_ids:
            continue
        seen_ids.add(item_id)
        unique_items.append(raw_item)
    return unique_items


# 2. filter
def matches_filter(raw_item: Dict[str, Any], movie_filter: MovieFilter) -> bool:
    """Function to re-check a raw item against the filter.

    Year bounds are inclusive. An item with no release date fails any year
    constraint. Genre membership is checked only when the item carries genre ids.
    """
    if movie_filter.min_rating is not None and _number(raw_item.get("vote_average")) < movie_filter.min_rating:
        return False

    if movie_filter.year is not None or movie_filter.year_after is not None or movie_filter.year_before is not None:
        year = release_year_of(raw_item)
        if not year:
            return False
        if movie_filter.year is not None and year != movie_filter.year:
            return False
        if movie_filter.year_after is not None and year < movie_filter.year_after:
            return False
        if movie_filter.year_before is not None and year > movie_filter.year_before:
            return False

    genre_id = genre_id_for(movie_filter.genre, movie_filter.media_type)
    genre_ids = raw_item.get("genre_ids")
    if genre_id is not None and isinstance(genre_ids, list) and genre_id not in genre_ids:
        return False

    return True


# 3. rank
def rank_items(raw_items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Rating descending, popularity descending on ties."""
    return sorted(
        raw_items,
        key=lambda raw_item: (_number(raw_item.get("vote_average")), _number(raw_item.get("popularity"))),
        reverse=True)


# 4. map
def to_catalog_item(raw_item: Dict[str, Any], media_type: str) -> Optional[CatalogItem]:
    """Map a raw catalog result to a CatalogItem (title falls back to the tv 'name')."""
    title = raw_item.get("title") or raw_item.get("name") \
        or raw_item.get("original_title") or raw_item.get("original_name")
    if not title:
        return None
    item_media_type = raw_item.get("media_type")
    if item_media_type not in ("movie", "tv"):
        item_media_type = media_type
    try:
        return CatalogItem(
            id=int(raw_item["id"]),
            title=str(title),
            overview=raw_item.get("overview") or "",
            poster_path=raw_item.get("poster_path") or None,
            poster_url=poster_url_for(raw_item.get("poster_path")),
            vote_average=_number(raw_item.get("vote_average")),
            release_date=release_date_of(raw_item),
            media_type=item_media_type)
    except (TypeError, ValueError) as mapping_error:
        logger.warning(f"Skipping malformed catalog item {raw_item.get('id')!r}: {mapping_error}")
        return None


# main post-processor
def process(raw_items: Iterable[Dict[str, Any]], movie_filter: MovieFilter) -> List[CatalogItem]:
    """Function to turn raw catalog results into the final ranked, bounded list.

    Args:
        raw_items (list): Raw results from discovery or person credits.
        movie_filter (MovieFilter): Resolved filter of the request.

    Returns:
        list: at most movie_filter.limit CatalogItem, best first.
    """
    unique_items = deduplicate_items(raw_items)
    matching_items = [raw_item for raw_item in unique_items if matches_filter(raw_item, movie_filter)]
    ranked_items = rank_items(matching_items)

    catalog_items = []
    for raw_item in ranked_items:
        if len(catalog_items) >= movie_filter.limit:
            break
        catalog_item = to_catalog_item(raw_item, movie_filter.media_type)
        if catalog_item is not None:
            catalog_items.append(catalog_item)

    logger.info(
        f"Post-processed {len(unique_items)} unique items -> {len(matching_items)} matching -> "
        f"{len(catalog_items)} returned (limit {movie_filter.limit})")
    return catalog_items
