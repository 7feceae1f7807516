"""Translate a MovieFilter into catalog calls and fetch the post-processed results.

 Strategy, first match wins:
- actor resolves to a person id -> discovery restricted to that cast member
  (tv has no cast filter on discovery, so the person's tv cast credits are used).
- director resolves to a person id -> the person's credits, crew entries with a directing job.
- otherwise -> generic discovery with genre, year, date range and rating applied server-side.

An actor or director path that ends with zero results falls back to generic discovery.
"""
import math
import logging
from typing import Any, Dict, List, Optional, Tuple
from popcorn_assistant.catalog_client.tmdb_client import TMDBClient
from popcorn_assistant.catalog_client.entity_resolver import EntityResolver
from popcorn_assistant.filter_normalizer.genre_vocabulary import genre_id_for
from popcorn_assistant.query_processor import result_post_processor
from popcorn_assistant.basemodel_response_validator.assistant_model import CatalogItem, MovieFilter
# basic log info
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
logger = logging.getLogger("Catalog_Query_Builder")

# discovery returns 20 items per page
DISCOVER_PAGE_SIZE = 20
MAX_DISCOVER_PAGES = 3
DIRECTING_JOBS = ("Director", "Co-Director")

STRATEGY_ACTOR = "actor"
STRATEGY_DIRECTOR = "director"
STRATEGY_DISCOVER = "discover"

# why a person path ended in generic discovery
BROADENED_PERSON_UNRESOLVED = "person_unresolved"
BROADENED_PERSON_NO_TITLES = "person_no_titles"


# build discovery params
def build_discover_params(
        movie_filter: MovieFilter,
        cast_person_id: Optional[int] = None) -> Dict[str, Any]:
    """Function to map a filter onto discovery query parameters.

    Args:
        movie_filter (MovieFilter): Resolved filter.
        cast_person_id (int): Restrict to a cast member (movie discovery only).

    Returns:
        dict: query parameters. Year bounds become Jan 1 / Dec 31 dates.
    """
    is_movie = movie_filter.media_type == "movie"
    # movie and tv name their date params differently
    date_field = "primary_release_date" if is_movie else "first_air_date"
    year_field = "primary_release_year" if is_movie else "first_air_date_year"

    params: Dict[str, Any] = {
        "sort_by": "popularity.desc",
        "include_adult": "false",}

    genre_id = genre_id_for(movie_filter.genre, movie_filter.media_type)
    if genre_id is not None:
        params["with_genres"] = str(genre_id)
    elif movie_filter.genre:
        logger.info(f"Genre {movie_filter.genre!r} has no {movie_filter.media_type} id, ignoring it server-side")

    if movie_filter.year is not None:
        params[year_field] = movie_filter.year
    else:
        if movie_filter.year_after is not None:
            params[f"{date_field}.gte"] = f"{movie_filter.year_after}-01-01"
        if movie_filter.year_before is not None:
            params[f"{date_field}.lte"] = f"{movie_filter.year_before}-12-31"

    if movie_filter.min_rating is not None:
        params["vote_average.gte"] = movie_filter.min_rating

    if cast_person_id is not None and is_movie:
        params["with_cast"] = str(cast_person_id)

    return params


class CatalogQueryBuilder:
    """Pick the catalog strategy for a filter and return post-processed CatalogItems."""

    def __init__(
            self,
            catalog_client: TMDBClient,
            entity_resolver: Optional[EntityResolver] = None):
        self.catalog_client = catalog_client
        self.entity_resolver = entity_resolver or EntityResolver(catalog_client)

    # 1. generic discovery
    def fetch_discover(
            self,
            movie_filter: MovieFilter,
            cast_person_id: Optional[int] = None) -> List[Dict[str, Any]]:
        """Fetch discovery pages until enough raw items are collected for the limit."""
        params = build_discover_params(movie_filter, cast_person_id)
        wanted_pages = min(MAX_DISCOVER_PAGES, math.ceil(movie_filter.limit / DISCOVER_PAGE_SIZE) + 1)
        raw_items: List[Dict[str, Any]] = []
        page = 1
        while page <= wanted_pages:
            logger.info(f"Discover {movie_filter.media_type} page {page} params: {params}")
            body = self.catalog_client.discover(movie_filter.media_type, params, page=page)
            raw_items.extend(body.get("results") or [])
            total_pages = body.get("total_pages") or 1
            if page >= total_pages:
                break
            page += 1
        return raw_items

    # 2. actor path
    def fetch_by_actor(self, movie_filter: MovieFilter, person_id: int) -> List[Dict[str, Any]]:
        if movie_filter.media_type == "movie":
            return self.fetch_discover(movie_filter, cast_person_id=person_id)
        credits = self.catalog_client.person_credits(person_id, movie_filter.media_type)
        return credits["cast"]

    # 3. director path
    def fetch_by_director(self, movie_filter: MovieFilter, person_id: int) -> List[Dict[str, Any]]:
        credits = self.catalog_client.person_credits(person_id, movie_filter.media_type)
        return [entry for entry in credits["crew"] if entry.get("job") in DIRECTING_JOBS]

    def fetch_with_strategy(self, movie_filter: MovieFilter) -> Tuple[List[CatalogItem], str, Optional[str]]:
        """Function to run the strategy selection and the zero-result fallback.

        Args:
            movie_filter (MovieFilter): Resolved filter.

        Returns:
            Tuple: (items, strategy used, broaden reason or None when the results match the named person).

        Raises:
            CatalogServiceError: when the catalog cannot answer.
        """
        person_path, person_id = self.select_person_path(movie_filter)

        if person_path == STRATEGY_ACTOR:
            items = result_post_processor.process(self.fetch_by_actor(movie_filter, person_id), movie_filter)
            if items:
                return items, STRATEGY_ACTOR, None
            logger.info(f"Actor path returned nothing for {movie_filter.actor!r}, broadening.")
        elif person_path == STRATEGY_DIRECTOR:
            items = result_post_processor.process(self.fetch_by_director(movie_filter, person_id), movie_filter)
            if items:
                return items, STRATEGY_DIRECTOR, None
            logger.info(f"Director path returned nothing for {movie_filter.director!r}, broadening.")

        items = result_post_processor.process(self.fetch_discover(movie_filter), movie_filter)
        # a named person that did not answer means the results are broader than asked
        broaden_reason = None
        if person_path is not None:
            broaden_reason = BROADENED_PERSON_NO_TITLES
        elif movie_filter.actor or movie_filter.director:
            broaden_reason = BROADENED_PERSON_UNRESOLVED
        return items, STRATEGY_DISCOVER, broaden_reason

    def select_person_path(self, movie_filter: MovieFilter) -> Tuple[Optional[str], Optional[int]]:
        """Resolve the actor first, the director only when the actor does not resolve."""
        if movie_filter.actor:
            person_id = self.entity_resolver.resolve_actor(movie_filter.actor)
            if person_id is not None:
                return STRATEGY_ACTOR, person_id
        if movie_filter.director:
            person_id = self.entity_resolver.resolve_director(movie_filter.director)
            if person_id is not None:
                return STRATEGY_DIRECTOR, person_id
        return None, None

    def build_and_fetch(self, movie_filter: MovieFilter) -> List[CatalogItem]:
        """Function to query the catalog for a filter and return the ranked, bounded items."""
        items, _, _ = self.fetch_with_strategy(movie_filter)
        return items
