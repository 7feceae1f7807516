"""Resolve actor/director names to catalog person ids."""
import logging
from typing import Dict, Optional
from popcorn_assistant.catalog_client.tmdb_client import TMDBClient, CatalogServiceError
# basic log info
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
logger = logging.getLogger("Entity_Resolver")


class EntityResolver:
    """Top-hit person search with an optional session-scoped name -> id cache.

    Ambiguous names resolve to the catalog's first result. Misses and remote
    errors resolve to None, the caller then broadens the query.
    """

    def __init__(
            self,
            catalog_client: TMDBClient,
            person_cache: Optional[Dict[str, Optional[int]]] = None):
        self.catalog_client = catalog_client
        # confirmed hits and confirmed misses, never errors
        self.person_cache = person_cache if person_cache is not None else {}

    def resolve_person(self, name: Optional[str]) -> Optional[int]:
        """Function to resolve a free-text person name to a catalog person id.

        Args:
            name (str): Actor or director name.

        Returns:
            int person id, or None on no match or remote error.
        """
        if not name or not name.strip():
            return None
        cache_key = " ".join(name.lower().split())
        if cache_key in self.person_cache:
            logger.info(f"Person cache hit for {name!r}")
            return self.person_cache[cache_key]

        try:
            results = self.catalog_client.search_person(name)
        except CatalogServiceError as search_error:
            logger.warning(f"Person search failed for {name!r}: {search_error}")
            return None

        if not isinstance(results, list):
            logger.warning(f"Person search for {name!r} returned {type(results).__name__}, not a list")
            return None
        person_id = None
        if results:
            top_hit = results[0]
            candidate_id = top_hit.get("id") if isinstance(top_hit, dict) else None
            # malformed hits are not cached, the next request searches again
            if not isinstance(candidate_id, int) or isinstance(candidate_id, bool):
                logger.warning(f"Unexpected person search hit for {name!r}: {top_hit!r}")
                return None
            person_id = candidate_id
            logger.info(f"Resolved {name!r} -> {top_hit.get('name')!r} ({person_id})")
        else:
            logger.info(f"No person found for {name!r}")
        self.person_cache[cache_key] = person_id
        return person_id

    def resolve_actor(self, name: Optional[str]) -> Optional[int]:
        return self.resolve_person(name)

    def resolve_director(self, name: Optional[str]) -> Optional[int]:
        return self.resolve_person(name)
