"""
TMDB catalog client for the Popcorn assistant.
- requests.Session with a timeout on every call.
- Retries connection errors, timeouts, 429 and 5xx with exponential backoff.
- No caching here, callers own any cache.
"""
import time
import logging
from typing import Any, Dict, List, Optional
import requests
from popcorn_assistant.utilities import app_config
# basic log info
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
logger = logging.getLogger("TMDB_Catalog_Client")

# status codes worth another attempt
RETRY_STATUS_CODES = {429, 500, 502, 503, 504}
MEDIA_TYPES = ("movie", "tv")


class CatalogServiceError(Exception):
    """Raised when the catalog cannot answer (network, auth, 4xx/5xx after retries)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TMDBClient:
    """Thin client over the TMDB v3 REST endpoints used by the assistant."""

    def __init__(
            self,
            api_key: Optional[str] = None,
            read_access_token: Optional[str] = None,
            base_url: str = "https://api.themoviedb.org/3",
            timeout: float = 10.0,
            max_retries: int = 2,
            backoff_seconds: float = 0.5,
            http_session: Optional[requests.Session] = None):
        """Initialise the catalog client.

        Args:
            api_key (str): v3 api key, sent as the api_key query param.
            read_access_token (str): v4 read token, sent as a bearer header when set.
            base_url (str): API root.
            timeout (float): Seconds per HTTP call.
            max_retries (int): Extra attempts for transient failures.
            backoff_seconds (float): First backoff delay, doubled per attempt.
            http_session (requests.Session): Optional shared session.
        """
        self.api_key = api_key
        self.read_access_token = read_access_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max(0, max_retries)
        self.backoff_seconds = backoff_seconds
        self.http_session = http_session or requests.Session()
        if read_access_token:
            self.http_session.headers.update({"Authorization": f"Bearer {read_access_token}"})
        self.http_session.headers.update({"Accept": "application/json"})

    # core request with bounded retries
    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Function to GET a catalog path and decode the JSON body.

        Args:
            path (str): Endpoint path e.g. '/discover/movie'.
            params (dict): Query parameters.

        Returns:
            dict: decoded body, always a JSON object.

        Raises:
            CatalogServiceError: after retries are exhausted or on a non-retryable failure.
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        query = dict(params or {})
        if self.api_key and not self.read_access_token:
            query["api_key"] = self.api_key

        last_error: Optional[CatalogServiceError] = None
        for attempt in range(self.max_retries + 1):
            if attempt:
                delay = self.backoff_seconds * (2 ** (attempt - 1))
                logger.info(f"Retrying {path} in {delay:.2f}s (attempt {attempt + 1}/{self.max_retries + 1})")
                time.sleep(delay)
            try:
                response = self.http_session.get(url, params=query, timeout=self.timeout)
            except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as network_error:
                last_error = CatalogServiceError(f"Catalog request to {path} failed: {network_error}")
                logger.warning(str(last_error))
                continue
            except requests.exceptions.RequestException as request_error:
                raise CatalogServiceError(f"Catalog request to {path} failed: {request_error}") from request_error

            if response.status_code in RETRY_STATUS_CODES:
                last_error = CatalogServiceError(
                    f"Catalog returned {response.status_code} for {path}",
                    status_code=response.status_code)
                logger.warning(str(last_error))
                continue
            if response.status_code >= 400:
                raise CatalogServiceError(
                    f"Catalog returned {response.status_code} for {path}",
                    status_code=response.status_code)
            try:
                body = response.json()
            except ValueError as decode_error:
                raise CatalogServiceError(f"Catalog returned a non-JSON body for {path}") from decode_error
            if not isinstance(body, dict):
                raise CatalogServiceError(f"Catalog returned a non-object body for {path}")
            return body

        raise last_error or CatalogServiceError(f"Catalog request to {path} failed.")

    # 1. discovery
    def discover(self, media_type: str, params: Dict[str, Any], page: int = 1) -> Dict[str, Any]:
        """Structured discovery (genre, dates, rating, cast) for movie or tv."""
        query = dict(params)
        query["page"] = page
        return self.get_json(f"/discover/{_media(media_type)}", query)

    # 2. person search
    def search_person(self, name: str) -> List[Dict[str, Any]]:
        """Free-text person search, results in the catalog's ranking order."""
        body = self.get_json("/search/person", {"query": name, "include_adult": "false"})
        return _results(body)

    # 3. person credits
    def person_credits(self, person_id: int, media_type: str = "movie") -> Dict[str, List[Dict[str, Any]]]:
        """Cast and crew credits of a person for one media type."""
        body = self.get_json(f"/person/{person_id}/{_media(media_type)}_credits")
        return {"cast": body.get("cast") or [], "crew": body.get("crew") or []}

    # 4. browse lists
    def trending(self, media_type: str = "movie", time_window: str = "week") -> List[Dict[str, Any]]:
        window = time_window if time_window in ("day", "week") else "week"
        return _results(self.get_json(f"/trending/{_media(media_type)}/{window}"))

    def top_rated(self, media_type: str = "movie") -> List[Dict[str, Any]]:
        return _results(self.get_json(f"/{_media(media_type)}/top_rated"))

    def upcoming(self, media_type: str = "movie") -> List[Dict[str, Any]]:
        # tv has no 'upcoming' list, 'on_the_air' is the closest
        path = "/movie/upcoming" if _media(media_type) == "movie" else "/tv/on_the_air"
        return _results(self.get_json(path))

    # 5. details
    def details(self, media_type: str, item_id: int) -> Dict[str, Any]:
        return self.get_json(f"/{_media(media_type)}/{int(item_id)}", {"language": "en-US"})


def _media(media_type: str) -> str:
    if media_type not in MEDIA_TYPES:
        raise ValueError(f"Unsupported media type: {media_type!r}")
    return media_type


def _results(body: Dict[str, Any]) -> List[Dict[str, Any]]:
    results = body.get("results")
    return results if isinstance(results, list) else []


def build_tmdb_client() -> TMDBClient:
    """Build the catalog client from configuration."""
    if not app_config.TMDB_API_KEY and not app_config.TMDB_READ_ACCESS_TOKEN:
        logger.warning(f"No TMDB credentials configured, catalog calls will fail with 401.")
    return TMDBClient(
        api_key=app_config.TMDB_API_KEY,
        read_access_token=app_config.TMDB_READ_ACCESS_TOKEN,
        base_url=app_config.TMDB_BASE_URL,
        timeout=app_config.CATALOG_TIMEOUT_SECONDS,
        max_retries=app_config.CATALOG_MAX_RETRIES,
        backoff_seconds=app_config.CATALOG_BACKOFF_SECONDS)
