""" Catalog Browse Router - trending, top rated, upcoming and title details """
import logging
from typing import Literal
from fastapi import APIRouter
from fastapi import HTTPException, status
from popcorn_assistant.catalog_client.tmdb_client import build_tmdb_client, CatalogServiceError
from popcorn_assistant.query_processor.result_post_processor import deduplicate_items, to_catalog_item
from popcorn_assistant.basemodel_response_validator import assistant_model
# define basic config
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
# logger for this router
logger = logging.getLogger("Catalog_Browse_API")

# initialise the router
router = APIRouter(tags=["CATALOG_BROWSE"])
# initiate the catalog client
catalogClient = build_tmdb_client()

MediaType = Literal["movie", "tv"]


def browse_list(media_type: str, category: str, fetch_items) -> assistant_model.CatalogListResponse:
    """Run one browse call and map the raw rows onto CatalogItems."""
    logger.info(f"Received /catalog/{media_type}/{category}")
    try:
        raw_items = fetch_items(media_type)
    except CatalogServiceError as catalog_error:
        logger.error(f"Catalog browse failed: {catalog_error}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Movie catalog is unavailable.")

    movies = [to_catalog_item(raw_item, media_type) for raw_item in deduplicate_items(raw_items)]
    return assistant_model.CatalogListResponse(
        media_type=media_type,
        category=category,
        movies=[movie for movie in movies if movie is not None])


# 1. trending this week
@router.get(
        "/catalog/{media_type}/trending",
        response_model=assistant_model.CatalogListResponse)
def api_catalog_trending(media_type: MediaType):
    return browse_list(media_type, "trending", catalogClient.trending)


# 2. top rated
@router.get(
        "/catalog/{media_type}/top-rated",
        response_model=assistant_model.CatalogListResponse)
def api_catalog_top_rated(media_type: MediaType):
    return browse_list(media_type, "top-rated", catalogClient.top_rated)


# 3. upcoming movies, or tv currently on the air
@router.get(
        "/catalog/{media_type}/upcoming",
        response_model=assistant_model.CatalogListResponse)
def api_catalog_upcoming(media_type: MediaType):
    return browse_list(media_type, "upcoming", catalogClient.upcoming)


# 4. details of one title
@router.get("/catalog/{media_type}/{item_id}")
def api_catalog_details(media_type: MediaType, item_id: int):
    """ GET - full catalog record for one title (info page data)."""
    logger.info(f"Received /catalog/{media_type}/{item_id}")
    try:
        return catalogClient.details(media_type, item_id)
    except CatalogServiceError as catalog_error:
        if catalog_error.status_code == status.HTTP_404_NOT_FOUND:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"No {media_type} with id {item_id}.")
        logger.error(f"Catalog details failed: {catalog_error}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Movie catalog is unavailable.")
