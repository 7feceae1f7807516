""" Popcorn assistant - utterance in, {summary, movies} out """
import time
import logging
from typing import Optional
from popcorn_assistant.catalog_client.tmdb_client import TMDBClient, CatalogServiceError
from popcorn_assistant.catalog_client.entity_resolver import EntityResolver
from popcorn_assistant.conversation.conversation_state import ConversationState
from popcorn_assistant.intent_extractor.intent_extractor_main import IntentExtractor
from popcorn_assistant.query_processor.catalog_query_builder import (
    CatalogQueryBuilder, BROADENED_PERSON_UNRESOLVED, BROADENED_PERSON_NO_TITLES)
from popcorn_assistant.basemodel_response_validator.assistant_model import AssistantResponse, MovieFilter
# basic log info
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
logger = logging.getLogger("Popcorn_Assistant")

CATALOG_ERROR_SUMMARY = "Sorry, I couldn't reach the movie catalog right now. Please try again in a moment."
UNEXPECTED_ERROR_SUMMARY = "Sorry, something went wrong while looking for movies. Please try again."


class PopcornAssistant:
    """Orchestrates extraction, entity resolution, catalog query and post-processing for one session request."""

    def __init__(
            self,
            intent_extractor: IntentExtractor,
            catalog_client: TMDBClient):
        self.intent_extractor = intent_extractor
        self.catalog_client = catalog_client

    def ask(self, state: ConversationState, utterance: str) -> AssistantResponse:
        """Function to answer one user utterance. Never raises.

        Args:
            state (ConversationState): Session the utterance belongs to.
            utterance (str): User text.

        Returns:
            AssistantResponse: status ok, degraded or error, with summary and movies.
        """
        start_time = time.time()
        ticket = state.begin_request()
        # read once, the state is not touched again until commit
        previous_filter = state.current_filter
        # names resolved by this request reach the session only through commit
        person_cache = state.snapshot_person_cache()
        resolved_filter: Optional[MovieFilter] = None
        try:
            resolved_filter, extraction_source = self.intent_extractor.extract_with_source(utterance, previous_filter)
            logger.info(f"Resolved filter via {extraction_source}: {resolved_filter.model_dump()}")

            query_builder = CatalogQueryBuilder(
                self.catalog_client,
                EntityResolver(self.catalog_client, person_cache))
            try:
                movies, strategy, broaden_reason = query_builder.fetch_with_strategy(resolved_filter)
            except CatalogServiceError as catalog_error:
                logger.error(f"Catalog failure: {catalog_error}")
                response = AssistantResponse(
                    summary=CATALOG_ERROR_SUMMARY,
                    movies=[],
                    status="error",
                    filter=resolved_filter,
                    extraction_source=extraction_source)
            else:
                fell_back = broaden_reason is not None or extraction_source != self._primary_source()
                response = AssistantResponse(
                    summary=self.build_summary(resolved_filter, len(movies), broaden_reason),
                    movies=movies,
                    status="degraded" if fell_back else "ok",
                    filter=resolved_filter,
                    strategy=strategy,
                    extraction_source=extraction_source)
        except Exception:
            logger.exception(f"Unexpected failure while answering utterance.")
            response = AssistantResponse(
                summary=UNEXPECTED_ERROR_SUMMARY,
                movies=[],
                status="error",
                filter=resolved_filter)

        # only the newest request may update the session
        if resolved_filter is not None:
            committed = state.commit(ticket, utterance, resolved_filter, person_cache_updates=person_cache)
        else:
            committed = state.is_current(ticket)
        response = response.model_copy(update={"session_id": state.session_id, "is_stale": not committed})
        logger.info(
            f"Answered in {int((time.time() - start_time) * 1000)} ms -> status: {response.status}, "
            f"movies: {len(response.movies)}, stale: {response.is_stale}")
        return response

    def _primary_source(self) -> str:
        return self.intent_extractor.strategies[0].name

    @staticmethod
    def build_summary(
            resolved_filter: MovieFilter,
            result_count: int,
            broaden_reason: Optional[str] = None) -> str:
        """Function to build the user-facing summary text."""
        summary = resolved_filter.summary.rstrip(". ")
        if broaden_reason == BROADENED_PERSON_UNRESOLVED:
            summary += ". I couldn't match the person you mentioned, so here are broader results"
        elif broaden_reason == BROADENED_PERSON_NO_TITLES:
            summary += ". I found no titles for that person with these filters, so here are broader results"
        if result_count == 0:
            return f"{summary}. No titles matched, try loosening the year or rating."
        return f"{summary}."

