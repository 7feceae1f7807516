"""Pydantic basemodels for the assistant filter, catalog items and API payloads."""
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional, Literal


# default and bounds for how many titles a request returns
DEFAULT_LIMIT = 10
MIN_LIMIT = 1
MAX_LIMIT = 50


# movie filter Class - canonical structured request
class MovieFilter(BaseModel):
    """Class - the canonical structured representation of a user's movie request.

    Produced only by the filter normalizer, so every instance is already
    clamped and merged. Frozen: merges build a new filter.
    """
    model_config = ConfigDict(frozen=True)

    # movie or tv catalog
    media_type: Literal["movie", "tv"] = Field("movie", description="Catalog media type.")

    # canonical genre name e.g. 'action', 'science fiction'
    genre: Optional[str] = Field(None, description="Genre from the fixed vocabulary.")

    # free text person names
    actor: Optional[str] = Field(None, description="Cast member name.")
    director: Optional[str] = Field(None, description="Director name.")

    # single year like 2020
    year: Optional[int] = Field(None, description="Exact release year.")

    # inclusive bounds, 'since 2015' -> year_after=2015
    year_after: Optional[int] = Field(None, description="Earliest release year (inclusive).")
    year_before: Optional[int] = Field(None, description="Latest release year (inclusive).")

    # minimum rating threshold 0..10
    min_rating: Optional[float] = Field(None, ge=0, le=10, description="Minimum vote average.")

    # how many items user wants
    limit: int = Field(DEFAULT_LIMIT, ge=MIN_LIMIT, le=MAX_LIMIT, description="Result count, 1..50.")

    # human-readable description of the interpreted request
    summary: str = Field("", description="Short summary for display.")


# single catalog item
class CatalogItem(BaseModel):
    """One title returned to the presentation layer - a read-only projection of catalog data."""
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    overview: str = ""
    poster_path: Optional[str] = None
    poster_url: Optional[str] = Field(None, description="Full poster image url, built from poster_path.")
    vote_average: float = 0.0
    release_date: Optional[str] = None
    media_type: Literal["movie", "tv"] = "movie"


# one past exchange
class ConversationTurn(BaseModel):
    """Single (utterance, resolved filter) pair kept for the session."""
    utterance: str
    filter: MovieFilter


# final assistant response
class AssistantResponse(BaseModel):
    """Output contract for every assistant request, even on total failure.

        - ok -> request served as asked (results may still be empty).
        - degraded -> served, but via a fallback (rule-based extraction or broader discovery).
        - error -> catalog failed, movies is empty and summary is an apology.
    """
    summary: str
    movies: List[CatalogItem] = Field(default_factory=list)
    status: Literal["ok", "degraded", "error"] = "ok"
    # resolved filter for this request, None only when nothing could be parsed
    filter: Optional[MovieFilter] = None
    # catalog strategy used: actor, director, discover
    strategy: Optional[str] = None
    # intent extraction strategy used: remote_model, rule_based
    extraction_source: Optional[str] = None
    # session that served the request
    session_id: Optional[str] = None
    # a newer request was issued on the same session before this one finished
    is_stale: bool = False


# request ask basemodel
class AskRequest(BaseModel):
    """Request body for /assistant/ask."""
    # user free text
    text: str = Field(..., description="User utterance.")
    # chat session, created when absent
    session_id: Optional[str] = Field(None, description="Chat session id.")


# request reset basemodel
class ResetRequest(BaseModel):
    """Request body for /assistant/reset."""
    session_id: str


class SessionResponse(BaseModel):
    """Current filter and turns of a chat session."""
    session_id: str
    filter: Optional[MovieFilter] = None
    turns: List[ConversationTurn] = Field(default_factory=list)


# request parser basemodel
class ParseRequest(BaseModel):
    """Request body for /query/parse - contains user text."""
    text: str = Field(..., description="User text to parse.")


class ParseResponse(BaseModel):
    """Response body from /query/parse - the rule-based filter."""
    raw: Dict[str, Any] = Field(default_factory=dict)
    parsed: MovieFilter


class CatalogListResponse(BaseModel):
    """Browse list (trending, top rated, upcoming)."""
    media_type: Literal["movie", "tv"]
    category: str
    movies: List[CatalogItem] = Field(default_factory=list)
