""" Popcorn Assistant Router """
import logging
from fastapi import APIRouter
from fastapi import HTTPException, status
from popcorn_assistant.utilities import app_config
from popcorn_assistant.catalog_client.tmdb_client import build_tmdb_client
from popcorn_assistant.conversation.conversation_state import ConversationSessionStore
from popcorn_assistant.intent_extractor.intent_extractor_main import build_intent_extractor, RuleBasedExtractor
from popcorn_assistant.filter_normalizer.filter_normalizer import normalize
from popcorn_assistant.query_responder.assistant_main import PopcornAssistant
from popcorn_assistant.basemodel_response_validator import assistant_model
# define basic config
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
# logger for this router
logger = logging.getLogger("Popcorn_Assistant_API")

# initialise the router
router = APIRouter(tags=["POPCORN_ASSISTANT"])

# chat sessions live for the process only, never persisted
sessionStore = ConversationSessionStore(max_sessions=app_config.MAX_SESSIONS)
# initiate the assistant with the configured extractor and catalog client
popcornAssistant = PopcornAssistant(
    intent_extractor=build_intent_extractor(),
    catalog_client=build_tmdb_client())
# rule-based parser for the debug parse endpoint
ruleBasedExtractor = RuleBasedExtractor()


# 1. ask the assistant
@router.post(
        "/assistant/ask",
        response_model=assistant_model.AssistantResponse)
def api_assistant_ask(req: assistant_model.AskRequest):
    """ POST - answer one utterance within a chat session (created when session_id is absent)."""
    text = (req.text or "").strip()
    if not text:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid request: 'text' field is required.")

    logger.info(f"Received /assistant/ask -> session: {req.session_id}, text: {text}")
    state = sessionStore.get_or_create(req.session_id)
    # the assistant never raises, failures come back as status 'error'
    return popcornAssistant.ask(state, text)


# 2. reset a session
@router.post("/assistant/reset")
def api_assistant_reset(req: assistant_model.ResetRequest):
    """ POST - clear the session filter, turns and person cache."""
    logger.info(f"Received /assistant/reset -> session: {req.session_id}")
    if not sessionStore.reset(req.session_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown session: {req.session_id}")
    return {"session_id": req.session_id, "reset": True}


# 3. inspect a session
@router.get(
        "/assistant/session/{session_id}",
        response_model=assistant_model.SessionResponse)
def api_assistant_session(session_id: str):
    """ GET - current filter and past turns of a session."""
    state = sessionStore.get(session_id)
    if state is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown session: {session_id}")
    return assistant_model.SessionResponse(
        session_id=state.session_id,
        filter=state.current_filter,
        turns=list(state.turns))


# 4. parse query - only to understand how the rules read a query, no catalog call
@router.post(
        "/query/parse",
        response_model=assistant_model.ParseResponse)
def api_parse(req: assistant_model.ParseRequest):
    """Parse the user text into a filter with the rule-based parser."""
    logger.info(f"Received /query/parse request -> text: {req.text}")
    raw_filter = ruleBasedExtractor.extract_raw(req.text)
    parsed = normalize(raw_filter, previous=None, raw_text=req.text)
    logger.info(f"Parsed result -> {parsed.model_dump()}")
    return assistant_model.ParseResponse(raw=raw_filter, parsed=parsed)
