"""Session-scoped conversation state and the store that owns the chat sessions."""
import uuid
import logging
import threading
from collections import OrderedDict
from typing import Any, Dict, List, Optional
from popcorn_assistant.filter_normalizer.filter_normalizer import normalize
from popcorn_assistant.basemodel_response_validator.assistant_model import ConversationTurn, MovieFilter
# basic log info
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
logger = logging.getLogger("Conversation_State")


class ConversationState:
    """Active filter, past turns and person cache of one chat session.

    Mutated only through commit(), after a request has fully resolved, and
    only by the newest request issued on the session (last-request-wins).
    """

    def __init__(self, session_id: Optional[str] = None):
        self.session_id = session_id or uuid.uuid4().hex
        self.current_filter: Optional[MovieFilter] = None
        self.turns: List[ConversationTurn] = []
        # name -> person id, filled from committed requests only
        self.person_cache: Dict[str, Optional[int]] = {}
        self._latest_ticket = 0
        self._lock = threading.Lock()

    def merge(self, partial_filter: Optional[Dict[str, Any]] = None) -> MovieFilter:
        """Merge a partial filter onto the active one without mutating the state."""
        return normalize(partial_filter or {}, previous=self.current_filter)

    def begin_request(self) -> int:
        """Issue a ticket for a new request, making any in-flight request stale."""
        with self._lock:
            self._latest_ticket += 1
            return self._latest_ticket

    def is_current(self, ticket: int) -> bool:
        with self._lock:
            return ticket == self._latest_ticket

    def snapshot_person_cache(self) -> Dict[str, Optional[int]]:
        """Copy of the person cache for one request to read and fill."""
        with self._lock:
            return dict(self.person_cache)

    def commit(
            self,
            ticket: int,
            utterance: str,
            resolved_filter: MovieFilter,
            person_cache_updates: Optional[Dict[str, Optional[int]]] = None) -> bool:
        """Function to record a resolved request.

        Args:
            ticket (int): Ticket from begin_request().
            utterance (str): The user utterance.
            resolved_filter (MovieFilter): Filter the request resolved to.
            person_cache_updates (dict): Names the request resolved, merged into the person cache.

        Returns:
            bool: False when a newer request was issued, in which case nothing changes.
        """
        with self._lock:
            if ticket != self._latest_ticket:
                logger.info(f"Discarding stale request {ticket} on session {self.session_id} (latest {self._latest_ticket})")
                return False
            self.current_filter = resolved_filter
            self.turns.append(ConversationTurn(utterance=utterance, filter=resolved_filter))
            if person_cache_updates:
                self.person_cache.update(person_cache_updates)
            return True

    def reset(self) -> None:
        """Clear the session back to defaults. In-flight requests become stale."""
        with self._lock:
            self.current_filter = None
            self.turns = []
            self.person_cache = {}
            self._latest_ticket += 1
        logger.info(f"Session {self.session_id} reset")


class ConversationSessionStore:
    """Session id -> ConversationState, bounded, least recently used sessions evicted first."""

    def __init__(self, max_sessions: int = 1000):
        self.max_sessions = max(1, max_sessions)
        self._sessions: "OrderedDict[str, ConversationState]" = OrderedDict()
        self._lock = threading.Lock()

    def get_or_create(self, session_id: Optional[str] = None) -> ConversationState:
        with self._lock:
            if session_id and session_id in self._sessions:
                self._sessions.move_to_end(session_id)
                return self._sessions[session_id]
            state = ConversationState(session_id)
            self._sessions[state.session_id] = state
            while len(self._sessions) > self.max_sessions:
                evicted_id, _ = self._sessions.popitem(last=False)
                logger.info(f"Evicted session {evicted_id}")
            return state

    def get(self, session_id: str) -> Optional[ConversationState]:
        with self._lock:
            return self._sessions.get(session_id)

    def reset(self, session_id: str) -> bool:
        """Reset a session, False when the session does not exist."""
        state = self.get(session_id)
        if state is None:
            return False
        state.reset()
        return True

    def __len__(self):
        return len(self._sessions)
