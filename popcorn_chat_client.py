""" Popcorn chat client """
import json
import time
import logging
from typing import Optional
import requests
from popcorn_assistant.utilities import app_config
# basic logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",)

ASK_URL = f"{app_config.POPCORN_API_URL}/assistant/ask"
RESET_URL = f"{app_config.POPCORN_API_URL}/assistant/reset"
EXIT_COMMANDS = {"exit", "quit", ":q"}


def format_answer(response_data: dict) -> str:
    """Function to render an assistant response as console text.

    Args:
        response_data (dict): Decoded /assistant/ask response.

    Returns:
        str: summary line followed by one numbered line per title.
    """
    lines = [response_data.get("summary") or ""]
    for position, movie in enumerate(response_data.get("movies") or [], start=1):
        year = (movie.get("release_date") or "")[:4] or "n/a"
        lines.append(f"  {position}. {movie.get('title')} ({year}) - {movie.get('vote_average', 0):.1f}")
    if response_data.get("status") == "degraded":
        lines.append("  (results may be broader than asked)")
    return "\n".join(lines)


# send an utterance and print the answer
def send_utterance(
        utterance: str,
        http_session: requests.Session,
        session_id: Optional[str] = None) -> Optional[str]:
    """Function to send one utterance to the assistant and display the answer.

    Args:
        utterance (str): User text.
        http_session (requests.Session): Persistent HTTP session.
        session_id (str): Chat session to continue, None starts a new one.

    Returns:
        str: session id to use for the next utterance.
    """
    payload = {"text": utterance, "session_id": session_id}
    try:
        response = http_session.post(ASK_URL, json=payload, timeout=30)
        response.raise_for_status()
        response_data = response.json()
    except requests.exceptions.RequestException as error:
        logging.error(f"Request failed: {error}")
        return session_id

    if response_data.get("summary") is None:
        logging.warning(f"No 'summary' found in response.")
        logging.info(f"{json.dumps(response_data, indent=2)}")
    else:
        print(f"\n{format_answer(response_data)}\n")
    return response_data.get("session_id") or session_id


def reset_session(http_session: requests.Session, session_id: Optional[str]) -> None:
    """Forget the filters of the current chat session."""
    if not session_id:
        print("Nothing to reset yet.")
        return
    try:
        response = http_session.post(RESET_URL, json={"session_id": session_id}, timeout=10)
        response.raise_for_status()
        print("Session reset. Start a new search.")
    except requests.exceptions.RequestException as error:
        logging.error(f"Reset failed: {error}")


# Main client
def popcorn_chat_client(max_attempts: int = 20):
    """Chat with the assistant until the user exits.
        - 'reset' clears the remembered filters.
        - Exits on exit, quit, :q or Ctrl+C.

    Args:
        max_attempts (int): Maximum number of utterances.
    """
    logging.info(f"Popcorn client ready.")
    logging.info(f"Ask for movies, 'reset' to start over, or 'exit'/'quit' to leave.\n")
    session_id: Optional[str] = None
    try:
        with requests.Session() as http_session:
            for attempt_number in range(1, max_attempts + 1):
                user_input = input(f"popcorn [{attempt_number}/{max_attempts}]> ").strip()

                if not user_input:
                    print("Empty input. Please ask for some movies or type 'exit'.")
                    continue
                if user_input.lower() in EXIT_COMMANDS:
                    print("Bye!")
                    break
                if user_input.lower() == "reset":
                    reset_session(http_session, session_id)
                    continue
                session_id = send_utterance(user_input, http_session, session_id)
                # small pause to avoid overwhelming the server
                time.sleep(0.05)

    except KeyboardInterrupt:
        print(f"\nInterrupted. Bye!")
    except Exception as unexpected_error:
        logging.error(f"Unexpected error: {unexpected_error}")


if __name__ == "__main__":
    popcorn_chat_client()
