""" LLM Intent Client - Hugging Face Inference chat completion constrained to a JSON filter """
import json
import logging
from typing import Any, Dict, Optional
from huggingface_hub import InferenceClient
from popcorn_assistant.utilities import query_preprocessing
from popcorn_assistant.filter_normalizer.filter_normalizer import FIELD_KEYS
from popcorn_assistant.basemodel_response_validator.assistant_model import MovieFilter
# basic log info
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
# define single logger for the llm intent client
logger = logging.getLogger("LLM_Intent_Client")


class IntentExtractionError(Exception):
    """Raised when a strategy cannot produce a raw filter (service down, bad JSON, wrong shape)."""


# fixed instructional preamble
SYSTEM_PROMPT = """You are Popcorn, a movie search assistant.
Your only job is to extract structured filters from the user's latest message.
Return ONLY one JSON object, no prose, with exactly these keys:
{
 "summary": "one short human-friendly sentence describing the full request",
 "media_type": "movie" or "tv",
 "genre": "<genre name or null>",
 "year": <exact 4-digit year or null>,
 "year_after": <earliest 4-digit year, inclusive, or null>,
 "year_before": <latest 4-digit year, inclusive, or null>,
 "actor": "<cast member name or null>",
 "director": "<director name or null>",
 "min_rating": <number 0-10 or null>,
 "limit": <how many titles the user asked for, or null>
}
Use null for anything the latest message does not mention.
The current filters are given for context, do not repeat them unless the user changes them."""


def build_user_message(utterance: str, previous: Optional[MovieFilter] = None) -> str:
    """Function to build the user message with the active filter as context.

    Args:
        utterance (str): Latest user message.
        previous (MovieFilter): Active filter of the conversation, if any.

    Returns:
        str: message text for the chat completion.
    """
    sections = []
    if previous is not None:
        context = previous.model_dump(exclude={"summary"}, exclude_none=True)
        sections.append(f"Current filters: {json.dumps(context)}")
    sections.append(f"Latest message: {utterance}")
    return "\n".join(sections)


def parse_model_reply(reply_text: str) -> Dict[str, Any]:
    """Function to parse the model's reply into a raw filter dict.

    Args:
        reply_text (str): Text payload from the model, possibly wrapped in code fences.

    Returns:
        dict: the decoded JSON object.

    Raises:
        IntentExtractionError: on an empty payload, non-JSON payload or JSON that is not a filter object.
    """
    json_text = query_preprocessing.strip_code_fences(reply_text)
    if not json_text:
        raise IntentExtractionError("Model reply did not contain a JSON object.")
    try:
        decoded = json.loads(json_text)
    except json.JSONDecodeError as decode_error:
        raise IntentExtractionError(f"Model reply is not valid JSON: {decode_error}") from decode_error
    if not isinstance(decoded, dict):
        raise IntentExtractionError(f"Model reply is {type(decoded).__name__}, expected an object.")
    # an object with none of the filter keys does not match the expected shape
    known_keys = {key for spellings in FIELD_KEYS.values() for key in spellings}
    if not known_keys.intersection(decoded):
        raise IntentExtractionError(f"Model reply has no filter keys: {sorted(decoded)[:5]}")
    return decoded


# huggingface inference client
def run_hf_chat_completion(
    system_prompt: str,
    user_message: str,
    model_id: str,
    provider: str = "novita",
    hf_token: Optional[str] = None,
    timeout: float = 15.0,
    temperature: float = 0.1,
    max_new_tokens: int = 250,
    client: Optional[InferenceClient] = None) -> str:
    """Funcion to call Hugging Face Inference API for one chat completion.

    Args:
        system_prompt: Instructional preamble.
        user_message: Utterance plus conversation context.
        model_id: HF model id to use.
        provider: Inference provider.
        hf_token: HF access token.
        timeout: Seconds before the call is treated as failed.
        temperature: Sampling temperature, low for deterministic JSON.
        max_new_tokens: Upper bound on generated tokens.
        client: Pre-built InferenceClient, mostly for tests.

    Returns:
        str: Assistant text.

    Raises:
        IntentExtractionError: when the service call fails or returns no text.
    """
    try:
        hf_inference_client = client or InferenceClient(
            provider=provider,
            api_key=hf_token,
            timeout=timeout)
        completion = hf_inference_client.chat.completions.create(
            model=model_id,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},],
            temperature=temperature,
            max_tokens=max_new_tokens,)
    except Exception as inference_error:
        # network, auth, timeout and provider errors all end the remote attempt
        raise IntentExtractionError(f"HF Inference API call failed: {inference_error}") from inference_error

    # extract assistant message text safely
    try:
        message = completion.choices[0].message
    except (AttributeError, IndexError, TypeError) as shape_error:
        raise IntentExtractionError(f"Unexpected completion shape: {shape_error}") from shape_error
    text = (message.get("content") if isinstance(message, dict) else getattr(message, "content", None)) or ""
    if not text.strip():
        raise IntentExtractionError("HF Inference API returned an empty payload.")
    return text.strip()
