"""Turn a user utterance into a MovieFilter through interchangeable extraction strategies.

The rule-based strategy is the always-available baseline. A remote language
model strategy can be placed in front of it; when it fails the extractor falls
back down the chain. Whatever strategy wins, its raw dict goes through the
normalizer together with the previous filter of the conversation.
"""
import time
import logging
from typing import Any, Dict, List, Optional, Tuple
from huggingface_hub import InferenceClient
from popcorn_assistant.utilities import app_config
from popcorn_assistant.filter_normalizer.filter_normalizer import normalize
from popcorn_assistant.intent_extractor.rules_based_parser import user_query_parser
from popcorn_assistant.intent_extractor import llm_intent_client
from popcorn_assistant.intent_extractor.llm_intent_client import IntentExtractionError
from popcorn_assistant.basemodel_response_validator.assistant_model import MovieFilter
# basic log info
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
logger = logging.getLogger("Intent_Extractor")


class IntentExtractionStrategy:
    """Base strategy: produce a raw (partial) filter dict from an utterance."""
    name = "base"

    def extract_raw(
            self,
            utterance: str,
            previous: Optional[MovieFilter] = None) -> Dict[str, Any]:
        raise NotImplementedError


class RuleBasedExtractor(IntentExtractionStrategy):
    """Pattern and keyword matching. Never raises."""
    name = "rule_based"

    def extract_raw(self, utterance, previous=None):
        return user_query_parser(utterance)


class RemoteModelExtractor(IntentExtractionStrategy):
    """Language model behind the Hugging Face Inference API, asked for strict JSON."""
    name = "remote_model"

    def __init__(
            self,
            model_id: str,
            hf_token: Optional[str] = None,
            provider: str = "novita",
            timeout: float = 15.0,
            client: Optional[InferenceClient] = None):
        """Initialise the remote extractor.

        Args:
            model_id (str): HF model id.
            hf_token (str): HF access token.
            provider (str): Inference provider.
            timeout (float): Ceiling in seconds for the completion call.
            client (InferenceClient): Optional pre-built client.
        """
        self.model_id = model_id
        self.hf_token = hf_token
        self.provider = provider
        self.timeout = timeout
        self.client = client

    def extract_raw(self, utterance, previous=None):
        """Ask the model for a JSON filter.

        Raises:
            IntentExtractionError: service failure or unusable reply.
        """
        user_message = llm_intent_client.build_user_message(utterance, previous)
        start_time = time.time()
        reply_text = llm_intent_client.run_hf_chat_completion(
            system_prompt=llm_intent_client.SYSTEM_PROMPT,
            user_message=user_message,
            model_id=self.model_id,
            provider=self.provider,
            hf_token=self.hf_token,
            timeout=self.timeout,
            client=self.client)
        logger.info(f"Remote model replied in {int((time.time() - start_time) * 1000)} ms")
        return llm_intent_client.parse_model_reply(reply_text)


class IntentExtractor:
    """Try each strategy in order, falling back on failure. The rule-based strategy always runs last."""

    def __init__(self, strategies: Optional[List[IntentExtractionStrategy]] = None):
        strategies = list(strategies or [])
        # the baseline is always present and always last
        strategies = [strategy for strategy in strategies if not isinstance(strategy, RuleBasedExtractor)]
        strategies.append(RuleBasedExtractor())
        self.strategies = strategies

    def extract_with_source(
            self,
            utterance: str,
            previous: Optional[MovieFilter] = None) -> Tuple[MovieFilter, str]:
        """Function to extract a filter and report which strategy produced it.

        Args:
            utterance (str): User utterance.
            previous (MovieFilter): Active filter for field-level merge.

        Returns:
            Tuple: (merged MovieFilter, strategy name).
        """
        utterance = utterance or ""
        for strategy in self.strategies:
            try:
                raw_filter = strategy.extract_raw(utterance, previous)
            except IntentExtractionError as extraction_error:
                logger.warning(f"Strategy {strategy.name} failed, falling back: {extraction_error}")
                continue
            except Exception:
                # an unexpected bug in one strategy must not take the chat down
                logger.exception(f"Strategy {strategy.name} raised unexpectedly, falling back.")
                continue
            logger.info(f"Strategy {strategy.name} produced raw filter: {raw_filter}")
            try:
                return normalize(raw_filter, previous, raw_text=utterance), strategy.name
            except Exception:
                logger.exception(f"Normalising output of {strategy.name} failed, falling back.")
                continue

        # only reached when every strategy, including the baseline, failed
        logger.error(f"All extraction strategies failed for utterance.")
        return normalize({}, previous, raw_text=utterance), "none"

    def extract(
            self,
            utterance: str,
            previous: Optional[MovieFilter] = None) -> MovieFilter:
        """Function to turn an utterance into a merged, normalised MovieFilter."""
        extracted_filter, _ = self.extract_with_source(utterance, previous)
        return extracted_filter


def build_intent_extractor() -> IntentExtractor:
    """Build the extractor from configuration: remote model first when enabled, rules always."""
    strategies: List[IntentExtractionStrategy] = []
    if app_config.USE_REMOTE_EXTRACTOR and app_config.HF_TOKEN:
        logger.info(f"Remote extractor enabled with model {app_config.HF_MODEL_ID}")
        strategies.append(RemoteModelExtractor(
            model_id=app_config.HF_MODEL_ID,
            hf_token=app_config.HF_TOKEN,
            provider=app_config.HF_PROVIDER,
            timeout=app_config.LLM_TIMEOUT_SECONDS))
    else:
        logger.info(f"Remote extractor disabled, using rule-based extraction only.")
    return IntentExtractor(strategies)
