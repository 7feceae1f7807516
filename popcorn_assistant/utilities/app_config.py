""" Application configuration read from the environment (.env supported) """
import os
import logging
from dotenv import load_dotenv
# initiate load_dotenv
load_dotenv()
# basic log info
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
logger = logging.getLogger("Popcorn_App_Config")


def _read_float(name: str, default: float) -> float:
    """Read a float env var, falling back to default on bad values."""
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Invalid value for {name}={value!r}, using default {default}")
        return default


def _read_int(name: str, default: int) -> int:
    """Read an int env var, falling back to default on bad values."""
    return int(_read_float(name, float(default)))


def _read_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# catalog (TMDB) settings
TMDB_BASE_URL = os.getenv("TMDB_BASE_URL", "https://api.themoviedb.org/3")
TMDB_API_KEY = os.getenv("TMDB_API_KEY", "")
TMDB_READ_ACCESS_TOKEN = os.getenv("TMDB_READ_ACCESS_TOKEN", "")
TMDB_IMAGE_BASE_URL = os.getenv("TMDB_IMAGE_BASE_URL", "https://image.tmdb.org/t/p/w500")
CATALOG_TIMEOUT_SECONDS = _read_float("CATALOG_TIMEOUT_SECONDS", 10.0)
CATALOG_MAX_RETRIES = _read_int("CATALOG_MAX_RETRIES", 2)
CATALOG_BACKOFF_SECONDS = _read_float("CATALOG_BACKOFF_SECONDS", 0.5)

# language model settings - hugging face inference
HF_TOKEN = os.getenv("HF_TOKEN", "")
HF_MODEL_ID = os.getenv("HF_MODEL_ID", "meta-llama/Llama-3.2-3B-Instruct")
HF_PROVIDER = os.getenv("HF_PROVIDER", "novita")
LLM_TIMEOUT_SECONDS = _read_float("LLM_TIMEOUT_SECONDS", 15.0)
# remote extractor is only used when a token is configured
USE_REMOTE_EXTRACTOR = _read_bool("USE_REMOTE_EXTRACTOR", bool(HF_TOKEN))

# session settings
MAX_SESSIONS = _read_int("MAX_SESSIONS", 1000)

# http api settings, comma separated origins
CORS_ALLOW_ORIGINS = [
    origin.strip() for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if origin.strip()] or ["*"]
# chat client target
POPCORN_API_URL = os.getenv("POPCORN_API_URL", "http://127.0.0.1:8000/api")
