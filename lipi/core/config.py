import os
import hmac
import hashlib
from dotenv import load_dotenv

load_dotenv()

PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def hash_key(raw: str) -> str:
    secret = os.environ.get("API_KEY_SECRET", "change-me")
    return hmac.new(secret.encode("utf-8"), raw.encode("utf-8"), hashlib.sha256).hexdigest()


class Settings:
    PORT: int = int(os.environ.get("PORT", 8080))
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")
    MAX_TEXT_LEN: int = int(os.environ.get("MAX_TEXT_LEN", 2000))
    MAX_BATCH_SIZE: int = int(os.environ.get("MAX_BATCH_SIZE", 100))
    RATE_LIMIT_PER_MIN: int = int(os.environ.get("RATE_LIMIT_PER_MIN", 60))
    CACHE_TTL_SECONDS: int = int(os.environ.get("CACHE_TTL_SECONDS", 600))
    CACHE_MAX_SIZE: int = int(os.environ.get("CACHE_MAX_SIZE", 5000))
    # below this the detected script is reported as ambiguous
    DETECTION_THRESHOLD: float = float(os.environ.get("DETECTION_THRESHOLD", 0.8))
    FALLBACK_SCRIPT: str = os.environ.get("FALLBACK_SCRIPT", "devanagari")
    VALIDATION_THRESHOLD: float = float(os.environ.get("VALIDATION_THRESHOLD", 0.8))
    # round-trip Levenshtein is quadratic, skip it for long inputs
    MAX_VALIDATION_LEN: int = int(os.environ.get("MAX_VALIDATION_LEN", 1000))
    DEFAULT_MODE: str = os.environ.get("DEFAULT_MODE", "readable")
    EXCEPTIONS_PATH: str = os.environ.get(
        "EXCEPTIONS_PATH", os.path.join(PACKAGE_DIR, "data", "exceptions.tsv")
    )
    CORRECTIONS_PATH: str = os.environ.get("CORRECTIONS_PATH", "")
    # Simple in-memory client registry: client_id -> hashed_key
    CLIENT_REGISTRY = {
        os.environ.get("CLIENT_ID", "demo-client"): hash_key(os.environ.get("API_KEY", "demo-key"))
    }


settings = Settings()
