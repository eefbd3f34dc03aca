import hmac
import hashlib
import os
from typing import Mapping, Optional

from lipi.core.config import settings


def hash_with_secret(raw: str) -> str:
    """HMAC-SHA256 of a presented key; must match how CLIENT_REGISTRY was built."""
    secret = os.environ.get("API_KEY_SECRET", "change-me")
    return hmac.new(secret.encode("utf-8"), raw.encode("utf-8"), hashlib.sha256).hexdigest()


def verify_api_key(client_id: str, presented_key: str, registry: Optional[Mapping[str, str]] = None) -> bool:
    registry = settings.CLIENT_REGISTRY if registry is None else registry
    stored = registry.get(client_id)
    if not stored or not presented_key:
        return False
    return hmac.compare_digest(stored, hash_with_secret(presented_key))
