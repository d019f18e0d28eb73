import os
from dataclasses import dataclass

from .log import get_logger

logger = get_logger(__name__)

# Internal only, never echoed in a response
DEFAULT_SOURCE_URL = "https://www.pickleballwarehouse.com/usedpaddles.html"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass(frozen=True)
class Settings:
    source_url: str = DEFAULT_SOURCE_URL
    cache_ttl: float = 300.0            # seconds (5 minutes)
    fetch_attempts: int = 3
    backoff_seconds: float = 3.0        # delay before retry n is backoff * n
    fetch_timeout: float = 20.0         # per attempt
    payout_ratio: float = 0.5           # offer = ratio * midpoint
    port: int = 8080
    log_level: str = "INFO"


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning("Ignoring malformed %s=%r, using %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring non-positive %s=%r, using %s", name, raw, default)
        return default
    return value


def load_settings() -> Settings:
    """Build Settings from environment variables, falling back to defaults."""
    level = (os.getenv("LOG_LEVEL") or "INFO").upper()
    if level not in _LOG_LEVELS:
        logger.warning("Unknown LOG_LEVEL=%r, using INFO", level)
        level = "INFO"

    return Settings(
        source_url=os.getenv("OFFER_SOURCE_URL") or DEFAULT_SOURCE_URL,
        cache_ttl=_env_number("OFFER_CACHE_TTL_SECONDS", 300.0, float),
        fetch_attempts=_env_number("OFFER_FETCH_ATTEMPTS", 3, int),
        backoff_seconds=_env_number("OFFER_BACKOFF_SECONDS", 3.0, float),
        fetch_timeout=_env_number("OFFER_FETCH_TIMEOUT_SECONDS", 20.0, float),
        payout_ratio=_env_number("OFFER_PAYOUT_RATIO", 0.5, float),
        port=_env_number("PORT", 8080, int),
        log_level=level,
    )
