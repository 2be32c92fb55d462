"""
Engine configuration with environment variable support.
"""
from __future__ import annotations

import os


def _get_env_int(key: str, default: int) -> int:
    """Get integer value from environment variable with fallback."""
    try:
        return int(os.getenv(key, default))
    except (ValueError, TypeError):
        return default


# Analytics Settings
DEFAULT_LOOKBACK_DAYS: int = _get_env_int("CHATPULSE_LOOKBACK_DAYS", 30)

# Calendar days of the daily series are taken in this timezone
ANALYTICS_TIMEZONE: str = os.getenv("CHATPULSE_TIMEZONE", "UTC")

# Decimal places used when rendering snapshots for display
DISPLAY_PRECISION: int = _get_env_int("CHATPULSE_DISPLAY_PRECISION", 4)

# Sentiment Lexicon (empty means the bundled lexicon)
LEXICON_PATH: str = os.getenv("CHATPULSE_LEXICON_PATH", "")

# Logging Configuration
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT: str = os.getenv(
    "LOG_FORMAT",
    "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
