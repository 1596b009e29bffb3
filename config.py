"""
Runtime configuration for LankaPOS, read from the environment (and a local
.env file when present).
"""
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env_string(name: str, default: Optional[str] = None) -> Optional[str]:
    """Return trimmed string-valued env vars, normalizing empty strings to the default."""
    raw = os.getenv(name, default)
    if raw is None:
        return default
    clean = raw.strip()
    return clean if clean else default


def _env_int(name: str, default: int) -> int:
    try:
        return int(_env_string(name, str(default)))
    except ValueError:
        return default


LOG_LEVEL = (_env_string("POS_LOG_LEVEL", "INFO") or "INFO").upper()

LOW_STOCK_THRESHOLD = _env_int("POS_LOW_STOCK_THRESHOLD", 10)
CURRENCY = _env_string("POS_CURRENCY", "LKR")
RECENT_SALES_LIMIT = _env_int("POS_RECENT_SALES_LIMIT", 20)

# Restock suggestions (Google Generative Language API)
GEMINI_API_KEY = _env_string("GEMINI_API_KEY") or _env_string("GOOGLE_API_KEY")
GEMINI_MODEL = _env_string("GEMINI_MODEL", "gemini-2.0-flash")
GEMINI_API_BASE = _env_string("GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta")
GEMINI_TIMEOUT = _env_int("GEMINI_TIMEOUT", 30)

PORT = _env_int("PORT", 8000)
