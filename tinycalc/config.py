from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from functools import lru_cache

logger = logging.getLogger(__name__)

def _parse_int(name: str, default: int, minimum: int) -> int:
    raw = os.getenv(name, str(default)).strip()
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, falling back to %s", name, raw, default)
        value = default
    return max(minimum, value)

@dataclass(frozen=True)
class Settings:
    """Runtime knobs, read once from TINYCALC_* environment variables."""
    precision: int = 5
    working_digits: int = 64
    max_length: int = 4096
    max_depth: int = 64
    history_limit: int = 100

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            precision=_parse_int("TINYCALC_PRECISION", 5, 0),
            working_digits=_parse_int("TINYCALC_WORKING_DIGITS", 64, 16),
            max_length=_parse_int("TINYCALC_MAX_LENGTH", 4096, 1),
            max_depth=_parse_int("TINYCALC_MAX_DEPTH", 64, 1),
            history_limit=_parse_int("TINYCALC_HISTORY_LIMIT", 100, 1),
        )

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()

def reset_settings() -> None:
    get_settings.cache_clear()
