"""
Game constants and environment-driven settings.
Dice themselves are always given on the command line; only diagnostics and
the prompt retry budget come from the environment (or a local .env file).
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

MIN_DICE = 3
KEY_SIZE_BYTES = 32
HMAC_ALGORITHM = "sha3_256"

# Invalid answers accepted per prompt before the game gives up.
DEFAULT_MAX_RETRIES = 5
DEFAULT_LOG_LEVEL = "WARNING"

EXAMPLE_DICE = ("2,2,4,4,9,9", "1,1,6,6,8,8", "3,3,5,5,7,7")

LOG_LEVEL_ENV = "FAIRDICE_LOG_LEVEL"
MAX_RETRIES_ENV = "FAIRDICE_MAX_RETRIES"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    log_level: str = DEFAULT_LOG_LEVEL
    max_retries: Optional[int] = DEFAULT_MAX_RETRIES


def _parse_max_retries(raw: str) -> Optional[int]:
    from fairdice.errors import ConfigurationError

    value = raw.strip().lower()
    if value in ("0", "unlimited", "none"):
        return None
    try:
        retries = int(value)
    except ValueError:
        raise ConfigurationError(f"{MAX_RETRIES_ENV} must be a non-negative integer or 'unlimited', got {raw!r}.")
    if retries < 0:
        raise ConfigurationError(f"{MAX_RETRIES_ENV} must be a non-negative integer or 'unlimited', got {raw!r}.")
    return retries


def load_settings(environ=None) -> Settings:
    """Build Settings from the environment. A .env file is read first when no mapping is given."""
    from fairdice.errors import ConfigurationError

    if environ is None:
        load_dotenv()
        environ = os.environ

    log_level = environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).strip().upper()
    if log_level not in _LOG_LEVELS:
        raise ConfigurationError(f"{LOG_LEVEL_ENV} must be one of {', '.join(_LOG_LEVELS)}, got {log_level!r}.")

    raw_retries = environ.get(MAX_RETRIES_ENV)
    max_retries = DEFAULT_MAX_RETRIES if raw_retries is None else _parse_max_retries(raw_retries)
    return Settings(log_level=log_level, max_retries=max_retries)
