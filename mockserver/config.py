"""
MOCK BLOCK EXPLORER CONFIGURATION

Simulation parameters for the static-mode backend.
- Every value can be overridden with an environment variable
- Blocks are synthetic and generated on demand (no persistence)
- Defaults match the static demo deployment
"""

import os


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if not value:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Block time (milliseconds between simulated blocks)
BLOCK_TIME_MS = _env_int("MOCK_BLOCK_TIME_MS", 10_000)

# Number of backdated blocks generated at start-up
NUM_BLOCKS = _env_int("MOCK_NUM_BLOCKS", 100)

# Block height is counted from the first day of the month this many months ago
START_MONTHS_BEFORE_TODAY = _env_int("MOCK_START_MONTHS_BEFORE_TODAY", 6)

# Random transaction count per block (inclusive bounds)
TXS_PER_BLOCK_MIN = _env_int("MOCK_TXS_PER_BLOCK_MIN", 1)
TXS_PER_BLOCK_MAX = _env_int("MOCK_TXS_PER_BLOCK_MAX", 3)

MS_PER_DAY = 24 * 60 * 60 * 1000
MAX_SAFE_INTEGER = 2**53 - 1  # Largest integer a double represents exactly

# HTTP facade
MAX_PAGE_SIZE = _env_int("MOCK_MAX_PAGE_SIZE", 100)
MAX_CANDLE_DAYS = _env_int("MOCK_MAX_CANDLE_DAYS", 366)
RATE_LIMIT_ENABLED = _env_bool("MOCK_RATE_LIMIT_ENABLED", True)
DEFAULT_PORT = _env_int("MOCK_SERVER_PORT", 5000)

_DEFAULT_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5000",
    "http://127.0.0.1:5000",
]
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("MOCK_ALLOWED_ORIGINS", ",".join(_DEFAULT_ORIGINS)).split(",")
    if origin.strip()
]
