"""Package-level default configuration values."""

from __future__ import annotations

from typing import Any

# Default marker size (pixels)
DEFAULT_WIDTH = 150
DEFAULT_HEIGHT = 150

# Default cache settings
DEFAULT_CACHE_MEMORY_MB = 50.0
DEFAULT_CACHE_DISK_MB = 500.0
DEFAULT_CACHE_TTL_DAYS = 30.0
DEFAULT_CACHE_DISABLED = False

# Default fetch settings
DEFAULT_FETCH_TIMEOUT: float | None = None
DEFAULT_FETCH_RETRIES = 0
DEFAULT_USER_AGENT = "cached-marker/0.1"

# Default concurrency settings
DEFAULT_MAX_WORKERS = 5

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "default_width": DEFAULT_WIDTH,
        "default_height": DEFAULT_HEIGHT,
        "cache_memory_mb": DEFAULT_CACHE_MEMORY_MB,
        "cache_disk_mb": DEFAULT_CACHE_DISK_MB,
        "cache_ttl_days": DEFAULT_CACHE_TTL_DAYS,
        "cache_db_path": None,
        "cache_disabled": DEFAULT_CACHE_DISABLED,
        "fetch_timeout": DEFAULT_FETCH_TIMEOUT,
        "fetch_retries": DEFAULT_FETCH_RETRIES,
        "user_agent": DEFAULT_USER_AGENT,
        "max_workers": DEFAULT_MAX_WORKERS,
        "log_level": DEFAULT_LOG_LEVEL,
    }
