"""
Configuration for the Plant Registry
====================================
Runtime settings loaded from environment variables (``PLANTREG_`` prefix).
Sets up the logging configuration as well.
"""

import logging
import os
import sys
from contextlib import suppress
from dataclasses import dataclass, field
from functools import lru_cache


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer.") from None


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be a number.") from None


@dataclass
class AppConfig:
    """Runtime configuration loaded from environment variables."""

    environment: str = field(default_factory=lambda: os.getenv("PLANTREG_ENV", "development"))
    log_level: str = field(default_factory=lambda: os.getenv("PLANTREG_LOG_LEVEL", "INFO"))

    # Audit trail of every mutating call (JSON lines, rotated at 10 MB)
    audit_enabled: bool = field(default_factory=lambda: _env_bool("PLANTREG_AUDIT_ENABLED", False))
    audit_log_path: str = field(default_factory=lambda: os.getenv("PLANTREG_AUDIT_LOG_PATH", "logs/audit.log"))

    # Key-value storage: "memory" or "json"
    storage_backend: str = field(default_factory=lambda: os.getenv("PLANTREG_STORAGE_BACKEND", "memory"))
    storage_path: str = field(default_factory=lambda: os.getenv("PLANTREG_STORAGE_PATH", "var/plants.json"))
    storage_lock_timeout: float = field(default_factory=lambda: _env_float("PLANTREG_STORAGE_LOCK_TIMEOUT", 5.0))

    # Event delivery: inline by default, single background worker when async
    eventbus_async: bool = field(default_factory=lambda: _env_bool("PLANTREG_EVENTBUS_ASYNC", False))
    eventbus_queue_size: int = field(default_factory=lambda: _env_int("PLANTREG_EVENTBUS_QUEUE_SIZE", 1024))

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self.storage_backend = self.storage_backend.strip().lower()
        self.log_level = self.log_level.strip().upper()
        if self.eventbus_queue_size < 1:
            raise ValueError("PLANTREG_EVENTBUS_QUEUE_SIZE must be at least 1.")
        if self.storage_lock_timeout <= 0:
            raise ValueError("PLANTREG_STORAGE_LOCK_TIMEOUT must be positive.")


def setup_logging(config: AppConfig | None = None) -> None:
    """Setup logging configuration."""
    config = config or load_config()
    log_level = getattr(logging, config.log_level, logging.INFO)

    root = logging.getLogger()
    root.setLevel(log_level)

    # Avoid adding duplicate handlers when called more than once
    has_console = any(getattr(h, "name", "") == "plantregistry_console" for h in root.handlers)

    stream = sys.stdout
    with suppress(AttributeError, ValueError):
        stream.reconfigure(encoding="utf-8", errors="replace")

    if not has_console:
        console_handler = logging.StreamHandler(stream=stream)
        console_handler.name = "plantregistry_console"
        console_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        root.addHandler(console_handler)
        root.info("Logging initialized at level: %s", logging.getLevelName(log_level))

    for handler in root.handlers:
        if getattr(handler, "name", "") == "plantregistry_console":
            handler.setLevel(log_level)


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    """Helper for callers to load and validate configuration."""
    return AppConfig()
