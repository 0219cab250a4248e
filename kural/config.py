"""
Centralized configuration management.

Configuration is loaded from:
1. Environment variables
2. .env file (if present)
3. Default values

Usage:
    from kural.config import get_config
    config = get_config()
    print(config.api.base_url)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Existing environment variables win over .env values
load_dotenv(override=False)


def _get_bool_env(key: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    value = os.getenv(key, "").strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    return default


def _get_int_env(key: str, default: int) -> int:
    """Get integer from environment variable."""
    value = os.getenv(key, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: Optional[float] = None) -> Optional[float]:
    """Get float from environment variable."""
    value = os.getenv(key, "").strip()
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass
class APIConfig:
    """Backend REST API configuration."""
    base_url: str = field(
        default_factory=lambda: os.getenv("KURAL_API_BASE_URL", "http://localhost:5000/api/v1")
    )
    token: str = field(default_factory=lambda: os.getenv("KURAL_API_TOKEN", ""))
    timeout_sec: int = field(default_factory=lambda: _get_int_env("KURAL_API_TIMEOUT_SEC", 30))

    # Retry configuration
    max_retries: int = field(default_factory=lambda: _get_int_env("KURAL_API_MAX_RETRIES", 2))
    retry_delay_sec: float = field(
        default_factory=lambda: _get_float_env("KURAL_API_RETRY_DELAY_SEC", 1.0) or 1.0
    )

    # Page sizes
    probe_limit: int = field(default_factory=lambda: _get_int_env("KURAL_PROBE_LIMIT", 50))
    fallback_limit: int = field(default_factory=lambda: _get_int_env("KURAL_FALLBACK_LIMIT", 5000))
    survey_form_limit: int = field(default_factory=lambda: _get_int_env("KURAL_SURVEY_FORM_LIMIT", 100))

    def get_normalized_base_url(self) -> str:
        """Base URL without a trailing slash."""
        return (self.base_url or "").strip().rstrip("/")


@dataclass
class CacheConfig:
    """Roster cache configuration."""
    roster_ttl_sec: int = field(default_factory=lambda: _get_int_env("KURAL_ROSTER_CACHE_TTL_SEC", 300))


@dataclass
class Config:
    """
    Main application configuration.

    All settings are loaded from environment variables with sensible defaults.
    Set DEBUG=1 in environment to enable debug mode.
    """

    # Base directory (working directory by default)
    base_dir: Path = field(default_factory=lambda: Path.cwd())

    logs_dir: Path = field(default=None)
    export_dir: Path = field(default=None)

    debug: bool = field(default_factory=lambda: _get_bool_env("DEBUG", False))
    log_to_file: bool = field(default_factory=lambda: _get_bool_env("LOG_TO_FILE", True))

    # Sub-configurations
    api: APIConfig = field(default_factory=APIConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)

    def __post_init__(self):
        """Resolve paths after initialization."""
        if self.logs_dir is None:
            self.logs_dir = self.base_dir / os.getenv("LOG_DIR", "logs")
        if self.export_dir is None:
            self.export_dir = self.base_dir / os.getenv("EXPORT_DIR", "exports")


# Global config instance (lazily initialized)
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
