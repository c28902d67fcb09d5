"""
Configuration settings for the localization translator.

This module centralizes all configuration constants, database parameters,
and default values used throughout the package. Settings are grouped by
their functional area for easy maintenance.

Configuration includes:
    - Translation API credentials and endpoint selection
    - Default language pair
    - HTTP client settings
    - Translation cache settings (SQLite or PostgreSQL)
    - On-the-fly translation of missing keys

The core components never read these constants directly. They receive a
TranslatorConfig object, which TranslatorConfig.from_settings() builds from
the values below.

License: MIT
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


def _env_flag(name: str, default: str) -> bool:
    """Read a boolean flag from the environment ("1", "true", "yes")."""
    return os.getenv(name, default).lower() in ("1", "true", "yes")


# =============================================================================
# TRANSLATION API CONFIGURATION
# =============================================================================

# Authentication key for the translation API.
DEEPL_API_KEY = os.getenv("DEEPL_API_KEY", "")

# "free" and "pro" accounts are served from different hosts.
DEEPL_API_TYPE = os.getenv("DEEPL_API_TYPE", "free")

# API version segment appended to the base URL.
DEEPL_API_VERSION = os.getenv("DEEPL_API_VERSION", "v2")

DEEPL_FREE_BASE_URL = "https://api-free.deepl.com"
DEEPL_PRO_BASE_URL = "https://api.deepl.com"

# Sentinel source language asking the provider to detect the language.
AUTOMATIC_SOURCE_LANG = "automatic"

# =============================================================================
# LANGUAGE DEFAULTS
# =============================================================================

# Used when a caller does not name a source or target language.
DEFAULT_SOURCE_LANG = os.getenv("DEEPL_DEFAULT_SOURCE_LANG", "en")
DEFAULT_TARGET_LANG = os.getenv("DEEPL_DEFAULT_TARGET_LANG", "cs")

# =============================================================================
# HTTP CLIENT CONFIGURATION
# =============================================================================

# Number of transport-level retries on connection failures, 429 and 5xx.
# 0 disables retries.
RETRY_ON_FAILURES = int(os.getenv("DEEPL_RETRY_ON_FAILURES", "3"))

# Backoff factor handed to urllib3's Retry between attempts.
RETRY_BACKOFF_FACTOR = float(os.getenv("DEEPL_RETRY_BACKOFF_FACTOR", "0.5"))

# Timeout in seconds for each HTTP request.
HTTP_TIMEOUT_SECONDS = int(os.getenv("DEEPL_TIMEOUT", "30"))

# =============================================================================
# TRANSLATION CACHE CONFIGURATION
# =============================================================================

# When disabled, every translation goes straight to the remote API.
ENABLE_TRANSLATION_CACHE = _env_flag("DEEPL_ENABLE_TRANSLATION_CACHE", "true")

# Table holding cached translations.
TRANSLATION_CACHE_TABLE = os.getenv("DEEPL_TRANSLATION_CACHE_TABLE", "translations_cache")

# Storage engine for the cache: "sqlite" or "postgres".
TRANSLATION_CACHE_BACKEND = os.getenv("TRANSLATION_CACHE_BACKEND", "sqlite")

# SQLite database file used when the backend is "sqlite".
TRANSLATION_CACHE_PATH = os.getenv(
    "TRANSLATION_CACHE_PATH",
    str(Path.home() / ".cache" / "localization-translator" / "translations_cache.db"),
)

# -----------------------------------------------------------------------------
# PostgreSQL Configuration
# -----------------------------------------------------------------------------
# Used when TRANSLATION_CACHE_BACKEND=postgres.
POSTGRES_HOST = os.getenv("POSTGRES_HOST", "localhost")
POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")
POSTGRES_USER = os.getenv("POSTGRES_USER", "translator")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD", "")
POSTGRES_DATABASE = os.getenv("POSTGRES_DATABASE", "translations")

# Consolidated connection parameters dictionary for psycopg2.
POSTGRES_CONNECTION_PARAMS = {
    "host": POSTGRES_HOST,
    "port": POSTGRES_PORT,
    "user": POSTGRES_USER,
    "password": POSTGRES_PASSWORD,
    "database": POSTGRES_DATABASE,
}

# =============================================================================
# LOCALIZATION FILES
# =============================================================================

# Root folder holding one subfolder (or one JSON file) per language.
LANG_PATH = os.getenv("LANG_PATH", "lang")

# Extensions recognised as localization files.
SUPPORTED_LANG_FILE_EXTENSIONS = [".json", ".yaml", ".yml"]

# JSON output indentation.
JSON_INDENT = 4

# =============================================================================
# ON-THE-FLY TRANSLATION
# =============================================================================

# Translate keys missing at lookup time by translating their source file.
ON_THE_FLY_ENABLED = _env_flag("DEEPL_ON_THE_FLY_ENABLED", "false")

# Language whose files are treated as authoritative for missing keys.
ON_THE_FLY_SOURCE_LANG = os.getenv("DEEPL_ON_THE_FLY_SOURCE_LANG", "en")

# Defer missing-key translation to a background worker instead of blocking.
ON_THE_FLY_USE_QUEUE = _env_flag("DEEPL_ON_THE_FLY_USE_QUEUE", "false")

# =============================================================================
# USAGE REPORTING
# =============================================================================

# Usage ratio at which the report flags a quota as nearly exhausted.
USAGE_WARNING_THRESHOLD = 0.9


@dataclass(frozen=True)
class TranslatorConfig:
    """
    Explicit configuration handed to the cache-aware translator.

    Attributes:
        default_source_lang: Source language used when a call names none.
            None or an empty string falls back to automatic detection.
        default_target_lang: Target language used when a call names none.
        cache_enabled: Whether calls consult the cache unless told otherwise.
        cache_table: Name of the cache table.
    """

    default_source_lang: Optional[str] = DEFAULT_SOURCE_LANG
    default_target_lang: Optional[str] = DEFAULT_TARGET_LANG
    cache_enabled: bool = ENABLE_TRANSLATION_CACHE
    cache_table: str = TRANSLATION_CACHE_TABLE

    @classmethod
    def from_settings(cls) -> "TranslatorConfig":
        """Build a config from the environment-driven module constants."""
        return cls(
            default_source_lang=DEFAULT_SOURCE_LANG,
            default_target_lang=DEFAULT_TARGET_LANG,
            cache_enabled=ENABLE_TRANSLATION_CACHE,
            cache_table=TRANSLATION_CACHE_TABLE,
        )


def get_api_base_url(api_type: str = DEEPL_API_TYPE) -> str:
    """
    Return the API host for the given account type.

    Args:
        api_type: "pro" for the paid endpoint; anything else selects the
            free endpoint.

    Returns:
        The base URL without a trailing slash or version segment.
    """
    return DEEPL_PRO_BASE_URL if api_type == "pro" else DEEPL_FREE_BASE_URL
