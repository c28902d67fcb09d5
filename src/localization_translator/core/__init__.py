"""
Core utilities module for the localization translator.

Submodules:
    fingerprint: Deterministic cache keys for translation requests.
    exceptions: The package-wide error taxonomy.
    connections: SQLite and PostgreSQL connection management.
    dict_utils: Dotted-key access into nested translation trees.
"""

from .fingerprint import Fingerprint, canonical_options, fingerprint, options_digest, text_digest
from .exceptions import (
    TranslatorError,
    StoreError,
    RemoteError,
    AuthError,
    QuotaExceededError,
    TransientError,
    InvalidRequestError,
    SegmentationError,
    MergeError,
    LangFileError,
)
from .dict_utils import safe_get, get_by_dotted_key
