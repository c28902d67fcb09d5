"""
Exception hierarchy for the localization translator.

Every error raised on purpose by this package derives from TranslatorError,
so callers such as the CLI scripts can catch a single base class and map
it to an exit code.

    TranslatorError
    ├── StoreError
    ├── RemoteError
    │   ├── AuthError
    │   ├── QuotaExceededError
    │   ├── TransientError
    │   └── InvalidRequestError
    ├── SegmentationError
    ├── MergeError
    └── LangFileError

License: MIT
"""

from typing import Optional


class TranslatorError(Exception):
    """Base class for all errors raised by the localization translator."""


class StoreError(TranslatorError):
    """The translation cache could not be read from or written to."""


class RemoteError(TranslatorError):
    """
    The remote translation provider rejected or failed a request.

    Attributes:
        status_code: HTTP status returned by the provider, if any.
        retryable: Whether repeating the same request may succeed. Only
            TransientError sets this; the retry itself belongs to the
            transport layer.
    """

    retryable = False

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthError(RemoteError):
    """The API key is missing, invalid or not allowed to call the endpoint."""


class QuotaExceededError(RemoteError):
    """The account's character quota for the billing period is used up."""


class TransientError(RemoteError):
    """Rate limiting, provider-side failures, timeouts and connection errors."""

    retryable = True


class InvalidRequestError(RemoteError):
    """The request itself was malformed (unknown language, bad option, ...)."""


class SegmentationError(TranslatorError):
    """Splitting a string into segments lost or duplicated characters."""


class MergeError(TranslatorError):
    """
    A translation tree could not be merged.

    Attributes:
        key_path: Dotted path of the key being processed when the merge
            failed, e.g. "auth.failed".
    """

    def __init__(self, message: str, key_path: Optional[str] = None):
        super().__init__(message)
        self.key_path = key_path


class LangFileError(TranslatorError):
    """A localization file or folder is missing, unreadable or unsupported."""
