"""
Request fingerprinting for the translation cache.

A translation request is addressed in the cache by two digests: one of the
exact text and one of the canonical serialization of the request options.
The source and target languages stay out of the digests;
the cache compares them as separate exact-match columns.

The digests are used for cache addressing only. A collision would serve a
wrong cached translation, which is accepted as a consistency risk rather
than treated as a security property.

License: MIT
"""

import hashlib
import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class Fingerprint:
    """
    Cache address of a translation request.

    Attributes:
        text_digest: SHA-256 hex digest of the UTF-8 encoded text.
        options_digest: MD5 hex digest of the canonical options string.
    """

    text_digest: str
    options_digest: str


def canonical_options(options: Optional[Mapping[str, Any]] = None) -> str:
    """
    Serialize request options so that key order never matters.

    Keys are sorted before serialization and the separators are fixed, so
    {"a": 1, "b": 2} and {"b": 2, "a": 1} produce the same string. Missing
    or empty options serialize to "{}".

    Args:
        options: Mapping of option name to a JSON-serializable value.

    Returns:
        The canonical JSON string.

    Example:
        >>> canonical_options({"formality": "less", "context": "UI"})
        '{"context":"UI","formality":"less"}'
    """
    return json.dumps(
        dict(options or {}),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def text_digest(text: str) -> str:
    """Return the SHA-256 hex digest of the exact UTF-8 bytes of text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def options_digest(serialized_options: str) -> str:
    """Return the MD5 hex digest of an already canonical options string."""
    return hashlib.md5(serialized_options.encode("utf-8")).hexdigest()


def fingerprint(text: str, options: Optional[Mapping[str, Any]] = None) -> Fingerprint:
    """
    Compute the cache fingerprint of a translation request.

    Args:
        text: The text to translate, hashed byte for byte.
        options: Request options; insertion order is irrelevant.

    Returns:
        Fingerprint with the text and options digests.

    Example:
        >>> fingerprint("Hello", {"b": 2, "a": 1}) == fingerprint("Hello", {"a": 1, "b": 2})
        True
    """
    return Fingerprint(
        text_digest=text_digest(text),
        options_digest=options_digest(canonical_options(options)),
    )
