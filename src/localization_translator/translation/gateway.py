"""
Remote translation gateway.

This module defines the single interface the translator uses to reach a
remote translation provider, plus an HTTP implementation for DeepL-v2
compatible APIs built on requests.

Retries are the transport's job: the HTTP session mounts urllib3's Retry
for connection failures, 429 and 5xx responses. Whatever still fails after
that is raised as one of the RemoteError subclasses and is never retried
again by the caller.

License: MIT
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config.settings import (
    AUTOMATIC_SOURCE_LANG,
    DEEPL_API_KEY,
    DEEPL_API_TYPE,
    DEEPL_API_VERSION,
    HTTP_TIMEOUT_SECONDS,
    RETRY_BACKOFF_FACTOR,
    RETRY_ON_FAILURES,
    get_api_base_url,
)
from ..config.logging_config import get_logger
from ..core.exceptions import (
    AuthError,
    InvalidRequestError,
    QuotaExceededError,
    RemoteError,
    TransientError,
)

# Module-level logger for consistent logging.
logger = get_logger(__name__)

# The API accepts at most this many texts in one translate request.
MAX_TEXTS_PER_REQUEST = 50

# Status codes the transport retries before giving up.
RETRY_STATUS_CODES = (429, 500, 502, 503, 504)

# Status used by the API when the character quota is exhausted.
QUOTA_EXCEEDED_STATUS = 456


@dataclass(frozen=True)
class TranslationResult:
    """
    One translated text.

    Attributes:
        translated_text: The translation.
        detected_source_lang: Source language reported by the provider, or
            the explicit source language of the request.
        billed_units: Characters billed for this text, 0 when unknown.
    """

    translated_text: str
    detected_source_lang: Optional[str] = None
    billed_units: int = 0


class TranslationGateway(ABC):
    """Interface of a remote translation provider."""

    @abstractmethod
    def translate(
        self,
        texts: Sequence[str],
        source_lang: str,
        target_lang: str,
        options: Optional[Mapping[str, Any]] = None
    ) -> List[TranslationResult]:
        """
        Translate texts in one logical call.

        Args:
            texts: Texts to translate, in order.
            source_lang: Source language code, or "automatic" to have the
                provider detect it.
            target_lang: Target language code.
            options: Provider options such as formality or glossary_id.

        Returns:
            One result per input text, in the same order.

        Raises:
            RemoteError: One of AuthError, QuotaExceededError,
                TransientError or InvalidRequestError.
        """


class HttpTranslationGateway(TranslationGateway):
    """
    Gateway for DeepL-v2 compatible HTTP APIs.

    Args:
        api_key: Authentication key sent in the Authorization header.
        api_type: "free" or "pro"; selects the API host.
        api_version: Version path segment, e.g. "v2".
        timeout: Per-request timeout in seconds.
        retries: Transport-level retries for connection failures, 429 and 5xx.
        session: Pre-built requests session; mainly for tests.

    Example:
        >>> gateway = HttpTranslationGateway(api_key="...")
        >>> gateway.translate(["Hello"], "en", "de")[0].translated_text
        'Hallo'
    """

    def __init__(
        self,
        api_key: str = DEEPL_API_KEY,
        api_type: str = DEEPL_API_TYPE,
        api_version: str = DEEPL_API_VERSION,
        timeout: int = HTTP_TIMEOUT_SECONDS,
        retries: int = RETRY_ON_FAILURES,
        session: Optional[requests.Session] = None
    ):
        self.base_url = f"{get_api_base_url(api_type)}/{api_version}"
        self.timeout = timeout
        self.session = session or self._build_session(retries)
        self.session.headers.update({"Authorization": f"DeepL-Auth-Key {api_key}"})

    @staticmethod
    def _build_session(retries: int) -> requests.Session:
        session = requests.Session()
        retry = Retry(
            total=retries,
            backoff_factor=RETRY_BACKOFF_FACTOR,
            status_forcelist=RETRY_STATUS_CODES,
            allowed_methods=frozenset({"GET", "POST"}),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        return session

    # -- translation ----------------------------------------------------------

    def translate(
        self,
        texts: Sequence[str],
        source_lang: str,
        target_lang: str,
        options: Optional[Mapping[str, Any]] = None
    ) -> List[TranslationResult]:
        if not texts:
            return []

        results: List[TranslationResult] = []

        for i in range(0, len(texts), MAX_TEXTS_PER_REQUEST):
            batch = list(texts[i:i + MAX_TEXTS_PER_REQUEST])
            payload = self._build_translate_payload(batch, source_lang, target_lang, options)
            data = self._request("POST", "translate", data=payload)

            translations = data.get("translations") if isinstance(data, dict) else None
            if not isinstance(translations, list) or len(translations) != len(batch):
                raise RemoteError(
                    f"Expected {len(batch)} translations, got an unexpected response"
                )

            for item in translations:
                results.append(self._parse_translation(item, source_lang))

        logger.debug(f"Translated {len(texts)} texts {source_lang} -> {target_lang}")
        return results

    @staticmethod
    def _build_translate_payload(
        texts: List[str],
        source_lang: str,
        target_lang: str,
        options: Optional[Mapping[str, Any]]
    ) -> List[Tuple[str, str]]:
        payload = [("text", text) for text in texts]
        payload.append(("target_lang", target_lang))
        if source_lang and source_lang != AUTOMATIC_SOURCE_LANG:
            payload.append(("source_lang", source_lang))
        payload.append(("show_billed_characters", "1"))

        for name, value in (options or {}).items():
            if isinstance(value, bool):
                value = "1" if value else "0"
            elif isinstance(value, (list, tuple)):
                value = ",".join(str(v) for v in value)
            payload.append((name, str(value)))

        return payload

    @staticmethod
    def _parse_translation(item: Dict[str, Any], source_lang: str) -> TranslationResult:
        text = item.get("text") if isinstance(item, dict) else None
        if not isinstance(text, str):
            raise RemoteError(f"Translation item has no text: {item!r}")

        if source_lang and source_lang != AUTOMATIC_SOURCE_LANG:
            detected = source_lang
        else:
            detected = item.get("detected_source_language")

        return TranslationResult(
            translated_text=text,
            detected_source_lang=detected,
            billed_units=int(item.get("billed_characters") or 0),
        )

    # -- account information --------------------------------------------------

    def get_usage(self) -> Dict[str, Any]:
        """
        Retrieve usage and limits for the current billing period.

        Returns:
            The decoded usage document, e.g.
            {"character_count": 1200, "character_limit": 500000}.
        """
        return self._request("GET", "usage")

    def get_languages(self, kind: str = "source") -> List[Dict[str, Any]]:
        """
        List the languages supported by the API.

        Args:
            kind: "source" or "target".

        Returns:
            A list of {"language": ..., "name": ...} dictionaries.
        """
        if kind not in ("source", "target"):
            raise ValueError(f"kind must be 'source' or 'target', got '{kind}'")
        return self._request("GET", "languages", params={"type": kind})

    # -- transport ------------------------------------------------------------

    def _request(self, method: str, endpoint: str, **kwargs) -> Any:
        url = f"{self.base_url}/{endpoint}"

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            raise TransientError(f"Request to {endpoint} timed out: {e}") from e
        except requests.ConnectionError as e:
            raise TransientError(f"Could not connect to translation API: {e}") from e
        except requests.RequestException as e:
            raise TransientError(f"Request to {endpoint} failed: {e}") from e

        if response.status_code >= 400:
            raise self._error_for_response(response)

        try:
            return response.json()
        except ValueError as e:
            raise RemoteError(
                f"Translation API returned invalid JSON for {endpoint}",
                status_code=response.status_code,
            ) from e

    @staticmethod
    def _error_for_response(response: requests.Response) -> RemoteError:
        status = response.status_code
        try:
            body = response.json()
        except ValueError:
            body = None
        detail = body.get("message", response.text) if isinstance(body, dict) else response.text
        message = f"Translation API error {status}: {detail}"

        if status in (401, 403):
            return AuthError(message, status_code=status)
        if status == QUOTA_EXCEEDED_STATUS:
            return QuotaExceededError(message, status_code=status)
        if status == 429 or status >= 500:
            return TransientError(message, status_code=status)
        return InvalidRequestError(message, status_code=status)
