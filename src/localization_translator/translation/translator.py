"""
Cache-aware translation.

CacheAwareTranslator sits between callers and the remote gateway. For a
batch of texts it computes one fingerprint per text, fetches every cached
translation with a single store lookup, sends only the distinct misses to
the gateway in a single call, writes the new translations back to the cache
and returns the results in input order.

Cache writes are best-effort: a failed insert is logged and counted, and
the translation is still returned. A failed lookup is fatal because no
cache semantics can be honoured without it.

License: MIT
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..config.settings import AUTOMATIC_SOURCE_LANG, TranslatorConfig
from ..config.logging_config import get_logger
from ..core.exceptions import InvalidRequestError, RemoteError, StoreError
from ..core.fingerprint import Fingerprint, canonical_options, options_digest, text_digest
from .cache import CacheEntry, TranslationCacheStore
from .gateway import TranslationGateway, TranslationResult

# Module-level logger for consistent logging.
logger = get_logger(__name__)


@dataclass(frozen=True)
class TranslationRequest:
    """
    An immutable translation request.

    Attributes:
        text: The text to translate.
        source_lang: Source language, or None for the configured default.
        target_lang: Target language, or None for the configured default.
        options: Provider options as (name, value) pairs in insertion order.
    """

    text: str
    source_lang: Optional[str] = None
    target_lang: Optional[str] = None
    options: Tuple[Tuple[str, Any], ...] = ()

    @classmethod
    def create(
        cls,
        text: str,
        source_lang: Optional[str] = None,
        target_lang: Optional[str] = None,
        options: Optional[Mapping[str, Any]] = None
    ) -> "TranslationRequest":
        return cls(text, source_lang, target_lang, tuple((options or {}).items()))

    @property
    def options_dict(self) -> Dict[str, Any]:
        return dict(self.options)

    @property
    def fingerprint(self) -> Fingerprint:
        serialized = canonical_options(self.options_dict)
        return Fingerprint(text_digest(self.text), options_digest(serialized))


class CacheAwareTranslator:
    """
    Translate texts through a persistent cache.

    Args:
        gateway: The remote translation provider.
        store: The translation cache. Without a store every call behaves
            as if use_cache were False.
        config: Language defaults and the cache toggle. Defaults to
            TranslatorConfig.from_settings().

    Attributes:
        failed_inserts: Number of cache writes that failed and were skipped.

    Example:
        >>> translator = CacheAwareTranslator(HttpTranslationGateway(), store)
        >>> translator.translate_one("Hello", "en", "de").translated_text
        'Hallo'
    """

    def __init__(
        self,
        gateway: TranslationGateway,
        store: Optional[TranslationCacheStore] = None,
        config: Optional[TranslatorConfig] = None
    ):
        self.gateway = gateway
        self.store = store
        self.config = config or TranslatorConfig.from_settings()
        self.failed_inserts = 0

    def resolve_source_lang(self, source_lang: Optional[str] = None) -> str:
        """Explicit source, else the configured default, else "automatic"."""
        return source_lang or self.config.default_source_lang or AUTOMATIC_SOURCE_LANG

    def resolve_target_lang(self, target_lang: Optional[str] = None) -> str:
        """
        Explicit target, else the configured default.

        Raises:
            InvalidRequestError: If neither is set. The target language has
                no automatic mode.
        """
        resolved = target_lang or self.config.default_target_lang
        if not resolved:
            raise InvalidRequestError("No target language given and no default configured")
        return resolved

    def translate_many(
        self,
        texts: Iterable[str],
        source_lang: Optional[str] = None,
        target_lang: Optional[str] = None,
        options: Optional[Mapping[str, Any]] = None,
        use_cache: Optional[bool] = None
    ) -> List[TranslationResult]:
        """
        Translate a batch of texts, serving repeats from the cache.

        Args:
            texts: Texts to translate. Duplicates are sent to the gateway
                only once and fanned back out to every position.
            source_lang: Source language; see resolve_source_lang().
            target_lang: Target language; see resolve_target_lang().
            options: Provider options, identical for the whole batch.
            use_cache: Consult and populate the cache. None means the
                configured default. False never touches the store.

        Returns:
            One TranslationResult per input text, in input order.

        Raises:
            StoreError: If the cache lookup fails.
            RemoteError: If the gateway call fails.
            InvalidRequestError: If no target language can be resolved.
        """
        texts = list(texts)
        source = self.resolve_source_lang(source_lang)
        target = self.resolve_target_lang(target_lang)
        options = dict(options or {})

        if use_cache is None:
            use_cache = self.config.cache_enabled
        use_cache = use_cache and self.store is not None

        if not texts:
            return []

        serialized_options = canonical_options(options)
        batch_options_digest = options_digest(serialized_options)
        digests = [text_digest(text) for text in texts]

        if not use_cache:
            fetched = self._fetch_distinct(texts, digests, source, target, options)
            return [fetched[digest] for digest in digests]

        cached = self.store.lookup(set(digests), source, target, batch_options_digest)
        results: Dict[str, TranslationResult] = {
            digest: self._result_from_entry(entry, source)
            for digest, entry in cached.items()
        }

        missing = self._distinct_pairs(texts, digests, exclude=results)
        logger.debug(
            f"Cache {source} -> {target}: {len(cached)} distinct hits, "
            f"{len(missing)} distinct misses"
        )

        if missing:
            fetched = self._call_gateway([text for _, text in missing], source, target, options)

            for (digest, text), result in zip(missing, fetched):
                self._insert_best_effort(CacheEntry(
                    text=text,
                    text_digest=digest,
                    translated_text=result.translated_text,
                    source_lang=source,
                    target_lang=target,
                    options=serialized_options,
                    options_digest=batch_options_digest,
                    detected_source_lang=result.detected_source_lang or source,
                    billed_units=result.billed_units,
                ))
                results[digest] = result

        return [results[digest] for digest in digests]

    def translate_one(
        self,
        text: str,
        source_lang: Optional[str] = None,
        target_lang: Optional[str] = None,
        options: Optional[Mapping[str, Any]] = None,
        use_cache: Optional[bool] = None
    ) -> TranslationResult:
        """Translate a single text; same cache behaviour as translate_many()."""
        return self.translate_many([text], source_lang, target_lang, options, use_cache)[0]

    def translate_request(
        self,
        request: TranslationRequest,
        use_cache: Optional[bool] = None
    ) -> TranslationResult:
        """Translate a TranslationRequest."""
        return self.translate_one(
            request.text,
            request.source_lang,
            request.target_lang,
            request.options_dict,
            use_cache,
        )

    # -- internals ------------------------------------------------------------

    @staticmethod
    def _distinct_pairs(
        texts: List[str],
        digests: List[str],
        exclude: Optional[Mapping[str, Any]] = None
    ) -> List[Tuple[str, str]]:
        """(digest, text) for each distinct text in first-occurrence order."""
        exclude = exclude or {}
        seen = set()
        pairs = []
        for digest, text in zip(digests, texts):
            if digest in exclude or digest in seen:
                continue
            seen.add(digest)
            pairs.append((digest, text))
        return pairs

    def _fetch_distinct(
        self,
        texts: List[str],
        digests: List[str],
        source: str,
        target: str,
        options: Dict[str, Any]
    ) -> Dict[str, TranslationResult]:
        pairs = self._distinct_pairs(texts, digests)
        fetched = self._call_gateway([text for _, text in pairs], source, target, options)
        return {digest: result for (digest, _), result in zip(pairs, fetched)}

    def _call_gateway(
        self,
        texts: List[str],
        source: str,
        target: str,
        options: Dict[str, Any]
    ) -> List[TranslationResult]:
        results = self.gateway.translate(texts, source, target, options)
        if len(results) != len(texts):
            raise RemoteError(
                f"Gateway returned {len(results)} results for {len(texts)} texts"
            )
        return list(results)

    def _insert_best_effort(self, entry: CacheEntry) -> None:
        try:
            self.store.insert(entry)
        except StoreError as e:
            self.failed_inserts += 1
            logger.warning(
                f"Could not cache translation {entry.source_lang} -> {entry.target_lang} "
                f"(text digest {entry.text_digest[:12]}): {e}"
            )

    @staticmethod
    def _result_from_entry(entry: CacheEntry, source: str) -> TranslationResult:
        return TranslationResult(
            translated_text=entry.translated_text,
            detected_source_lang=entry.detected_source_lang or source,
            billed_units=entry.billed_units or 0,
        )
