"""
Translation module for the localization translator.

This module contains everything between a localization string and the
remote translation API:
    - cache: Persistent SQL cache of finished translations
    - gateway: Remote translation provider interface and HTTP client
    - translator: Cache-aware batch translation
    - segmenter: Placeholder-preserving string translation
    - merge: Hierarchical merge of translation trees
    - on_the_fly: Translation of keys missing at lookup time
"""

from .cache import (
    CacheEntry,
    TranslationCacheStore,
    SQLiteTranslationCache,
    PostgresTranslationCache,
    create_cache_store,
)
from .gateway import TranslationGateway, HttpTranslationGateway, TranslationResult
from .translator import CacheAwareTranslator, TranslationRequest
from .segmenter import PlaceholderSegmenter, Segment, SegmentKind, segment, reassemble
from .merge import TreeMerger, merge_translate
from .on_the_fly import OnTheFlyTranslator, TranslateKeyMessage, apply_replacements
