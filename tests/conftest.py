"""
Pytest configuration and fixtures for testing the localization translator.
"""

import os
import sys

import pytest

# Add the src directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from localization_translator.config.settings import AUTOMATIC_SOURCE_LANG, TranslatorConfig
from localization_translator.files import LangFileTranslator
from localization_translator.translation import (
    CacheAwareTranslator,
    PlaceholderSegmenter,
    SQLiteTranslationCache,
    TranslationGateway,
    TranslationResult,
    TreeMerger,
)


class FakeGateway(TranslationGateway):
    """
    Gateway that upper-cases texts and records every call.

    Setting `error` makes the next calls raise it instead.
    """

    def __init__(self):
        self.calls = []
        self.error = None

    def translate(self, texts, source_lang, target_lang, options=None):
        self.calls.append({
            'texts': list(texts),
            'source_lang': source_lang,
            'target_lang': target_lang,
            'options': dict(options or {}),
        })
        if self.error is not None:
            raise self.error

        detected = 'EN' if source_lang == AUTOMATIC_SOURCE_LANG else source_lang
        return [
            TranslationResult(text.upper(), detected_source_lang=detected, billed_units=len(text))
            for text in texts
        ]

    @property
    def translated_texts(self):
        return [text for call in self.calls for text in call['texts']]


@pytest.fixture
def gateway():
    """Recording fake gateway."""
    return FakeGateway()


@pytest.fixture
def store(tmp_path):
    """Initialized SQLite cache in a temporary file."""
    cache = SQLiteTranslationCache(str(tmp_path / 'cache' / 'translations.db'))
    cache.initialize()
    return cache


@pytest.fixture
def config():
    """Translator config with an en -> de default pair and caching on."""
    return TranslatorConfig(
        default_source_lang='en',
        default_target_lang='de',
        cache_enabled=True,
        cache_table='translations_cache',
    )


@pytest.fixture
def translator(gateway, store, config):
    """Cache-aware translator wired to the fake gateway and SQLite cache."""
    return CacheAwareTranslator(gateway, store, config)


@pytest.fixture
def segmenter(translator):
    return PlaceholderSegmenter(translator)


@pytest.fixture
def merger(segmenter):
    return TreeMerger(segmenter)


@pytest.fixture
def lang_path(tmp_path):
    """Empty lang root folder."""
    path = tmp_path / 'lang'
    path.mkdir()
    return path


@pytest.fixture
def lang_files(merger, lang_path):
    return LangFileTranslator(merger, lang_path)
