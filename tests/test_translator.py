"""Test suite for cache-aware translation."""
import logging

import pytest

from localization_translator.config.settings import TranslatorConfig
from localization_translator.core.exceptions import (
    InvalidRequestError,
    QuotaExceededError,
    RemoteError,
    StoreError,
)
from localization_translator.translation import (
    CacheAwareTranslator,
    SQLiteTranslationCache,
    TranslationRequest,
    TranslationResult,
)


class BrokenInsertCache(SQLiteTranslationCache):
    """Cache whose writes always fail."""

    def insert(self, entry):
        raise StoreError('disk full')


class BrokenLookupCache(SQLiteTranslationCache):
    """Cache whose reads always fail."""

    def lookup(self, text_digests, source_lang, target_lang, options_digest):
        raise StoreError('database is locked')


class TestCacheRoundTrip:
    """Test cases for serving repeated requests from the cache."""

    def test_second_call_is_served_from_cache(self, translator, gateway):
        """Test that a repeated translation does not reach the gateway."""
        first = translator.translate_one('Hello', 'en', 'de')
        second = translator.translate_one('Hello', 'en', 'de')

        assert len(gateway.calls) == 1
        assert second.translated_text == first.translated_text == 'HELLO'

    def test_cached_result_keeps_metadata(self, translator):
        """Test that cache hits carry detected language and billed units."""
        translator.translate_one('Hello', 'en', 'de')
        cached = translator.translate_one('Hello', 'en', 'de')

        assert cached.detected_source_lang == 'en'
        assert cached.billed_units == 5

    def test_cache_is_shared_between_translators(self, gateway, store, config):
        """Test that a new translator on the same store sees earlier results."""
        CacheAwareTranslator(gateway, store, config).translate_one('Hello')
        CacheAwareTranslator(gateway, store, config).translate_one('Hello')

        assert len(gateway.calls) == 1

    def test_language_pair_is_part_of_the_address(self, translator, gateway):
        """Test that another target language is a cache miss."""
        translator.translate_one('Hello', 'en', 'de')
        translator.translate_one('Hello', 'en', 'fr')

        assert len(gateway.calls) == 2
        assert gateway.calls[1]['target_lang'] == 'fr'

    def test_options_are_part_of_the_address(self, translator, gateway):
        """Test that options distinguish entries but their order does not."""
        translator.translate_one('Hello', options={'formality': 'more', 'context': 'UI'})
        translator.translate_one('Hello', options={'context': 'UI', 'formality': 'more'})
        translator.translate_one('Hello', options={'formality': 'less'})

        assert len(gateway.calls) == 2
        assert gateway.calls[0]['options'] == {'formality': 'more', 'context': 'UI'}


class TestCacheBypass:
    """Test cases for translating without the cache."""

    def test_bypass_never_touches_store(self, translator, gateway, store):
        """Test that use_cache=False neither reads nor writes the store."""
        translator.translate_one('Hello', use_cache=False)
        translator.translate_one('Hello', use_cache=False)

        assert len(gateway.calls) == 2
        assert store.stats()['total_entries'] == 0

    def test_bypass_ignores_existing_entries(self, translator, gateway):
        translator.translate_one('Hello')
        translator.translate_one('Hello', use_cache=False)

        assert len(gateway.calls) == 2

    def test_bypass_works_with_broken_store(self, gateway, tmp_path, config):
        """Test that bypass mode succeeds even when the store is unusable."""
        store = BrokenLookupCache(str(tmp_path / 'broken.db'))
        translator = CacheAwareTranslator(gateway, store, config)

        result = translator.translate_one('Hello', use_cache=False)

        assert result.translated_text == 'HELLO'

    def test_config_disables_cache(self, gateway, store):
        config = TranslatorConfig('en', 'de', cache_enabled=False)
        translator = CacheAwareTranslator(gateway, store, config)

        translator.translate_one('Hello')

        assert store.stats()['total_entries'] == 0

    def test_without_store(self, gateway, config):
        """Test that a translator without a store always calls the gateway."""
        translator = CacheAwareTranslator(gateway, None, config)

        translator.translate_one('Hello')
        translator.translate_one('Hello')

        assert len(gateway.calls) == 2

    def test_bypass_deduplicates(self, translator, gateway):
        results = translator.translate_many(['a', 'b', 'a'], use_cache=False)

        assert gateway.calls[0]['texts'] == ['a', 'b']
        assert [r.translated_text for r in results] == ['A', 'B', 'A']


class TestBatching:
    """Test cases for partial misses and deduplication."""

    def test_only_misses_reach_the_gateway(self, translator, gateway):
        """Test a batch where some texts are already cached."""
        translator.translate_many(['apple', 'banana'])

        results = translator.translate_many(['apple', 'cherry', 'banana', 'date'])

        assert len(gateway.calls) == 2
        assert gateway.calls[1]['texts'] == ['cherry', 'date']
        assert [r.translated_text for r in results] == ['APPLE', 'CHERRY', 'BANANA', 'DATE']

    def test_all_hits_make_no_call(self, translator, gateway):
        translator.translate_many(['apple', 'banana'])

        translator.translate_many(['banana', 'apple'])

        assert len(gateway.calls) == 1

    def test_duplicates_are_sent_once(self, translator, gateway, store):
        """Test that repeated texts in one batch cost one translation."""
        results = translator.translate_many(['x', 'x', 'y', 'x'])

        assert gateway.calls[0]['texts'] == ['x', 'y']
        assert [r.translated_text for r in results] == ['X', 'X', 'Y', 'X']
        assert store.stats()['total_entries'] == 2

    def test_empty_batch(self, translator, gateway):
        assert translator.translate_many([]) == []
        assert gateway.calls == []

    def test_one_gateway_call_per_batch(self, translator, gateway):
        texts = [f'text {i}' for i in range(120)]

        results = translator.translate_many(texts)

        assert len(gateway.calls) == 1
        assert len(results) == 120
        assert results[119].translated_text == 'TEXT 119'


class TestLanguageResolution:
    """Test cases for default and automatic languages."""

    def test_defaults_from_config(self, translator, gateway):
        translator.translate_one('Hello')

        assert gateway.calls[0]['source_lang'] == 'en'
        assert gateway.calls[0]['target_lang'] == 'de'

    def test_automatic_source(self, gateway, store):
        """Test that a missing source language asks for detection."""
        translator = CacheAwareTranslator(gateway, store, TranslatorConfig(None, 'de'))

        result = translator.translate_one('Hello')

        assert gateway.calls[0]['source_lang'] == 'automatic'
        assert result.detected_source_lang == 'EN'

    def test_automatic_and_explicit_source_are_cached_apart(self, translator, gateway):
        translator.translate_one('Hello', 'automatic', 'de')
        translator.translate_one('Hello', 'en', 'de')

        assert len(gateway.calls) == 2

    def test_missing_target_language(self, gateway, store):
        translator = CacheAwareTranslator(gateway, store, TranslatorConfig('en', None))

        with pytest.raises(InvalidRequestError):
            translator.translate_one('Hello')

        assert gateway.calls == []


class TestFailures:
    """Test cases for store and gateway failures."""

    def test_failed_insert_still_returns_translation(self, gateway, tmp_path, config, caplog):
        """Test that cache writes are best-effort and failures are logged."""
        store = BrokenInsertCache(str(tmp_path / 'cache.db'))
        store.initialize()
        translator = CacheAwareTranslator(gateway, store, config)

        with caplog.at_level(logging.WARNING, logger='localization_translator.translation.translator'):
            results = translator.translate_many(['Hello', 'World'])

        assert [r.translated_text for r in results] == ['HELLO', 'WORLD']
        assert translator.failed_inserts == 2
        warnings = [
            record for record in caplog.records
            if record.name == 'localization_translator.translation.translator'
            and record.levelno == logging.WARNING
        ]
        assert len(warnings) == 2
        assert 'disk full' in warnings[0].getMessage()

    def test_uncreatable_cache_folder_is_a_store_error(self, gateway, tmp_path, config):
        """Test that a cache path under a regular file fails as a store error."""
        blocker = tmp_path / 'blocker'
        blocker.write_text('not a folder', encoding='utf-8')
        store = SQLiteTranslationCache(str(blocker / 'cache.db'))
        translator = CacheAwareTranslator(gateway, store, config)

        with pytest.raises(StoreError):
            translator.translate_one('Hello')

        assert gateway.calls == []

    def test_failed_lookup_is_fatal(self, gateway, tmp_path, config):
        store = BrokenLookupCache(str(tmp_path / 'cache.db'))
        translator = CacheAwareTranslator(gateway, store, config)

        with pytest.raises(StoreError):
            translator.translate_one('Hello')

        assert gateway.calls == []

    def test_remote_error_propagates_and_nothing_is_cached(self, translator, gateway, store):
        gateway.error = QuotaExceededError('Quota exceeded', status_code=456)

        with pytest.raises(QuotaExceededError):
            translator.translate_many(['Hello', 'World'])

        assert store.stats()['total_entries'] == 0

    def test_result_count_mismatch(self, gateway, store, config):
        """Test that a gateway returning too few results is rejected."""
        class ShortGateway(type(gateway)):
            def translate(self, texts, source_lang, target_lang, options=None):
                return [TranslationResult('only one')]

        translator = CacheAwareTranslator(ShortGateway(), store, config)

        with pytest.raises(RemoteError):
            translator.translate_many(['a', 'b'])

        assert store.stats()['total_entries'] == 0


class TestTranslationRequest:
    """Test cases for the request value object."""

    def test_request_fingerprint_ignores_option_order(self):
        first = TranslationRequest.create('Hello', options={'a': 1, 'b': 2})
        second = TranslationRequest.create('Hello', options={'b': 2, 'a': 1})

        assert first.fingerprint == second.fingerprint

    def test_translate_request(self, translator, gateway):
        request = TranslationRequest.create('Hello', 'en', 'fr', {'formality': 'less'})

        result = translator.translate_request(request)

        assert result.translated_text == 'HELLO'
        assert gateway.calls[0]['target_lang'] == 'fr'
        assert gateway.calls[0]['options'] == {'formality': 'less'}
