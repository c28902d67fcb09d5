"""Test suite for localization file handling and translation."""
import json
from pathlib import Path

import pytest
import yaml

from localization_translator.core.exceptions import LangFileError, MergeError, TransientError
from localization_translator.files.handlers import JsonLangFile, YamlLangFile, get_handler
from localization_translator.files.lang_files import resolve_key, target_path_for


def _write_json(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding='utf-8')


def _read_json(path):
    return json.loads(path.read_text(encoding='utf-8'))


class TestHandlers:
    """Test cases for JSON and YAML handlers."""

    def test_handler_by_extension(self):
        assert isinstance(get_handler('lang/en/auth.json'), JsonLangFile)
        assert isinstance(get_handler('lang/en/auth.yaml'), YamlLangFile)
        assert isinstance(get_handler('lang/en/auth.YML'), YamlLangFile)

    def test_unsupported_extension(self):
        with pytest.raises(LangFileError):
            get_handler('lang/en/auth.php')

    def test_json_output_format(self, tmp_path):
        """Test that JSON is indented and keeps non-ASCII characters."""
        path = tmp_path / 'de.json'

        JsonLangFile().save(path, {'greeting': 'Grüß Gott'})

        content = path.read_text(encoding='utf-8')
        assert content == '{\n    "greeting": "Grüß Gott"\n}\n'

    def test_yaml_round_trip_keeps_order(self, tmp_path):
        path = tmp_path / 'nested' / 'auth.yaml'
        tree = {'zeta': 'Z', 'alpha': {'beta': 'Ünïcode'}}

        YamlLangFile().save(path, tree)

        assert list(yaml.safe_load(path.read_text(encoding='utf-8'))) == ['zeta', 'alpha']
        assert YamlLangFile().load(path) == tree

    def test_empty_yaml_is_empty_tree(self, tmp_path):
        path = tmp_path / 'empty.yaml'
        path.write_text('', encoding='utf-8')

        assert YamlLangFile().load(path) == {}

    def test_invalid_json(self, tmp_path):
        path = tmp_path / 'broken.json'
        path.write_text('{"greeting": ', encoding='utf-8')

        with pytest.raises(LangFileError):
            JsonLangFile().load(path)

    def test_top_level_list_is_rejected(self, tmp_path):
        path = tmp_path / 'list.json'
        path.write_text('["a", "b"]', encoding='utf-8')

        with pytest.raises(LangFileError):
            JsonLangFile().load(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(LangFileError):
            JsonLangFile().load(tmp_path / 'missing.json')


class TestTargetPath:
    """Test cases for mapping source files to target files."""

    def test_root_json_file(self):
        assert target_path_for('lang/en.json', 'en', 'de') == Path('lang/de.json')

    def test_group_file(self):
        assert target_path_for('lang/en/auth.json', 'en', 'de') == Path('lang/de/auth.json')

    def test_nested_group_file(self):
        assert target_path_for('lang/en/admin/users.yml', 'en', 'fr') == Path('lang/fr/admin/users.yml')

    def test_file_name_matching_language_is_not_renamed(self):
        """Test that only folder names are swapped for non-root files."""
        assert target_path_for('lang/en/en.yaml', 'en', 'de') == Path('lang/de/en.yaml')

    def test_unrelated_file_has_no_target(self):
        assert target_path_for('lang/vendor/auth.json', 'en', 'de') is None


class TestResolveKey:
    """Test cases for resolving requested keys."""

    def test_group_prefix_is_dropped(self):
        assert resolve_key({'failed': 'Falsch'}, 'auth.failed') == 'Falsch'

    def test_nested_path(self):
        assert resolve_key({'password': {'reset': 'Zurückgesetzt'}}, 'auth.password.reset') == 'Zurückgesetzt'

    def test_literal_key_wins(self):
        assert resolve_key({'Welcome back.': 'Willkommen zurück.'}, 'Welcome back.') == 'Willkommen zurück.'

    def test_missing_key(self):
        assert resolve_key({'failed': 'Falsch'}, 'auth.throttle') is None


class TestTranslateFile:
    """Test cases for LangFileTranslator.translate_file."""

    def test_creates_target_file(self, lang_files, lang_path):
        _write_json(lang_path / 'en' / 'auth.json', {'failed': 'Wrong credentials', 'password': {'reset': 'Reset'}})

        lang_files.translate_file(lang_path / 'en' / 'auth.json', 'en', 'de')

        assert _read_json(lang_path / 'de' / 'auth.json') == {
            'failed': 'WRONG CREDENTIALS',
            'password': {'reset': 'RESET'},
        }

    def test_existing_translations_are_kept(self, lang_files, lang_path, gateway):
        _write_json(lang_path / 'en' / 'auth.json', {'failed': 'Wrong credentials', 'throttle': 'Slow down'})
        _write_json(lang_path / 'de' / 'auth.json', {'failed': 'Falsche Zugangsdaten', 'old': 'Alt'})

        lang_files.translate_file(lang_path / 'en' / 'auth.json', 'en', 'de')

        assert _read_json(lang_path / 'de' / 'auth.json') == {
            'failed': 'Falsche Zugangsdaten',
            'throttle': 'SLOW DOWN',
        }
        assert gateway.translated_texts == ['Slow down']

    def test_root_json_file(self, lang_files, lang_path):
        _write_json(lang_path / 'en.json', {'Welcome back, :name': 'Welcome back, :name'})

        lang_files.translate_file(lang_path / 'en.json', 'en', 'cs')

        assert _read_json(lang_path / 'cs.json') == {'Welcome back, :name': 'WELCOME BACK, :name'}

    def test_yaml_file_stays_yaml(self, lang_files, lang_path):
        source = lang_path / 'en' / 'messages.yaml'
        source.parent.mkdir(parents=True)
        source.write_text('inbox:\n  empty: No messages\n', encoding='utf-8')

        lang_files.translate_file(source, 'en', 'de')

        target = lang_path / 'de' / 'messages.yaml'
        assert yaml.safe_load(target.read_text(encoding='utf-8')) == {'inbox': {'empty': 'NO MESSAGES'}}

    def test_return_keys(self, lang_files, lang_path):
        _write_json(lang_path / 'en' / 'auth.json', {'failed': 'Wrong credentials'})

        result = lang_files.translate_file(
            lang_path / 'en' / 'auth.json', 'en', 'de',
            return_keys=['auth.failed', 'auth.missing']
        )

        assert result == {'auth.failed': 'WRONG CREDENTIALS', 'auth.missing': None}

    def test_missing_source_file(self, lang_files, lang_path):
        with pytest.raises(LangFileError):
            lang_files.translate_file(lang_path / 'en' / 'nope.json', 'en', 'de')

    def test_missing_source_file_skipped(self, lang_files, lang_path):
        assert lang_files.translate_file(lang_path / 'en' / 'nope.json', 'en', 'de', skip_missing=True) == {}

    def test_unrelated_file_is_skipped(self, lang_files, lang_path, gateway):
        _write_json(lang_path / 'vendor' / 'auth.json', {'failed': 'Wrong'})

        assert lang_files.translate_file(lang_path / 'vendor' / 'auth.json', 'en', 'de') == {}
        assert gateway.calls == []

    def test_translate_to_target_reports_written_file(self, lang_files, lang_path):
        _write_json(lang_path / 'en' / 'auth.json', {'failed': 'Wrong'})

        target = lang_files.translate_to_target(lang_path / 'en' / 'auth.json', 'en', 'de')

        assert target == lang_path / 'de' / 'auth.json'
        assert target.exists()

    def test_translate_to_target_reports_skipped_file(self, lang_files, lang_path, gateway):
        _write_json(lang_path / 'vendor' / 'auth.json', {'failed': 'Wrong'})

        assert lang_files.translate_to_target(lang_path / 'vendor' / 'auth.json', 'en', 'de') is None
        assert not (lang_path / 'de' / 'auth.json').exists()
        assert gateway.calls == []

    def test_failed_merge_writes_nothing(self, lang_files, lang_path, gateway):
        _write_json(lang_path / 'en' / 'auth.json', {'failed': 'Wrong credentials'})
        gateway.error = TransientError('Service unavailable', status_code=503)

        with pytest.raises(MergeError):
            lang_files.translate_file(lang_path / 'en' / 'auth.json', 'en', 'de')

        assert not (lang_path / 'de' / 'auth.json').exists()


class TestTranslateFolder:
    """Test cases for LangFileTranslator.translate_folder."""

    def test_translates_all_supported_files(self, lang_files, lang_path):
        _write_json(lang_path / 'en' / 'auth.json', {'failed': 'Wrong'})
        _write_json(lang_path / 'en' / 'admin' / 'users.json', {'title': 'Users'})
        (lang_path / 'en' / 'messages.yml').write_text('hello: Hello\n', encoding='utf-8')
        (lang_path / 'en' / 'README.txt').write_text('not a lang file', encoding='utf-8')

        written = lang_files.translate_folder(lang_path / 'en', 'en', 'de')

        assert sorted(written) == sorted([
            lang_path / 'de' / 'admin' / 'users.json',
            lang_path / 'de' / 'auth.json',
            lang_path / 'de' / 'messages.yml',
        ])
        assert _read_json(lang_path / 'de' / 'admin' / 'users.json') == {'title': 'USERS'}
        assert not (lang_path / 'de' / 'README.txt').exists()

    def test_lang_root_is_rejected(self, lang_files, lang_path):
        with pytest.raises(LangFileError):
            lang_files.translate_folder(lang_path, 'en', 'de')

    def test_missing_folder(self, lang_files, lang_path):
        with pytest.raises(LangFileError):
            lang_files.translate_folder(lang_path / 'en', 'en', 'de')
