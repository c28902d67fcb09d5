"""
Localization file handling for the translator.

Submodules:
    handlers: JSON and YAML readers and writers.
    lang_files: File and folder translation with target path mapping.
"""

from .handlers import LangFileHandler, JsonLangFile, YamlLangFile, get_handler, is_supported
from .lang_files import LangFileTranslator, resolve_key, target_path_for
