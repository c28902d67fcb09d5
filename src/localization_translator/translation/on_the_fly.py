"""
On-the-fly translation of missing keys.

When application code asks for a key that the requested locale does not
have, OnTheFlyTranslator translates the source-language file holding that
key into the locale and returns the new value. With queueing enabled, the
work is handed to a background worker as a TranslateKeyMessage and the key
itself is returned straight away.

Key lookup follows the usual layout of localization folders:
    - "auth.failed" lives in lang/<locale>/auth.json (or .yaml / .yml)
    - "Welcome back" lives in lang/<locale>.json

License: MIT
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from ..config.settings import (
    LANG_PATH,
    ON_THE_FLY_ENABLED,
    ON_THE_FLY_SOURCE_LANG,
    ON_THE_FLY_USE_QUEUE,
    SUPPORTED_LANG_FILE_EXTENSIONS,
)
from ..config.logging_config import get_logger
from ..files.handlers import get_handler
from ..files.lang_files import resolve_key

# Module-level logger for consistent logging.
logger = get_logger(__name__)


@dataclass
class TranslateKeyMessage:
    """
    A deferred request to translate one missing key.

    Attributes:
        key: The missing key, e.g. "auth.failed".
        locale: The locale the key was requested in.
        replace: Placeholder replacements given with the request.
    """

    key: str
    locale: str
    replace: Dict[str, Any] = field(default_factory=dict)


def apply_replacements(text: str, replace: Optional[Mapping[str, Any]] = None) -> str:
    """
    Substitute ":name" placeholders in a string.

    ":Name" and ":NAME" receive the capitalized and upper-cased value.
    Longer names are substituted first so ":username" is not clobbered by
    ":user".

    Example:
        >>> apply_replacements("Hello :name", {"name": "ada"})
        'Hello ada'
    """
    if not replace:
        return text

    for name in sorted(replace, key=len, reverse=True):
        value = str(replace[name])
        text = (
            text.replace(f":{name.upper()}", value.upper())
                .replace(f":{name.capitalize()}", value.capitalize())
                .replace(f":{name}", value)
        )

    return text


class OnTheFlyTranslator:
    """
    Resolve keys, translating their source file when a locale lacks them.

    Args:
        lang_files: A LangFileTranslator used to translate source files.
        lang_path: Root folder of the localization files.
        source_lang: Language whose files are authoritative.
        use_queue: Enqueue missing keys instead of translating inline.
        enqueue: Callable receiving TranslateKeyMessage objects; required
            when use_queue is True.
        enabled: When False, missing keys are returned as-is.

    Example:
        >>> on_the_fly = OnTheFlyTranslator(files, "lang", enabled=True)
        >>> on_the_fly.get("auth.failed", "de")
        'Diese Anmeldedaten stimmen nicht.'
    """

    def __init__(
        self,
        lang_files,
        lang_path: Union[str, Path] = LANG_PATH,
        source_lang: str = ON_THE_FLY_SOURCE_LANG,
        use_queue: bool = ON_THE_FLY_USE_QUEUE,
        enqueue: Optional[Callable[[TranslateKeyMessage], None]] = None,
        enabled: bool = ON_THE_FLY_ENABLED
    ):
        if use_queue and enqueue is None:
            raise ValueError("An enqueue callable is required when use_queue is True")

        self.lang_files = lang_files
        self.lang_path = Path(lang_path)
        self.source_lang = source_lang
        self.use_queue = use_queue
        self.enqueue = enqueue
        self.enabled = enabled

    def get(self, key: str, locale: str, replace: Optional[Mapping[str, Any]] = None) -> str:
        """
        Get the translation of a key, translating it first if it is missing.

        Args:
            key: Dotted group key or whole-sentence key.
            locale: Requested locale.
            replace: Placeholder replacements applied to the result.

        Returns:
            The translation, or the key itself when it is still missing
            (always the case while a queued translation is pending).

        Raises:
            MergeError: If the inline translation fails.
            LangFileError: If a localization file cannot be read or written.
        """
        value = self.lookup(key, locale)

        if value is None and self.enabled:
            if self.use_queue:
                self.enqueue(TranslateKeyMessage(key, locale, dict(replace or {})))
                logger.debug(f"Queued on-the-fly translation of '{key}' to {locale}")
                return key

            value = self.translate_missing(key, locale)

        return apply_replacements(value if value is not None else key, replace)

    def handle_message(self, message: TranslateKeyMessage) -> str:
        """Worker entry point for a queued TranslateKeyMessage."""
        value = self.translate_missing(message.key, message.locale)
        return apply_replacements(value, message.replace)

    def lookup(self, key: str, locale: str) -> Optional[str]:
        """
        Find the existing translation of a key without translating anything.

        Returns:
            The string value, or None when no file of the locale has it.
        """
        for path in self._candidate_files(key, locale):
            if not path.is_file():
                continue
            value = resolve_key(get_handler(path).load(path), key)
            if isinstance(value, str):
                return value

        return None

    def translate_missing(self, key: str, locale: str) -> str:
        """
        Translate the source file holding a key into the locale.

        Returns:
            The new translation, or the key itself when the source files do
            not define it either.
        """
        for path in self._candidate_files(key, self.source_lang):
            translations = self.lang_files.translate_file(
                path,
                self.source_lang,
                locale,
                return_keys=[key],
                skip_missing=True,
            )
            value = translations.get(key)
            if isinstance(value, str):
                logger.info(f"Translated missing key '{key}' to {locale} from {path}")
                return value

        logger.warning(f"Key '{key}' is missing from the {self.source_lang} files")
        return key

    def _candidate_files(self, key: str, lang: str) -> List[Path]:
        if "." in key:
            group = key.split(".", 1)[0]
            return [
                self.lang_path / lang / f"{group}{extension}"
                for extension in SUPPORTED_LANG_FILE_EXTENSIONS
            ]

        return [self.lang_path / f"{lang}.json"]
