"""
Hierarchical merge of translation trees.

A translation tree is a nested dictionary loaded from a localization file.
Merging walks the source tree depth-first and builds a fresh target tree:
keys that already have a value in the existing target tree keep it, keys
that don't are translated, and keys found only in the existing tree are
dropped. The merge is all-or-nothing: the first leaf that fails to
translate aborts it with a MergeError.

License: MIT
"""

from typing import Any, Callable, Dict, Optional, Union

from ..config.logging_config import get_logger
from ..core.exceptions import MergeError, TranslatorError

# Module-level logger for consistent logging.
logger = get_logger(__name__)

TranslationTree = Dict[str, Union[str, "TranslationTree"]]


def merge_translate(
    source: TranslationTree,
    existing: Optional[TranslationTree],
    source_lang: str,
    target_lang: str,
    translate_leaf: Callable[[str, str, str], str],
    _path: str = ""
) -> TranslationTree:
    """
    Translate the keys of source that existing does not have yet.

    Args:
        source: Authoritative tree in the source language.
        existing: Previously produced target tree; None counts as empty.
        source_lang: Source language code.
        target_lang: Target language code.
        translate_leaf: Called as translate_leaf(text, source_lang,
            target_lang) for every string leaf missing from existing.

    Returns:
        A new tree with exactly the keys of source, in source order.

    Raises:
        MergeError: If a leaf fails to translate, or existing holds a
            non-dictionary value where source has a subtree.

    Example:
        >>> merge_translate({"a": "x"}, {"a": "y", "b": "z"}, "en", "de", translate)
        {'a': 'y'}
    """
    existing = existing or {}
    merged: TranslationTree = {}

    for key, value in source.items():
        key_path = f"{_path}.{key}" if _path else str(key)

        if isinstance(value, dict):
            existing_value = existing.get(key, {})
            if not isinstance(existing_value, dict):
                raise MergeError(
                    f"Existing translation for '{key_path}' is "
                    f"{type(existing_value).__name__}, expected a nested group",
                    key_path=key_path,
                )
            merged[key] = merge_translate(
                value, existing_value, source_lang, target_lang, translate_leaf, key_path
            )
        elif key in existing:
            merged[key] = existing[key]
        elif isinstance(value, str):
            try:
                merged[key] = translate_leaf(value, source_lang, target_lang)
            except TranslatorError as e:
                raise MergeError(
                    f"Could not translate '{key_path}': {e}", key_path=key_path
                ) from e
        else:
            # Numbers, booleans and nulls carry no translatable text.
            merged[key] = value

    return merged


class TreeMerger:
    """
    Merge trees, translating leaves through a PlaceholderSegmenter.

    Args:
        segmenter: Translates individual strings while keeping placeholders.
        options: Provider options applied to every leaf.
        use_cache: Cache toggle applied to every leaf.
    """

    def __init__(self, segmenter, options: Optional[Dict[str, Any]] = None, use_cache: Optional[bool] = None):
        self.segmenter = segmenter
        self.options = options
        self.use_cache = use_cache
        self.translated_leaves = 0

    def merge(
        self,
        source: TranslationTree,
        existing: Optional[TranslationTree],
        source_lang: str,
        target_lang: str
    ) -> TranslationTree:
        """Merge source into existing; see merge_translate()."""
        self.translated_leaves = 0
        merged = merge_translate(source, existing, source_lang, target_lang, self._translate_leaf)
        logger.debug(f"Merged tree {source_lang} -> {target_lang}: {self.translated_leaves} new leaves")
        return merged

    def _translate_leaf(self, text: str, source_lang: str, target_lang: str) -> str:
        self.translated_leaves += 1
        return self.segmenter.translate_text(
            text, source_lang, target_lang, self.options, self.use_cache
        )
