"""
Placeholder-preserving segmentation.

Localization strings carry replacement tokens such as ":name" or ":count"
that must reach the output untouched. Sending them to a translation API
risks having them translated, re-cased or re-spaced, so a string is split
into TEXT segments (translated) and PLACEHOLDER segments (passed through),
and only the former are translated.

Whitespace around a placeholder belongs to the placeholder segment, which
keeps the original spacing on reassembly no matter how the provider trims
the translated pieces.

License: MIT
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional

from ..config.logging_config import get_logger
from ..core.exceptions import SegmentationError

# Module-level logger for consistent logging.
logger = get_logger(__name__)

# A colon followed by letters or underscores, with surrounding whitespace.
PLACEHOLDER_PATTERN = re.compile(r"\s*:[A-Za-z_]+\s*")


class SegmentKind(Enum):
    PLACEHOLDER = "placeholder"
    TEXT = "text"


@dataclass(frozen=True)
class Segment:
    kind: SegmentKind
    value: str


def segment(text: str) -> List[Segment]:
    """
    Split a string into TEXT and PLACEHOLDER segments.

    The split is total and lossless: joining the segment values in order
    gives back the input exactly. Empty input yields no segments.

    Args:
        text: The string to split.

    Returns:
        Ordered segments.

    Raises:
        SegmentationError: If the segments do not reconstruct the input.

    Example:
        >>> [s.value for s in segment("Hello :name, welcome")]
        ['Hello', ' :name', ', welcome']
    """
    segments: List[Segment] = []
    position = 0

    for match in PLACEHOLDER_PATTERN.finditer(text):
        start, end = match.span()
        if start > position:
            segments.append(Segment(SegmentKind.TEXT, text[position:start]))
        segments.append(Segment(SegmentKind.PLACEHOLDER, match.group(0)))
        position = end

    if position < len(text):
        segments.append(Segment(SegmentKind.TEXT, text[position:]))

    if "".join(s.value for s in segments) != text:
        raise SegmentationError(f"Segmentation of {text!r} is not lossless")

    return segments


def reassemble(segments: List[Segment], translate_fn: Callable[[str], str]) -> str:
    """
    Join segments back into a string, translating the TEXT ones.

    Args:
        segments: Output of segment().
        translate_fn: Maps a TEXT segment value to its translation.

    Returns:
        The concatenation of translated TEXT values and untouched
        PLACEHOLDER values, in order.
    """
    return "".join(
        translate_fn(s.value) if s.kind is SegmentKind.TEXT else s.value
        for s in segments
    )


class PlaceholderSegmenter:
    """
    Translate strings while keeping their placeholders intact.

    All TEXT segments of one string go to the translator as a single batch.
    Whitespace-only TEXT segments are kept as they are.

    Args:
        translator: A CacheAwareTranslator (anything with translate_many()).
    """

    def __init__(self, translator):
        self.translator = translator

    def translate_text(
        self,
        text: str,
        source_lang: Optional[str] = None,
        target_lang: Optional[str] = None,
        options: Optional[Mapping[str, Any]] = None,
        use_cache: Optional[bool] = None
    ) -> str:
        """
        Translate a string, leaving ":placeholder" tokens untouched.

        Args:
            text: The string to translate.
            source_lang: Source language, passed to the translator.
            target_lang: Target language, passed to the translator.
            options: Provider options, passed to the translator.
            use_cache: Cache toggle, passed to the translator.

        Returns:
            The translated string.

        Example:
            >>> segmenter.translate_text("Hello :name", "en", "de")
            'Hallo :name'
        """
        segments = segment(text)
        pieces = [
            s.value for s in segments
            if s.kind is SegmentKind.TEXT and s.value.strip()
        ]

        if not pieces:
            return text

        results = self.translator.translate_many(
            pieces, source_lang, target_lang, options, use_cache
        )
        translations = iter(result.translated_text for result in results)

        return reassemble(
            segments,
            lambda value: next(translations) if value.strip() else value,
        )
