"""
Translation of localization files and folders.

Localization files are laid out in one of two ways under the lang root:
    - lang/<locale>.json: a flat file of whole-sentence keys
    - lang/<locale>/<group>.json|.yaml|.yml: one file per group of keys

LangFileTranslator maps a source-language file to its target-language
counterpart, merges the source tree into whatever the target file already
holds (translating only the missing keys) and writes the result back in the
source file's format.

License: MIT
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..config.settings import LANG_PATH
from ..config.logging_config import get_logger
from ..core.dict_utils import get_by_dotted_key
from ..core.exceptions import LangFileError
from .handlers import get_handler, is_supported

# Module-level logger for consistent logging.
logger = get_logger(__name__)

PathLike = Union[str, Path]


def target_path_for(path: PathLike, source_lang: str, target_lang: str) -> Optional[Path]:
    """
    Map a source-language file to the matching target-language file.

    Args:
        path: The source file.
        source_lang: Source language code.
        target_lang: Target language code.

    Returns:
        The target path, or None when the file is not tied to source_lang
        and therefore has no counterpart.

    Example:
        >>> target_path_for("lang/en.json", "en", "de")
        PosixPath('lang/de.json')
        >>> target_path_for("lang/en/auth.yaml", "en", "de")
        PosixPath('lang/de/auth.yaml')
    """
    path = Path(path)

    if path.suffix.lower() == ".json" and path.name == f"{source_lang}.json":
        return path.with_name(f"{target_lang}.json")

    folders = [target_lang if part == source_lang else part for part in path.parts[:-1]]
    target = Path(*folders, path.name)

    if target == path:
        return None

    return target


def resolve_key(tree: Dict[str, Any], key: str) -> Any:
    """
    Resolve a requested key against a translated file.

    Keys are addressed the way application code names them: the first
    segment is the file group and is dropped before the lookup, unless the
    whole key exists literally (flat sentence files).
    """
    if key in tree:
        return tree[key]

    _, _, remainder = key.partition(".")
    return get_by_dotted_key(tree, remainder or key)


class LangFileTranslator:
    """
    Translate localization files through a TreeMerger.

    Args:
        merger: Merges source trees into existing target trees.
        lang_path: Root folder of the localization files.

    Example:
        >>> files = LangFileTranslator(TreeMerger(segmenter), "lang")
        >>> files.translate_file("lang/en/auth.json", "en", "de")
        {}
    """

    def __init__(self, merger, lang_path: PathLike = LANG_PATH):
        self.merger = merger
        self.lang_path = Path(lang_path)

    def translate_file(
        self,
        path: PathLike,
        source_lang: str,
        target_lang: str,
        return_keys: Sequence[str] = (),
        skip_missing: bool = False
    ) -> Dict[str, Any]:
        """
        Translate the missing keys of one file into the target language.

        Args:
            path: The source-language file.
            source_lang: Source language code.
            target_lang: Target language code.
            return_keys: Dotted keys whose translated values should be
                returned, e.g. "auth.failed".
            skip_missing: Return {} instead of raising when the source file
                does not exist.

        Returns:
            Mapping of each requested key to its value in the written file
            (None when absent). Empty when no keys were requested or the
            file was skipped.

        Raises:
            LangFileError: If the source file is missing or unreadable, or
                the target file cannot be written.
            MergeError: If any missing key fails to translate. Nothing is
                written in that case.
        """
        outcome = self._translate(Path(path), source_lang, target_lang, skip_missing)
        if outcome is None:
            return {}

        _, merged = outcome
        return {key: resolve_key(merged, key) for key in return_keys}

    def translate_to_target(self, path: PathLike, source_lang: str, target_lang: str) -> Optional[Path]:
        """
        Translate one file and report where it was written.

        Returns:
            The target file, or None when the file has no target-language
            counterpart and was skipped.
        """
        outcome = self._translate(Path(path), source_lang, target_lang)
        return outcome[0] if outcome is not None else None

    def translate_folder(
        self,
        folder: PathLike,
        source_lang: str,
        target_lang: str
    ) -> List[Path]:
        """
        Translate every supported file below a folder, recursively.

        Args:
            folder: A language folder such as "lang/en".
            source_lang: Source language code.
            target_lang: Target language code.

        Returns:
            The target files written, in processing order.

        Raises:
            LangFileError: If the folder does not exist or is the lang root.
            MergeError: If a key fails to translate. Files processed before
                the failure stay written.
        """
        folder = Path(folder)

        if not folder.is_dir():
            raise LangFileError(f"Folder does not exist: {folder}")

        if folder.resolve() == self.lang_path.resolve():
            raise LangFileError(
                f"Cannot translate the root '{self.lang_path}' folder. "
                f"Please specify a subfolder, like '{self.lang_path / source_lang}'."
            )

        files = sorted(p for p in folder.rglob("*") if p.is_file() and is_supported(p))
        logger.info(f"Translating {len(files)} files in {folder} ({source_lang} -> {target_lang})")

        written = []
        for file_path in files:
            target = self.translate_to_target(file_path, source_lang, target_lang)
            if target is not None:
                written.append(target)

        logger.info(f"Wrote {len(written)} files for {target_lang}")
        return written

    def _translate(
        self,
        path: Path,
        source_lang: str,
        target_lang: str,
        skip_missing: bool = False
    ) -> Optional[Tuple[Path, Dict[str, Any]]]:
        if not path.is_file():
            if skip_missing:
                return None
            raise LangFileError(f"Source file does not exist: {path}")

        target = target_path_for(path, source_lang, target_lang)
        if target is None:
            logger.info(f"Skipping {path}: not a {source_lang} file")
            return None

        source_tree = get_handler(path).load(path)
        existing_tree = get_handler(target).load(target) if target.exists() else {}

        merged = self.merger.merge(source_tree, existing_tree, source_lang, target_lang)
        get_handler(target).save(target, merged)

        logger.info(f"Translated {path} -> {target}")
        return target, merged
