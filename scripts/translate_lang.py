#!/usr/bin/env python3
"""
CLI script for translating localization files.

Translates the keys missing from the target-language files, leaving keys
that already have a translation untouched. Finished translations are
cached so re-running the script only pays for new text.

Usage:
    python translate_lang.py --file lang/en/auth.json --target-lang de
    python translate_lang.py --folder lang/en --source-lang en --target-lang fr
    python translate_lang.py --file lang/en.json --target-lang cs --no-cache

License: MIT
"""

import sys
from pathlib import Path

# Allow running without package installation
_script_dir = Path(__file__).parent
_project_root = _script_dir.parent
_src_dir = _project_root / "src"
if _src_dir.exists() and str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

import argparse
import logging

from rich.console import Console

from localization_translator.config.settings import (
    DEFAULT_SOURCE_LANG,
    DEFAULT_TARGET_LANG,
    LANG_PATH,
    TranslatorConfig,
)
from localization_translator.config.logging_config import get_logger, setup_logging
from localization_translator.core.exceptions import TranslatorError
from localization_translator.files import LangFileTranslator
from localization_translator.translation import (
    CacheAwareTranslator,
    HttpTranslationGateway,
    PlaceholderSegmenter,
    TreeMerger,
    create_cache_store,
)


console = Console()


def parse_arguments() -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        argparse.Namespace: The parsed arguments.
    """
    parser = argparse.ArgumentParser(
        description="Translate missing keys of localization files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Translate one group file into German
    python translate_lang.py --file lang/en/auth.json --target-lang de

    # Translate a whole language folder
    python translate_lang.py --folder lang/en --target-lang fr

    # Skip the translation cache
    python translate_lang.py --folder lang/en --target-lang fr --no-cache
        """
    )

    # What to translate (mutually exclusive)
    mode_group = parser.add_mutually_exclusive_group(required=True)
    mode_group.add_argument(
        "--file",
        type=Path,
        help="Translate a single localization file"
    )
    mode_group.add_argument(
        "--folder",
        type=Path,
        help="Translate every localization file below a language folder"
    )

    # Languages
    parser.add_argument(
        "--source-lang",
        default=DEFAULT_SOURCE_LANG,
        help=f"Source language code (default: {DEFAULT_SOURCE_LANG})"
    )
    parser.add_argument(
        "--target-lang",
        default=DEFAULT_TARGET_LANG,
        help=f"Target language code (default: {DEFAULT_TARGET_LANG})"
    )

    # Other options
    parser.add_argument(
        "--lang-path",
        type=Path,
        default=Path(LANG_PATH),
        help=f"Root folder of the localization files (default: {LANG_PATH})"
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Do not read or write the translation cache"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )

    return parser.parse_args()


def build_lang_file_translator(lang_path: Path, use_cache: bool) -> LangFileTranslator:
    """
    Wire the gateway, cache, translator and merger together.

    Args:
        lang_path: Root folder of the localization files.
        use_cache: Whether translations go through the cache.

    Returns:
        A ready LangFileTranslator.
    """
    config = TranslatorConfig.from_settings()
    use_cache = use_cache and config.cache_enabled

    store = None
    if use_cache:
        store = create_cache_store(table=config.cache_table)
        store.initialize()

    translator = CacheAwareTranslator(HttpTranslationGateway(), store, config)
    merger = TreeMerger(PlaceholderSegmenter(translator), use_cache=use_cache)

    return LangFileTranslator(merger, lang_path)


def main() -> int:
    """
    Main entry point for the translation CLI.

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    args = parse_arguments()

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)
    logger = get_logger(__name__)

    try:
        lang_files = build_lang_file_translator(args.lang_path, use_cache=not args.no_cache)

        if args.file:
            target = lang_files.translate_to_target(args.file, args.source_lang, args.target_lang)
            if target is None:
                console.print(
                    f"[yellow]Skipped {args.file}: not a {args.source_lang} file[/yellow]"
                )
            else:
                console.print(f"[green]Translated {args.file} to {target}[/green]")
        else:
            written = lang_files.translate_folder(args.folder, args.source_lang, args.target_lang)
            console.print(
                f"[green]Translated {len(written)} files in {args.folder} "
                f"to {args.target_lang}[/green]"
            )

        return 0

    except KeyboardInterrupt:
        logger.warning("Translation interrupted by user")
        return 130

    except TranslatorError as e:
        logger.error(f"Translation failed: {e}")
        console.print(f"[red]{e}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
