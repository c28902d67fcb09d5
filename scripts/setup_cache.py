#!/usr/bin/env python3
"""
Translation cache setup script.

Creates the translation cache table and its lookup index in the configured
backend (SQLite by default, PostgreSQL with TRANSLATION_CACHE_BACKEND=postgres).
Safe to run multiple times.

Usage:
    python setup_cache.py              # Create table and index
    python setup_cache.py --stats      # Show cache statistics

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
from rich.panel import Panel
from rich.table import Table

from localization_translator.config.settings import (
    TRANSLATION_CACHE_BACKEND,
    TRANSLATION_CACHE_PATH,
    TRANSLATION_CACHE_TABLE,
)
from localization_translator.config.logging_config import get_logger, setup_logging
from localization_translator.core.exceptions import StoreError
from localization_translator.translation import create_cache_store


console = Console()


def parse_arguments() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create the translation cache table"
    )
    parser.add_argument(
        "--backend",
        choices=["sqlite", "postgres"],
        default=TRANSLATION_CACHE_BACKEND,
        help=f"Cache backend (default: {TRANSLATION_CACHE_BACKEND})"
    )
    parser.add_argument(
        "--table",
        default=TRANSLATION_CACHE_TABLE,
        help=f"Cache table name (default: {TRANSLATION_CACHE_TABLE})"
    )
    parser.add_argument(
        "--path",
        default=TRANSLATION_CACHE_PATH,
        help="SQLite database file (ignored for postgres)"
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Show cache statistics after setup"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )
    return parser.parse_args()


def print_stats(stats: dict) -> None:
    """Print cache statistics as a rich table."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Source", style="cyan")
    table.add_column("Target", style="cyan")
    table.add_column("Entries", justify="right")

    for (source_lang, target_lang), count in stats["by_language_pair"].items():
        table.add_row(source_lang, target_lang, f"{count:,}")

    console.print(Panel(
        f"Total cached translations: [bold]{stats['total_entries']:,}[/bold]",
        title="Translation Cache",
    ))
    if stats["by_language_pair"]:
        console.print(table)


def main() -> int:
    args = parse_arguments()

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)
    logger = get_logger(__name__)

    try:
        store = create_cache_store(args.backend, table=args.table, cache_path=args.path)
        store.initialize()
        console.print(f"[green]Cache table '{args.table}' ready ({args.backend})[/green]")

        if args.stats:
            print_stats(store.stats())

        return 0

    except StoreError as e:
        logger.error(f"Cache setup failed: {e}")
        console.print(f"[red]{e}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
