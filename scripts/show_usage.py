#!/usr/bin/env python3
"""
Show translation API usage for the current billing period.

Prints character, document and team document counts against the account
limits. Rows at 90% of their limit are shown in yellow, exhausted limits
in red.

Usage:
    python show_usage.py
    python show_usage.py --languages target

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
from rich.table import Table

from localization_translator.config.logging_config import get_logger, setup_logging
from localization_translator.core.exceptions import TranslatorError
from localization_translator.translation import HttpTranslationGateway
from localization_translator.utils.usage_report import build_usage_rows, render_usage_table


console = Console()


def parse_arguments() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Show translation API usage and account limits"
    )
    parser.add_argument(
        "--languages",
        choices=["source", "target"],
        default=None,
        help="List the supported source or target languages instead"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )
    return parser.parse_args()


def print_languages(languages) -> None:
    """Print the supported languages as a table."""
    table = Table(title="Supported Languages", show_header=True, header_style="bold cyan")
    table.add_column("Code", style="cyan")
    table.add_column("Name")

    for language in languages:
        table.add_row(language.get("language", ""), language.get("name", ""))

    console.print(table)


def main() -> int:
    args = parse_arguments()

    setup_logging(level=logging.DEBUG if args.verbose else logging.WARNING)
    logger = get_logger(__name__)

    try:
        gateway = HttpTranslationGateway()

        if args.languages:
            print_languages(gateway.get_languages(args.languages))
            return 0

        rows = build_usage_rows(gateway.get_usage())
        render_usage_table(rows, console)
        return 0

    except TranslatorError as e:
        logger.error(f"Could not retrieve usage: {e}")
        console.print(f"[red]{e}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
