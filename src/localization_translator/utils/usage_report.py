"""
Usage report for the translation API account.

Turns the usage document returned by HttpTranslationGateway.get_usage()
into table rows (characters, documents, team documents and a total) and
renders them with rich, highlighting quotas that are nearly or fully used.

Usage:
    from localization_translator.utils.usage_report import build_usage_rows, render_usage_table
    rows = build_usage_rows(gateway.get_usage())
    render_usage_table(rows)

License: MIT
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table

from ..config.settings import USAGE_WARNING_THRESHOLD
from ..core.exceptions import RemoteError

STATUS_OK = "ok"
STATUS_WARNING = "warning"
STATUS_EXCEEDED = "exceeded"

_STATUS_STYLES = {
    STATUS_OK: None,
    STATUS_WARNING: "yellow",
    STATUS_EXCEEDED: "red",
}

# (label, count field, limit field) as reported by the usage endpoint.
_USAGE_FIELDS = [
    ("Translated Characters", "character_count", "character_limit"),
    ("Translated Documents", "document_count", "document_limit"),
    ("Translated Team Documents", "team_document_count", "team_document_limit"),
]


@dataclass(frozen=True)
class UsageRow:
    label: str
    count: int
    limit: int
    status: str = STATUS_OK

    @property
    def remaining(self) -> int:
        return self.limit - self.count

    @property
    def percentage(self) -> float:
        return (self.count / self.limit) * 100 if self.limit > 0 else 0.0


def _status_for(count: int, limit: int, warning_threshold: float) -> str:
    percentage = (count / limit) * 100 if limit > 0 else 0.0
    if percentage >= 100:
        return STATUS_EXCEEDED
    if percentage >= warning_threshold * 100:
        return STATUS_WARNING
    return STATUS_OK


def build_usage_rows(
    usage: Dict[str, Any],
    warning_threshold: float = USAGE_WARNING_THRESHOLD
) -> List[UsageRow]:
    """
    Build report rows from a usage document.

    Character usage is mandatory. Document and team document rows are added
    when the account reports them. A "Total" row follows whenever the
    summed limit is positive.

    Args:
        usage: Decoded response of the usage endpoint.
        warning_threshold: Fraction of a limit from which a row is flagged.

    Returns:
        The rows, in display order.

    Raises:
        RemoteError: If the document lacks the character count or limit.

    Example:
        >>> rows = build_usage_rows({"character_count": 450000, "character_limit": 500000})
        >>> [(r.label, r.status) for r in rows]
        [('Translated Characters', 'warning'), ('Total', 'warning')]
    """
    if not isinstance(usage, dict) or "character_count" not in usage or "character_limit" not in usage:
        raise RemoteError(f"Invalid usage data format: {usage!r}")

    rows = []
    total_count = 0
    total_limit = 0

    for label, count_field, limit_field in _USAGE_FIELDS:
        if count_field not in usage or limit_field not in usage:
            continue

        count = int(usage[count_field] or 0)
        limit = int(usage[limit_field] or 0)
        rows.append(UsageRow(label, count, limit, _status_for(count, limit, warning_threshold)))

        total_count += count
        total_limit += limit

    if total_limit > 0:
        rows.append(UsageRow(
            "Total",
            total_count,
            total_limit,
            _status_for(total_count, total_limit, warning_threshold),
        ))

    return rows


def any_limit_reached(rows: List[UsageRow]) -> bool:
    """True if any row has used up its limit."""
    return any(row.status == STATUS_EXCEEDED for row in rows)


def render_usage_table(rows: List[UsageRow], console: Optional[Console] = None) -> Table:
    """
    Print the usage rows as a rich table.

    Args:
        rows: Output of build_usage_rows().
        console: Console to print to. Defaults to a new stdout console.

    Returns:
        The rendered table.
    """
    console = console or Console()

    table = Table(title="Translation API Usage", show_header=True, header_style="bold cyan")
    table.add_column("Usage Type", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("Limit", justify="right")
    table.add_column("Remaining", justify="right")
    table.add_column("Percentage", justify="right")

    for row in rows:
        table.add_row(
            row.label,
            f"{row.count:,}",
            f"{row.limit:,}",
            f"{row.remaining:,}",
            f"{row.percentage:.2f}%",
            style=_STATUS_STYLES[row.status],
        )

    console.print(table)

    if any_limit_reached(rows):
        console.print("[bold red]Translation limit exceeded.[/bold red]")
        console.print("Please consider upgrading your plan or review your current usage.")

    return table
