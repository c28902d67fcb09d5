"""Test suite for the usage report."""
import pytest
from rich.console import Console

from localization_translator.core.exceptions import RemoteError
from localization_translator.utils.usage_report import (
    STATUS_EXCEEDED,
    STATUS_OK,
    STATUS_WARNING,
    any_limit_reached,
    build_usage_rows,
    render_usage_table,
)


class TestBuildUsageRows:
    """Test cases for turning usage documents into rows."""

    def test_character_usage_only(self):
        rows = build_usage_rows({'character_count': 1200, 'character_limit': 500000})

        assert [row.label for row in rows] == ['Translated Characters', 'Total']
        assert rows[0].remaining == 498800
        assert rows[0].percentage == pytest.approx(0.24)
        assert rows[0].status == STATUS_OK

    def test_document_rows(self):
        rows = build_usage_rows({
            'character_count': 100, 'character_limit': 1000,
            'document_count': 2, 'document_limit': 10,
            'team_document_count': 0, 'team_document_limit': 5,
        })

        assert [row.label for row in rows] == [
            'Translated Characters',
            'Translated Documents',
            'Translated Team Documents',
            'Total',
        ]
        assert (rows[-1].count, rows[-1].limit) == (102, 1015)

    def test_warning_threshold(self):
        rows = build_usage_rows({'character_count': 450000, 'character_limit': 500000})

        assert rows[0].status == STATUS_WARNING
        assert not any_limit_reached(rows)

    def test_exceeded(self):
        rows = build_usage_rows({'character_count': 500000, 'character_limit': 500000})

        assert rows[0].status == STATUS_EXCEEDED
        assert any_limit_reached(rows)

    def test_custom_threshold(self):
        rows = build_usage_rows({'character_count': 60, 'character_limit': 100}, warning_threshold=0.5)

        assert rows[0].status == STATUS_WARNING

    def test_zero_limit_has_no_total(self):
        rows = build_usage_rows({'character_count': 0, 'character_limit': 0})

        assert [row.label for row in rows] == ['Translated Characters']
        assert rows[0].percentage == 0.0

    def test_invalid_document(self):
        with pytest.raises(RemoteError):
            build_usage_rows({'document_count': 1})


class TestRenderUsageTable:
    """Test cases for rich rendering."""

    def test_table_contents(self):
        console = Console(record=True, width=120)
        rows = build_usage_rows({'character_count': 1200, 'character_limit': 500000})

        table = render_usage_table(rows, console)

        output = console.export_text()
        assert table.row_count == 2
        assert 'Translated Characters' in output
        assert '1,200' in output
        assert '500,000' in output
        assert '0.24%' in output
        assert 'limit exceeded' not in output

    def test_exceeded_message(self):
        console = Console(record=True, width=120)
        rows = build_usage_rows({'character_count': 600, 'character_limit': 500})

        render_usage_table(rows, console)

        assert 'Translation limit exceeded.' in console.export_text()
