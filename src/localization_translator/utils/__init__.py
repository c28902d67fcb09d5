"""
Utility modules for the localization translator.

Submodules:
    usage_report: Rich table of the translation API account usage.
"""

from .usage_report import UsageRow, build_usage_rows, render_usage_table, any_limit_reached
