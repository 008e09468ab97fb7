"""
Reconciliation report generation and formatting.

This submodule summarises reconciliation results and renders them for
the console or as JSON.
"""

from .formatters import export_report_json, format_report_console
from .generator import ReportStatus, add_totals_row, format_timestamp, generate_report

__all__ = [
    'generate_report',
    'add_totals_row',
    'format_timestamp',
    'ReportStatus',
    'export_report_json',
    'format_report_console',
]
