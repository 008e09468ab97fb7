"""
Command-line argument parser configuration.

This module sets up the argument parser for the sheetrecon CLI tool,
defining all commands and their options.
"""

import argparse

from ..model import DiffColumnSpec, SortDirection, SortSpec
from ..sorting import MAX_SORT_COLUMNS


def column_list(value: str) -> list[str]:
    """Parse ``a,b,c`` into column names, dropping empty entries."""
    return [name.strip() for name in value.split(',') if name.strip()]


def sort_spec(value: str) -> SortSpec:
    """
    Parse ``column[:asc|desc]``.

    A suffix other than asc/desc is part of the column name.
    """
    column, sep, direction = value.rpartition(':')
    if sep and direction.lower() in (SortDirection.ASC.value, SortDirection.DESC.value):
        return SortSpec(column, SortDirection(direction.lower()))
    return SortSpec(value)


def diff_spec(value: str) -> DiffColumnSpec:
    """Parse ``left_column:right_column:label``."""
    parts = value.split(':')
    if len(parts) != 3 or not all(parts):
        raise argparse.ArgumentTypeError(
            f"Invalid diff column {value!r}, expected left:right:label"
        )
    return DiffColumnSpec(*parts)


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog='sheetrecon',
        description="Reconcile two tables by key, or split one table by key",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Reconcile two exports on a composite key
  sheetrecon compare --left ledger.csv --right bank.csv --key date,ref --output-dir out

  # Add a difference column and sort the merged table by it
  sheetrecon compare --left a.csv --right b.csv --key id \\
      --diff amount:amount:delta --sort delta:desc --output-dir out

  # Match keys regardless of letter case, print the report as JSON
  sheetrecon compare --left a.csv --right b.csv --key code --case-insensitive \\
      --report-format json --output-dir out

  # Write one file per department, each sorted by date
  sheetrecon split --input staff.csv --key dept --sort date --output-dir parts
        """
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='INFO',
        help='Logging level (default: INFO)'
    )
    parser.add_argument(
        '--log-json',
        action='store_true',
        help='Emit logs as JSON lines'
    )
    parser.add_argument(
        '--collate',
        metavar='LOCALE',
        help='Locale for sorting text, e.g. ja_JP.UTF-8 (default: SHEETRECON_COLLATE or the environment)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # ========== Compare command ==========
    compare_parser = subparsers.add_parser('compare', help='Reconcile two CSV files by key')
    compare_parser.add_argument('--left', required=True, help='Left CSV file')
    compare_parser.add_argument('--right', required=True, help='Right CSV file')
    compare_parser.add_argument(
        '--key',
        required=True,
        type=column_list,
        help='Comma-separated key columns present in both files'
    )
    compare_parser.add_argument(
        '--trim',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Trim whitespace around composite keys (default: SHEETRECON_TRIM or on)'
    )
    compare_parser.add_argument(
        '--case-insensitive',
        action='store_true',
        default=None,
        help='Compare keys ignoring letter case'
    )
    compare_parser.add_argument(
        '--no-presort',
        action='store_true',
        help='Keep input row order instead of sorting both sides by key first'
    )
    compare_parser.add_argument(
        '--diff',
        action='append',
        type=diff_spec,
        default=[],
        metavar='LEFT:RIGHT:LABEL',
        help='Add a LABEL column holding L__LEFT - R__RIGHT (repeatable)'
    )
    compare_parser.add_argument(
        '--sort',
        action='append',
        type=sort_spec,
        default=[],
        metavar='COLUMN[:asc|desc]',
        help=f'Sort the merged table (repeatable, at most {MAX_SORT_COLUMNS})'
    )
    compare_parser.add_argument(
        '--columns',
        type=column_list,
        default=[],
        help='Comma-separated columns to keep in the merged output'
    )
    compare_parser.add_argument(
        '--totals',
        type=column_list,
        default=[],
        metavar='COLUMNS',
        help='Append a total row summing these merged columns'
    )
    compare_parser.add_argument(
        '--output-dir',
        required=True,
        help='Directory for merged.csv and the per-bucket files'
    )
    compare_parser.add_argument(
        '--status-columns',
        action='store_true',
        help='Add match_status, diff_cols and dup_key_flag columns to the merged output'
    )
    compare_parser.add_argument(
        '--report-format',
        choices=['console', 'json'],
        default='console',
        help='Report output format (default: console)'
    )
    compare_parser.add_argument(
        '--report-output',
        help='Also write the JSON report to this file'
    )

    # ========== Split command ==========
    split_parser = subparsers.add_parser('split', help='Split a CSV file into one file per key')
    split_parser.add_argument('--input', required=True, help='CSV file to split')
    split_parser.add_argument(
        '--key',
        required=True,
        type=column_list,
        help='Comma-separated key columns'
    )
    split_parser.add_argument(
        '--trim',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Trim whitespace around composite keys (default: SHEETRECON_SPLIT_TRIM or on)'
    )
    split_parser.add_argument(
        '--case-insensitive',
        action='store_true',
        default=None,
        help='Group keys ignoring letter case'
    )
    split_parser.add_argument(
        '--sort',
        action='append',
        type=sort_spec,
        default=[],
        metavar='COLUMN[:asc|desc]',
        help=f'Sort rows inside each part (repeatable, at most {MAX_SORT_COLUMNS})'
    )
    split_parser.add_argument(
        '--columns',
        type=column_list,
        default=[],
        help='Comma-separated columns to keep in each part'
    )
    split_parser.add_argument(
        '--output-dir',
        required=True,
        help='Directory for the part files'
    )

    return parser
