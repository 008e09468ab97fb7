"""
CLI command implementations.

This module contains the implementation of the two CLI commands:
- compare: Reconcile two CSV files and write the buckets
- split: Split one CSV file into a file per key
"""

import argparse
import json
import logging
import os

from ..config import Settings
from ..model import KeyOptions, Partition
from ..pipeline import run_reconciliation, run_split
from ..report import add_totals_row, export_report_json, format_report_console, generate_report
from ..tableio import read_table_csv, write_partitions_csv, write_table_csv

logger = logging.getLogger(__name__)

BUCKET_FILES = {
    "matched": "matched.csv",
    "left_only": "left_only.csv",
    "right_only": "right_only.csv",
    "duplicates": "duplicates.csv",
}
MERGED_FILE = "merged.csv"


def _key_options(args: argparse.Namespace, defaults: KeyOptions) -> KeyOptions:
    """Command-line flags over environment defaults."""
    return KeyOptions(
        trim=defaults.trim if args.trim is None else args.trim,
        case_insensitive=(
            defaults.case_insensitive if args.case_insensitive is None
            else args.case_insensitive
        ),
        delimiter=defaults.delimiter,
    )


def cmd_compare(args: argparse.Namespace, settings: Settings) -> int:
    """
    Reconcile two CSV files

    Args:
        args: Parsed command-line arguments
        settings: Environment defaults

    Returns:
        Process exit status
    """
    logger.info(f"Comparing {args.left} with {args.right} on {', '.join(args.key)}")

    left = read_table_csv(args.left, settings.csv_encoding, settings.csv_delimiter)
    right = read_table_csv(args.right, settings.csv_encoding, settings.csv_delimiter)

    result = run_reconciliation(
        left,
        right,
        args.key,
        options=_key_options(args, settings.compare_options),
        diff_specs=args.diff,
        sort_specs=args.sort,
        presort=settings.presort and not args.no_presort,
        status_columns=args.status_columns,
    )

    os.makedirs(args.output_dir, exist_ok=True)

    merged = result.merged.select_columns(args.columns)
    if args.totals:
        merged = add_totals_row(merged, args.totals)
    write_table_csv(
        merged,
        os.path.join(args.output_dir, MERGED_FILE),
        settings.csv_encoding,
        settings.csv_delimiter,
    )
    for bucket, table in result.buckets.tables().items():
        write_table_csv(
            table,
            os.path.join(args.output_dir, BUCKET_FILES[bucket]),
            settings.csv_encoding,
            settings.csv_delimiter,
        )
    logger.info(f"Results saved to {args.output_dir}")

    report = generate_report(result)
    if args.report_output:
        export_report_json(report, args.report_output)
        logger.info(f"Report saved to {args.report_output}")

    if args.report_format == "json":
        print(json.dumps(report, indent=2, ensure_ascii=False))
    else:
        print(format_report_console(report))

    return 0


def cmd_split(args: argparse.Namespace, settings: Settings) -> int:
    """
    Split a CSV file into one file per composite key

    Args:
        args: Parsed command-line arguments
        settings: Environment defaults

    Returns:
        Process exit status
    """
    logger.info(f"Splitting {args.input} on {', '.join(args.key)}")

    table = read_table_csv(args.input, settings.csv_encoding, settings.csv_delimiter)
    parts = run_split(
        table,
        args.key,
        options=_key_options(args, settings.split_options),
        sort_specs=args.sort,
    )

    if args.columns:
        parts = [
            Partition(part.key_value, part.table.select_columns(args.columns))
            for part in parts
        ]

    paths = write_partitions_csv(
        parts, args.output_dir, settings.csv_encoding, settings.csv_delimiter
    )
    for part, path in zip(parts, paths):
        print(f"{path}\t{len(part.table)} rows\t{part.key_value}")

    return 0
