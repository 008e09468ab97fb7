"""
Command-line interface for table reconciliation.

This module provides a CLI for reconciling and splitting CSV exports.

Available commands:
- compare: Reconcile two files by composite key
- split: Write one file per composite key
"""

import logging
import os
import sys

from ..config import Settings
from ..exceptions import SheetReconError
from ..sorting import set_collation
from ..utils.logging import setup_logging, shutdown_logging
from ..utils.tracing import initialize_tracing, shutdown_tracing
from .commands import cmd_compare, cmd_split
from .parser import create_parser

logger = logging.getLogger(__name__)

COMMANDS = {
    'compare': cmd_compare,
    'split': cmd_split,
}


def _tracing_requested() -> bool:
    return bool(os.getenv("OTLP_ENDPOINT")) or os.getenv("TRACE_CONSOLE", "").lower() == "true"


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the sheetrecon CLI"""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command not in COMMANDS:
        parser.print_help()
        return 1

    setup_logging(level=args.log_level, json_format=args.log_json)
    tracing = _tracing_requested()
    if tracing:
        initialize_tracing()

    try:
        settings = Settings.from_env()
        set_collation(args.collate or settings.collation)
        return COMMANDS[args.command](args, settings)
    except (SheetReconError, OSError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    finally:
        if tracing:
            shutdown_tracing()
        shutdown_logging()


__all__ = [
    'main',
    'cmd_compare',
    'cmd_split',
    'create_parser',
]


if __name__ == '__main__':
    sys.exit(main())
