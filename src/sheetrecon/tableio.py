"""
CSV load and save for tables and partitions.
"""

import csv
import logging
import os
from typing import Sequence

from .model import Partition, Table
from .split import unique_file_names
from .utils.tracing import trace_function

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8-sig"


@trace_function("read_table_csv", component="tableio")
def read_table_csv(
    path: str, encoding: str = DEFAULT_ENCODING, delimiter: str = ","
) -> Table:
    """
    Load a CSV file; the first record is the header row.

    An empty file gives a table with no headers and no rows.

    Raises:
        OSError: If the file cannot be read
        DuplicateHeaderError: If two header cells are equal
    """
    with open(path, newline="", encoding=encoding) as f:
        records = list(csv.reader(f, delimiter=delimiter))

    if not records:
        logger.warning(f"{path} is empty")
        return Table(())

    table = Table.from_records(records[0], records[1:])
    logger.debug(f"Read {len(table)} rows x {len(table.headers)} columns from {path}")
    return table


def write_table_csv(
    table: Table, path: str, encoding: str = DEFAULT_ENCODING, delimiter: str = ","
) -> None:
    """Write headers then rows to ``path``, replacing any existing file."""
    with open(path, "w", newline="", encoding=encoding) as f:
        writer = csv.writer(f, delimiter=delimiter)
        writer.writerow(table.headers)
        writer.writerows(table.rows)
    logger.debug(f"Wrote {len(table)} rows to {path}")


@trace_function("write_partitions_csv", component="tableio")
def write_partitions_csv(
    partitions: Sequence[Partition],
    output_dir: str,
    encoding: str = DEFAULT_ENCODING,
    delimiter: str = ",",
) -> list[str]:
    """
    Write each partition to ``<output_dir>/<safe key>.csv``.

    Returns:
        Written file paths, in partition order
    """
    os.makedirs(output_dir, exist_ok=True)
    names = unique_file_names(part.key_value for part in partitions)

    paths = []
    for part, name in zip(partitions, names):
        path = os.path.join(output_dir, f"{name}.csv")
        write_table_csv(part.table, path, encoding, delimiter)
        paths.append(path)

    logger.info(f"Wrote {len(paths)} partition file(s) to {output_dir}")
    return paths
