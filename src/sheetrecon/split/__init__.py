"""
Single-table partitioning by composite key.

Components:
- partition: first-seen ordered grouping of rows by key
- naming: file-system safe names for partition outputs
"""

from .naming import safe_file_name, unique_file_names
from .partition import partition

__all__ = [
    'partition',
    'safe_file_name',
    'unique_file_names',
]
