"""
File names for partition outputs.
"""

import re
from typing import Iterable

_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*]')
_WHITESPACE = re.compile(r"\s+")

EMPTY_KEY_NAME = "EMPTY"


def safe_file_name(key_value: str) -> str:
    """
    Turn a partition key into a file-system safe base name.

    Example:
        >>> safe_file_name("Tokyo|Sales dept")
        'Tokyo_Sales_dept'
    """
    name = _UNSAFE_CHARS.sub("_", key_value)
    name = _WHITESPACE.sub("_", name)
    return name or EMPTY_KEY_NAME


def unique_file_names(key_values: Iterable[str]) -> list[str]:
    """
    Safe base names for a sequence of keys, suffixed ``_2``, ``_3`` ... on clashes.

    Distinct keys can map to the same safe name (``a/b`` and ``a:b``).
    """
    used: set[str] = set()
    names = []
    for key_value in key_values:
        base = safe_file_name(key_value)
        name = base
        counter = 2
        while name.lower() in used:
            name = f"{base}_{counter}"
            counter += 1
        used.add(name.lower())
        names.append(name)
    return names
