"""
Runtime settings read from the environment.

Environment variables:
    SHEETRECON_TRIM: Trim composite keys when reconciling (default: true)
    SHEETRECON_CASE_INSENSITIVE: Lowercase composite keys when reconciling (default: false)
    SHEETRECON_PRESORT: Sort both sides by key before reconciling (default: true)
    SHEETRECON_SPLIT_TRIM: Trim composite keys when splitting (default: true)
    SHEETRECON_SPLIT_CASE_INSENSITIVE: Lowercase keys when splitting (default: false)
    SHEETRECON_CSV_ENCODING: Encoding of CSV inputs and outputs (default: utf-8-sig)
    SHEETRECON_CSV_DELIMITER: CSV field delimiter (default: ,)
    SHEETRECON_COLLATE: Locale used to collate text when sorting (default: the
        user's environment, LC_ALL / LC_COLLATE / LANG)
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping

from .model import KeyOptions

logger = logging.getLogger(__name__)

_TRUTHY = ("true", "1", "yes", "on")
_FALSY = ("false", "0", "no", "off")


def _env_flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    logger.warning(f"Ignoring invalid boolean {name}={raw!r}, using {default}")
    return default


@dataclass(frozen=True)
class Settings:
    """Defaults for reconcile and split runs; CLI flags override them."""

    compare_options: KeyOptions = field(default_factory=KeyOptions)
    split_options: KeyOptions = field(default_factory=KeyOptions.split_default)
    presort: bool = True
    csv_encoding: str = "utf-8-sig"
    csv_delimiter: str = ","
    collation: str = ""

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        """
        Build settings from environment variables

        Args:
            env: Mapping to read instead of ``os.environ``
        """
        env = os.environ if env is None else env
        return cls(
            compare_options=KeyOptions(
                trim=_env_flag(env, "SHEETRECON_TRIM", True),
                case_insensitive=_env_flag(env, "SHEETRECON_CASE_INSENSITIVE", False),
            ),
            split_options=KeyOptions(
                trim=_env_flag(env, "SHEETRECON_SPLIT_TRIM", True),
                case_insensitive=_env_flag(env, "SHEETRECON_SPLIT_CASE_INSENSITIVE", False),
            ),
            presort=_env_flag(env, "SHEETRECON_PRESORT", True),
            csv_encoding=env.get("SHEETRECON_CSV_ENCODING") or "utf-8-sig",
            csv_delimiter=env.get("SHEETRECON_CSV_DELIMITER") or ",",
            collation=env.get("SHEETRECON_COLLATE", "").strip(),
        )
