"""
Configuration schema (``textile_config.schema``).

Frozen dataclass describing the runtime configuration.  Instances are
only built by ``textile_config.loader``; callers obtain one through
``textile_config.get_active_config()``.
"""

from __future__ import annotations

from dataclasses import dataclass

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
ID_LOCALES = ("tr", "default")


@dataclass(frozen=True)
class TextileConfig:
    """
    Resolved runtime configuration.

    Guarantees:
        - ``log_level`` is one of LOG_LEVELS, ``id_locale`` one of
          ID_LOCALES.
        - ``checksum`` is the SHA-256 of the merged source data; equal
          sources give equal checksums.
    """

    config_id: str
    version: int
    database_url: str
    echo_sql: bool
    log_level: str
    unassigned_label: str
    id_locale: str
    checksum: str
    source_paths: tuple[str, ...] = ()
