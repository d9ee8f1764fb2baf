"""
textile_config -- single public entrypoint for runtime configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration files
    or the ``TEXTILE_CONFIG`` environment variable directly.

Architecture position:
    Configuration -- sits above ``textile_kernel`` and below
    ``textile_services`` and the scripts.  The kernel MUST NEVER import
    from ``textile_config``; callers pass resolved values (database URL,
    log level, unassigned label) into kernel functions.

Invariants enforced:
    - Single entrypoint: all runtime config flows through
      ``get_active_config()``.
    - Deterministic: the same files always produce the same checksum.

Failure modes:
    - ``ConfigError`` -- unreadable file, malformed YAML, unknown key,
      wrong type or out-of-range value.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``TEXTILE_CONFIG_TRACE`` log entry with the config id, version,
    checksum and source files.
"""

from __future__ import annotations

import os
from pathlib import Path

from textile_config.loader import load_yaml_file, merge, parse_config, validate
from textile_config.schema import TextileConfig
from textile_kernel.logging_config import get_logger

_logger = get_logger("config")

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"
ENV_VAR = "TEXTILE_CONFIG"


def get_active_config(config_path: Path | str | None = None) -> TextileConfig:
    """The ONLY public configuration entrypoint.

    The packaged defaults are always loaded first.  An override file is
    merged over them when ``config_path`` is given, or else when the
    ``TEXTILE_CONFIG`` environment variable names one.

    Args:
        config_path: Optional override YAML file.

    Returns:
        Frozen ``TextileConfig``.

    Raises:
        ConfigError: If a file cannot be read or the merged configuration
            is invalid.
    """
    data = load_yaml_file(DEFAULTS_PATH)
    sources = [str(DEFAULTS_PATH)]

    override = config_path or os.environ.get(ENV_VAR)
    if override:
        override_path = Path(override)
        override_data = load_yaml_file(override_path)
        validate(override_data, str(override_path))
        data = merge(data, override_data)
        sources.append(str(override_path))

    config = parse_config(data, source_paths=tuple(sources))

    _logger.info(
        "TEXTILE_CONFIG_TRACE",
        extra={
            "trace_type": "TEXTILE_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "source_paths": list(config.source_paths),
        },
    )
    return config


__all__ = ["DEFAULTS_PATH", "ENV_VAR", "TextileConfig", "get_active_config"]
