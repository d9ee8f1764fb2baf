"""
Configuration Loader (``textile_config.loader``).

Responsibility
--------------
Loads YAML files, merges an override file over the packaged defaults and
parses the result into a frozen ``TextileConfig``.  Runtime callers go
through ``textile_config.get_active_config()``.

Invariants enforced
-------------------
* Unknown sections or keys are rejected, so a typo never silently falls
  back to a default.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the merged
  data.

Failure modes
-------------
* Missing or unreadable file -> ``ConfigError``.
* Malformed YAML -> ``ConfigError`` (chained from ``yaml.YAMLError``).
* Unknown key or wrong type -> ``ConfigError``.
"""

from __future__ import annotations

import copy
import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from textile_config.schema import ID_LOCALES, LOG_LEVELS, TextileConfig
from textile_kernel.exceptions import ConfigError

# section -> key -> expected type
_SCHEMA: dict[str, dict[str, type]] = {
    "database": {"url": str, "echo_sql": bool},
    "logging": {"level": str},
    "production": {"unassigned_label": str, "id_locale": str},
}
_TOP_LEVEL: dict[str, type] = {"config_id": str, "version": int}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        ConfigError: if the file is missing, unreadable, not valid YAML,
            or does not hold a mapping.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as exc:
        raise ConfigError(f"cannot read configuration: {exc.strerror}", str(path)) from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML: {exc}", str(path)) from exc
    if not isinstance(data, dict):
        raise ConfigError("top level must be a mapping", str(path))
    return data


def merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Override values win; nested sections are merged key by key."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def validate(data: dict[str, Any], source: str | None = None) -> None:
    """Check keys and types against the schema."""
    for key, value in data.items():
        if key in _TOP_LEVEL:
            _check_type(key, value, _TOP_LEVEL[key], source)
            continue
        if key not in _SCHEMA:
            raise ConfigError(f"unknown section {key!r}", source)
        if not isinstance(value, dict):
            raise ConfigError(f"section {key!r} must be a mapping", source)
        for sub_key, sub_value in value.items():
            expected = _SCHEMA[key].get(sub_key)
            if expected is None:
                raise ConfigError(f"unknown key {key}.{sub_key}", source)
            _check_type(f"{key}.{sub_key}", sub_value, expected, source)


def _check_type(name: str, value: Any, expected: type, source: str | None) -> None:
    # bool is an int subclass; do not accept it for int fields.
    if expected is int and isinstance(value, bool):
        raise ConfigError(f"{name} must be {expected.__name__}", source)
    if not isinstance(value, expected):
        raise ConfigError(
            f"{name} must be {expected.__name__}, got {type(value).__name__}", source
        )


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def parse_config(data: dict[str, Any], source_paths: tuple[str, ...] = ()) -> TextileConfig:
    """
    Build a ``TextileConfig`` from merged data.

    Raises:
        ConfigError: if a required key is missing or a value is out of range.
    """
    validate(data)
    try:
        database = data["database"]
        logging_section = data["logging"]
        production = data["production"]
        config = TextileConfig(
            config_id=data["config_id"],
            version=data["version"],
            database_url=database["url"],
            echo_sql=database["echo_sql"],
            log_level=logging_section["level"].upper(),
            unassigned_label=production["unassigned_label"],
            id_locale=production["id_locale"],
            checksum=compute_checksum(data),
            source_paths=source_paths,
        )
    except KeyError as exc:
        raise ConfigError(f"missing required key {exc.args[0]!r}") from exc

    if config.log_level not in LOG_LEVELS:
        raise ConfigError(f"logging.level must be one of {', '.join(LOG_LEVELS)}")
    if config.id_locale not in ID_LOCALES:
        raise ConfigError(f"production.id_locale must be one of {', '.join(ID_LOCALES)}")
    if not config.database_url.strip():
        raise ConfigError("database.url must not be empty")
    return config
