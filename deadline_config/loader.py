"""
Configuration Loader (``deadline_config.loader``).

Responsibility
--------------
Loads the YAML configuration file and parses it into the typed
``deadline_config.schema`` dataclasses.  Runtime callers use
``deadline_config.get_active_config()``; ``load_config`` is exposed for
tests and tooling that need an explicit file.

Architecture position
---------------------
**Config layer** -- infrastructure tooling.  Depends only on the kernel's
domain enums; no dependency on engines or services.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* Omitted keys take the schema defaults; present keys are type-checked and
  range-checked, never silently coerced.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the parsed
  document for change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing ``config_id`` -> ``KeyError`` propagates.
* Out-of-range or wrongly typed values -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from deadline_config.schema import DatabaseSettings, DeadlineConfig, EngineSettings
from deadline_kernel.domain.values import MonthMode

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {path} must contain a mapping")
    return data


def _positive_int(section: str, data: dict[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"{section}.{key} must be a positive integer, got {value!r}")
    return value


def _positive_number(section: str, data: dict[str, Any], key: str, default: float) -> float:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValueError(f"{section}.{key} must be a positive number, got {value!r}")
    return float(value)


def parse_engine_settings(data: dict[str, Any]) -> EngineSettings:
    """Parse the ``engine`` section."""
    defaults = EngineSettings()

    try:
        month_mode = MonthMode(str(data.get("month_mode", defaults.month_mode.value)).lower())
    except ValueError:
        raise ValueError(
            f"engine.month_mode must be one of "
            f"{sorted(m.value for m in MonthMode)}, got {data.get('month_mode')!r}"
        ) from None

    log_level = str(data.get("log_level", defaults.log_level)).upper()
    if log_level not in _LOG_LEVELS:
        raise ValueError(f"engine.log_level must be one of {sorted(_LOG_LEVELS)}, got {log_level!r}")

    settings = EngineSettings(
        max_consecutive_skips=_positive_int(
            "engine", data, "max_consecutive_skips", defaults.max_consecutive_skips,
        ),
        holiday_fetch_timeout_seconds=_positive_number(
            "engine", data, "holiday_fetch_timeout_seconds",
            defaults.holiday_fetch_timeout_seconds,
        ),
        month_mode=month_mode,
        bulk_min_items=_positive_int("engine", data, "bulk_min_items", defaults.bulk_min_items),
        bulk_max_items=_positive_int("engine", data, "bulk_max_items", defaults.bulk_max_items),
        federal_holiday_years_ahead=_positive_int(
            "engine", data, "federal_holiday_years_ahead",
            defaults.federal_holiday_years_ahead,
        ),
        log_level=log_level,
    )
    if settings.bulk_min_items > settings.bulk_max_items:
        raise ValueError(
            f"engine.bulk_min_items ({settings.bulk_min_items}) exceeds "
            f"engine.bulk_max_items ({settings.bulk_max_items})"
        )
    return settings


def parse_database_settings(data: dict[str, Any]) -> DatabaseSettings:
    """Parse the ``database`` section."""
    defaults = DatabaseSettings()
    url = data.get("url", defaults.url)
    if not isinstance(url, str) or not url:
        raise ValueError(f"database.url must be a non-empty string, got {url!r}")
    return DatabaseSettings(
        url=url,
        echo=bool(data.get("echo", defaults.echo)),
        pool_size=_positive_int("database", data, "pool_size", defaults.pool_size),
        max_overflow=_positive_int("database", data, "max_overflow", defaults.max_overflow),
        pool_timeout=_positive_int("database", data, "pool_timeout", defaults.pool_timeout),
    )


def parse_config(data: dict[str, Any]) -> DeadlineConfig:
    """
    Parse a full configuration document.

    Raises:
        KeyError: if ``config_id`` is missing.
        ValueError: if a section is malformed.
    """
    return DeadlineConfig(
        config_id=data["config_id"],
        version=int(data.get("version", 1)),
        engine=parse_engine_settings(data.get("engine") or {}),
        database=parse_database_settings(data.get("database") or {}),
        checksum=compute_checksum(data),
    )


def load_config(path: Path | str) -> DeadlineConfig:
    """Load and parse the configuration file at ``path``."""
    return parse_config(load_yaml_file(Path(path)))


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 checksum of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
