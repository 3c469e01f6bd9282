"""
deadline_config -- single public entrypoint for deadline engine configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component may read configuration
    files or environment variables directly.

Architecture position:
    Configuration -- YAML-driven settings.  This package sits above
    ``deadline_kernel`` and below ``deadline_services``.  The kernel and
    the engines MUST NEVER import from ``deadline_config``; services pass
    the individual settings down as constructor arguments.

Invariants enforced:
    - Single entrypoint: all runtime config flows through ``get_active_config()``.
    - Returned configuration is frozen.
    - Deterministic checksum: the same YAML always yields the same checksum.

Failure modes:
    - ``FileNotFoundError`` -- the selected configuration file does not exist.
    - ``ValueError`` -- schema validation failures.
    - ``yaml.YAMLError`` -- the file is not valid YAML.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``DEADLINE_CONFIG_TRACE`` log entry containing the config_id, version,
    checksum and source path, tying calculations to the settings (skip
    ceiling, month mode) that governed them.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from deadline_config.loader import load_config
from deadline_config.schema import DatabaseSettings, DeadlineConfig, EngineSettings

_logger = logging.getLogger("deadline_kernel.config")

CONFIG_ENV_VAR = "DEADLINE_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"


def get_active_config(path: Path | str | None = None) -> DeadlineConfig:
    """The ONLY public configuration entrypoint.

    Resolution order: explicit ``path``, then the ``DEADLINE_CONFIG``
    environment variable, then the packaged ``defaults.yaml``.

    Non-goals:
        - No caching; callers hold the returned config for as long as they
          need it.

    Raises:
        FileNotFoundError: If the selected file does not exist.
        ValueError: If configuration validation fails.
    """
    source = Path(path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH)
    config = load_config(source)

    _logger.info(
        "DEADLINE_CONFIG_TRACE",
        extra={
            "trace_type": "DEADLINE_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "source": str(source),
            "month_mode": config.engine.month_mode.value,
            "max_consecutive_skips": config.engine.max_consecutive_skips,
        },
    )
    return config


__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATH",
    "DatabaseSettings",
    "DeadlineConfig",
    "EngineSettings",
    "get_active_config",
    "load_config",
]
