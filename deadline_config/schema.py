"""
DeadlineConfig schema.

Typed, frozen view of the YAML configuration file.  The loader parses YAML
into these types; ``get_active_config`` is the only runtime entrypoint that
hands them out.

Sections:
  engine    -- counting limits, unit conversion mode, bulk bounds, logging
  database  -- SQLAlchemy engine settings for the holiday and audit store
"""

from __future__ import annotations

from dataclasses import dataclass, field

from deadline_kernel.domain.values import MonthMode

# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EngineSettings:
    """Settings consumed by the deadline engine and calculation service."""

    max_consecutive_skips: int = 366
    holiday_fetch_timeout_seconds: float = 5.0
    month_mode: MonthMode = MonthMode.APPROXIMATE
    bulk_min_items: int = 1
    bulk_max_items: int = 100
    federal_holiday_years_ahead: int = 2  # CLI seeding horizon past the trigger year
    log_level: str = "INFO"


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DatabaseSettings:
    """Connection settings for ``deadline_kernel.db.init_engine_from_url``."""

    url: str = "sqlite://"
    echo: bool = False
    pool_size: int = 20
    max_overflow: int = 10
    pool_timeout: int = 30


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DeadlineConfig:
    """The complete, validated configuration."""

    config_id: str
    version: int
    engine: EngineSettings = field(default_factory=EngineSettings)
    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    checksum: str = ""
