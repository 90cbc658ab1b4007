"""
Ladderwatch Core - Foundation modules for the statistics engine.

This module contains the fundamental components:
- constants: Time units, windows, thresholds and enums
- config: Application configuration management
- log_setup: Root logger configuration
- utils: Numeric and ordering helpers
"""

from ladderwatch.core.config import (
    CacheConfig,
    LadderwatchConfig,
    LoggingConfig,
    TrackerConfig,
    get_config,
    load_config,
    reset_config,
    set_config,
)
from ladderwatch.core.constants import (
    CYCLE_THRESHOLDS,
    DEFAULT_LADDER,
    SECONDS_PER_DAY,
    SECONDS_PER_WEEK,
    Granularity,
    TiltType,
)
from ladderwatch.core.log_setup import setup_logging
from ladderwatch.core.utils import is_finite, round_half_up, sort_by_ended_at

__all__ = [
    # Config
    "CacheConfig",
    "LadderwatchConfig",
    "LoggingConfig",
    "TrackerConfig",
    "get_config",
    "load_config",
    "reset_config",
    "set_config",
    # Constants
    "CYCLE_THRESHOLDS",
    "DEFAULT_LADDER",
    "SECONDS_PER_DAY",
    "SECONDS_PER_WEEK",
    "Granularity",
    "TiltType",
    # Logging
    "setup_logging",
    # Utils
    "is_finite",
    "round_half_up",
    "sort_by_ended_at",
]
