"""
Configuration Management for Ladderwatch

Provides configuration loading from multiple sources:
- Default values
- Configuration files (YAML, TOML, JSON)
- Environment variables

Configuration precedence (highest to lowest):
1. Environment variables (LADDERWATCH_*)
2. Configuration file
3. Default values
"""

import json
import logging
import math
import os
import tomllib
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, get_args, get_origin

import yaml

from ladderwatch.core.constants import (
    CYCLE_THRESHOLDS,
    DEFAULT_LADDER,
    TILT_ELO_DROP,
    TILT_MIN_LOSSES,
    TILT_WINDOW,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Dataclasses
# ============================================================================


@dataclass
class TrackerConfig:
    """Configuration for the statistics engine."""

    default_ladder: str = DEFAULT_LADDER

    # Tilt detection
    tilt_min_losses: int = TILT_MIN_LOSSES
    tilt_elo_drop: float = TILT_ELO_DROP
    tilt_window: int = TILT_WINDOW

    # Rating thresholds for elo cycles
    cycle_thresholds: list[int] = field(default_factory=lambda: list(CYCLE_THRESHOLDS))

    # IANA zone used for play-pattern analysis; None means host local time
    timezone: str | None = None


@dataclass
class CacheConfig:
    """Configuration for the nickname cache."""

    nickname_ttl_seconds: int = 24 * 60 * 60
    max_entries: int = 1000


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = None
    file_max_bytes: int = 10 * 1024 * 1024  # 10MB
    file_backup_count: int = 5


@dataclass
class LadderwatchConfig:
    """Main configuration container."""

    tracker: TrackerConfig = field(default_factory=TrackerConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Version of the config format
    config_version: str = "1.0"


# ============================================================================
# Configuration Loading
# ============================================================================

CONFIG_SECTIONS = ("tracker", "cache", "logging")

# Environment variable -> (section, key)
ENV_MAPPINGS: dict[str, tuple[str, str]] = {
    "LADDERWATCH_LOG_LEVEL": ("logging", "level"),
    "LADDERWATCH_LOG_FILE": ("logging", "file"),
    "LADDERWATCH_LADDER": ("tracker", "default_ladder"),
    "LADDERWATCH_TIMEZONE": ("tracker", "timezone"),
    "LADDERWATCH_TILT_MIN_LOSSES": ("tracker", "tilt_min_losses"),
    "LADDERWATCH_TILT_ELO_DROP": ("tracker", "tilt_elo_drop"),
    "LADDERWATCH_TILT_WINDOW": ("tracker", "tilt_window"),
    "LADDERWATCH_CYCLE_THRESHOLDS": ("tracker", "cycle_thresholds"),
    "LADDERWATCH_NICKNAME_TTL": ("cache", "nickname_ttl_seconds"),
}


def get_default_config_paths() -> list[Path]:
    """Config files looked up when none is given, first match wins."""
    user_dir = Path.home() / ".config" / "ladderwatch"
    return [
        Path.cwd() / "ladderwatch.yaml",
        Path.cwd() / "ladderwatch.toml",
        Path.cwd() / "ladderwatch.json",
        user_dir / "config.yaml",
        user_dir / "config.toml",
    ]


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _read_json(path: Path) -> dict[str, Any]:
    with open(path) as f:
        return json.load(f)


_READERS = {".yaml": _read_yaml, ".yml": _read_yaml, ".toml": _read_toml, ".json": _read_json}


def load_config_file(path: Path) -> dict[str, Any]:
    """Read a config file, picking the parser from its extension."""
    if not path.exists():
        return {}
    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        logger.warning(f"Unknown config file format: {path.suffix}")
        return {}
    return reader(path)


def load_env_config() -> dict[str, Any]:
    """Collect LADDERWATCH_* overrides as raw strings, grouped by section."""
    config: dict[str, dict[str, Any]] = {}
    for env_var, (section, key) in ENV_MAPPINGS.items():
        value = os.environ.get(env_var)
        if value is not None:
            config.setdefault(section, {})[key] = value
    return config


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into base, one level deep per section."""
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = {**result[key], **value}
        else:
            result[key] = value
    return result


def _coerce(name: str, value: Any, kind: Any) -> Any:
    """Convert a file or environment value to the field's declared type.

    Files give typed values and the environment gives strings; both go
    through here. Optional string fields accept None.

    Raises:
        ValueError: if the value cannot be converted.
    """
    if value is None:
        return None
    if kind is bool:
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in ("true", "1", "yes", "on"):
            return True
        if text in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"{name} must be true or false, got {value!r}")
    if kind in (int, float):
        if isinstance(value, bool):
            raise ValueError(f"{name} must be a number, got {value!r}")
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"{name} must be a number, got {value!r}") from None
        if not math.isfinite(number):
            raise ValueError(f"{name} must be a finite number, got {value!r}")
        if number.is_integer():
            return int(number)
        if kind is int:
            raise ValueError(f"{name} must be a whole number, got {value!r}")
        return number
    if get_origin(kind) is list:
        items = value.split(",") if isinstance(value, str) else value
        if not isinstance(items, (list, tuple)):
            raise ValueError(f"{name} must be a list, got {value!r}")
        (item_kind,) = get_args(kind)
        return [_coerce(name, item, item_kind) for item in items if str(item).strip()]
    return str(value)


def dict_to_config(data: dict[str, Any]) -> LadderwatchConfig:
    """Build a LadderwatchConfig, converting values to each field's type.

    Unknown keys are logged and ignored.

    Raises:
        ValueError: if a value does not fit its field.
    """
    config = LadderwatchConfig()
    for section in CONFIG_SECTIONS:
        target = getattr(config, section)
        kinds = {f.name: f.type for f in fields(target)}
        for key, value in (data.get(section) or {}).items():
            if key not in kinds:
                logger.warning(f"Ignoring unknown config key: {section}.{key}")
                continue
            setattr(target, key, _coerce(f"{section}.{key}", value, kinds[key]))
    return config


def load_config(config_file: Path | None = None, include_env: bool = True) -> LadderwatchConfig:
    """
    Load configuration from a file (explicit or the first default path found)
    and, unless include_env is False, LADDERWATCH_* environment variables.

    Raises:
        ValueError: if a configured value does not fit its field.
    """
    path = config_file
    if path is None:
        path = next((p for p in get_default_config_paths() if p.exists()), None)

    config_data: dict[str, Any] = {}
    if path is not None:
        config_data = load_config_file(path)
        logger.info(f"Loaded config from: {path}")

    if include_env:
        config_data = merge_configs(config_data, load_env_config())

    return dict_to_config(config_data)


def save_config(config: LadderwatchConfig, path: Path) -> None:
    """
    Save configuration to a .yaml/.yml or .json file.

    Raises:
        ValueError: for any other extension.
    """
    data = asdict(config)
    suffix = path.suffix.lower()

    with open(path, "w") as f:
        if suffix in (".yaml", ".yml"):
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        elif suffix == ".json":
            json.dump(data, f, indent=2)
        else:
            raise ValueError(f"Unknown config format: {suffix}")

    logger.info(f"Saved config to: {path}")


# ============================================================================
# Active Configuration
# ============================================================================

_active: dict[str, LadderwatchConfig] = {}


def get_config() -> LadderwatchConfig:
    """The active configuration, loaded from files and environment on first use."""
    if "config" not in _active:
        _active["config"] = load_config()
    return _active["config"]


def set_config(config: LadderwatchConfig) -> None:
    _active["config"] = config


def reset_config() -> None:
    """Forget the active configuration so the next get_config() reloads it."""
    _active.pop("config", None)


# ============================================================================
# Configuration Templates
# ============================================================================

DEFAULT_CONFIG_YAML = """# Ladderwatch Configuration

# Statistics engine
tracker:
  default_ladder: rm_1v1
  tilt_min_losses: 3
  tilt_elo_drop: 40
  tilt_window: 10
  cycle_thresholds: [1700, 1800, 1900, 2000]
  # timezone: America/Sao_Paulo  # play-pattern analysis; host time if unset

# Nickname cache
cache:
  nickname_ttl_seconds: 86400
  max_entries: 1000

# Logging settings
logging:
  level: INFO
  # file: /path/to/ladderwatch.log
"""


def generate_default_config(path: Path) -> None:
    """Generate a default configuration file."""
    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        path.write_text(DEFAULT_CONFIG_YAML)
    else:
        save_config(LadderwatchConfig(), path)

    logger.info(f"Generated default config at: {path}")
