"""
Configuration for wardmap.

All tunable parameters in one place. Loaded from:
1. Defaults (this file)
2. Config file (~/.config/wardmap/config.toml) if exists
3. Environment variables (WARDMAP_*) override file
4. Explicit Config objects passed to Converter override everything
"""

from __future__ import annotations

import contextlib
import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class FeaturesConfig:
    """Parser feature switches."""
    new_pipelines: bool = True  # pipeline children only inside { }
    blank_containers: bool = True


@dataclass
class DefaultsConfig:
    """Fallback values used when a field is missing or unreadable."""
    component_visibility: float = 0.9
    component_maturity: float = 0.1
    anchor_visibility: float = 0.95
    anchor_maturity: float = 0.05
    label_x: float = 5.0
    label_y: float = -10.0
    evolve_maturity: float = 0.85
    pipeline_component_maturity: float = 0.2


@dataclass
class LimitsConfig:
    """Validation bounds for the property mutators."""
    min_size: int = 100
    max_size: int = 5000
    max_title: int = 200
    max_stage_name: int = 50


@dataclass
class Config:
    """Root config with all settings."""
    features: FeaturesConfig = field(default_factory=FeaturesConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)


def get_config_path() -> Path:
    """Get config file path, respecting XDG."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "wardmap" / "config.toml"
    return Path.home() / ".config" / "wardmap" / "config.toml"


def load_config() -> Config:
    """Load config from file if exists, else return defaults."""
    config = Config()
    path = get_config_path()

    if path.exists():
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
            config = _apply_toml(config, data)
        except (OSError, tomllib.TOMLDecodeError, TypeError, ValueError) as e:
            logger.warning("Ignoring unreadable config %s: %s", path, e)

    config = _apply_env(config)

    return config


def _apply_toml(config: Config, data: dict) -> Config:
    """Apply toml data to config, section by section."""
    sections = {
        "features": config.features,
        "defaults": config.defaults,
        "limits": config.limits,
    }
    for section_name, section in sections.items():
        values = data.get(section_name)
        if not isinstance(values, dict):
            continue
        for key, value in values.items():
            if not hasattr(section, key):
                logger.debug("Unknown config key %s.%s", section_name, key)
                continue
            current = getattr(section, key)
            setattr(section, key, type(current)(value))
    return config


def _apply_env(config: Config) -> Config:
    """Apply environment variable overrides."""
    env_map: dict[str, tuple[str, str, type]] = {
        "WARDMAP_NEW_PIPELINES": ("features", "new_pipelines", bool),
        "WARDMAP_BLANK_CONTAINERS": ("features", "blank_containers", bool),
        "WARDMAP_EVOLVE_MATURITY": ("defaults", "evolve_maturity", float),
        "WARDMAP_MAX_TITLE": ("limits", "max_title", int),
        "WARDMAP_MIN_SIZE": ("limits", "min_size", int),
        "WARDMAP_MAX_SIZE": ("limits", "max_size", int),
        "WARDMAP_MAX_STAGE_NAME": ("limits", "max_stage_name", int),
    }

    for env_key, (section, attr, conv) in env_map.items():
        val = os.environ.get(env_key)
        if val is not None:
            with contextlib.suppress(ValueError, AttributeError):
                # Bool needs special handling: "true", "1", "yes" -> True
                converted = val.lower() in ("true", "1", "yes") if conv is bool else conv(val)
                setattr(getattr(config, section), attr, converted)

    return config


# Module-level config instance, loaded on first use
_config: Config | None = None


def get_config() -> Config:
    """Get the global config instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Drop the cached config so the next get_config() reloads it."""
    global _config
    _config = None
