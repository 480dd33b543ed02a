"""Configuration management for archext.

Config resolution order (highest priority first):
1. Programmatic (ArchextConfig constructed in code, installed with configure())
2. Environment variables (ARCHEXT_CATALOG, ARCHEXT_NEGATION_PREFIX, ...)
3. Config file (~/.config/archext/config.json, managed by `archext config`)
4. Hardcoded defaults
"""

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any


logger = logging.getLogger(__name__)


# =============================================================================
# Config file location
# =============================================================================

CONFIG_DIR = Path.home() / ".config" / "archext"
CONFIG_FILE = CONFIG_DIR / "config.json"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_MODES = ("human", "agent")


# =============================================================================
# Config dataclasses
# =============================================================================


@dataclass
class CatalogConfig:
    """Which static catalog to load.

    - path: YAML catalog file; empty = bundled catalog
    """

    path: str = ""


@dataclass
class ResolverConfig:
    """Modifier parsing settings."""

    negation_prefix: str = "no"


@dataclass
class CliConfig:
    """CLI behaviour.

    - mode: "human" (rich output) or "agent" (JSON output)
    - log_level: root log level for CLI runs
    """

    mode: str = "human"
    log_level: str = "WARNING"


# =============================================================================
# Main config class
# =============================================================================


@dataclass
class ArchextConfig:
    """Top-level archext configuration.

    Examples:
        # Package use: no files needed
        config = ArchextConfig(catalog=CatalogConfig(path="my-cpus.yaml"))

        # CLI use: loads from ~/.config/archext/config.json
        config = ArchextConfig.load()
    """

    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    cli: CliConfig = field(default_factory=CliConfig)

    @classmethod
    def load(cls) -> "ArchextConfig":
        """Load config from file + env vars.

        Priority: env var values > config.json values > defaults.
        """
        config = cls()

        # Layer 1: Load from config file if it exists
        if CONFIG_FILE.exists():
            try:
                with open(CONFIG_FILE) as f:
                    data = json.load(f)
                _apply_dict(config, data)
            except (json.JSONDecodeError, OSError) as exc:
                logger.warning("Failed to load config from %s: %s", CONFIG_FILE, exc)

        # Layer 2: Env var overrides
        if val := os.environ.get("ARCHEXT_CATALOG"):
            config.catalog.path = val
        if val := os.environ.get("ARCHEXT_NEGATION_PREFIX"):
            config.resolver.negation_prefix = val
        if val := os.environ.get("ARCHEXT_MODE"):
            if val in VALID_MODES:
                config.cli.mode = val
            else:
                logger.warning("Invalid ARCHEXT_MODE=%r, ignoring", val)
        if val := os.environ.get("ARCHEXT_LOG_LEVEL"):
            if val.upper() in VALID_LOG_LEVELS:
                config.cli.log_level = val.upper()
            else:
                logger.warning("Invalid ARCHEXT_LOG_LEVEL=%r, ignoring", val)

        return config

    def save(self) -> None:
        """Save config to ~/.config/archext/config.json."""
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        with open(CONFIG_FILE, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for display."""
        return {
            "catalog": asdict(self.catalog),
            "resolver": asdict(self.resolver),
            "cli": asdict(self.cli),
        }


# =============================================================================
# Config dict application
# =============================================================================


def _valid_value(key: str, value: Any) -> Any:
    """Normalize a config value, or return None if it is not acceptable."""
    if not isinstance(value, str):
        return None
    if key == "cli.log_level":
        value = value.upper()
        return value if value in VALID_LOG_LEVELS else None
    if key == "cli.mode":
        return value if value in VALID_MODES else None
    if key == "resolver.negation_prefix":
        return value or None
    return value


def _apply_dict(config: ArchextConfig, data: dict) -> None:
    """Apply a dict of values onto an ArchextConfig.

    Invalid values are logged and skipped, leaving the default in place.
    """
    sections = {
        "catalog": config.catalog,
        "resolver": config.resolver,
        "cli": config.cli,
    }
    for name, target in sections.items():
        values = data.get(name)
        if not isinstance(values, dict):
            continue
        for k, v in values.items():
            if not hasattr(target, k):
                continue
            valid = _valid_value(f"{name}.{k}", v)
            if valid is None:
                logger.warning("Invalid %s.%s=%r in %s, ignoring", name, k, v, CONFIG_FILE)
                continue
            setattr(target, k, valid)


# =============================================================================
# Global config singleton
# =============================================================================

_config: ArchextConfig | None = None


def get_config() -> ArchextConfig:
    """Get the global ArchextConfig instance.

    First call loads from file + env vars. Subsequent calls return cached instance.
    Use configure() to replace the global config programmatically.
    """
    global _config
    if _config is None:
        _config = ArchextConfig.load()
    return _config


def configure(config: ArchextConfig) -> None:
    """Set the global ArchextConfig programmatically.

    Use this when archext is used as a package:
        from archext.config import configure, ArchextConfig, ResolverConfig
        configure(ArchextConfig(resolver=ResolverConfig(negation_prefix="no-")))
    """
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global config (forces reload on next get_config())."""
    global _config
    _config = None
