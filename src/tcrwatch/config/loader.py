#
# config/loader.py
#
"""
Builds the effective TcrConfig from defaults, an optional TOML file and CLI overrides.
"""

import tomllib
from pathlib import Path
from typing import Any

import attrs
import structlog

from tcrwatch.config.models import TcrConfig
from tcrwatch.exceptions import ConfigurationError

log = structlog.get_logger("config.loader")

CONFIG_TABLE = "tcr"
_KNOWN_KEYS = frozenset(a.name for a in attrs.fields(TcrConfig))


def _read_toml_table(config_path: Path) -> dict[str, Any]:
    """Reads the `[tcr]` table (or the top level when absent) from a TOML file."""
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError("Configuration file not found", path=str(config_path)) from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML: {e}", path=str(config_path)) from e

    table = data.get(CONFIG_TABLE, data)
    if not isinstance(table, dict):
        raise ConfigurationError(f"'[{CONFIG_TABLE}]' must be a table", path=str(config_path))

    unknown = set(table) - _KNOWN_KEYS
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}", path=str(config_path))
    return dict(table)


def load_config(
    source_root: Path | str | None,
    config_path: Path | None = None,
    **overrides: Any,
) -> TcrConfig:
    """
    Loads and validates the configuration for one watch session.

    Args:
        source_root: Root source directory to watch. Overrides any file value.
        config_path: Optional TOML file with a `[tcr]` table.
        **overrides: Values from the command line; `None` means "not given".

    Returns:
        A validated, frozen TcrConfig.

    Raises:
        ConfigurationError: On unreadable files, unknown keys, failed
            validation, or a source root that is not an existing directory.
    """
    values: dict[str, Any] = {}
    if config_path is not None:
        values.update(_read_toml_table(config_path))
        log.debug("Loaded configuration file", path=str(config_path), keys=sorted(values))

    if source_root is not None:
        values["source_root"] = source_root
    values.update({k: v for k, v in overrides.items() if v is not None})

    if "source_root" not in values:
        raise ConfigurationError("No source root given", path=str(config_path) if config_path else None)

    try:
        config = TcrConfig(**values)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(str(e), path=str(config_path) if config_path else None) from e

    root = config.source_root
    if not root.is_dir():
        raise ConfigurationError(f"Source root is not a directory: {root}")

    config = attrs.evolve(config, source_root=root.resolve())
    log.info(
        "Configuration loaded",
        source_root=str(config.source_root),
        test_suffix=config.test_suffix,
        debounce_seconds=config.debounce_seconds,
    )
    return config

# 🟢🔴
