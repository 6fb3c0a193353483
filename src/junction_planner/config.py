"""
Configuration file support for junction-planner.

Provides hierarchical configuration loading from:
1. Project config: .junction-planner.toml or junction-planner.toml in the
   geometry/project directory or any parent up to the repository root
2. User config: ~/.config/junction-planner/config.toml

CLI arguments override config file values, and project config overrides user config.
"""

import sys
import warnings
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from junction_planner.exceptions import ConfigError
from junction_planner.geometry.constants import (
    MAX_CURRENT_PER_LED,
    PANEL_MAX_STRIP_LENGTH,
    PANEL_ROW_PITCH,
)

# Config file names to search for in project directories
CONFIG_FILENAMES = [".junction-planner.toml", "junction-planner.toml"]

# User-level config path
USER_CONFIG_PATH = Path.home() / ".config" / "junction-planner" / "config.toml"

# All known config keys for validation
KNOWN_KEYS = {
    "defaults": {"format", "verbose", "quiet"},
    "physics": {"max_current_per_led"},
    "panels": {"row_pitch", "max_strip_length"},
    "planning": {"rebalance", "max_passes"},
}

OUTPUT_FORMATS = ("table", "json", "yaml")


@dataclass
class DefaultsConfig:
    """Default options for CLI commands."""

    format: str = "table"
    verbose: bool = False
    quiet: bool = False


@dataclass
class PhysicsConfig:
    """Electrical constants that vary with the LED product used."""

    max_current_per_led: float = MAX_CURRENT_PER_LED  # Amps at full white


@dataclass
class PanelsConfig:
    """How LED strips are laid across lit panels."""

    row_pitch: float = PANEL_ROW_PITCH  # Micrometers between rows
    max_strip_length: float = PANEL_MAX_STRIP_LENGTH  # Micrometers


@dataclass
class PlanningConfig:
    """Allocation engine options."""

    rebalance: bool = True
    max_passes: int = 0  # 0 = run until no pass makes progress

    @property
    def pass_limit(self) -> int | None:
        return self.max_passes or None


@dataclass
class Config:
    """Merged configuration from all sources."""

    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    physics: PhysicsConfig = field(default_factory=PhysicsConfig)
    panels: PanelsConfig = field(default_factory=PanelsConfig)
    planning: PlanningConfig = field(default_factory=PlanningConfig)

    # Track which file each setting came from (for --show)
    _sources: dict = field(default_factory=dict, repr=False)

    @classmethod
    def load(cls, start_dir: Path | None = None) -> "Config":
        """
        Load configuration with precedence: project > user > defaults.

        Args:
            start_dir: Directory to start searching from (default: current directory)

        Returns:
            Merged configuration object

        Raises:
            ConfigError: If a config file is unreadable, not valid TOML, or
                holds a value of the wrong type
        """
        if start_dir is None:
            start_dir = Path.cwd()

        config = cls()
        sources: dict[str, str] = {}

        # Load user config first (lower precedence)
        if USER_CONFIG_PATH.exists():
            user_data = _load_toml_file(USER_CONFIG_PATH)
            if user_data:
                _merge_config(config, user_data, str(USER_CONFIG_PATH), sources)

        # Load project config (higher precedence)
        project_config = _find_project_config(start_dir)
        if project_config:
            project_data = _load_toml_file(project_config)
            if project_data:
                _merge_config(config, project_data, str(project_config), sources)

        config._sources = sources
        return config

    def get_source(self, key: str) -> str:
        """Get the source file for a config key."""
        return self._sources.get(key, "default")

    def get(self, key: str) -> Any:
        """Get a value by dotted key, e.g. ``physics.max_current_per_led``."""
        section_name, _, name = key.partition(".")
        if section_name not in KNOWN_KEYS or name not in KNOWN_KEYS[section_name]:
            raise KeyError(key)
        return getattr(getattr(self, section_name), name)


def _find_project_config(start_dir: Path) -> Path | None:
    """
    Find project config by walking up the directory tree.

    Stops at .git directory or filesystem root.

    Args:
        start_dir: Directory to start searching from

    Returns:
        Path to config file if found, None otherwise
    """
    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        # Stop at .git directory (project root)
        if (current / ".git").exists():
            break

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _load_toml_file(path: Path) -> dict[str, Any]:
    """
    Load a TOML file.

    Args:
        path: Path to TOML file

    Returns:
        Parsed TOML data

    Raises:
        ConfigError: If TOML is invalid or the file cannot be read
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e


def _coerce(value: Any, expected: type, key: str, source: str) -> Any:
    """Check a TOML value against the dataclass field type."""
    if expected is bool:
        ok = isinstance(value, bool)
    elif expected is float:
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
        value = float(value) if ok else value
    elif expected is int:
        ok = isinstance(value, int) and not isinstance(value, bool)
    else:
        ok = isinstance(value, expected)

    if not ok:
        raise ConfigError(
            f"Config key '{key}' in {source} must be {expected.__name__}, "
            f"got {type(value).__name__}"
        )
    return value


def _merge_config(
    config: Config, data: dict[str, Any], source: str, sources: dict[str, str]
) -> None:
    """
    Merge loaded config data into Config object.

    Args:
        config: Config object to update
        data: Raw config data from TOML
        source: Source file path (for tracking)
        sources: Dict to update with source info
    """
    # Warn about unknown top-level keys
    for key in data:
        if key not in KNOWN_KEYS:
            warnings.warn(f"Unknown config key '{key}' in {source}", stacklevel=3)

    for section_name, known in KNOWN_KEYS.items():
        if section_name not in data:
            continue
        section_data = data[section_name]
        if not isinstance(section_data, dict):
            raise ConfigError(f"Config section '{section_name}' in {source} must be a table")
        _warn_unknown_keys(section_data, known, section_name, source)

        section = getattr(config, section_name)
        types = {f.name: f.type for f in fields(section)}
        for name in known:
            if name not in section_data:
                continue
            key = f"{section_name}.{name}"
            value = _coerce(section_data[name], _field_type(types[name]), key, source)
            setattr(section, name, value)
            sources[key] = source

    if config.defaults.format not in OUTPUT_FORMATS:
        raise ConfigError(
            f"Unknown output format '{config.defaults.format}' in {source}",
            suggestions=[f"Use one of: {', '.join(OUTPUT_FORMATS)}"],
        )
    if config.physics.max_current_per_led <= 0:
        raise ConfigError(
            f"physics.max_current_per_led in {source} must be positive",
            context={"max_current_per_led": config.physics.max_current_per_led},
        )
    if config.planning.max_passes < 0:
        raise ConfigError(
            f"planning.max_passes in {source} must not be negative",
            context={"max_passes": config.planning.max_passes},
            suggestions=["Use 0 to rebalance until no pass makes progress"],
        )


def _field_type(annotation: Any) -> type:
    # Field annotations are strings or types depending on how the module was compiled
    if isinstance(annotation, str):
        return {"str": str, "bool": bool, "float": float, "int": int}[annotation]
    return annotation


def _warn_unknown_keys(data: dict[str, Any], known: set[str], section: str, source: str) -> None:
    """Warn about unknown keys in a config section."""
    for key in data:
        if key not in known:
            warnings.warn(f"Unknown config key '{section}.{key}' in {source}", stacklevel=4)


def generate_template() -> str:
    """
    Generate a template config file with all options documented.

    Returns:
        Template TOML string
    """
    return f"""# junction-planner configuration file
# Place as .junction-planner.toml in the project root or
# ~/.config/junction-planner/config.toml for user defaults

[defaults]
# Output format: table, json, yaml
# format = "table"

# Enable verbose (debug) logging by default
# verbose = false

# Enable quiet mode by default
# quiet = false

[physics]
# Worst-case current draw per LED in amps
# max_current_per_led = {MAX_CURRENT_PER_LED}

[panels]
# Spacing between LED rows on lit panels, in micrometers
# row_pitch = {PANEL_ROW_PITCH}

# Longest single strip on a panel, in micrometers
# max_strip_length = {PANEL_MAX_STRIP_LENGTH}

[planning]
# Run the rebalancing pass after initial placement
# rebalance = true

# Maximum rebalancing passes (0 = until no further improvement)
# max_passes = 0
"""


def get_config_paths() -> dict[str, Path | None]:
    """
    Get paths to config files that would be loaded.

    Returns:
        Dict with 'user' and 'project' keys
    """
    project_config = _find_project_config(Path.cwd())

    return {
        "user": USER_CONFIG_PATH if USER_CONFIG_PATH.exists() else None,
        "project": project_config,
    }
