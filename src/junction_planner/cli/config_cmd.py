"""
Config command for the junction-planner CLI.

Usage:
    jbp config --show          Show effective configuration with sources
    jbp config --init          Create template config file
    jbp config --paths         Show config file locations
    jbp config get <key>       Get a specific config value
"""

import argparse
import sys
from pathlib import Path

from junction_planner.config import (
    CONFIG_FILENAMES,
    KNOWN_KEYS,
    USER_CONFIG_PATH,
    Config,
    ConfigError,
    generate_template,
    get_config_paths,
)


def add_arguments(parser: argparse.ArgumentParser) -> None:
    """Register config arguments on ``parser``."""
    action_group = parser.add_mutually_exclusive_group()
    action_group.add_argument(
        "--show",
        action="store_true",
        help="Show effective configuration with sources",
    )
    action_group.add_argument(
        "--init",
        action="store_true",
        help="Create template config file in current directory",
    )
    action_group.add_argument(
        "--paths",
        action="store_true",
        help="Show config file paths",
    )
    parser.add_argument(
        "action",
        nargs="?",
        choices=["get"],
        help="Config action",
    )
    parser.add_argument(
        "key",
        nargs="?",
        help="Config key (e.g., physics.max_current_per_led)",
    )
    parser.add_argument(
        "--user",
        action="store_true",
        help="Use user config (~/.config/junction-planner/config.toml) for --init",
    )


def run(args: argparse.Namespace) -> int:
    """Execute the config command from parsed arguments."""
    try:
        if args.init:
            return _init_config(args.user)
        elif args.paths:
            return _show_paths()
        elif args.action == "get":
            if not args.key:
                print("Error: 'get' requires a key argument", file=sys.stderr)
                return 1
            return _get_config(args.key)
        else:
            return _show_config()

    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _show_config() -> int:
    """Show effective configuration with sources."""
    config = Config.load()

    print("# Effective junction-planner configuration")
    for section, keys in KNOWN_KEYS.items():
        print()
        print(f"[{section}]")
        for key in sorted(keys):
            dotted = f"{section}.{key}"
            _print_value(key, config.get(dotted), config.get_source(dotted))

    return 0


def _format_value(value) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "# not set"
    return str(value)


def _print_value(key: str, value, source: str) -> None:
    """Print a config value with its source."""
    source_display = Path(source).name if source != "default" else source
    print(f"{key} = {_format_value(value)}  # from: {source_display}")


def _show_paths() -> int:
    """Show config file paths."""
    paths = get_config_paths()

    print("Config file paths:")
    print()

    print(f"User config: {USER_CONFIG_PATH}")
    print("  Status: exists" if paths["user"] else "  Status: not found")
    print()

    print(f"Project config search: {', '.join(CONFIG_FILENAMES)}")
    if paths["project"]:
        print(f"  Found: {paths['project']}")
    else:
        print("  Status: not found")

    return 0


def _init_config(user: bool = False) -> int:
    """Create a template config file."""
    if user:
        target = USER_CONFIG_PATH
        target.parent.mkdir(parents=True, exist_ok=True)
    else:
        target = Path.cwd() / CONFIG_FILENAMES[0]

    if target.exists():
        print(f"Error: Config file already exists: {target}", file=sys.stderr)
        print("Remove it first or edit manually.", file=sys.stderr)
        return 1

    try:
        target.write_text(generate_template())
    except OSError as e:
        print(f"Error writing config file: {e}", file=sys.stderr)
        return 1

    print(f"Created config template: {target}")
    return 0


def _get_config(key: str) -> int:
    """Get a specific config value."""
    config = Config.load()

    try:
        value = config.get(key)
    except KeyError:
        print(f"Error: Unknown config key '{key}'. Use 'section.key' format.", file=sys.stderr)
        return 1

    print(_format_value(value).strip('"'))

    source = config.get_source(key)
    if source != "default":
        print(f"# source: {source}", file=sys.stderr)

    return 0


def main(argv: list[str] | None = None) -> int:
    """Standalone entry point for the config command."""
    parser = argparse.ArgumentParser(
        prog="junction-planner config",
        description="Manage junction-planner configuration",
    )
    add_arguments(parser)
    return run(parser.parse_args(argv))
