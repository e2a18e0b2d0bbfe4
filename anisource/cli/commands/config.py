"""
Configuration Command - Settings management.

This module implements commands for showing, changing, validating and
resetting the JSON configuration.
"""

import json
from typing import Any, Optional

import typer
from rich.prompt import Confirm
from rich.table import Table

from anisource.cli.context import get_config_manager
from anisource.core.exceptions import ConfigurationError
from anisource.ui import display_info, display_warning, get_console, handle_error

# Create config command group
app = typer.Typer(
    name="config",
    help="⚙️  Manage application configuration and settings",
    no_args_is_help=True,
)


def parse_value(raw: str) -> Any:
    """Interpret a command line value as JSON, falling back to the raw string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def _settings_table(settings: dict, section: Optional[str]) -> Table:
    table = Table(title="Settings", show_header=True, header_style="table.header")
    table.add_column("Key", style="primary")
    table.add_column("Value")

    for group, values in settings.items():
        if section and group != section:
            continue
        for key, value in values.items():
            table.add_row(f"{group}.{key}", json.dumps(value))

    return table


def _sources_table(sources_config) -> Table:
    table = Table(title="Sources", show_header=True, header_style="table.header")
    table.add_column("Name", style="primary")
    table.add_column("Enabled")
    table.add_column("Priority", justify="right")
    table.add_column("Config", style="muted", overflow="fold")

    for name, source in sorted(sources_config.sources.items(), key=lambda item: item[1].priority):
        table.add_row(name, "yes" if source.enabled else "no", str(source.priority), json.dumps(source.config))

    return table


@app.command(name="show")
def show_config(
    section: Optional[str] = typer.Argument(
        None,
        help="Settings section to display (resolver, ui, logging or sources)"
    ),
) -> None:
    """
    📋 Display current configuration.
    """
    try:
        config_manager = get_config_manager()
        settings = config_manager.settings.model_dump(mode="json")
        if section and section != "sources" and section not in settings:
            raise ConfigurationError(f"Unknown configuration section: {section}")
    except Exception as e:
        handle_error(e, "Failed to display configuration")
        raise typer.Exit(1)

    console = get_console()
    if section != "sources":
        console.print(_settings_table(settings, section))
    if section in (None, "sources"):
        console.print(_sources_table(config_manager.sources))


@app.command(name="set")
def set_config(
    key: str = typer.Argument(..., help="Configuration key (dot notation)"),
    value: str = typer.Argument(..., help="New value (JSON, or a plain string)"),
) -> None:
    """
    🔧 Set a configuration value.

    Example: anisource config set resolver.dubbed true
    """
    try:
        parsed = parse_value(value)
        get_config_manager().update_setting(key, parsed)
    except Exception as e:
        handle_error(e, f"Failed to set configuration value '{key}'")
        raise typer.Exit(1)

    display_info(f"{key} = {json.dumps(parsed)}", "✅ Configuration Updated")


@app.command(name="validate")
def validate_config() -> None:
    """
    ✅ Validate current configuration.
    """
    report = get_config_manager().validate_configuration()

    for warning in report["warnings"]:
        display_warning(warning)

    if not report["valid"]:
        display_warning("\n".join(report["issues"]), "❌ Invalid Configuration")
        raise typer.Exit(1)

    display_info("Configuration is valid.", "✅ Configuration Valid")


@app.command(name="reset")
def reset_config(
    confirm: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation prompt"
    ),
) -> None:
    """
    🔄 Reset configuration to defaults.

    This action requires confirmation unless --yes is used.
    """
    try:
        if not confirm:
            if not Confirm.ask(
                "[bold red]⚠️  This will reset ALL configuration to defaults. Continue?[/bold red]",
                default=False
            ):
                display_info("Configuration reset cancelled.", "ℹ️  Cancelled")
                return

        get_config_manager().reset_to_defaults()
        display_info("Configuration has been reset to default values.", "✅ Configuration Reset")

    except Exception as e:
        handle_error(e, "Failed to reset configuration")
        raise typer.Exit(1)


__all__ = ["app", "parse_value"]
