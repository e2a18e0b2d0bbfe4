"""
Sources Command - Provider plugin management.

This module implements commands for listing, enabling, disabling and
checking the provider plugins used during resolution.
"""

import asyncio

import typer
from rich.table import Table

from anisource.cli.context import get_config_manager
from anisource.core import PluginManager
from anisource.core.exceptions import PluginError
from anisource.ui import display_info, display_warning, get_console, handle_error, status_spinner

# Create sources command group
app = typer.Typer(
    name="sources",
    help="🔌 Manage provider plugins",
    no_args_is_help=True,
)


def _require_known(plugin_manager: PluginManager, source_name: str) -> None:
    if source_name not in plugin_manager.available_plugins:
        available = ", ".join(sorted(plugin_manager.available_plugins)) or "none"
        raise PluginError(
            f"Unknown source '{source_name}' (available: {available})",
            source_name,
        )


@app.command(name="list")
def list_sources(
    enabled_only: bool = typer.Option(
        False, "--enabled", "-e", help="Show only enabled sources"
    ),
) -> None:
    """
    📋 List discovered provider plugins with their status and priority.
    """
    try:
        config_manager = get_config_manager()
        status = PluginManager(config_manager).get_plugin_status()
    except Exception as e:
        handle_error(e, "Failed to list sources")
        raise typer.Exit(1)

    rows = sorted(
        status.items(),
        key=lambda item: (item[1]["priority"] is None, item[1]["priority"] or 0, item[0]),
    )
    if enabled_only:
        rows = [(name, info) for name, info in rows if info["enabled"]]

    if not rows:
        display_warning("No provider plugins match.")
        return

    table = Table(title="Provider Plugins", show_header=True, header_style="table.header")
    table.add_column("Name", style="primary")
    table.add_column("Status")
    table.add_column("Priority", justify="right")
    table.add_column("Description", style="muted")

    for name, info in rows:
        source_config = config_manager.sources.get_source(name)
        state = "[status.enabled]enabled[/status.enabled]" if info["enabled"] else "[status.disabled]disabled[/status.disabled]"
        if info["error"]:
            state = "[status.error]error[/status.error]"
        table.add_row(
            name,
            state,
            str(info["priority"]) if info["priority"] is not None else "-",
            (source_config.description if source_config else None) or "",
        )

    get_console().print(table)


@app.command(name="enable")
def enable_source(
    source_name: str = typer.Argument(..., help="Source plugin name to enable"),
) -> None:
    """
    ✅ Enable a provider plugin.
    """
    try:
        config_manager = get_config_manager()
        _require_known(PluginManager(config_manager), source_name)
        config_manager.enable_source(source_name)
    except Exception as e:
        handle_error(e, f"Failed to enable source '{source_name}'")
        raise typer.Exit(1)

    display_info(f"Source '{source_name}' enabled.", "✅ Source Enabled")


@app.command(name="disable")
def disable_source(
    source_name: str = typer.Argument(..., help="Source plugin name to disable"),
) -> None:
    """
    ⛔ Disable a provider plugin.
    """
    try:
        config_manager = get_config_manager()
        _require_known(PluginManager(config_manager), source_name)
        config_manager.disable_source(source_name)
    except Exception as e:
        handle_error(e, f"Failed to disable source '{source_name}'")
        raise typer.Exit(1)

    display_info(f"Source '{source_name}' disabled.", "⛔ Source Disabled")
    if not config_manager.get_enabled_sources():
        display_warning("No sources are enabled; resolution will fail until one is.")


async def _check_source(plugin_manager: PluginManager, source_name: str) -> bool:
    plugin = plugin_manager.load_plugin(source_name)
    if plugin is None:
        raise PluginError(f"Source '{source_name}' could not be loaded", source_name)
    try:
        return await plugin.validate_connection()
    finally:
        await plugin_manager.cleanup()


@app.command(name="check")
def check_source(
    source_name: str = typer.Argument(..., help="Source plugin name to check"),
) -> None:
    """
    🩺 Check that a provider plugin answers a search.
    """
    try:
        plugin_manager = PluginManager(get_config_manager())
        _require_known(plugin_manager, source_name)
        with status_spinner(f"Checking {source_name}..."):
            healthy = asyncio.run(_check_source(plugin_manager, source_name))
    except Exception as e:
        handle_error(e, f"Failed to check source '{source_name}'")
        raise typer.Exit(1)

    if healthy:
        display_info(f"Source '{source_name}' is reachable.", "✅ Source Healthy")
    else:
        display_warning(f"Source '{source_name}' did not answer a test search.")
        raise typer.Exit(1)


__all__ = ["app"]
