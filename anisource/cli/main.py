"""
CLI Main Application - Typer app entry point.

This module provides the main CLI application entry point: global options,
logging and theme setup from the configuration, and command registration.
"""

import sys
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.traceback import install as install_rich_traceback

from anisource import __version__
from anisource.core import ConfigManager
from anisource.core.config_schemas import LoggingSettings
from anisource.core.exceptions import AniSourceError, ConfigurationError
from anisource.ui import get_console, handle_error, setup_console
from anisource.cli.context import get_config_manager, set_config_manager, set_debug


# Create main Typer application
app = typer.Typer(
    name="anisource",
    help="🎌 Find playable episode sources for anime catalog entries",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool) -> None:
    if value:
        get_console().print(f"[bold blue]anisource[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version information and exit",
        callback=_version_callback,
        is_eager=True,
    ),
    config_dir: Optional[Path] = typer.Option(
        None,
        "--config-dir",
        help="Configuration directory path",
        file_okay=False,
        dir_okay=True,
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging and show the attempt trail",
    ),
) -> None:
    """
    🎌 anisource - episode source resolution.

    Searches the configured providers under several spellings of a title
    and prints the first playable set of video sources found.
    """
    try:
        _initialize_application(config_dir=config_dir, debug=debug)
    except AniSourceError as e:
        handle_error(e, "During application initialization")
        raise typer.Exit(1)
    except Exception as e:
        handle_error(e, "Unexpected error during startup", show_traceback=debug)
        raise typer.Exit(1)


def _initialize_application(config_dir: Optional[Path] = None, debug: bool = False) -> None:
    """
    Initialize configuration, logging and UI.

    Args:
        config_dir: Configuration directory override
        debug: Enable debug mode
    """
    set_debug(debug)
    install_rich_traceback(show_locals=debug)

    try:
        config_manager = ConfigManager(config_dir or Path("config"))
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Failed to load configuration: {e}", str(config_dir))
    set_config_manager(config_manager)

    settings = config_manager.settings
    _setup_logging(settings.logging, debug)
    _setup_ui(settings.ui.color_theme)


def _setup_logging(logging_settings: LoggingSettings, debug: bool = False) -> None:
    """
    Set up application logging.

    Args:
        logging_settings: Configured level and optional log file
        debug: Force debug logging
    """
    level = logging.DEBUG if debug else getattr(logging, logging_settings.level, logging.WARNING)

    handlers = [logging.StreamHandler(sys.stderr)]
    if logging_settings.file:
        handlers.append(logging.FileHandler(logging_settings.file, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )
    logging.getLogger("anisource").setLevel(level)

    # Reduce noise from third-party libraries
    if not debug:
        logging.getLogger("aiohttp").setLevel(logging.WARNING)


def _setup_ui(theme_name: str) -> None:
    setup_console(theme_name=theme_name)


def _register_commands() -> None:
    """Register commands and command groups with the main app."""
    # Import commands here to avoid circular imports
    from anisource.cli.commands import config, resolve, sources

    app.command(name="resolve")(resolve.resolve_episode)
    app.command(name="variants")(resolve.show_variants)
    app.add_typer(sources.app, name="sources", help="🔌 Manage provider plugins")
    app.add_typer(config.app, name="config", help="⚙️  Manage configuration")


# Register commands at module level to ensure they're available for help
_register_commands()


def cli_main() -> None:
    """
    Main CLI entry point for the anisource command.
    """
    try:
        app()
    except KeyboardInterrupt:
        get_console().print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)  # Standard exit code for SIGINT
    except Exception as e:
        handle_error(e, "Unexpected error in CLI")
        sys.exit(1)


__all__ = [
    "app",
    "cli_main",
    "get_config_manager",
]
