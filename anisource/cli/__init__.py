"""
CLI Layer - Typer application and command groups.
"""

from anisource.cli.main import app, cli_main

__all__ = ["app", "cli_main"]
