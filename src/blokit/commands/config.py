"""Configuration management commands."""

import typer

from blokit.services.config_service import get_config_service
from blokit.utils.ui.formatters import format_error, format_json, format_success

from .decorators import command_wrapper

app = typer.Typer(help="Configuration management commands")


@app.command("show")
@command_wrapper
def show_config() -> None:
    """Show the current configuration."""
    format_json(get_config_service().config.model_dump())


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., block_minutes)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    config = get_config_service().set(key, value)
    format_success(f"Configuration '{key}' set to '{getattr(config, key)}'")


@app.command("reset")
@command_wrapper
def reset_config(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if not yes and not typer.confirm("Are you sure you want to reset the configuration?"):
        format_error("Cancelled")
        raise typer.Exit(0)
    get_config_service().reset_config()
    format_success("Configuration reset to defaults")
