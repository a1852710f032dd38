"""Main CLI implementation using Typer."""

import asyncio
import os
from pathlib import Path
from typing import Any, Callable, Optional

import typer
from rich.console import Console

from swarmdeploy.cli.commands import (
    deploy_applications,
    list_applications,
    show_build_command,
    validate_config,
)
from swarmdeploy.config import ConfigManager
from swarmdeploy.errors import SwarmDeployError
from swarmdeploy.utils.logging import setup_logging


# Create Typer app
app = typer.Typer(
    name="swarmctl",
    help="swarmdeploy - deploy applications as Docker Swarm services",
    add_completion=False,
)

# Console for rich output
console = Console()


def _config_dir(config_dir: Optional[str]) -> Path:
    return Path(config_dir or os.environ.get("SWARMDEPLOY_CONFIG_DIR") or "./configs")


def _run_cli_command(handler: Callable[..., Any], config_dir: Optional[str], **kwargs: Any):
    """Helper to load configuration and run a CLI command with error handling."""
    try:
        manager = ConfigManager(_config_dir(config_dir))
        asyncio.run(manager.load())
        setup_logging(manager.config.agent.log_level)
        handler(manager, **kwargs)
    except SwarmDeployError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


ConfigDirOption = typer.Option(
    None, "--config-dir", "-c", help="Configuration directory"
)


@app.command("list")
def list_command(config_dir: Optional[str] = ConfigDirOption):
    """List configured applications."""
    _run_cli_command(list_applications, config_dir=config_dir)


@app.command("deploy")
def deploy_command(
    name: Optional[str] = typer.Argument(None, help="Application to deploy"),
    all: bool = typer.Option(False, "--all", help="Deploy all configured applications"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only report failures"),
    config_dir: Optional[str] = ConfigDirOption,
):
    """Build and deploy application(s) as swarm services."""
    if not name and not all:
        console.print("[red]Error:[/red] Specify application name or use --all")
        raise typer.Exit(1)
    _run_cli_command(deploy_applications, config_dir=config_dir, name=name, all_apps=all, quiet=quiet)


@app.command("build-command")
def build_command_command(
    name: str = typer.Argument(..., help="Application name"),
    log_path: Optional[str] = typer.Option(None, "--log", help="Log file the command appends to"),
    config_dir: Optional[str] = ConfigDirOption,
):
    """Show the build command for an application."""
    _run_cli_command(show_build_command, config_dir=config_dir, name=name, log_path=log_path)


# Config subcommands
config_app = typer.Typer(help="Configuration commands")
app.add_typer(config_app, name="config")


@config_app.command("validate")
def config_validate_command(config_dir: Optional[str] = ConfigDirOption):
    """Validate configuration files."""
    _run_cli_command(validate_config, config_dir=config_dir)


def main():
    """Main entry point for CLI."""
    app()
