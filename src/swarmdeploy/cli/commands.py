"""Command implementations for CLI."""

import asyncio
from typing import Dict, Optional

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from swarmdeploy.config import ConfigManager
from swarmdeploy.deployer import Deployer
from swarmdeploy.errors import ConfigError, SwarmDeployError
from swarmdeploy.models.application import ApplicationSpec


console = Console()


def _get_app(manager: ConfigManager, name: str) -> ApplicationSpec:
    app = manager.get_application(name)
    if app is None:
        raise ConfigError(f"Application {name} not found in configuration")
    return app


def list_applications(manager: ConfigManager):
    """List configured applications."""
    table = Table(title="Applications")
    table.add_column("Name", style="cyan")
    table.add_column("Source", style="magenta")
    table.add_column("Build")
    table.add_column("Server")
    table.add_column("Replicas", justify="right")
    table.add_column("Mounts", justify="right")

    for name, app in sorted(manager.applications.items()):
        table.add_row(
            name,
            app.docker_image if app.is_docker_source else app.source_type,
            "-" if app.is_docker_source else app.build_type,
            app.server_id or "local",
            str(app.replicas),
            str(len(app.mounts)),
        )

    console.print(table)


def deploy_applications(manager: ConfigManager, name: Optional[str], all_apps: bool, quiet: bool = False):
    """Deploy one or all applications."""
    deployer = Deployer(manager.config)
    names = sorted(manager.applications) if all_apps else [name]
    apps = [_get_app(manager, n) for n in names]

    failures: Dict[str, str] = {}
    for app in apps:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            disable=quiet,
        ) as progress:
            task = progress.add_task(f"Deploying {app.app_name}...", total=None)
            try:
                result = asyncio.run(deployer.deploy(app))
            except SwarmDeployError as e:
                failures[app.app_name] = str(e)
                result = None
            progress.update(task, completed=True)

        if result is not None and not quiet:
            console.print(f"[green]✓[/green] {app.app_name}: service {result.action}")
        elif result is None:
            console.print(f"[red]✗[/red] {app.app_name}: {failures[app.app_name]}")

    if failures:
        raise SwarmDeployError(f"{len(failures)}/{len(apps)} deployment(s) failed")


def show_build_command(manager: ConfigManager, name: str, log_path: Optional[str] = None):
    """Print the build command for an application."""
    app = _get_app(manager, name)
    command = Deployer(manager.config).get_build_command(app, log_path)
    if command is None:
        console.print(f"[yellow]{name} has no build step ({app.build_type})[/yellow]")
        return
    console.print(command.as_shell(), soft_wrap=True, markup=False, highlight=False)


def validate_config(manager: ConfigManager):
    """Report configuration errors collected while loading."""
    if manager.errors:
        table = Table(title="Configuration errors")
        table.add_column("Source", style="cyan")
        table.add_column("Error", style="red")
        for source, error in manager.errors.items():
            table.add_row(source, error)
        console.print(table)
        raise ConfigError(f"{len(manager.errors)} configuration error(s)")

    console.print(f"[green]✓[/green] Configuration valid ({len(manager.applications)} application(s))")
