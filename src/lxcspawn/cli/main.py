"""Main CLI implementation using Typer."""

import subprocess
from pathlib import Path
from typing import Any, Callable, Optional

import typer
from rich.console import Console
from rich.markup import escape

from lxcspawn.cli.commands import (
    create_container,
    plan_request,
    ssh_batch,
    ssh_cleanup,
    ssh_setup,
    validate_config,
)
from lxcspawn.errors import UNKNOWN_OUTCOME_EXIT_CODE, LxcSpawnError
from lxcspawn.models.request import OutcomeStatus
from lxcspawn.ssh.manager import SSHKeyManager
from lxcspawn.utils.logging import setup_logging


# Create Typer app
app = typer.Typer(
    name="lxcspawn",
    help="Create Proxmox LXC containers from YAML configuration",
    add_completion=False,
)

# Errors go to stderr
console = Console(stderr=True)


def _run_cli_command(handler: Callable[..., Any], debug: bool = False, **kwargs: Any) -> Any:
    """Helper to run a CLI command with logging and error handling."""
    setup_logging("DEBUG" if debug else "INFO")
    try:
        return handler(**kwargs)
    except LxcSpawnError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        if e.__cause__ is not None:
            console.print(f"[dim]Cause: {escape(str(e.__cause__))}[/dim]")
        vmid = getattr(e, "vmid", None)
        if vmid is not None:
            # The container may exist half-created and need manual cleanup
            console.print(
                f"Container ID: [cyan]{vmid}[/cyan]  Node: [magenta]{escape(str(e.node))}[/magenta]"
            )
        raise typer.Exit(e.exit_code) from e


@app.command("create")
def create_command(
    config: Path = typer.Argument(..., help="Path to the YAML configuration file"),
    env_file: Optional[Path] = typer.Option(
        None, "--env-file", "-e", help="Environment file with Proxmox credentials"
    ),
    timeout: float = typer.Option(
        600.0, "--timeout", "-t", min=1.0, help="Seconds to wait for the creation task"
    ),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
):
    """Create an LXC container and wait for it to finish."""
    result = _run_cli_command(
        create_container, debug=debug, config=config, env_file=env_file, timeout=timeout
    )
    if result.outcome.status is OutcomeStatus.UNKNOWN:
        console.print("[yellow]Warning:[/yellow] task stopped without an exit status")
        raise typer.Exit(UNKNOWN_OUTCOME_EXIT_CODE)


@app.command("validate")
def validate_command(
    config: Path = typer.Argument(..., help="Path to the YAML configuration file"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
):
    """Validate a configuration file without contacting Proxmox."""
    _run_cli_command(validate_config, debug=debug, config=config)


@app.command("plan")
def plan_command(
    config: Path = typer.Argument(..., help="Path to the YAML configuration file"),
    vmid: int = typer.Option(..., "--vmid", min=100, help="Container ID to render"),
    env_file: Optional[Path] = typer.Option(
        None, "--env-file", "-e", help="Environment file with Proxmox credentials"
    ),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
):
    """Show the creation parameters without submitting them."""
    _run_cli_command(plan_request, debug=debug, config=config, vmid=vmid, env_file=env_file)


# SSH subcommands
ssh_app = typer.Typer(help="SSH key and host management")
app.add_typer(ssh_app, name="ssh")


def _run_ssh_command(handler: Callable[..., Any], config_file: Optional[Path], **kwargs: Any):
    """Run an SSH command; subprocess failures end the command."""
    setup_logging("INFO")
    manager = SSHKeyManager(config_file=config_file)
    try:
        return handler(manager, **kwargs)
    except subprocess.CalledProcessError as e:
        console.print(f"[red]Error:[/red] {escape(' '.join(e.cmd))} exited with {e.returncode}")
        raise typer.Exit(1) from e
    except OSError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e


@ssh_app.command("setup")
def ssh_setup_command(
    alias: str = typer.Option(..., prompt="Short nickname for this host (e.g. 'docker')"),
    hostname: str = typer.Option(..., prompt="Remote hostname or IP"),
    user: str = typer.Option(..., prompt="Remote username"),
    key_name: str = typer.Option(..., prompt="Key file name in ~/.ssh (e.g. 'id_ed25519_docker')"),
    comment: str = typer.Option("", prompt="Optional comment for key"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="SSH config file"),
):
    """Generate a key, copy it to a host and add a config entry."""
    _run_ssh_command(
        ssh_setup,
        config_file,
        alias=alias,
        hostname=hostname,
        user=user,
        key_name=key_name,
        comment=comment,
    )


@ssh_app.command("cleanup")
def ssh_cleanup_command(
    alias: str = typer.Argument(..., help="Host alias to remove"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="SSH config file"),
):
    """Remove a host entry and delete its key files."""
    _run_ssh_command(ssh_cleanup, config_file, alias=alias)


@ssh_app.command("batch")
def ssh_batch_command(
    config_file: Optional[Path] = typer.Argument(None, help="SSH config file (default ~/.ssh/config)"),
):
    """Install keys for every host in an SSH config file."""
    if config_file is not None and not config_file.is_file():
        console.print(f"[red]Error:[/red] Config file not found: {escape(str(config_file))}")
        raise typer.Exit(1)
    _run_ssh_command(ssh_batch, config_file)


def main():
    """Main entry point for CLI."""
    app()
