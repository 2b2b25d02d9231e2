"""Command implementations for CLI."""

from pathlib import Path
from typing import Dict, Optional

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from lxcspawn.config import load_container_spec, load_credentials
from lxcspawn.models.container import ContainerSpec
from lxcspawn.models.request import OutcomeStatus, ProvisionResult
from lxcspawn.provisioner import Provisioner
from lxcspawn.proxmox.builder import build_request
from lxcspawn.proxmox.client import ProxmoxClient
from lxcspawn.proxmox.poller import TaskPoller
from lxcspawn.ssh.config import HostEntry
from lxcspawn.ssh.manager import SSHKeyManager


console = Console()
stderr_console = Console(stderr=True)

_OUTCOME_STYLES = {
    OutcomeStatus.SUCCESS: "[green]success[/green]",
    OutcomeStatus.FAILURE: "[red]failure[/red]",
    OutcomeStatus.UNKNOWN: "[yellow]unknown[/yellow]",
}


def create_container(
    config: Path,
    env_file: Optional[Path] = None,
    timeout: float = 600.0,
    quiet: bool = False,
) -> ProvisionResult:
    """Validate, create and wait for a container; print a summary."""
    spec = load_container_spec(config)
    credentials = load_credentials(env_file)
    client = ProxmoxClient(credentials)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        disable=quiet,
    ) as progress:
        task = progress.add_task(f"Creating container on {spec.node}...", total=None)

        def on_poll(status: str):
            progress.update(task, description=f"Waiting for creation task ({status})...")

        poller = TaskPoller(client, timeout=timeout, on_poll=on_poll)
        result = Provisioner(client, poller).provision(spec, credentials)

        progress.update(task, completed=True)

    if not quiet:
        print_result(result)
    return result


def print_result(result: ProvisionResult):
    """Print the final summary of a run."""
    table = Table(title="LXC container creation")
    table.add_column("Container ID", style="cyan")
    table.add_column("Node", style="magenta")
    table.add_column("Outcome")
    table.add_column("Task", style="dim")

    table.add_row(
        str(result.vmid),
        result.node,
        _OUTCOME_STYLES[result.outcome.status],
        escape(result.task.upid) if result.task else "-",
    )
    console.print(table)


def _spec_rows(spec: ContainerSpec) -> Dict[str, str]:
    resources = spec.resources
    rows = {
        "Node": spec.node,
        "Template": spec.template,
        "Hostname": spec.hostname or "-",
        "Memory": f"{resources.memory} MB (swap {resources.swap} MB)",
        "Cores": str(resources.cores),
        "Root disk": f"{spec.storage.storage}:{spec.storage.size:g}",
        "Interfaces": str(len(spec.network) or "1 (default)"),
        "Mount points": str(len(spec.mountpoints)),
    }
    options = spec.options
    rows["Options"] = ", ".join(
        f"{name}={'yes' if value else 'no'}"
        for name, value in (
            ("unprivileged", options.unprivileged),
            ("onboot", options.onboot),
            ("start", options.start),
            ("protection", options.protection),
        )
    )
    return rows


def validate_config(config: Path) -> ContainerSpec:
    """Validate a configuration document without contacting Proxmox."""
    spec = load_container_spec(config)

    table = Table(title=f"Configuration: {escape(str(config))}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for field, value in _spec_rows(spec).items():
        table.add_row(field, escape(value))
    console.print(table)
    console.print("[green]✓[/green] Configuration is valid")
    return spec


def plan_request(config: Path, vmid: int, env_file: Optional[Path] = None):
    """Show the parameters a creation run would submit."""
    spec = load_container_spec(config)
    credentials = load_credentials(env_file)
    request = build_request(spec, vmid, credentials)

    table = Table(title=f"POST /nodes/{escape(spec.node)}/lxc")
    table.add_column("Parameter", style="cyan")
    table.add_column("Value")
    for name, value in request.redacted().items():
        table.add_row(name, escape(value))
    console.print(table)
    return request


def ssh_setup(
    manager: SSHKeyManager,
    alias: str,
    hostname: str,
    user: str,
    key_name: str,
    comment: str = "",
):
    """Create a key for a host, install it and add a config entry."""
    entry = HostEntry(alias=alias, hostname=hostname, user=user, identity_file=key_name)
    added = manager.setup_host(entry, comment=comment)
    if added:
        console.print(f"[green]✓[/green] Config entry added to {manager.config_file}")
    else:
        console.print(f"[yellow]![/yellow] Config already has an entry for {escape(alias)}")
    console.print(f"Setup complete. Try: ssh {escape(alias)}")


def ssh_cleanup(manager: SSHKeyManager, alias: str):
    """Remove a host entry and its key files."""
    removed = manager.cleanup_host(alias)
    if removed:
        console.print(f"[green]✓[/green] Deleted {removed} and {removed}.pub")
    console.print(
        "Note: remove the public key from ~/.ssh/authorized_keys on the remote host manually."
    )


def ssh_batch(manager: SSHKeyManager) -> Dict[str, bool]:
    """Install keys for all complete hosts in the config file."""
    console.print(f"Using config: {manager.config_file}")
    results = manager.batch_setup()

    table = Table(title="Batch SSH key setup")
    table.add_column("Host", style="cyan")
    table.add_column("Result")
    for alias, ok in results.items():
        table.add_row(escape(alias), "[green]✓[/green]" if ok else "[red]✗[/red]")
    console.print(table)
    return results
