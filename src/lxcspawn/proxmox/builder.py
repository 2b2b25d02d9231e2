"""Translation of a container spec into creation parameters."""

import logging
from typing import List, Optional, Tuple, Union

from lxcspawn.errors import ValidationError
from lxcspawn.models.container import ContainerSpec, MountPointSpec, NetworkSpec
from lxcspawn.models.credentials import CredentialContext
from lxcspawn.models.request import CreationRequest


logger = logging.getLogger(__name__)

MIN_VMID = 100
DEFAULT_INTERFACE = "name=eth0,bridge=vmbr0,ip=dhcp"


def format_value(value: Union[bool, int, float, str]) -> str:
    """Render a value the way the API expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    return str(value)


def format_interface(interface: NetworkSpec) -> str:
    """Render one interface as ``name=..,bridge=..,ip=..[,gw=..][,firewall=..]``."""
    attributes = [
        f"name={interface.name}",
        f"bridge={interface.bridge}",
        f"ip={interface.ip}",
    ]
    if not interface.is_dhcp and interface.gateway:
        attributes.append(f"gw={interface.gateway}")
    if interface.firewall is not None:
        attributes.append(f"firewall={format_value(interface.firewall)}")
    return ",".join(attributes)


def format_mountpoint(mountpoint: MountPointSpec) -> str:
    """Render one mount point as ``storage:size,mp=path[,backup=..]``."""
    value = f"{mountpoint.storage}:{format_value(mountpoint.size)},mp={mountpoint.path}"
    if mountpoint.backup is not None:
        value += f",backup={format_value(mountpoint.backup)}"
    return value


def build_request(
    spec: ContainerSpec,
    vmid: int,
    credentials: CredentialContext,
) -> CreationRequest:
    """Build the creation parameters for ``spec`` under ``vmid``.

    Pure function: secrets come from ``credentials`` and nothing is read
    from the environment or the network.
    """
    if isinstance(vmid, bool) or not isinstance(vmid, int) or vmid < MIN_VMID:
        raise ValidationError(f"Invalid container ID: {vmid!r}")
    if not spec.node or not spec.template:
        raise ValidationError("Required field missing: node/template")

    params: List[Tuple[str, str]] = []
    secret_keys = set()

    def add(key: str, value) -> None:
        params.append((key, format_value(value)))

    def add_optional(key: str, value: Optional[str], from_secret: bool = False) -> None:
        resolved = credentials.resolve(value)
        if resolved:
            params.append((key, resolved))
            if from_secret or credentials.is_reference(value):
                secret_keys.add(key)
        elif value:
            logger.debug(f"Omitting {key}: referenced variable is not set")

    add("vmid", vmid)
    add("ostemplate", spec.template)
    add_optional("hostname", spec.hostname)
    add_optional("password", spec.password)
    add_optional(
        "ssh-public-keys",
        _resolve_keys(spec.ssh_keys, credentials),
        from_secret=any(
            credentials.is_reference(line) for line in (spec.ssh_keys or "").split("\n")
        ),
    )

    resources = spec.resources
    add("memory", resources.memory)
    add("swap", resources.swap)
    add("cores", resources.cores)
    if resources.cpulimit is not None:
        add("cpulimit", resources.cpulimit)
    add("cpuunits", resources.cpuunits)

    add("rootfs", f"{spec.storage.storage}:{format_value(spec.storage.size)}")

    if spec.network:
        for index, interface in enumerate(spec.network):
            add(f"net{index}", format_interface(interface))
    else:
        add("net0", DEFAULT_INTERFACE)

    for index, mountpoint in enumerate(spec.mountpoints):
        add(f"mp{index}", format_mountpoint(mountpoint))

    options = spec.options
    add("unprivileged", options.unprivileged)
    add("onboot", options.onboot)
    add("start", options.start)
    add("protection", options.protection)

    add_optional("nameserver", spec.dns.nameserver)
    add_optional("searchdomain", spec.dns.searchdomain)
    add_optional("tags", spec.tags)
    add_optional("description", spec.description)

    return CreationRequest(params=tuple(params), secret_keys=frozenset(secret_keys))


def _resolve_keys(ssh_keys: Optional[str], credentials: CredentialContext) -> Optional[str]:
    """Resolve each key line; a single ``${NAME}`` may hold several keys."""
    if not ssh_keys:
        return None
    keys = []
    for line in ssh_keys.split("\n"):
        resolved = credentials.resolve(line)
        if resolved:
            keys.extend(key.strip() for key in resolved.splitlines() if key.strip())
    return "\n".join(keys) or None
