"""SSH host and key management."""

from lxcspawn.ssh.config import HostEntry, add_host, has_host, parse_hosts, remove_host
from lxcspawn.ssh.manager import SSHKeyManager

__all__ = [
    "HostEntry",
    "SSHKeyManager",
    "add_host",
    "has_host",
    "parse_hosts",
    "remove_host",
]
