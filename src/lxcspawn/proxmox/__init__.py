"""Proxmox VE API access."""

from lxcspawn.proxmox.builder import build_request
from lxcspawn.proxmox.client import ProxmoxClient
from lxcspawn.proxmox.poller import TaskPoller

__all__ = [
    "build_request",
    "ProxmoxClient",
    "TaskPoller",
]
