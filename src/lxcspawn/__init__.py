"""
LXC Spawn - declarative Proxmox LXC container creation.

Turns a YAML container description into a Proxmox VE API creation request
and follows the resulting task until it finishes.
"""

__version__ = "1.0.0"

# Re-export key components for easier access
from lxcspawn.models.container import ContainerSpec
from lxcspawn.models.credentials import CredentialContext
from lxcspawn.models.request import CreationRequest, Outcome, TaskHandle

__all__ = [
    "ContainerSpec",
    "CredentialContext",
    "CreationRequest",
    "Outcome",
    "TaskHandle",
]
