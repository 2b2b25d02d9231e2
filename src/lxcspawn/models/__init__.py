"""Pydantic models for configuration and requests."""

from lxcspawn.models.container import (
    ContainerSpec,
    DnsSpec,
    MountPointSpec,
    NetworkSpec,
    OptionsSpec,
    ResourceSpec,
    StorageSpec,
)
from lxcspawn.models.credentials import CredentialContext
from lxcspawn.models.request import (
    CreationRequest,
    Outcome,
    OutcomeStatus,
    ProvisionResult,
    TaskHandle,
)

__all__ = [
    "ContainerSpec",
    "DnsSpec",
    "MountPointSpec",
    "NetworkSpec",
    "OptionsSpec",
    "ResourceSpec",
    "StorageSpec",
    "CredentialContext",
    "CreationRequest",
    "Outcome",
    "OutcomeStatus",
    "ProvisionResult",
    "TaskHandle",
]
