"""Container specification models."""

from typing import List, Optional
from pydantic import BaseModel, Field, root_validator, validator


class SpecModel(BaseModel):
    """Base for configuration sections. An explicit null means "not set"."""

    @root_validator(pre=True)
    def drop_nulls(cls, values):
        """Let defaults apply to keys given as null."""
        if isinstance(values, dict):
            return {key: value for key, value in values.items() if value is not None}
        return values

    class Config:
        """Pydantic config."""
        extra = "ignore"


def _blank_to_none(value):
    # YAML reads unquoted numbers as int or float; booleans stay invalid
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if isinstance(value, str) and not value.strip():
        return None
    return value


class ResourceSpec(SpecModel):
    """CPU and memory allocation."""
    memory: int = Field(..., gt=0, description="Memory in MB")
    swap: int = Field(default=512, ge=0, description="Swap in MB")
    cores: int = Field(default=1, ge=1)
    cpulimit: Optional[float] = Field(None, ge=0)
    cpuunits: int = Field(default=1024, gt=0)


class StorageSpec(SpecModel):
    """Root filesystem."""
    storage: str = Field(default="local-lvm", min_length=1, description="Storage backend")
    size: float = Field(default=8, gt=0, description="Size in GB")


class NetworkSpec(SpecModel):
    """Network interface."""
    name: str = Field(..., min_length=1)
    bridge: str = Field(default="vmbr0", min_length=1)
    ip: str = Field(default="dhcp", min_length=1)
    gateway: Optional[str] = None
    firewall: Optional[bool] = None

    @validator("gateway", pre=True)
    def blank_gateway(cls, v):
        """Treat an empty gateway as unset."""
        return _blank_to_none(v)

    @property
    def is_dhcp(self) -> bool:
        """Whether the address is assigned by DHCP."""
        return self.ip == "dhcp"


class MountPointSpec(SpecModel):
    """Additional volume attached to the container."""
    storage: str = Field(..., min_length=1)
    size: float = Field(..., gt=0, description="Size in GB")
    path: str = Field(..., min_length=1)
    backup: Optional[bool] = None


class OptionsSpec(SpecModel):
    """Container flags. Always sent to the API."""
    unprivileged: bool = Field(default=True)
    onboot: bool = Field(default=False)
    start: bool = Field(default=False)
    protection: bool = Field(default=False)


class DnsSpec(SpecModel):
    """DNS settings."""
    nameserver: Optional[str] = None
    searchdomain: Optional[str] = None

    @validator("nameserver", "searchdomain", pre=True)
    def blank_to_none(cls, v):
        return _blank_to_none(v)


class ContainerSpec(SpecModel):
    """Validated configuration for one LXC container."""
    node: str = Field(..., min_length=1, description="Proxmox node name")
    template: str = Field(..., min_length=1, description="OS template volume id")
    hostname: Optional[str] = None
    password: Optional[str] = Field(None, repr=False)
    ssh_keys: Optional[str] = Field(None, description="Public keys, one per line")
    resources: ResourceSpec = Field(...)
    storage: StorageSpec = Field(default_factory=StorageSpec)
    network: List[NetworkSpec] = Field(default_factory=list)
    mountpoints: List[MountPointSpec] = Field(default_factory=list)
    options: OptionsSpec = Field(default_factory=OptionsSpec)
    dns: DnsSpec = Field(default_factory=DnsSpec)
    tags: Optional[str] = None
    description: Optional[str] = None

    @validator("hostname", "password", "description", pre=True)
    def blank_to_none(cls, v):
        """Empty strings count as unset."""
        return _blank_to_none(v)

    @validator("ssh_keys", pre=True)
    def join_ssh_keys(cls, v):
        """Accept a list of keys or a multi-line block; one key per line."""
        if isinstance(v, (list, tuple)):
            lines = [str(item) for item in v]
        elif isinstance(v, str):
            lines = v.splitlines()
        else:
            return v
        keys = [line.strip() for line in lines if line.strip()]
        return "\n".join(keys) or None

    @validator("tags", pre=True)
    def join_tags(cls, v):
        """Proxmox separates tags with semicolons."""
        if isinstance(v, (list, tuple)):
            v = ";".join(str(tag) for tag in v)
        return _blank_to_none(v)
