"""Shared fixtures."""

import pytest

from lxcspawn.models.container import ContainerSpec
from lxcspawn.models.credentials import CredentialContext


@pytest.fixture
def credentials():
    """Credential context with a couple of named secrets."""
    return CredentialContext(
        host="pve.example.lan",
        user="root",
        token_name="automation",
        token_secret="s3cret",
        secrets={"FOO": "bar", "ROOT_PASSWORD": "hunter2", "EMPTY": ""},
    )


@pytest.fixture
def minimal_spec():
    """Spec with only the required fields."""
    return ContainerSpec(
        node="pve",
        template="local:vztmpl/x.tar.zst",
        resources={"memory": 1024},
    )


@pytest.fixture
def env_file(tmp_path):
    """Environment file with complete credentials."""
    path = tmp_path / ".env"
    path.write_text(
        "PROXMOX_HOST=pve.example.lan\n"
        "PROXMOX_USER=root\n"
        "PROXMOX_TOKEN_NAME=automation\n"
        "PROXMOX_TOKEN_SECRET=s3cret\n"
        "ROOT_PASSWORD=hunter2\n"
    )
    return path
