"""Error kinds raised while provisioning a container."""

from typing import Optional


class LxcSpawnError(Exception):
    """Base error. Every kind is fatal to the run."""
    exit_code = 1


class ValidationError(LxcSpawnError):
    """Configuration document is missing a required field or is malformed."""
    exit_code = 3


class CredentialError(LxcSpawnError):
    """Secret context is missing or incomplete."""
    exit_code = 4


class TransportError(LxcSpawnError):
    """Connection or authentication failure talking to Proxmox."""
    exit_code = 5


class ProtocolError(LxcSpawnError):
    """Proxmox answered with an unusable payload."""
    exit_code = 6

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class RemoteTaskFailure(LxcSpawnError):
    """The creation task ran on the node and ended in failure."""
    exit_code = 7

    def __init__(self, exit_detail: str, vmid: Optional[int] = None, node: Optional[str] = None):
        super().__init__(f"Container creation failed with status: {exit_detail}")
        self.exit_detail = exit_detail
        self.vmid = vmid
        self.node = node


class TaskTimeoutError(LxcSpawnError):
    """A task did not reach a terminal state within the polling bound."""
    exit_code = 8

    def __init__(self, message: str, vmid: Optional[int] = None, node: Optional[str] = None):
        super().__init__(message)
        self.vmid = vmid
        self.node = node


# Not an exception: the task stopped without reporting an exit status.
UNKNOWN_OUTCOME_EXIT_CODE = 9
