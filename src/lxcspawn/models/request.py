"""Request and task outcome models."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple
from urllib.parse import quote


# Values that may contain spaces, newlines or reserved characters.
FREE_TEXT_KEYS = frozenset({"ssh-public-keys", "description", "password"})
STRUCTURED_SAFE = ":/,=@"


@dataclass(frozen=True)
class CreationRequest:
    """Ordered parameter set for the container creation endpoint.

    ``secret_keys`` names parameters whose value came from a secret
    reference; they are masked like the password.
    """
    params: Tuple[Tuple[str, str], ...]
    secret_keys: FrozenSet[str] = frozenset()

    def __contains__(self, key: str) -> bool:
        return any(name == key for name, _ in self.params)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return the value for a parameter."""
        for name, value in self.params:
            if name == key:
                return value
        return default

    def keys(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.params)

    def as_dict(self) -> Dict[str, str]:
        return dict(self.params)

    def encode(self) -> str:
        """Render as an application/x-www-form-urlencoded body."""
        parts = []
        for name, value in self.params:
            safe = "" if name in FREE_TEXT_KEYS else STRUCTURED_SAFE
            parts.append(f"{name}={quote(value, safe=safe)}")
        return "&".join(parts)

    def redacted(self) -> Dict[str, str]:
        """Parameters with secret values masked, for logs and previews."""
        return {
            name: "********" if name == "password" or name in self.secret_keys else value
            for name, value in self.params
        }


@dataclass(frozen=True)
class TaskHandle:
    """Asynchronous task on a node, identified by its UPID."""
    node: str
    upid: str


class OutcomeStatus(Enum):
    """Terminal classification of a task."""
    SUCCESS = "success"
    FAILURE = "failure"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Outcome:
    """Result of waiting for a task."""
    status: OutcomeStatus
    exit_detail: Optional[str] = None

    @classmethod
    def success(cls) -> "Outcome":
        return cls(OutcomeStatus.SUCCESS, "OK")

    @classmethod
    def failure(cls, exit_detail: str) -> "Outcome":
        return cls(OutcomeStatus.FAILURE, exit_detail)

    @classmethod
    def unknown(cls) -> "Outcome":
        return cls(OutcomeStatus.UNKNOWN)

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS


@dataclass(frozen=True)
class ProvisionResult:
    """Summary of one provisioning run."""
    vmid: int
    node: str
    outcome: Outcome
    task: Optional[TaskHandle] = None
