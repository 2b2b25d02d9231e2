"""Credential context models."""

import re
from typing import Dict, Optional
from pydantic import BaseModel, Field, validator


SECRET_REFERENCE = re.compile(r"^\$\{([A-Za-z_][A-Za-z0-9_]*)\}$")


class CredentialContext(BaseModel):
    """API credentials and named secrets, loaded once per run."""
    host: str = Field(..., min_length=1)
    user: str = Field(..., min_length=1)
    token_name: str = Field(..., min_length=1)
    token_secret: str = Field(..., min_length=1, repr=False)
    port: int = Field(default=8006, gt=0, lt=65536)
    verify_ssl: bool = Field(default=False)
    secrets: Dict[str, str] = Field(default_factory=dict, repr=False)

    class Config:
        """Pydantic config."""
        frozen = True

    @validator("user")
    def default_realm(cls, v):
        """Users without a realm authenticate against PAM."""
        return v if "@" in v else f"{v}@pam"

    @property
    def base_url(self) -> str:
        """Root of the Proxmox JSON API."""
        return f"https://{self.host}:{self.port}/api2/json"

    @property
    def authorization(self) -> str:
        """Value for the Authorization header."""
        return f"PVEAPIToken={self.user}!{self.token_name}={self.token_secret}"

    def resolve(self, value: Optional[str]) -> Optional[str]:
        """Substitute a ``${NAME}`` reference with the named secret.

        Values that are not a reference are returned unchanged. A reference
        to an unset or empty variable resolves to None.
        """
        if value is None:
            return None
        match = SECRET_REFERENCE.match(value)
        if not match:
            return value
        return self.secrets.get(match.group(1)) or None

    @staticmethod
    def is_reference(value: Optional[str]) -> bool:
        """Whether ``value`` is a ``${NAME}`` secret reference."""
        return value is not None and SECRET_REFERENCE.match(value) is not None
