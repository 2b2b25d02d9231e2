"""Loading of container configuration documents and credentials."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import dotenv_values
from pydantic import ValidationError as PydanticValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from lxcspawn.errors import CredentialError, ValidationError
from lxcspawn.models.container import ContainerSpec
from lxcspawn.models.credentials import CredentialContext


logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = Path(".env")

REQUIRED_VARIABLES = {
    "PROXMOX_HOST": "host",
    "PROXMOX_USER": "user",
    "PROXMOX_TOKEN_NAME": "token_name",
    "PROXMOX_TOKEN_SECRET": "token_secret",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


def format_errors(error: PydanticValidationError) -> str:
    """Render pydantic errors as ``path: message`` lines."""
    lines = []
    for item in error.errors():
        path = ""
        for part in item["loc"]:
            if isinstance(part, int):
                path += f"[{part}]"
            else:
                path += f".{part}" if path else str(part)
        lines.append(f"{path or '<root>'}: {item['msg']}")
    return "\n".join(lines)


def _read_yaml(config_path: Path) -> Any:
    """Read and parse a YAML file."""
    yaml = YAML(typ="safe")
    try:
        content = config_path.read_text()
    except OSError as e:
        raise ValidationError(f"Cannot read configuration file {config_path}: {e}") from e
    try:
        return yaml.load(content)
    except YAMLError as e:
        raise ValidationError(f"Invalid YAML syntax in {config_path}: {e}") from e


def load_container_spec(config_path: Path) -> ContainerSpec:
    """Load and validate a container configuration document.

    The container may be described under a top-level ``container`` key or at
    the top level of the document.
    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise ValidationError(f"Configuration file not found: {config_path}")

    logger.info(f"Validating configuration {config_path}")
    data = _read_yaml(config_path)
    if not isinstance(data, dict):
        raise ValidationError(f"Configuration must be a mapping: {config_path}")
    if "container" in data:
        data = data["container"]
        if not isinstance(data, dict):
            raise ValidationError(f"'container' must be a mapping: {config_path}")

    try:
        spec = ContainerSpec(**data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid configuration {config_path}:\n{format_errors(e)}") from e
    except TypeError as e:
        # Non-string keys cannot be passed as keyword arguments.
        raise ValidationError(f"Invalid configuration {config_path}: {e}") from e

    logger.debug(f"Configuration valid for node {spec.node}")
    return spec


def load_credentials(
    env_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> CredentialContext:
    """Build the credential context from the environment and an env file.

    Values from the env file take precedence over the process environment.
    When no env file is given, ``./.env`` is used if it exists.
    """
    variables: Dict[str, str] = dict(os.environ if environ is None else environ)

    if env_file is not None:
        env_path = Path(env_file)
        if not env_path.is_file():
            raise CredentialError(f"Environment file not found: {env_path}")
    elif DEFAULT_ENV_FILE.is_file():
        env_path = DEFAULT_ENV_FILE
    else:
        env_path = None
        logger.debug("No environment file, using process environment only")

    if env_path is not None:
        logger.debug(f"Loading environment variables from {env_path}")
        for key, value in dotenv_values(env_path).items():
            if value is not None:
                variables[key] = value

    missing = [name for name in REQUIRED_VARIABLES if not variables.get(name)]
    if missing:
        raise CredentialError(
            f"Required environment variable not set: {', '.join(missing)}"
        )

    fields: Dict[str, Any] = {
        field: variables[name] for name, field in REQUIRED_VARIABLES.items()
    }
    if variables.get("PROXMOX_PORT"):
        fields["port"] = variables["PROXMOX_PORT"]
    if variables.get("PROXMOX_VERIFY_SSL"):
        fields["verify_ssl"] = variables["PROXMOX_VERIFY_SSL"].strip().lower() in _TRUE_VALUES

    try:
        credentials = CredentialContext(secrets=variables, **fields)
    except PydanticValidationError as e:
        raise CredentialError(f"Invalid credentials:\n{format_errors(e)}") from e

    logger.debug("Environment variables loaded successfully")
    return credentials
