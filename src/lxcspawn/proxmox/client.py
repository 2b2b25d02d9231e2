"""HTTP client for the Proxmox VE REST API."""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from lxcspawn.errors import ProtocolError, TransportError
from lxcspawn.models.credentials import CredentialContext
from lxcspawn.models.request import CreationRequest, TaskHandle


logger = logging.getLogger(__name__)


class ProxmoxClient:
    """Token-authenticated client for the endpoints used during creation."""

    def __init__(
        self,
        credentials: CredentialContext,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the client."""
        self.credentials = credentials
        self.base_url = credentials.base_url
        self.timeout = timeout
        self.transport = transport

    def request(self, method: str, path: str, body: Optional[str] = None) -> Any:
        """Send an API request and return the ``data`` member of the reply."""
        headers = {"Authorization": self.credentials.authorization}
        if body is not None:
            headers["Content-Type"] = "application/x-www-form-urlencoded"

        try:
            with httpx.Client(
                transport=self.transport,
                base_url=self.base_url,
                timeout=self.timeout,
                verify=self.credentials.verify_ssl,
            ) as client:
                response = client.request(method, path, headers=headers, content=body)
                logger.debug(f"{method} {path} -> HTTP {response.status_code}")
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            text = e.response.text
            if status in (401, 403):
                raise TransportError(f"Authentication failed (HTTP {status}): {text}") from e
            raise ProtocolError(
                f"Proxmox API error {status}: {text}", status_code=status, body=text
            ) from e
        except httpx.RequestError as e:
            raise TransportError(f"Failed to connect to Proxmox API at {self.base_url}: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise ProtocolError(
                f"Unparseable response from {path}",
                status_code=response.status_code,
                body=response.text,
            ) from e
        if not isinstance(payload, dict) or "data" not in payload:
            raise ProtocolError(
                f"Response from {path} has no data",
                status_code=response.status_code,
                body=response.text,
            )
        return payload["data"]

    def next_vmid(self, node: str) -> int:
        """Ask the cluster for the next free container ID."""
        logger.debug(f"Getting next available container ID for node: {node}")
        data = self.request("GET", "/cluster/nextid")
        try:
            vmid = int(data)
        except (TypeError, ValueError):
            raise ProtocolError(f"Failed to get next available container ID: {data!r}")
        logger.debug(f"Next available container ID: {vmid}")
        return vmid

    def create_container(self, node: str, request: CreationRequest) -> Optional[TaskHandle]:
        """Submit a creation request. Returns the task handle, if any."""
        logger.info(f"Creating container on node: {node}")
        data = self.request("POST", f"/nodes/{quote(node, safe='')}/lxc", body=request.encode())
        if data is None or data == "":
            return None
        if not isinstance(data, str):
            raise ProtocolError(f"Unexpected creation response: {data!r}")
        return TaskHandle(node=node, upid=data)

    def task_status(self, handle: TaskHandle) -> Dict[str, Any]:
        """Fetch the point-in-time status of a task."""
        path = f"/nodes/{quote(handle.node, safe='')}/tasks/{quote(handle.upid, safe='')}/status"
        data = self.request("GET", path)
        if not isinstance(data, dict):
            raise ProtocolError(f"Unexpected task status response: {data!r}")
        return data
