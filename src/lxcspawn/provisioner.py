"""Container provisioning sequence."""

import logging

from lxcspawn.errors import RemoteTaskFailure, TaskTimeoutError
from lxcspawn.models.container import ContainerSpec
from lxcspawn.models.credentials import CredentialContext
from lxcspawn.models.request import Outcome, OutcomeStatus, ProvisionResult
from lxcspawn.proxmox.builder import build_request
from lxcspawn.proxmox.client import ProxmoxClient
from lxcspawn.proxmox.poller import TaskPoller


logger = logging.getLogger(__name__)


class Provisioner:
    """Runs one creation: allocate ID, build, submit, wait.

    Steps are never retried and a failure aborts the run. A container
    created by a task that later failed is left for manual cleanup.
    """

    def __init__(self, client: ProxmoxClient, poller: TaskPoller):
        """Initialize the provisioner."""
        self.client = client
        self.poller = poller

    def provision(self, spec: ContainerSpec, credentials: CredentialContext) -> ProvisionResult:
        """Create the container described by ``spec``."""
        logger.info("Starting LXC container creation process")

        # The next ID is not reserved; concurrent runs may collide.
        vmid = self.client.next_vmid(spec.node)
        logger.info(f"Using container ID: {vmid}")

        request = build_request(spec, vmid, credentials)
        logger.debug(f"API parameters: {request.redacted()}")

        handle = self.client.create_container(spec.node, request)
        if handle is None:
            logger.info("Container created successfully")
            return ProvisionResult(vmid=vmid, node=spec.node, outcome=Outcome.success())

        logger.info(f"Container creation task started: {handle.upid}")
        try:
            outcome = self.poller.await_completion(handle)
        except TaskTimeoutError as e:
            e.vmid = vmid
            e.node = spec.node
            raise

        if outcome.status is OutcomeStatus.FAILURE:
            logger.error(f"Container creation failed with status: {outcome.exit_detail}")
            raise RemoteTaskFailure(outcome.exit_detail, vmid=vmid, node=spec.node)
        if outcome.ok:
            logger.info("Container created successfully!")

        return ProvisionResult(vmid=vmid, node=spec.node, outcome=outcome, task=handle)
