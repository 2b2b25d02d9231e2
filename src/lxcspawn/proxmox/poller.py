"""Polling of asynchronous Proxmox tasks."""

import logging
import math
import time
from typing import Callable, Optional

from lxcspawn.errors import TaskTimeoutError
from lxcspawn.models.request import Outcome, TaskHandle
from lxcspawn.proxmox.client import ProxmoxClient


logger = logging.getLogger(__name__)

SUCCESS_EXIT_STATUS = "OK"


class TaskPoller:
    """Waits for a task to stop and classifies how it ended.

    ``running`` and unrecognized statuses are both polled again after
    ``interval`` seconds; the number of polls is bounded by ``timeout``.
    """

    def __init__(
        self,
        client: ProxmoxClient,
        interval: float = 2.0,
        timeout: float = 600.0,
        sleep: Callable[[float], None] = time.sleep,
        on_poll: Optional[Callable[[str], None]] = None,
    ):
        """Initialize the poller."""
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.client = client
        self.interval = interval
        self.timeout = timeout
        self.max_polls = max(1, math.ceil(timeout / interval) + 1)
        self._sleep = sleep
        self._on_poll = on_poll

    def await_completion(self, handle: TaskHandle) -> Outcome:
        """Poll ``handle`` until the task stops."""
        logger.info("Monitoring task progress...")

        for attempt in range(1, self.max_polls + 1):
            data = self.client.task_status(handle)
            status = str(data.get("status") or "unknown")
            exitstatus = data.get("exitstatus")
            logger.debug(f"Task status: {status}, Exit status: {exitstatus}")
            if self._on_poll:
                self._on_poll(status)

            if status == "stopped":
                if exitstatus is None or exitstatus == "":
                    logger.warning(f"Task {handle.upid} stopped without an exit status")
                    return Outcome.unknown()
                if exitstatus == SUCCESS_EXIT_STATUS:
                    return Outcome.success()
                return Outcome.failure(str(exitstatus))
            if status != "running":
                logger.warning(f"Unknown task status: {status}")

            if attempt < self.max_polls:
                self._sleep(self.interval)

        raise TaskTimeoutError(
            f"Task {handle.upid} on {handle.node} did not finish within {self.timeout:g}s"
        )
