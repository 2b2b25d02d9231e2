"""Subprocess helpers."""

import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional


logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Result from running a command."""
    returncode: int
    stdout: str = ""
    stderr: str = ""


def run_command(
    cmd: List[str],
    check: bool = True,
    capture_output: bool = True,
    timeout: Optional[int] = None,
    **kwargs
) -> CommandResult:
    """Run a command and wait for it."""
    logger.debug(f"Running command: {' '.join(cmd)}")

    process = subprocess.run(
        cmd,
        stdout=subprocess.PIPE if capture_output else None,
        stderr=subprocess.PIPE if capture_output else None,
        timeout=timeout,
        **kwargs
    )

    result = CommandResult(
        returncode=process.returncode,
        stdout=process.stdout.decode() if process.stdout else "",
        stderr=process.stderr.decode() if process.stderr else "",
    )

    if check and process.returncode != 0:
        logger.error(f"Command failed ({process.returncode}): {' '.join(cmd)}")
        if result.stderr:
            logger.error(f"stderr: {result.stderr.strip()}")
        raise subprocess.CalledProcessError(
            process.returncode, cmd, output=result.stdout, stderr=result.stderr
        )

    return result
