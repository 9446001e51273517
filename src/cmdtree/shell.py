"""Shell command runner for cmdtree commands.

Provides a helper for commands that need to run an external program
and surface its output.
"""

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from cmdtree.exceptions import ShellCommandError

logger = logging.getLogger(__name__)


@dataclass
class ShellResult:
    """Result from running a shell command."""

    command: str
    stdout: str = ""
    stderr: str = ""
    return_code: int = 0


def run_command(command: str, cwd: Optional[Union[str, Path]] = None) -> ShellResult:
    """Run a shell command and echo its stdout.

    Args:
        command: Command line, interpreted by the system shell
        cwd: Working directory (default: current directory)

    Returns:
        ShellResult with captured output

    Raises:
        ShellCommandError: If the command cannot be started or exits non-zero
    """
    logger.debug(f"Executing command: {command} in {cwd or os.getcwd()}")

    try:
        result = subprocess.run(
            command,
            shell=True,
            cwd=cwd,
            capture_output=True,
            text=True,
        )
    except OSError as e:
        logger.error(f"Command failed: {command}")
        raise ShellCommandError(
            f"Command failed: {command}", context={"error": str(e)}
        ) from e

    if result.returncode != 0:
        logger.error(f"Command failed: {command}")
        if result.stderr:
            logger.error(result.stderr)
        raise ShellCommandError(
            f"Command failed: {command}",
            context={"exit_code": result.returncode},
        )

    if result.stdout:
        print(result.stdout)

    return ShellResult(
        command=command,
        stdout=result.stdout,
        stderr=result.stderr,
        return_code=result.returncode,
    )
