"""External process execution utilities"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..constants import COMMAND_NOT_FOUND

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of an external process"""
    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Best available diagnostic text"""
        return self.stderr.strip() or self.stdout.strip()


def run_command(args: Sequence[str],
                cwd: Union[str, Path],
                timeout: Optional[float] = None,
                shell: bool = False) -> CommandResult:
    """
    Run an external command and capture its output

    Args:
        args: Command and arguments (a single string when shell=True)
        cwd: Working directory
        timeout: Optional timeout in seconds, no limit by default
        shell: Run through the system shell

    Returns:
        CommandResult, never raises for a non-zero exit
    """
    cmd = args if shell else list(args)
    logger.debug("exec %s (cwd=%s)", cmd, cwd)

    if not Path(cwd).is_dir():
        return CommandResult(
            args=[cmd] if shell else list(cmd),
            returncode=1,
            stderr=f"Working directory does not exist: {cwd}"
        )

    try:
        result = subprocess.run(
            cmd,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=timeout,
            shell=shell
        )
    except FileNotFoundError as e:
        return CommandResult(
            args=[cmd] if shell else list(cmd),
            returncode=COMMAND_NOT_FOUND,
            stderr=f"Command not found: {e.filename or cmd}"
        )
    except subprocess.TimeoutExpired:
        logger.warning("Command timed out after %ss: %s", timeout, cmd)
        return CommandResult(
            args=[cmd] if shell else list(cmd),
            returncode=1,
            stderr=f"Command timed out after {timeout}s"
        )

    if result.returncode != 0:
        logger.debug("exit %s: %s", result.returncode, result.stderr.strip())

    return CommandResult(
        args=[cmd] if shell else list(cmd),
        returncode=result.returncode,
        stdout=result.stdout,
        stderr=result.stderr
    )


def run_git(args: Sequence[str], cwd: Union[str, Path]) -> CommandResult:
    """Run a git subcommand in cwd"""
    return run_command(["git", *args], cwd=cwd)
