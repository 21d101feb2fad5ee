"""Run local commands as structured argument lists"""

import getpass
import logging
import os
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from hostkit.errors import CommandError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of a finished command"""

    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = field(default="", repr=False)

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def command_exists(name: str) -> bool:
    """Check if an executable is on PATH"""
    return shutil.which(name) is not None


def run_command(
    cmd: Sequence[str],
    *,
    input: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
    cwd: Optional[Path] = None,
    check: bool = True,
    timeout: Optional[float] = None,
) -> CommandResult:
    """Run a command and return the result.

    ``input`` is written to the process stdin and is never logged, so it is
    the only channel secrets may travel through.
    """
    args = [str(a) for a in cmd]
    logger.debug("Running: %s", " ".join(args))

    try:
        proc = subprocess.run(
            args,
            input=input,
            env=env,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
        result = CommandResult(args, proc.returncode, proc.stdout or "", proc.stderr or "")
    except FileNotFoundError:
        result = CommandResult(args, 127, "", f"{args[0]}: command not found")
    except OSError as e:
        result = CommandResult(args, 126, "", f"{args[0]}: {e.strerror or e}")

    if check and not result.ok:
        logger.debug("Command failed with code %d: %s", result.returncode, result.stderr.strip())
        raise CommandError(args, result.returncode, result.stderr)

    return result


def invoking_user() -> str:
    """Name of the human user, even when running under sudo"""
    return os.environ.get("SUDO_USER") or getpass.getuser()
