"""Run commands with elevated rights"""

import logging
import os
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence

from hostkit.errors import CommandError, ElevationFailed
from hostkit.privilege.credential import CredentialStore
from hostkit.system.runner import CommandResult, run_command

logger = logging.getLogger(__name__)

# fragments of the "sudo: ..." lines sudo prints when it refuses to elevate
SUDO_REFUSALS = (
    "incorrect password",
    "a password is required",
    "no password was provided",
    "a terminal is required",
)


def sudo_refused(result: CommandResult) -> bool:
    """Check if a sudo invocation failed before running its command"""
    if result.ok:
        return False
    for line in result.stderr.lower().splitlines():
        line = line.strip()
        if line.startswith("sorry, try again"):
            return True
        if line.startswith("sudo:") and any(marker in line for marker in SUDO_REFUSALS):
            return True
    return False


class PrivilegedExecutor:
    """Run commands as root.

    Escalation order: already root, then a cached sudo grant (``sudo -n``),
    then the password from the ``CredentialStore`` piped to ``sudo -S``.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        *,
        runner: Callable = run_command,
        geteuid: Callable[[], int] = os.geteuid,
    ):
        self.credentials = credentials
        self._runner = runner
        self._geteuid = geteuid

    def is_privileged(self) -> bool:
        """Check if this process already runs as root"""
        return self._geteuid() == 0

    def can_elevate_noninteractive(self) -> bool:
        """Check if sudo currently works without a password"""
        return self._runner(["sudo", "-n", "true"], check=False).ok

    def run(
        self,
        cmd: Sequence[str],
        *,
        input: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
        cwd: Optional[Path] = None,
        check: bool = True,
    ) -> CommandResult:
        """Run ``cmd`` as root and return its result"""
        argv = [str(c) for c in cmd]
        if env:
            # sudo resets the environment
            argv = ["env"] + [f"{k}={v}" for k, v in env.items()] + argv

        if self.is_privileged():
            return self._runner(argv, input=input, cwd=cwd, check=check)

        if self.can_elevate_noninteractive():
            result = self._runner(["sudo", "-n"] + argv, input=input, cwd=cwd, check=False)
        else:
            secret = self.credentials.get()
            result = self._runner(
                ["sudo", "-S", "-k", "-p", ""] + argv,
                input=secret + "\n" + (input or ""),
                cwd=cwd,
                check=False,
            )

        if sudo_refused(result):
            logger.error("Elevation refused for: %s", " ".join(argv))
            raise ElevationFailed(f"sudo refused to run: {' '.join(argv)}")

        if check and not result.ok:
            raise CommandError(argv, result.returncode, result.stderr)

        return result
