"""apt package management through the privileged executor"""

import logging
from typing import Iterable, List, Sequence

from hostkit.errors import CommandError, ToolingMissing
from hostkit.privilege.executor import PrivilegedExecutor
from hostkit.system.runner import command_exists

logger = logging.getLogger(__name__)

APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


class PackageInstaller:
    """Install and remove Debian packages"""

    def __init__(self, executor: PrivilegedExecutor):
        self.executor = executor

    def update(self) -> None:
        self._apt(["update"])

    def install(self, packages: Sequence[str]) -> None:
        if not packages:
            return
        logger.info("Installing %s", " ".join(packages))
        self._apt(["install", "-y", *packages])

    def remove(self, packages: Sequence[str]) -> None:
        """Remove packages, ignoring the ones that are not installed"""
        if not packages:
            return
        self.executor.run(["apt-get", "remove", "-y", *packages], env=APT_ENV, check=False)

    def missing(self, commands: Iterable[str]) -> List[str]:
        return [c for c in commands if not command_exists(c)]

    def ensure_commands(self, commands: Iterable[str]) -> List[str]:
        """Install the package of each missing command; package name equals command name"""
        missing = self.missing(commands)
        if missing:
            self.update()
            self.install(missing)
            still_missing = self.missing(missing)
            if still_missing:
                raise ToolingMissing(f"Still missing after install: {', '.join(still_missing)}")
        return missing

    def _apt(self, args: List[str]) -> None:
        try:
            self.executor.run(["apt-get", *args], env=APT_ENV)
        except CommandError as e:
            raise ToolingMissing(f"apt-get {args[0]} failed: {e}") from e
