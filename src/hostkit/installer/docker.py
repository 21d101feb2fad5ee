"""Docker Engine installation from the upstream apt repository"""

import logging
import shlex
from pathlib import Path
from typing import Dict, Optional, Tuple

import httpx

from hostkit.errors import CommandError, ToolingMissing
from hostkit.installer.download import fetch_text
from hostkit.installer.packages import PackageInstaller
from hostkit.privilege.executor import PrivilegedExecutor
from hostkit.system.runner import command_exists, run_command

logger = logging.getLogger(__name__)

OS_RELEASE = Path("/etc/os-release")
KEYRING = "/etc/apt/keyrings/docker.gpg"
SOURCES_LIST = "/etc/apt/sources.list.d/docker.list"

CONFLICTING_PACKAGES = ["docker", "docker-engine", "docker.io", "containerd", "runc"]
PREREQUISITES = ["ca-certificates", "curl", "gnupg"]
ENGINE_PACKAGES = [
    "docker-ce",
    "docker-ce-cli",
    "containerd.io",
    "docker-buildx-plugin",
    "docker-compose-plugin",
]

UBUNTU_IDS = {"ubuntu", "linuxmint", "elementary", "neon"}

# Linux Mint codenames have no docker repo of their own
CODENAME_ALIASES = {
    "vanessa": "jammy",
    "vera": "jammy",
    "victoria": "jammy",
    "virginia": "noble",
}


def parse_os_release(text: str) -> Dict[str, str]:
    """Parse ``/etc/os-release`` style KEY=value lines"""
    values = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, raw = line.partition("=")
        try:
            parts = shlex.split(raw)
        except ValueError:
            parts = [raw]
        values[key.strip()] = parts[0] if parts else ""
    return values


def docker_repo(os_release: Dict[str, str]) -> Tuple[str, str]:
    """Pick the docker apt repo (base, codename) for this distribution"""
    if os_release.get("UBUNTU_CODENAME"):
        base = "ubuntu"
        codename = os_release["UBUNTU_CODENAME"]
    else:
        distro = os_release.get("ID", "debian")
        codename = os_release.get("VERSION_CODENAME") or "bookworm"
        base = "ubuntu" if distro in UBUNTU_IDS else "debian"

    return base, CODENAME_ALIASES.get(codename, codename)


def read_os_release(path: Path = OS_RELEASE) -> Dict[str, str]:
    try:
        return parse_os_release(path.read_text())
    except OSError:
        return {}


class DockerInstaller:
    """Install Docker Engine and the compose plugin"""

    def __init__(
        self,
        executor: PrivilegedExecutor,
        packages: PackageInstaller,
        os_release: Path = OS_RELEASE,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.executor = executor
        self.packages = packages
        self.os_release = os_release
        self.transport = transport

    def install(self, user: Optional[str] = None) -> bool:
        """Install docker unless present; returns True when something was installed"""
        if command_exists("docker"):
            logger.info("Docker already installed")
            return False

        base, codename = docker_repo(read_os_release(self.os_release))
        logger.info("Docker apt repo base=%s codename=%s", base, codename)

        try:
            self.packages.remove(CONFLICTING_PACKAGES)
            self.packages.update()
            self.packages.install(PREREQUISITES)

            self.executor.run(["install", "-m", "0755", "-d", str(Path(KEYRING).parent)])
            key = fetch_text(f"https://download.docker.com/linux/{base}/gpg", transport=self.transport)
            self.executor.run(["gpg", "--batch", "--yes", "--dearmor", "-o", KEYRING], input=key)
            self.executor.run(["chmod", "a+r", KEYRING])

            arch = run_command(["dpkg", "--print-architecture"]).stdout.strip()
            source = (
                f"deb [arch={arch} signed-by={KEYRING}] "
                f"https://download.docker.com/linux/{base} {codename} stable\n"
            )
            self.executor.run(["install", "-m", "0644", "/dev/stdin", SOURCES_LIST], input=source)

            self.packages.update()
            self.packages.install(ENGINE_PACKAGES)
            self.executor.run(["systemctl", "enable", "--now", "docker"])
        except CommandError as e:
            raise ToolingMissing(f"Docker installation failed: {e}") from e

        if user:
            self.executor.run(["usermod", "-aG", "docker", user], check=False)

        logger.info("Docker installed. Log out and back in to use docker without sudo.")
        return True
