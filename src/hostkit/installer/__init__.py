"""Package, container and shell profile installers"""

from .bashrc import patch_bashrc
from .compose import SERVICES, deploy_service
from .docker import DockerInstaller
from .packages import PackageInstaller
from .tailscale import TailscaleInstaller

__all__ = [
    "DockerInstaller",
    "PackageInstaller",
    "SERVICES",
    "TailscaleInstaller",
    "deploy_service",
    "patch_bashrc",
]
