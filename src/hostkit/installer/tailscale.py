"""Tailscale client installation"""

import logging
import tempfile
from pathlib import Path
from typing import Optional

import httpx

from hostkit.errors import CommandError, ToolingMissing
from hostkit.installer.download import fetch_text
from hostkit.privilege.executor import PrivilegedExecutor
from hostkit.system.runner import command_exists

logger = logging.getLogger(__name__)

DEFAULT_INSTALL_SCRIPT_URL = "https://tailscale.com/install.sh"


class TailscaleInstaller:
    """Install tailscale and keep tailscaled running"""

    def __init__(
        self,
        executor: PrivilegedExecutor,
        script_url: str = DEFAULT_INSTALL_SCRIPT_URL,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.executor = executor
        self.script_url = script_url
        self.transport = transport

    def ensure(self) -> None:
        if not command_exists("tailscale"):
            self.install()
        try:
            self.executor.run(["systemctl", "enable", "--now", "tailscaled"])
        except CommandError as e:
            raise ToolingMissing(f"tailscaled is not running: {e}") from e

    def install(self) -> None:
        logger.info("Installing Tailscale")
        script = fetch_text(self.script_url, transport=self.transport)
        with tempfile.TemporaryDirectory(prefix="hostkit-") as tmp:
            script_path = Path(tmp) / "install.sh"
            script_path.write_text(script)
            try:
                self.executor.run(["sh", str(script_path)])
            except CommandError as e:
                raise ToolingMissing(f"Tailscale install script failed: {e}") from e
