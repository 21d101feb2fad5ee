"""Local tailscale client state and commands"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List

from hostkit.api.models import AuthKey, normalize_tag
from hostkit.errors import HostkitError
from hostkit.privilege.executor import PrivilegedExecutor
from hostkit.system.runner import command_exists, run_command

logger = logging.getLogger(__name__)


class TailscaleDevice:
    """This machine as seen through the ``tailscale`` CLI"""

    def __init__(self, executor: PrivilegedExecutor, runner: Callable = run_command):
        self.executor = executor
        self._runner = runner

    def is_installed(self) -> bool:
        return command_exists("tailscale")

    def status(self) -> Dict[str, Any]:
        """Parsed ``tailscale status --json``, empty when the daemon is unreachable"""
        result = self._runner(["tailscale", "status", "--json"], check=False)
        if not result.stdout.strip():
            return {}
        try:
            data = json.loads(result.stdout)
        except ValueError:
            logger.warning("Unreadable tailscale status output")
            return {}
        return data if isinstance(data, dict) else {}

    def is_enrolled(self) -> bool:
        return self.status().get("BackendState") == "Running"

    def advertised_tags(self) -> List[str]:
        self_state = self.status().get("Self") or {}
        return list(self_state.get("Tags") or [])

    def enroll(self, auth_key: AuthKey) -> None:
        """Join the tailnet with ``auth_key``.

        The key goes through an owner-only temporary file so it never shows
        up in a process listing or in the command log.
        """
        with tempfile.TemporaryDirectory(prefix="hostkit-") as tmp:
            key_file = Path(tmp) / "authkey"
            fd = os.open(key_file, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
            with os.fdopen(fd, "w") as f:
                f.write(auth_key.key)
            self.executor.run(["tailscale", "up", f"--auth-key=file:{key_file}"])

    def enable_ssh(self) -> None:
        self.executor.run(["tailscale", "set", "--ssh"])

    def advertise_tags(self, tags: Iterable[str]) -> None:
        """Advertise ``tags`` alongside the tags already on the device"""
        wanted = sorted(set(self.advertised_tags()) | {normalize_tag(t) for t in tags})
        if not wanted:
            raise HostkitError("No tags to advertise")
        # tailscale set leaves the other prefs alone
        self.executor.run(["tailscale", "set", f"--advertise-tags={','.join(wanted)}"])
