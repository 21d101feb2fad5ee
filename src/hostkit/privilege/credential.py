"""Administrator credential cache.

One ``CredentialStore`` is created per process and handed to every component
that may need elevation. The credential is looked up in this order:

1. the in-memory cache,
2. the persisted file, when it can be read without a password,
3. an interactive prompt, verified with a no-op ``sudo`` call and then
   persisted owner-only (mode 600, ``root:root``).

The credential value is never logged and never passed as a command argument;
it only travels through a subprocess stdin.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Optional

import click

from hostkit.errors import CredentialVerificationFailed, ElevationFailed, HostkitError
from hostkit.system.runner import run_command

logger = logging.getLogger(__name__)

DEFAULT_CREDENTIAL_FILE = Path("/etc/hostkit/credential")


def prompt_for_password() -> str:
    """Ask the operator for their sudo password without echoing it"""
    return click.prompt("Enter your sudo password", hide_input=True, err=True)


class CredentialStore:
    """Persist and cache the sudo password for this process"""

    def __init__(
        self,
        path: Path = DEFAULT_CREDENTIAL_FILE,
        *,
        prompt: Callable[[], str] = prompt_for_password,
        runner: Callable = run_command,
        max_attempts: int = 3,
        geteuid: Callable[[], int] = os.geteuid,
    ):
        self.path = Path(path)
        self.max_attempts = max_attempts
        self._prompt = prompt
        self._runner = runner
        self._geteuid = geteuid
        self._cache: Optional[str] = None

    def __repr__(self) -> str:
        state = "cached" if self._cache is not None else "empty"
        return f"<CredentialStore path={self.path} {state}>"

    def has(self) -> bool:
        """Check if a persisted credential exists"""
        return self.path.exists()

    def get(self) -> str:
        """Return the credential, prompting the operator only as a last resort"""
        if self._cache is not None:
            return self._cache

        if self.has():
            secret = self._read_persisted()
            if secret:
                self._cache = secret
                return secret

        self._cache = self._prompt_until_verified()
        return self._cache

    def clear(self) -> None:
        """Forget the cached credential"""
        self._cache = None

    def verify(self, secret: str) -> None:
        """Check ``secret`` against sudo, ignoring any cached sudo timestamp"""
        result = self._runner(
            ["sudo", "-S", "-k", "-p", "", "true"],
            input=secret + "\n",
            check=False,
        )
        if not result.ok:
            raise CredentialVerificationFailed("sudo rejected the password")

    def _read_persisted(self) -> Optional[str]:
        if self._geteuid() == 0:
            try:
                return self.path.read_text().rstrip("\r\n") or None
            except OSError as e:
                logger.warning("Cannot read credential file %s: %s", self.path, e)
                return None

        if not self._runner(["sudo", "-n", "true"], check=False).ok:
            return None

        result = self._runner(["sudo", "-n", "cat", str(self.path)], check=False)
        if not result.ok:
            return None
        return result.stdout.rstrip("\r\n") or None

    def _prompt_until_verified(self) -> str:
        attempt = 0
        while True:
            attempt += 1
            secret = self._prompt()
            try:
                self.verify(secret)
            except CredentialVerificationFailed as e:
                if self.max_attempts and attempt >= self.max_attempts:
                    raise ElevationFailed(
                        f"Password rejected {attempt} times, giving up"
                    ) from e
                logger.warning("Password failed. Try again.")
                continue

            self._persist(secret)
            return secret

    def _persist(self, secret: str) -> None:
        try:
            if self._geteuid() == 0:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
                with os.fdopen(fd, "w") as f:
                    f.write(secret + "\n")
                os.chmod(self.path, 0o600)
                os.chown(self.path, 0, 0)
            else:
                # -k makes sudo read the first stdin line as the password,
                # the rest becomes the file content
                self._runner(
                    [
                        "sudo", "-S", "-k", "-p", "",
                        "install", "-D", "-m", "600", "-o", "root", "-g", "root",
                        "/dev/stdin", str(self.path),
                    ],
                    input=f"{secret}\n{secret}\n",
                    check=True,
                )
        except (OSError, HostkitError) as e:
            logger.warning("Could not persist credential to %s: %s", self.path, e)
            return

        logger.info("Credential stored in %s", self.path)
