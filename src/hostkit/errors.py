"""Exception hierarchy for hostkit"""

from typing import Optional, Sequence


class HostkitError(Exception):
    """Base exception for hostkit failures"""

    pass


class CommandError(HostkitError):
    """A local command exited with a non-zero status"""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = ""):
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command failed with code {returncode}: {' '.join(self.command)}"
        if stderr.strip():
            message += f" ({stderr.strip().splitlines()[-1]})"
        super().__init__(message)


class PrivilegeError(HostkitError):
    """Base exception for elevation problems"""

    pass


class CredentialVerificationFailed(PrivilegeError):
    """The operator entered a credential that sudo rejected"""

    pass


class ElevationFailed(PrivilegeError):
    """Could not obtain elevated rights for a command"""

    pass


class ToolingMissing(HostkitError):
    """A required tool could not be installed"""

    pass


class ProvisioningFailed(HostkitError):
    """The access workflow stopped at a failing step"""

    def __init__(self, step: str, cause: Optional[BaseException] = None):
        self.step = step
        self.cause = cause
        super().__init__(f"{step} failed: {cause}")
