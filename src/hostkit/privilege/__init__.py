"""Credential cache and privileged command execution"""

from .credential import CredentialStore
from .executor import PrivilegedExecutor

__all__ = ["CredentialStore", "PrivilegedExecutor"]
