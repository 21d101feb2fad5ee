"""Tailscale SSH access workflow"""

from .device import TailscaleDevice
from .policy import apply_access, ensure_grant, ensure_tag_owner, grant_rule
from .provisioner import AccessProvisioner, ProvisionResult, Step

__all__ = [
    "AccessProvisioner",
    "ProvisionResult",
    "Step",
    "TailscaleDevice",
    "apply_access",
    "ensure_grant",
    "ensure_tag_owner",
    "grant_rule",
]
