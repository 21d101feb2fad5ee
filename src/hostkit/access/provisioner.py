"""Tailscale SSH access provisioning.

Brings this device and the tailnet policy to the state where ``grantee`` can
Tailscale-SSH into every device carrying ``tag``:

    Start -> ToolingReady -> DeviceEnrolled -> SSHEnabled -> TagAdvertised
          -> PolicyUpdated -> Done

Every step checks before it acts, so the whole sequence can be re-run at
any time. The first failing step moves the machine to ``Failed``; later
steps are not attempted and nothing is rolled back.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from hostkit.access.device import TailscaleDevice
from hostkit.access.policy import ADMIN_OWNERS, NONROOT_USERS, apply_access
from hostkit.api.client import PolicyClient
from hostkit.api.models import normalize_tag, tag_name
from hostkit.errors import HostkitError
from hostkit.installer.packages import PackageInstaller
from hostkit.installer.tailscale import TailscaleInstaller

logger = logging.getLogger(__name__)

REQUIRED_TOOLS = ("jq", "curl")
PUSH_MODES = ("changed", "always")


class Step(str, Enum):
    START = "Start"
    TOOLING_READY = "ToolingReady"
    DEVICE_ENROLLED = "DeviceEnrolled"
    SSH_ENABLED = "SSHEnabled"
    TAG_ADVERTISED = "TagAdvertised"
    POLICY_UPDATED = "PolicyUpdated"
    DONE = "Done"
    FAILED = "Failed"


@dataclass
class ProvisionResult:
    """Where a provisioning run stopped"""

    state: Step
    completed: List[Step] = field(default_factory=list)
    failed_step: Optional[Step] = None
    error: Optional[BaseException] = None
    policy_changed: bool = False

    @property
    def ok(self) -> bool:
        return self.state is Step.DONE


class AccessProvisioner:
    """Drive device enrollment and tailnet policy to the desired state"""

    def __init__(
        self,
        client: PolicyClient,
        device: TailscaleDevice,
        packages: PackageInstaller,
        tailscale: TailscaleInstaller,
        *,
        tag: str,
        grantee: str,
        owners: Sequence[str] = ADMIN_OWNERS,
        users: Sequence[str] = NONROOT_USERS,
        required_tools: Sequence[str] = REQUIRED_TOOLS,
        push_policy: str = "changed",
    ):
        if push_policy not in PUSH_MODES:
            raise ValueError(f"push_policy must be one of {PUSH_MODES}, got {push_policy!r}")
        if not grantee:
            raise ValueError("A grantee is required")

        self.client = client
        self.device = device
        self.packages = packages
        self.tailscale = tailscale
        self.tag = normalize_tag(tag)
        self.grantee = grantee
        self.owners = list(owners)
        self.users = list(users)
        self.required_tools = list(required_tools)
        self.push_policy = push_policy

    def run(self) -> ProvisionResult:
        """Walk every transition in order, stopping at the first failure"""
        result = ProvisionResult(state=Step.START)
        transitions = [
            (Step.TOOLING_READY, self.ensure_tooling),
            (Step.DEVICE_ENROLLED, self.ensure_enrolled),
            (Step.SSH_ENABLED, self.ensure_ssh),
            (Step.TAG_ADVERTISED, self.ensure_tag_advertised),
            (Step.POLICY_UPDATED, self.ensure_policy),
        ]

        for step, transition in transitions:
            logger.debug("Entering %s", step.value)
            try:
                changed = transition()
            except (HostkitError, OSError) as e:
                logger.error("%s failed: %s", step.value, e)
                result.state = Step.FAILED
                result.failed_step = step
                result.error = e
                return result

            if step is Step.POLICY_UPDATED:
                result.policy_changed = bool(changed)
            result.completed.append(step)
            result.state = step

        result.state = Step.DONE
        logger.info(
            "Done. %s can Tailscale SSH to devices with %s in %s.",
            self.grantee,
            self.tag,
            self.client.tailnet,
        )
        return result

    def ensure_tooling(self) -> None:
        self.packages.ensure_commands(self.required_tools)
        self.tailscale.ensure()

    def ensure_enrolled(self) -> bool:
        if self.device.is_enrolled():
            logger.info("Device already enrolled")
            return False

        logger.info("Creating reusable preauthorized auth key for %s", self.tag)
        key = self.client.issue_key(
            [self.tag],
            reusable=True,
            ephemeral=False,
            preauthorized=True,
            description=f"{tag_name(self.tag)} reusable auth key",
        )
        logger.info("Enrolling device with auth key")
        self.device.enroll(key)
        return True

    def ensure_ssh(self) -> None:
        logger.info("Enabling Tailscale SSH on device")
        self.device.enable_ssh()

    def ensure_tag_advertised(self) -> bool:
        if self.tag in self.device.advertised_tags():
            logger.info("%s already advertised", self.tag)
            return False

        logger.info("Advertising %s on this device", self.tag)
        self.device.advertise_tags([self.tag])
        return True

    def ensure_policy(self) -> bool:
        """Fetch, transform and push the policy; returns True if it changed"""
        logger.info("Fetching tailnet policy")
        current = self.client.fetch_policy()
        updated = apply_access(current, self.tag, self.grantee, self.owners, self.users)
        changed = updated != current

        if changed or self.push_policy == "always":
            logger.info("Pushing updated policy")
            self.client.push_policy(updated)
        else:
            logger.info("Policy already grants access, nothing to push")

        return changed
