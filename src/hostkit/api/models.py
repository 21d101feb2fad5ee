"""Typed views over Tailscale API payloads"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

TAG_PREFIX = "tag:"


def normalize_tag(name: str) -> str:
    """Return the canonical ``tag:<name>`` form of a tag"""
    name = name.strip()
    if name.startswith(TAG_PREFIX):
        name = name[len(TAG_PREFIX):].strip()
    if not name:
        raise ValueError("Tag name must not be empty")
    return TAG_PREFIX + name


def tag_name(tag: str) -> str:
    """Strip the ``tag:`` prefix"""
    return normalize_tag(tag)[len(TAG_PREFIX):]


@dataclass(frozen=True)
class AccessRule:
    """One entry of the policy ``ssh`` list.

    Two rules are equal when action, src, dst and users all match by value.
    Keys outside those four (``checkPeriod``, ``acceptEnv``...) ride along in
    ``extra`` and are ignored by equality.
    """

    action: str
    src: Tuple[str, ...]
    dst: Tuple[str, ...]
    users: Tuple[str, ...]
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    FIELDS = ("action", "src", "dst", "users")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccessRule":
        return cls(
            action=data.get("action", ""),
            src=tuple(data.get("src") or ()),
            dst=tuple(data.get("dst") or ()),
            users=tuple(data.get("users") or ()),
            extra={k: v for k, v in data.items() if k not in cls.FIELDS},
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "action": self.action,
            "src": list(self.src),
            "dst": list(self.dst),
            "users": list(self.users),
        }
        data.update(copy.deepcopy(self.extra))
        return data


@dataclass
class PolicyDocument:
    """Working copy of a tailnet policy file.

    The whole JSON object is kept so that sections this model does not know
    about survive a fetch, transform and push cycle unchanged.
    """

    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PolicyDocument":
        return cls(copy.deepcopy(data))

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.data)

    def copy(self) -> "PolicyDocument":
        return PolicyDocument.from_dict(self.data)

    @property
    def tag_owners(self) -> Dict[str, List[str]]:
        return copy.deepcopy(self.data.get("tagOwners") or {})

    @property
    def ssh_rules(self) -> List[AccessRule]:
        return [AccessRule.from_dict(rule) for rule in self.data.get("ssh") or []]


@dataclass
class AuthKey:
    """Auth key returned by the keys endpoint; the secret is kept out of repr"""

    key: str = field(repr=False)
    id: str = ""
    description: str = ""
    expires: str = ""
    reusable: bool = False
    ephemeral: bool = False
    preauthorized: bool = False
    tags: Tuple[str, ...] = ()

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "AuthKey":
        capabilities = data.get("capabilities") or {}
        create = (capabilities.get("devices") or {}).get("create") or {}
        return cls(
            key=str(data["key"]),
            id=data.get("id") or "",
            description=data.get("description") or "",
            expires=data.get("expires") or "",
            reusable=bool(create.get("reusable", False)),
            ephemeral=bool(create.get("ephemeral", False)),
            preauthorized=bool(create.get("preauthorized", False)),
            tags=tuple(create.get("tags") or ()),
        )
