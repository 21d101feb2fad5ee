"""Tailscale API client and payload models"""

from .client import (
    AuthKeyUnavailable,
    NotFoundError,
    PolicyClient,
    RemoteAPIError,
    UnauthorizedError,
)
from .models import AccessRule, AuthKey, PolicyDocument, normalize_tag

__all__ = [
    "AccessRule",
    "AuthKey",
    "AuthKeyUnavailable",
    "NotFoundError",
    "PolicyClient",
    "PolicyDocument",
    "RemoteAPIError",
    "UnauthorizedError",
    "normalize_tag",
]
