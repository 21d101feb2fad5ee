"""Tailscale control plane API client"""

from typing import Any, Iterable, Optional
from urllib.parse import quote

import httpx

from hostkit.api.models import AuthKey, PolicyDocument, normalize_tag
from hostkit.errors import HostkitError

DEFAULT_API_URL = "https://api.tailscale.com/api/v2"


class RemoteAPIError(HostkitError):
    """Base exception for API errors"""

    pass


class NotFoundError(RemoteAPIError):
    """Resource not found"""

    pass


class UnauthorizedError(RemoteAPIError):
    """Unauthorized access"""

    pass


class AuthKeyUnavailable(RemoteAPIError):
    """Key endpoint answered without a usable key"""

    pass


class PolicyClient:
    """Keys and policy file operations for one tailnet"""

    def __init__(
        self,
        tailnet: str,
        token: str,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.tailnet = tailnet
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def __repr__(self) -> str:
        return f"<PolicyClient tailnet={self.tailnet} url={self.base_url}>"

    def issue_key(
        self,
        tags: Iterable[str],
        *,
        reusable: bool = True,
        ephemeral: bool = False,
        preauthorized: bool = True,
        description: str = "",
    ) -> AuthKey:
        """Create an auth key limited to ``tags``"""
        payload = {
            "capabilities": {
                "devices": {
                    "create": {
                        "reusable": reusable,
                        "ephemeral": ephemeral,
                        "preauthorized": preauthorized,
                        "tags": [normalize_tag(t) for t in tags],
                    }
                }
            },
            "description": description,
        }
        response = self._post("/keys", payload)

        if not isinstance(response, dict) or not response.get("key"):
            raise AuthKeyUnavailable(
                "Failed to obtain an auth key. Check token privileges."
            )

        return AuthKey.from_response(response)

    def fetch_policy(self) -> PolicyDocument:
        """Get the tailnet policy file"""
        response = self._get("/acl")

        if response is None:
            raise RemoteAPIError("Empty policy file response")
        if not isinstance(response, dict):
            raise RemoteAPIError("Policy file is not a JSON object")

        return PolicyDocument.from_dict(response)

    def push_policy(self, doc: PolicyDocument) -> None:
        """Replace the tailnet policy file with ``doc``"""
        self._post("/acl", doc.to_dict())

    def _url(self, path: str) -> str:
        return f"{self.base_url}/tailnet/{quote(self.tailnet, safe='')}{path}"

    def _get(self, path: str) -> Any:
        """Execute GET request"""
        return self._request("GET", path)

    def _post(self, path: str, data: Any = None) -> Any:
        """Execute POST request"""
        return self._request("POST", path, json=data)

    def _request(self, method: str, path: str, **kwargs) -> Any:
        """Execute HTTP request"""
        url = self._url(path)

        headers = kwargs.pop("headers", {})
        headers.setdefault("Accept", "application/json")
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise RemoteAPIError(f"{method} {path} failed: {e}") from e

        if response.status_code == 404:
            raise NotFoundError(f"Resource not found: {path}")
        elif response.status_code in (401, 403):
            raise UnauthorizedError(f"Unauthorized: {path}")
        elif response.status_code >= 400:
            raise RemoteAPIError(
                f"API error {response.status_code}: {response.text}"
            )

        if not response.content.strip():
            return None

        try:
            return response.json()
        except ValueError as e:
            raise RemoteAPIError(f"Malformed response from {path}") from e
