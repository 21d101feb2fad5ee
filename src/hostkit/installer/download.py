"""Fetch installer payloads over HTTPS"""

from typing import Optional

import httpx

from hostkit.errors import ToolingMissing


def fetch_text(
    url: str,
    timeout: float = 60.0,
    transport: Optional[httpx.BaseTransport] = None,
) -> str:
    """Download ``url`` and return the body as text"""
    try:
        with httpx.Client(timeout=timeout, transport=transport, follow_redirects=True) as client:
            response = client.get(url)
            response.raise_for_status()
    except httpx.HTTPError as e:
        raise ToolingMissing(f"Download failed: {url}: {e}") from e
    return response.text
