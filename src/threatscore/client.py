"""
HTTP client for the Threat Scoring API.

Lets a collector running in another process submit events to a scoring
server and read back threat levels and verdicts.
"""

# src/threatscore/client.py
import json
from typing import Any, Dict, Mapping, Union

import requests

from .exceptions import ClientError


class ThreatScoreClient:
    """
    Synchronous client for the scoring API.

    Example:
        >>> client = ThreatScoreClient("http://localhost:8000")
        >>> client.score(b'{"type": "file", "data": {"file": {"path": "/etc/shadow"}}}')
        8
    """

    def __init__(self, base_url: str = "http://localhost:8000", timeout: float = 5.0) -> None:
        """
        Args:
            base_url: URL of the scoring API server
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        kwargs.setdefault("timeout", self.timeout)
        try:
            response = self.session.request(method, f"{self.base_url}{path}", **kwargs)
        except requests.RequestException as e:
            raise ClientError(f"{method} {path} failed: {e}") from e

        if response.status_code >= 400:
            raise ClientError(
                f"{method} {path} returned {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        return response.json()

    def health(self) -> Dict[str, Any]:
        """Return the server's health report."""
        return self._request("GET", "/health")

    def score(self, raw: Union[bytes, str, Mapping[str, Any]]) -> int:
        """
        Score one event on the server.

        Args:
            raw: JSON bytes or str sent as-is, or a mapping that is JSON encoded

        Returns:
            Threat level computed by the server
        """
        if isinstance(raw, Mapping):
            raw = json.dumps(raw)
        if isinstance(raw, str):
            raw = raw.encode("utf-8")
        result = self._request("POST", "/score", data=raw,
                               headers={"Content-Type": "application/json"})
        return int(result["threat_level"])

    def submit_event(self, event: Mapping[str, Any]) -> Dict[str, Any]:
        """Submit a structured event and return the server's verdict."""
        return self._request("POST", "/events", json=dict(event))

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "ThreatScoreClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
