# ipfs_cluster_client/core/endpoint.py
import base64
from dataclasses import dataclass, field
from typing import Dict, Optional
from urllib.parse import urljoin

from ipfs_cluster_client.core.config import Settings


def _basic_auth_header(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


@dataclass(frozen=True)
class ClusterEndpoint:
    """
    Base URL and credentials of a cluster REST API.

    The Authorization header is computed once here; requests only ever read it.
    It is produced only when both username and password are given.
    """
    base_url: str
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    authorization_header: str = field(init=False, default="", repr=False)

    def __post_init__(self):
        base_url = str(self.base_url)
        if not base_url.endswith("/"):
            base_url += "/"
        object.__setattr__(self, "base_url", base_url)

        if self.username and self.password:
            object.__setattr__(
                self, "authorization_header", _basic_auth_header(self.username, self.password)
            )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ClusterEndpoint":
        return cls(
            base_url=str(settings.CLUSTER_API_URL),
            username=settings.CLUSTER_API_USERNAME,
            password=settings.CLUSTER_API_PASSWORD,
        )

    def construct_headers(self, headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Return a new header dict with the Authorization header merged in."""
        merged = dict(headers or {})
        if self.authorization_header:
            merged["Authorization"] = self.authorization_header
        return merged

    def url_for(self, path: str) -> str:
        return urljoin(self.base_url, path.lstrip("/"))
