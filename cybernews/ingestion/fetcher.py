"""HTTP retrieval shared by feed, page and article-body ingestion.

Policy:
- Fixed timeout and a browser-like User-Agent on every request.
- No retries; a failed fetch is final for the cycle.
- Refuse URLs that point at localhost / private address space.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

import requests

from cybernews.config import DEFAULT_USER_AGENT, Settings
from cybernews.errors import FetchError


_PRIVATE_NETS = [
    ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("169.254.0.0/16"),
    ipaddress.ip_network("0.0.0.0/8"),
    ipaddress.ip_network("::1/128"),
    ipaddress.ip_network("fc00::/7"),
    ipaddress.ip_network("fe80::/10"),
]


def _is_private_ip(hostname: str) -> bool:
    try:
        ip = ipaddress.ip_address(hostname)
    except ValueError:
        return False
    return any(ip in net for net in _PRIVATE_NETS)


def validate_fetch_url(url: str) -> Optional[str]:
    """Return an error string if URL should not be fetched."""
    try:
        p = urlparse(url or "")
    except ValueError:
        return "invalid_url"
    if p.scheme not in ("http", "https"):
        return "bad_scheme"
    host = (p.hostname or "").strip().lower()
    if not host:
        return "missing_host"
    if host in ("localhost", "localhost.localdomain"):
        return "blocked_host"
    if _is_private_ip(host):
        return "blocked_private_ip"
    return None


@dataclass
class ContentFetcher:
    timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    max_bytes: int = 2_000_000

    @classmethod
    def from_settings(cls, settings: Settings) -> "ContentFetcher":
        return cls(
            timeout=settings.fetch_timeout,
            user_agent=settings.user_agent,
            max_bytes=settings.max_response_bytes,
        )

    def fetch(self, url: str) -> bytes:
        err = validate_fetch_url(url)
        if err:
            raise FetchError(FetchError.BLOCKED, url, err)
        try:
            # No shared Session: fetches run on several threads at once
            resp = requests.get(
                url,
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                },
                timeout=self.timeout,
                allow_redirects=True,
                stream=True,
            )
        except requests.Timeout as e:
            raise FetchError(FetchError.TIMEOUT, url, str(e)) from e
        except requests.RequestException as e:
            raise FetchError(FetchError.NETWORK, url, str(e)) from e

        with resp:
            if resp.status_code >= 400:
                raise FetchError(FetchError.HTTP_STATUS, url, f"http_{resp.status_code}", status_code=resp.status_code)
            content = b""
            try:
                for chunk in resp.iter_content(chunk_size=64 * 1024):
                    if not chunk:
                        continue
                    content += chunk
                    if len(content) > self.max_bytes:
                        raise FetchError(FetchError.NETWORK, url, "too_large")
            except requests.Timeout as e:
                raise FetchError(FetchError.TIMEOUT, url, str(e)) from e
            except requests.RequestException as e:
                raise FetchError(FetchError.NETWORK, url, str(e)) from e
        return content
