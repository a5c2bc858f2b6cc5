"""Error taxonomy for the ingestion pipeline.

None of these escape an ingestion cycle. They are raised close to the failing
call and contained by the ingestor, extractor or resolver that owns the call:
- FetchError: network failure, timeout, HTTP error status, or a refused URL
- ParseError: a feed or page that cannot be turned into entries
- ResolutionError: a date (or URL) that cannot be resolved
"""

from __future__ import annotations

from typing import Optional


class CyberNewsError(Exception):
    """Base class for pipeline errors."""


class FetchError(CyberNewsError):
    TIMEOUT = "timeout"
    NETWORK = "network"
    HTTP_STATUS = "http_status"
    BLOCKED = "blocked"

    def __init__(self, kind: str, url: str, message: str = "", status_code: Optional[int] = None):
        self.kind = kind
        self.url = url
        self.status_code = status_code
        detail = message or kind
        super().__init__(f"{kind} fetching {url}: {detail}")


class ParseError(CyberNewsError):
    pass


class ResolutionError(CyberNewsError):
    pass
