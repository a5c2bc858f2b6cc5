"""URL helpers for page ingestion."""

from __future__ import annotations

from urllib.parse import urljoin, urlparse

from cybernews.errors import ResolutionError


def origin_of(url: str) -> str:
    """Return ``scheme://host[:port]/`` for an absolute URL."""
    p = urlparse((url or "").strip())
    if not p.scheme or not p.netloc:
        raise ResolutionError(f"not an absolute url: {url!r}")
    return f"{p.scheme}://{p.netloc}/"


def resolve_url(link: str, base_url: str) -> str:
    """Make ``link`` absolute against the origin of ``base_url``.

    Links that already start with ``http`` are returned as is. When the base
    has no usable origin the link is returned unchanged.
    """
    link = (link or "").strip()
    if link.startswith("http"):
        return link
    try:
        return urljoin(origin_of(base_url), link)
    except (ResolutionError, ValueError):
        return link

