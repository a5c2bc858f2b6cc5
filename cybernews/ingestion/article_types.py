"""Shared ingestion data types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


FEED = "feed"
PAGE = "page"
STRATEGIES = (FEED, PAGE)


@dataclass(frozen=True)
class SourceConfig:
    """One configured origin of news content (feed or page)."""

    name: str
    location: str
    strategy: str
    category: str = "general"
    weight: float = 1.0


@dataclass(frozen=True)
class RawArticle:
    """Unmerged item produced by ingesting a single source.

    Lives for one ingestion cycle only; the aggregator folds these into stories.
    """

    title: str
    content: str
    url: str
    published_at: datetime
    source_name: str
    category: str = "general"
    summary: Optional[str] = None
