"""Source registry: the default security feeds, or a JSON file override."""

from __future__ import annotations

import json
from typing import List, Optional

from cybernews.contracts.source_registry import sources_from_payload
from cybernews.ingestion.article_types import FEED, SourceConfig


def default_sources() -> List[SourceConfig]:
    """Curated starter set of security news feeds."""
    return [
        SourceConfig("Krebs on Security", "https://krebsonsecurity.com/feed/", FEED, "general"),
        SourceConfig("The Hacker News", "https://feeds.feedburner.com/TheHackersNews", FEED, "general"),
        SourceConfig("Bleeping Computer", "https://www.bleepingcomputer.com/feed/", FEED, "malware"),
        SourceConfig("SecurityWeek", "https://www.securityweek.com/rss.xml", FEED, "general"),
        SourceConfig("CSO Online", "https://www.csoonline.com/index.rss", FEED, "general"),
    ]


def load_sources(path: Optional[str] = None) -> List[SourceConfig]:
    if not path:
        return default_sources()
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    return sources_from_payload(payload)
