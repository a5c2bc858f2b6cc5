"""Ingestion cycle + the process-wide story snapshot.

The current story list is an immutable snapshot. A cycle builds a complete new
list (fetch + aggregate) and only then swaps the reference, so readers see
either the previous list or the new one, never a mix. Overlapping cycles are
allowed; the last one to finish wins.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from cybernews.aggregation.stories import Confidence, Story, aggregate
from cybernews.config import Settings
from cybernews.contracts.fallback import fallback_stories
from cybernews.ingestion.article_types import SourceConfig
from cybernews.ingestion.dates import utcnow
from cybernews.ingestion.fetcher import ContentFetcher
from cybernews.ingestion.ingestors import build_ingestors, ingest_source
from cybernews.ingestion.sources import load_sources
from cybernews.pipeline.fanout import IngestFn, fan_out

logger = logging.getLogger(__name__)

ALL = "all"


@dataclass(frozen=True)
class StorySnapshot:
    stories: Tuple[Story, ...] = ()
    completed_at: Optional[datetime] = None
    version: int = 0
    from_fallback: bool = False


def parse_confidence_filter(value: Union[None, str, Confidence]) -> Optional[Confidence]:
    """None / "" / "all" mean no filter; anything else must be a level."""
    if value is None or isinstance(value, Confidence):
        return value
    v = str(value).strip().lower()
    if not v or v == ALL:
        return None
    try:
        return Confidence(v)
    except ValueError:
        raise ValueError(f"unknown confidence level {value!r}") from None


class AggregatorService:
    def __init__(
        self,
        sources: Sequence[SourceConfig],
        *,
        settings: Optional[Settings] = None,
        ingest: Optional[IngestFn] = None,
        fetcher: Optional[ContentFetcher] = None,
        fallback: Callable[[], List[Story]] = fallback_stories,
    ):
        self.sources = list(sources)
        self.settings = settings or Settings()
        if ingest is None:
            ingestors = build_ingestors(fetcher or ContentFetcher.from_settings(self.settings), self.settings)

            def ingest(src: SourceConfig):
                return ingest_source(src, ingestors)

        self._ingest = ingest
        self._fallback = fallback
        self._lock = threading.Lock()
        self._snapshot = StorySnapshot()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "AggregatorService":
        settings = settings or Settings.from_env()
        return cls(load_sources(settings.sources_file), settings=settings)

    @property
    def snapshot(self) -> StorySnapshot:
        return self._snapshot

    def _install(self, stories: List[Story], completed_at: datetime, from_fallback: bool) -> None:
        with self._lock:
            self._snapshot = StorySnapshot(
                stories=tuple(stories),
                completed_at=completed_at,
                version=self._snapshot.version + 1,
                from_fallback=from_fallback,
            )

    def run_ingestion_cycle(self) -> Tuple[List[Story], datetime]:
        """Fetch, aggregate and publish a fresh story list. Never raises."""
        logger.info("Starting ingestion cycle over %d sources", len(self.sources))
        from_fallback = False
        try:
            articles = fan_out(self.sources, self._ingest, max_workers=self.settings.fanout_workers)
            stories = aggregate(articles)
            logger.info("Aggregated %d articles into %d stories", len(articles), len(stories))
        except Exception:
            logger.exception("Ingestion cycle failed; using fallback data")
            stories = []
        if not stories:
            logger.warning("No news ingested, using fallback data")
            stories = self._fallback()
            from_fallback = True

        completed_at = utcnow()
        self._install(stories, completed_at, from_fallback)
        return list(stories), completed_at

    def get_current_stories(
        self,
        confidence: Union[None, str, Confidence] = None,
        limit: Optional[int] = None,
    ) -> List[Story]:
        level = parse_confidence_filter(confidence)
        stories = list(self._snapshot.stories)
        if level is not None:
            stories = [s for s in stories if s.confidence == level]
        if limit is not None:
            stories = stories[: max(0, int(limit))]
        return stories

    def get_stats(self) -> Dict[str, Any]:
        snap = self._snapshot
        counts = {c.value: 0 for c in (Confidence.LOW, Confidence.MEDIUM, Confidence.HIGH)}
        for s in snap.stories:
            counts[s.confidence.value] += 1
        return {
            "total_stories": len(snap.stories),
            "count_by_confidence": counts,
            "source_count": len(self.sources),
            "last_updated": snap.completed_at,
        }
