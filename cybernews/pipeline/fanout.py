"""Concurrent per-source ingestion with settle-all semantics.

Every source runs on its own worker; the call returns only after all of them
have either produced articles or failed. A failing source contributes no
articles and never cancels the others.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from cybernews.ingestion.article_types import RawArticle, SourceConfig

logger = logging.getLogger(__name__)

IngestFn = Callable[[SourceConfig], List[RawArticle]]


@dataclass(frozen=True)
class SourceResult:
    source: SourceConfig
    articles: List[RawArticle] = field(default_factory=list)
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def settle_all(sources: Sequence[SourceConfig], ingest: IngestFn, *, max_workers: int = 8) -> List[SourceResult]:
    """Run ``ingest`` for every source concurrently; results in registry order."""
    if not sources:
        return []
    workers = max(1, min(max_workers, len(sources)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ingest") as executor:
        futures = [executor.submit(ingest, src) for src in sources]
        results: List[SourceResult] = []
        for src, fut in zip(sources, futures):
            try:
                articles = list(fut.result() or [])
            except Exception as e:
                logger.warning("Failed to ingest %s: %s", src.name, e)
                results.append(SourceResult(source=src, error=e))
                continue
            logger.info("Ingested %d articles from %s", len(articles), src.name)
            results.append(SourceResult(source=src, articles=articles))
    return results


def fan_out(sources: Sequence[SourceConfig], ingest: IngestFn, *, max_workers: int = 8) -> List[RawArticle]:
    """Concatenate the articles of every source that settled successfully."""
    out: List[RawArticle] = []
    for result in settle_all(sources, ingest, max_workers=max_workers):
        out.extend(result.articles)
    return out
