#!/usr/bin/env python3
"""Security news ingestion worker.

Runs a single ingestion cycle over the configured sources and logs the result:
- Feed sources (RSS/Atom) and page sources (HTML listings)
- Dedup by title key, confidence by corroborating source count

Periodic refresh belongs to the web app's scheduler; results here live in
memory only, so this script is for one-off runs (cron, manual checks).
"""

from __future__ import annotations

import logging

from cybernews.config import Settings
from cybernews.pipeline.service import AggregatorService

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


def run_once(service: AggregatorService) -> None:
    stories, completed_at = service.run_ingestion_cycle()
    stats = service.get_stats()
    counts = stats["count_by_confidence"]
    logger.info(
        "[ingest] stories=%d high=%d medium=%d low=%d fallback=%s at=%s",
        len(stories),
        counts["high"],
        counts["medium"],
        counts["low"],
        service.snapshot.from_fallback,
        completed_at.isoformat(),
    )


if __name__ == "__main__":
    run_once(AggregatorService.from_settings(Settings.from_env()))
