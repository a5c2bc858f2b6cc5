"""Ingestors for feed-based and page-based news sources.

Both strategies share one capability, ``ingest(source) -> List[RawArticle]``:
- FeedIngestor: syndication feeds (RSS/Atom) via feedparser, with full-page
  enrichment when an entry snippet is too short
- PageIngestor: plain HTML listing pages, located with a prioritized list of
  CSS selectors (first selector with any match wins)

Fetch and parse failures are contained here and turn into an empty result for
the source.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import feedparser
from bs4 import BeautifulSoup

from cybernews.config import Settings
from cybernews.errors import FetchError, ParseError
from cybernews.extraction.fulltext import ArticleBodyExtractor
from cybernews.ingestion.article_types import FEED, PAGE, RawArticle, SourceConfig
from cybernews.ingestion.cascade import first_satisfying
from cybernews.ingestion.dates import age_hours, from_struct_time, resolve_date, utcnow
from cybernews.ingestion.fetcher import ContentFetcher
from cybernews.ingestion.text_utils import MAX_TEXT_CHARS, normalize_text, strip_markup
from cybernews.ingestion.url_utils import resolve_url

logger = logging.getLogger(__name__)


PAGE_SELECTORS: Sequence[str] = (
    "article",
    ".article",
    ".news-item",
    ".post",
    ".entry",
    '[class*="article"]',
    '[class*="news"]',
)

TITLE_SELECTOR = "h1, h2, h3, .title, .headline"
CONTENT_SELECTOR = "p, .content, .excerpt"
DATE_SELECTOR = ".date, .published, time"


class BaseIngestor:
    name: str = "base"

    def ingest(self, source: SourceConfig, *, now: Optional[datetime] = None) -> List[RawArticle]:
        raise NotImplementedError


def _entry_time(entry: Any) -> Optional[datetime]:
    """Entry timestamp: published, then updated, then the raw strings."""
    for key in ("published_parsed", "updated_parsed"):
        dt = from_struct_time(entry.get(key))
        if dt is not None:
            return dt
    for key in ("published", "updated"):
        dt = resolve_date(entry.get(key))
        if dt is not None:
            return dt
    return None


def _entry_snippet(entry: Any) -> str:
    summary = entry.get("summary") or ""
    if not summary:
        blocks = entry.get("content") or []
        if blocks:
            summary = blocks[0].get("value") or ""
    return strip_markup(summary)


@dataclass(frozen=True)
class FeedIngestor(BaseIngestor):
    fetcher: ContentFetcher
    extractor: ArticleBodyExtractor
    max_entries: int = 10
    max_age_hours: float = 168.0
    min_content_chars: int = 100
    max_text_chars: int = MAX_TEXT_CHARS

    name: str = FEED

    def _parse(self, raw: bytes, source: SourceConfig) -> List[Any]:
        # A file object keeps feedparser from treating the body as a path or URL
        parsed = feedparser.parse(io.BytesIO(raw))
        entries = list(parsed.entries or [])
        if parsed.get("bozo") and not entries:
            raise ParseError(f"malformed feed for {source.name}: {parsed.get('bozo_exception')}")
        return entries

    def _enrich(self, link: str) -> Optional[str]:
        try:
            return self.extractor.extract(link)
        except Exception as e:
            logger.debug("Could not enrich %s: %s", link, e)
            return None

    def ingest(self, source: SourceConfig, *, now: Optional[datetime] = None) -> List[RawArticle]:
        now = now or utcnow()
        try:
            raw = self.fetcher.fetch(source.location)
            entries = self._parse(raw, source)
        except (FetchError, ParseError) as e:
            logger.warning("Feed ingestion failed for %s: %s", source.name, e)
            return []

        logger.debug("Found %d entries in %s", len(entries), source.name)
        out: List[RawArticle] = []
        for entry in entries[: max(0, self.max_entries)]:
            title = normalize_text(entry.get("title"), max_chars=self.max_text_chars)
            link = (entry.get("link") or "").strip()
            if not title or not link:
                continue
            published = _entry_time(entry)
            if published is None:
                logger.debug("Skipping undated entry %r from %s", title[:50], source.name)
                continue
            if age_hours(published, now=now) > self.max_age_hours:
                continue

            content = normalize_text(_entry_snippet(entry), max_chars=self.max_text_chars)
            if len(content) < self.min_content_chars:
                content = self._enrich(link) or content

            out.append(
                RawArticle(
                    title=title,
                    content=content,
                    url=link,
                    published_at=published,
                    source_name=source.name,
                    category=source.category,
                )
            )
        return out


def _first_text(el: Any, selector: str) -> str:
    node = el.select_one(selector)
    return node.get_text() if node is not None else ""


@dataclass(frozen=True)
class PageIngestor(BaseIngestor):
    fetcher: ContentFetcher
    max_elements: int = 10
    max_age_hours: float = 24.0
    selectors: Sequence[str] = PAGE_SELECTORS
    max_text_chars: int = MAX_TEXT_CHARS

    name: str = PAGE

    def _article_from(self, el: Any, source: SourceConfig, now: datetime) -> Optional[RawArticle]:
        title = normalize_text(_first_text(el, TITLE_SELECTOR), max_chars=self.max_text_chars)
        anchor = el.find("a")
        href = (anchor.get("href") or "").strip() if anchor is not None else ""
        if not title or not href:
            return None
        published = resolve_date(_first_text(el, DATE_SELECTOR)) or now
        if age_hours(published, now=now) > self.max_age_hours:
            return None
        return RawArticle(
            title=title,
            content=normalize_text(_first_text(el, CONTENT_SELECTOR), max_chars=self.max_text_chars),
            url=resolve_url(href, source.location),
            published_at=published,
            source_name=source.name,
            category=source.category,
        )

    def ingest(self, source: SourceConfig, *, now: Optional[datetime] = None) -> List[RawArticle]:
        now = now or utcnow()
        try:
            html = self.fetcher.fetch(source.location)
        except FetchError as e:
            logger.warning("Page ingestion failed for %s: %s", source.name, e)
            return []

        soup = BeautifulSoup(html, "html.parser")
        elements = first_satisfying(self.selectors, soup.select)
        if not elements:
            logger.info("No articles found for %s with standard selectors", source.name)
            return []

        out: List[RawArticle] = []
        for el in elements[: max(0, self.max_elements)]:
            article = self._article_from(el, source, now)
            if article is not None:
                out.append(article)
        return out


def build_ingestors(fetcher: ContentFetcher, settings: Settings) -> Dict[str, BaseIngestor]:
    """One ingestor per strategy; adding a strategy means adding an entry here."""
    extractor = ArticleBodyExtractor(
        fetcher=fetcher,
        min_chars=settings.min_body_chars,
        max_chars=settings.max_text_chars,
    )
    return {
        FEED: FeedIngestor(
            fetcher=fetcher,
            extractor=extractor,
            max_entries=settings.feed_max_entries,
            max_age_hours=settings.feed_max_age_hours,
            min_content_chars=settings.min_snippet_chars,
            max_text_chars=settings.max_text_chars,
        ),
        PAGE: PageIngestor(
            fetcher=fetcher,
            max_elements=settings.page_max_elements,
            max_age_hours=settings.page_max_age_hours,
            max_text_chars=settings.max_text_chars,
        ),
    }


def ingest_source(source: SourceConfig, ingestors: Dict[str, BaseIngestor], *, now: Optional[datetime] = None) -> List[RawArticle]:
    ingestor = ingestors.get(source.strategy)
    if ingestor is None:
        raise ValueError(f"unknown ingestion strategy {source.strategy!r} for {source.name}")
    return ingestor.ingest(source, now=now)
