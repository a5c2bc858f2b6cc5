"""Article body extraction.

Used to enrich feed entries whose snippet is too short. The page is stripped of
non-content markup, then a fixed list of content containers is tried in order;
the first container with enough text wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from bs4 import BeautifulSoup

from cybernews.errors import FetchError
from cybernews.ingestion.cascade import first_satisfying
from cybernews.ingestion.fetcher import ContentFetcher
from cybernews.ingestion.text_utils import MAX_TEXT_CHARS, normalize_text

logger = logging.getLogger(__name__)


NOISE_SELECTOR = "script, style, nav, header, footer, .advertisement, .ads"

CONTENT_SELECTORS: Sequence[str] = (
    ".article-content",
    ".post-content",
    ".entry-content",
    ".content",
    "article p",
    ".article p",
    "main p",
)


def extract_body_text(
    html: Union[bytes, str],
    *,
    min_chars: int = 200,
    selectors: Sequence[str] = CONTENT_SELECTORS,
    max_chars: int = MAX_TEXT_CHARS,
) -> Optional[str]:
    """Return normalized body text from an HTML document, or None."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.select(NOISE_SELECTOR):
        tag.decompose()

    def _text_for(selector: str) -> str:
        return "".join(el.get_text() for el in soup.select(selector))

    text = first_satisfying(selectors, _text_for, accept=lambda t: len(t) > min_chars)
    if text is None:
        return None
    return normalize_text(text, max_chars=max_chars)


@dataclass(frozen=True)
class ArticleBodyExtractor:
    fetcher: ContentFetcher
    min_chars: int = 200
    max_chars: int = MAX_TEXT_CHARS

    def extract(self, url: str) -> Optional[str]:
        if not url:
            return None
        try:
            html = self.fetcher.fetch(url)
        except FetchError as e:
            logger.debug("Body fetch failed for %s: %s", url, e)
            return None
        if not html.strip():
            return None
        return extract_body_text(html, min_chars=self.min_chars, max_chars=self.max_chars)
