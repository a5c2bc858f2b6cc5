"""Story aggregation: dedup, corroboration and ranking.

Raw articles are folded into stories by a coarse title key:
    key = first five lower-cased, punctuation-free title tokens joined by "_"
Every extra report with the same key adds a reference and raises the
corroborating source count. Confidence is a step function of that count:
    1 -> low, 2..4 -> medium, >=5 -> high
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from cybernews.ingestion.article_types import RawArticle


class Confidence(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


CONFIDENCE_RANK: Dict[Confidence, int] = {
    Confidence.HIGH: 3,
    Confidence.MEDIUM: 2,
    Confidence.LOW: 1,
}

HIGH_MIN_SOURCES = 5
MEDIUM_MIN_SOURCES = 2

KEY_TOKENS = 5
SUMMARY_MAX_SENTENCE = 200
SUMMARY_FALLBACK_CHARS = 150
NO_SUMMARY = "No summary available."

_non_word_re = re.compile(r"[^A-Za-z0-9_\s]")
_sentence_split_re = re.compile(r"[.!?]+")


@dataclass(frozen=True)
class Reference:
    source_name: str
    url: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.source_name, "url": self.url}


@dataclass(frozen=True)
class Story:
    id: str
    title: str
    summary: str
    content: str
    confidence: Confidence
    corroborating_source_count: int
    timestamp: datetime
    category: str
    references: Tuple[Reference, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "tldr": self.summary,
            "content": self.content,
            "confidence": self.confidence.value,
            "sources": self.corroborating_source_count,
            "timestamp": self.timestamp.isoformat(),
            "category": self.category,
            "references": [r.to_dict() for r in self.references],
        }


def dedup_key(title: str) -> str:
    cleaned = _non_word_re.sub("", (title or "").lower())
    return "_".join(cleaned.split()[:KEY_TOKENS])


def confidence_for(count: int) -> Confidence:
    if count >= HIGH_MIN_SOURCES:
        return Confidence.HIGH
    if count >= MEDIUM_MIN_SOURCES:
        return Confidence.MEDIUM
    return Confidence.LOW


def generate_summary(content: Optional[str]) -> str:
    """First sentence if short enough, else a clipped prefix of the content."""
    if not content:
        return NO_SUMMARY
    first = _sentence_split_re.split(content)[0].strip()
    if first and len(first) <= SUMMARY_MAX_SENTENCE:
        return first + "."
    return content[:SUMMARY_FALLBACK_CHARS] + "..."


def new_story_id() -> str:
    return uuid.uuid4().hex


@dataclass
class _Draft:
    """Mutable accumulator for one story during a single aggregation pass."""

    title: str
    summary: str
    summary_generated: bool
    content: str
    timestamp: datetime
    category: str
    references: List[Reference] = field(default_factory=list)

    @classmethod
    def start(cls, article: RawArticle) -> "_Draft":
        supplied = (article.summary or "").strip()
        return cls(
            title=article.title,
            summary=supplied or generate_summary(article.content),
            summary_generated=not supplied,
            content=article.content,
            timestamp=article.published_at,
            category=article.category or "general",
            references=[Reference(article.source_name, article.url)],
        )

    def merge(self, article: RawArticle) -> None:
        self.references.append(Reference(article.source_name, article.url))
        if article.published_at > self.timestamp:
            self.timestamp = article.published_at
        if not self.content and article.content:
            self.content = article.content
            if self.summary_generated:
                self.summary = generate_summary(self.content)

    def freeze(self) -> Story:
        count = len(self.references)
        return Story(
            id=new_story_id(),
            title=self.title,
            summary=self.summary,
            content=self.content,
            confidence=confidence_for(count),
            corroborating_source_count=count,
            timestamp=self.timestamp,
            category=self.category,
            references=tuple(self.references),
        )


def merge_articles(articles: Iterable[RawArticle]) -> List[Story]:
    """Fold articles into stories, in first-seen order of their keys."""
    drafts: Dict[str, _Draft] = {}
    for article in articles:
        key = dedup_key(article.title)
        draft = drafts.get(key)
        if draft is None:
            drafts[key] = _Draft.start(article)
        else:
            draft.merge(article)
    return [d.freeze() for d in drafts.values()]


def rank_stories(stories: Iterable[Story]) -> List[Story]:
    """Confidence first, then most recent; stable for exact ties."""
    return sorted(
        stories,
        key=lambda s: (CONFIDENCE_RANK[s.confidence], s.timestamp),
        reverse=True,
    )


def aggregate(articles: Iterable[RawArticle]) -> List[Story]:
    return rank_stories(merge_articles(articles))
