"""Date resolution for free-form date strings scraped from pages and feeds."""

from __future__ import annotations

import re
import time
from datetime import datetime, timezone
from typing import Optional, Sequence

from dateutil import parser as dtparser

from cybernews.errors import ResolutionError
from cybernews.ingestion.cascade import first_satisfying


DATE_PATTERNS: Sequence[re.Pattern] = (
    re.compile(r"\d{4}-\d{2}-\d{2}"),  # ISO
    re.compile(r"\d{1,2}/\d{1,2}/\d{4}"),  # 1/15/2024
    re.compile(r"\d{1,2}-\d{1,2}-\d{4}"),  # 1-15-2024
    re.compile(r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+\d{1,2},?\s+\d{4}"),
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    # Naive values are taken as UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def from_struct_time(st: Optional[time.struct_time]) -> Optional[datetime]:
    """Convert feedparser's *_parsed fields (UTC struct_time) to datetime."""
    if not st:
        return None
    try:
        return datetime(*st[:6], tzinfo=timezone.utc)
    except (TypeError, ValueError):
        return None


def parse_date_strict(text: str) -> datetime:
    """Parse ``text`` as a date or raise ResolutionError."""
    s = (text or "").strip()
    if not s:
        raise ResolutionError("empty date string")
    try:
        return ensure_utc(dtparser.parse(s))
    except (ValueError, OverflowError) as e:
        raise ResolutionError(f"unparseable date {s!r}: {e}") from e


def _try_parse(text: str) -> Optional[datetime]:
    try:
        return parse_date_strict(text)
    except ResolutionError:
        return None


def _match_and_parse(pattern: re.Pattern, text: str) -> Optional[datetime]:
    m = pattern.search(text)
    if not m:
        return None
    return _try_parse(m.group(0))


def resolve_date(text: Optional[str]) -> Optional[datetime]:
    """Resolve a free-form date string, or None when nothing parses.

    Known patterns are tried first (the first one that both matches and parses
    wins); otherwise the whole string is handed to dateutil.
    """
    if not text or not text.strip():
        return None
    found = first_satisfying(DATE_PATTERNS, lambda p: _match_and_parse(p, text))
    if found is not None:
        return found
    return _try_parse(text)


def age_hours(dt: datetime, *, now: Optional[datetime] = None) -> float:
    ref = now or utcnow()
    return (ref - ensure_utc(dt)).total_seconds() / 3600.0
