"""Runtime settings read from the environment (and .env via python-dotenv)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


def _get_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = (env.get(key) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = (env.get(key) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    fetch_timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    max_response_bytes: int = 2_000_000
    feed_max_entries: int = 10
    page_max_elements: int = 10
    # Feed window is deliberately wide (7 days); pages use a strict 24 hours.
    feed_max_age_hours: float = 168.0
    page_max_age_hours: float = 24.0
    min_snippet_chars: int = 100
    min_body_chars: int = 200
    max_text_chars: int = 2000
    fanout_workers: int = 8
    refresh_minutes: int = 30
    sources_file: Optional[str] = None
    port: int = 3000
    default_news_limit: int = 50

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        if env is None:
            load_dotenv()
            env = os.environ
        return cls(
            fetch_timeout=_get_float(env, "FETCH_TIMEOUT", 10.0),
            user_agent=(env.get("USER_AGENT") or "").strip() or DEFAULT_USER_AGENT,
            max_response_bytes=_get_int(env, "MAX_RESPONSE_BYTES", 2_000_000),
            feed_max_entries=_get_int(env, "FEED_MAX_ENTRIES", 10),
            page_max_elements=_get_int(env, "PAGE_MAX_ELEMENTS", 10),
            feed_max_age_hours=_get_float(env, "FEED_MAX_AGE_HOURS", 168.0),
            page_max_age_hours=_get_float(env, "PAGE_MAX_AGE_HOURS", 24.0),
            min_snippet_chars=_get_int(env, "MIN_SNIPPET_CHARS", 100),
            min_body_chars=_get_int(env, "MIN_BODY_CHARS", 200),
            max_text_chars=_get_int(env, "MAX_TEXT_CHARS", 2000),
            fanout_workers=max(1, _get_int(env, "FANOUT_WORKERS", 8)),
            refresh_minutes=max(1, _get_int(env, "REFRESH_MINUTES", 30)),
            sources_file=(env.get("SOURCES_FILE") or "").strip() or None,
            port=_get_int(env, "PORT", 3000),
            default_news_limit=_get_int(env, "DEFAULT_NEWS_LIMIT", 50),
        )
