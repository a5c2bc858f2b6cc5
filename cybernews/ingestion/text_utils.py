"""Text normalization helpers used on every textual field."""

from __future__ import annotations

import re
from typing import Optional

from bs4 import BeautifulSoup


MAX_TEXT_CHARS = 2000

_ws_re = re.compile(r"\s+")


def normalize_text(text: Optional[str], *, max_chars: int = MAX_TEXT_CHARS) -> str:
    """Collapse whitespace runs to single spaces, trim, and truncate."""
    if not text:
        return ""
    return _ws_re.sub(" ", text).strip()[:max_chars]


def strip_markup(fragment: Optional[str]) -> str:
    """Plain text of an HTML fragment (feed summaries often carry markup)."""
    if not fragment:
        return ""
    if "<" not in fragment and "&" not in fragment:
        return fragment
    return BeautifulSoup(fragment, "html.parser").get_text(" ")
