"""First-success cascades.

Short snippet enrichment, the date pattern list and the content selector lists
all share one shape: try candidates in priority order and keep the first result
that passes a check.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional, TypeVar

C = TypeVar("C")
R = TypeVar("R")


def first_satisfying(
    candidates: Iterable[C],
    produce: Callable[[C], Optional[R]],
    accept: Callable[[R], bool] = bool,
    default: Optional[R] = None,
) -> Optional[R]:
    """Return ``produce(c)`` for the first candidate whose result is accepted.

    Candidates after the first accepted one are never produced.
    """
    for candidate in candidates:
        result = produce(candidate)
        if result is None:
            continue
        if accept(result):
            return result
    return default
