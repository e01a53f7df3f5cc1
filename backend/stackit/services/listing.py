"""In-memory filtering, ordering and tag statistics for question listings.

Every function works on any sequence of objects exposing ``tags``,
``vote_count``, ``answer_count`` and ``created_at`` (ORM rows or response
schemas) and recomputes its result from the full collection on each call.
"""

from collections import Counter
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class SortKey(str, Enum):
    """Supported listing orders."""

    NEWEST = "newest"
    VOTES = "votes"
    ANSWERS = "answers"


def _as_utc(value: Optional[datetime]) -> datetime:
    # SQLite hands back naive datetimes; treat them as UTC
    if value is None:
        return datetime.min.replace(tzinfo=timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


_SORT_FIELDS: Dict[SortKey, Callable[[Any], Any]] = {
    SortKey.NEWEST: lambda item: _as_utc(item.created_at),
    SortKey.VOTES: lambda item: item.vote_count or 0,
    SortKey.ANSWERS: lambda item: item.answer_count or 0,
}


def item_tags(item: Any) -> List[str]:
    """Return an item's tags as a list of strings, tolerating loose payloads."""
    tags = getattr(item, "tags", None)
    if not isinstance(tags, (list, tuple)):
        return []
    return [t for t in tags if isinstance(t, str)]


def filter_by_tag(items: Iterable[T], tag: Optional[str]) -> List[T]:
    """Keep items with at least one tag containing ``tag`` (case-insensitive).

    An empty or missing tag keeps everything.
    """
    needle = (tag or "").strip().lower()
    if not needle:
        return list(items)
    return [
        item for item in items
        if any(needle in t.lower() for t in item_tags(item))
    ]


def parse_sort_key(sort_by: Optional[str]) -> SortKey:
    """Map a sort parameter onto a SortKey, defaulting to newest."""
    if isinstance(sort_by, SortKey):
        return sort_by
    try:
        return SortKey(sort_by)
    except ValueError:
        logger.debug("unknown_sort_key", sort_by=sort_by)
        return SortKey.NEWEST


def sort_items(items: Iterable[T], sort_by: Optional[str] = SortKey.NEWEST) -> List[T]:
    """Order items descending by the chosen key.

    The sort is stable, so equal keys keep their input order.
    """
    key = _SORT_FIELDS[parse_sort_key(sort_by)]
    return sorted(items, key=key, reverse=True)


def render_listing(
    items: Sequence[T],
    sort_by: Optional[str] = SortKey.NEWEST,
    tag: Optional[str] = None,
) -> List[T]:
    """Filter by tag, then sort."""
    return sort_items(filter_by_tag(items, tag), sort_by)


def paginate(items: Sequence[T], page: int = 1, limit: int = 20) -> Tuple[List[T], int]:
    """Slice one page out of an ordered listing.

    Returns:
        Tuple of (page items, total item count)
    """
    offset = (page - 1) * limit
    return list(items[offset:offset + limit]), len(items)


def popular_tags(items: Iterable[Any], limit: int = 12) -> List[Tuple[str, int]]:
    """Most used tags across items.

    Tags are grouped case-insensitively and reported with the spelling first
    seen. Ties keep first-seen order.

    Returns:
        List of (tag, question count) pairs, most used first
    """
    counts: Counter = Counter()
    spelling: Dict[str, str] = {}
    for item in items:
        seen = set()
        for t in item_tags(item):
            folded = t.lower()
            if folded in seen:
                continue
            seen.add(folded)
            spelling.setdefault(folded, t)
            counts[folded] += 1

    # Counter.most_common keeps insertion order for equal counts
    return [(spelling[folded], n) for folded, n in counts.most_common(limit)]
