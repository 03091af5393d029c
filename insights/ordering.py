"""Today's feed: same-day filtering and source-priority ordering.

The feed shows articles registered on the current calendar day in the
display timezone (Asia/Tokyo by default), ordered by a fixed source
ranking and then by recency.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from typing import Callable, Iterable, List, Optional, Tuple
from zoneinfo import ZoneInfo

from .models import Article


logger = logging.getLogger(__name__)

DISPLAY_ZONE = ZoneInfo("Asia/Tokyo")
LOWEST_PRIORITY = 8

# The first three rules match substrings; the rest need the exact name.
_PRIORITY_RULES: List[Tuple[Callable[[str], bool], int]] = [
    (lambda name: "google" in name, 1),
    (lambda name: "openai" in name, 2),
    (lambda name: "github" in name, 3),
    (lambda name: name == "zenn trends", 4),
    (lambda name: name == "zenn (copilot)", 5),
    (lambda name: name == "qiita trends", 6),
    (lambda name: name == "qiita (copilot)", 7),
]


def source_priority(source_name: Optional[str]) -> int:
    name = (source_name or "").lower()
    for matches, priority in _PRIORITY_RULES:
        if matches(name):
            return priority
    return LOWEST_PRIORITY


def is_today(
    created_at: Optional[datetime],
    now: Optional[datetime] = None,
    zone: tzinfo = DISPLAY_ZONE,
) -> bool:
    if created_at is None:
        return False
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return created_at.astimezone(zone).date() == current.astimezone(zone).date()


def _sort_key(article: Article) -> Tuple[int, bool, float]:
    published = article.published_at
    return (
        source_priority(article.source_name),
        published is None,
        -published.timestamp() if published is not None else 0.0,
    )


def sort_by_priority(articles: Iterable[Article]) -> List[Article]:
    """Order by source priority, newest first within a priority.

    Articles without a publish time go last in their priority group.
    """
    return sorted(articles, key=_sort_key)


def daily_feed(
    articles: Iterable[Article],
    now: Optional[datetime] = None,
    zone: tzinfo = DISPLAY_ZONE,
) -> List[Article]:
    todays: List[Article] = []
    undated = 0
    for article in articles:
        if article.created_at is None:
            undated += 1
            continue
        if is_today(article.created_at, now, zone):
            todays.append(article)
    if undated:
        logger.warning("[daily_feed_undated] skipped=%s", undated)
    return sort_by_priority(todays)
