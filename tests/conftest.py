from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

import pytest

from insights.models import Article
from insights.store import StoreError


def make_article(
    article_id: str,
    source_name: Optional[str] = "Google News",
    *,
    published_at: Optional[datetime] = None,
    created_at: Optional[datetime] = None,
    is_favorite: bool = False,
    **extra,
) -> Article:
    return Article(
        id=article_id,
        title=extra.pop("title", f"Article {article_id}"),
        url=extra.pop("url", f"https://example.com/{article_id}"),
        summary=extra.pop("summary", f"Summary of {article_id}"),
        published_at=published_at or datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc),
        created_at=created_at,
        source_name=source_name,
        is_favorite=is_favorite,
        **extra,
    )


class FakeStore:
    """In-memory stand-in for ArticleStore."""

    def __init__(self, articles: Optional[List[Article]] = None) -> None:
        self.articles = list(articles or [])
        self.updates = []
        self.fail_updates = False
        self.fail_fetch = False

    def fetch_articles(self, *, limit, order_by="created_at", favorites_only=False):
        if self.fail_fetch:
            raise StoreError("fetch_articles", "connection refused")
        rows = [a for a in self.articles if a.is_favorite or not favorites_only]
        rows.sort(key=lambda a: getattr(a, order_by) or datetime.min.replace(tzinfo=timezone.utc), reverse=True)
        return rows[:limit]

    def get_article(self, article_id):
        if self.fail_fetch:
            raise StoreError("get_article", "connection refused")
        for article in self.articles:
            if article.id == article_id:
                return article
        return None

    def set_favorite(self, article_id, is_favorite):
        self.updates.append((article_id, is_favorite))
        if self.fail_updates:
            raise StoreError("set_favorite", "503 Service Unavailable")
        for article in self.articles:
            if article.id == article_id:
                article.is_favorite = is_favorite


@pytest.fixture
def fake_store():
    return FakeStore()


# 2024-06-02 12:00 in Tokyo
NOW = datetime(2024, 6, 2, 3, 0, tzinfo=timezone.utc)


class FrozenDatetime(datetime):
    @classmethod
    def now(cls, tz=None):
        return NOW.astimezone(tz) if tz is not None else NOW.replace(tzinfo=None)


@pytest.fixture
def frozen_clock(monkeypatch):
    monkeypatch.setattr("insights.ordering.datetime", FrozenDatetime)
    return NOW
