"""Optimistic favorite updates for a single view's article list.

The local list is changed first and the store is told afterwards. When
the store update fails the local change is rolled back and ``error`` is
set so the view can show it.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .models import Article
from .store import StoreError


logger = logging.getLogger(__name__)

UPDATE_FAILED_MESSAGE = "Could not update the bookmark. Please try again."


class FavoriteBoard:
    def __init__(self, store, articles: Iterable[Article]) -> None:
        self.store = store
        self.articles: List[Article] = list(articles)
        self.error: Optional[str] = None

    def _index_of(self, article_id: str) -> Optional[int]:
        for index, article in enumerate(self.articles):
            if article.id == article_id:
                return index
        return None

    def remove(self, article_id: str) -> bool:
        """Drop an article from the list and unset its favorite flag remotely."""
        index = self._index_of(article_id)
        if index is None:
            return False
        article = self.articles.pop(index)
        previous = article.is_favorite
        article.is_favorite = False
        try:
            self.store.set_favorite(article_id, False)
        except StoreError as exc:
            article.is_favorite = previous
            self.articles.insert(index, article)
            self._fail(article_id, exc)
            return False
        self.error = None
        return True

    def save(self, article_id: str) -> bool:
        """Mark an article as a favorite. Saving a saved article is a no-op."""
        index = self._index_of(article_id)
        if index is None:
            return False
        article = self.articles[index]
        if article.is_favorite:
            self.error = None
            return True

        article.is_favorite = True
        try:
            self.store.set_favorite(article_id, True)
        except StoreError as exc:
            article.is_favorite = False
            self._fail(article_id, exc)
            return False
        self.error = None
        return True

    def _fail(self, article_id: str, exc: StoreError) -> None:
        logger.warning(
            "[favorite_update_rolled_back] article_id=%s error=%s",
            article_id,
            exc.detail,
        )
        self.error = UPDATE_FAILED_MESSAGE
