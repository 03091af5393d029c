from __future__ import annotations

import logging
from typing import List, Optional

import requests

from .models import Article
from .settings import Settings


logger = logging.getLogger(__name__)

_SELECT = "*,source:sources(name)"


class StoreError(RuntimeError):
    def __init__(self, operation: str, detail: str) -> None:
        super().__init__(f"{operation} failed: {detail}")
        self.operation = operation
        self.detail = detail


class ArticleStore:
    """Client for the articles table behind a PostgREST endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        table: str = "articles",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not base_url:
            raise ValueError("store base_url is required")
        self.endpoint = f"{base_url.rstrip('/')}/rest/v1/{table}"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            }
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ArticleStore":
        return cls(
            settings.supabase_url,
            settings.supabase_key,
            table=settings.articles_table,
            timeout=settings.store_timeout,
        )

    def fetch_articles(
        self,
        *,
        limit: int,
        order_by: str = "created_at",
        favorites_only: bool = False,
    ) -> List[Article]:
        params = {
            "select": _SELECT,
            "order": f"{order_by}.desc",
            "limit": str(limit),
        }
        if favorites_only:
            params["is_favorite"] = "eq.true"
        rows = self._request("fetch_articles", "GET", params=params)
        if not isinstance(rows, list):
            raise StoreError("fetch_articles", "expected a list of rows")
        articles = [Article.from_row(row) for row in rows if isinstance(row, dict)]
        logger.info(
            "[store_fetch] order_by=%s favorites_only=%s rows=%s",
            order_by,
            favorites_only,
            len(articles),
        )
        return articles

    def get_article(self, article_id: str) -> Optional[Article]:
        params = {"select": _SELECT, "id": f"eq.{article_id}", "limit": "1"}
        rows = self._request("get_article", "GET", params=params)
        if rows is not None and not isinstance(rows, list):
            raise StoreError("get_article", "expected a list of rows")
        if not rows:
            return None
        return Article.from_row(rows[0])

    def set_favorite(self, article_id: str, is_favorite: bool) -> None:
        self._request(
            "set_favorite",
            "PATCH",
            params={"id": f"eq.{article_id}"},
            json={"is_favorite": is_favorite},
            headers={"Prefer": "return=minimal"},
        )
        logger.info(
            "[store_set_favorite] article_id=%s is_favorite=%s",
            article_id,
            is_favorite,
        )

    def close(self) -> None:
        self.session.close()

    def _request(self, operation: str, method: str, **kwargs):
        try:
            resp = self.session.request(
                method, self.endpoint, timeout=self.timeout, **kwargs
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("[store_request_failed] operation=%s error=%s", operation, repr(exc))
            raise StoreError(operation, str(exc)) from exc

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise StoreError(operation, "invalid JSON response") from exc
