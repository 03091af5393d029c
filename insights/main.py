from __future__ import annotations

import logging
from datetime import datetime
from functools import lru_cache
from typing import Iterator, List, Optional
from zoneinfo import ZoneInfo

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import BaseModel

from .favorites import FavoriteBoard
from .models import Article
from .ordering import daily_feed
from .rendering import render_card, render_detail, render_grid, render_page
from .settings import Settings, load_settings
from .store import ArticleStore, StoreError
from .styles import get_source_style


app = FastAPI(title="Daily Tech Insights")
logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Could not load articles. Please reload the page."


class SourceStyleOut(BaseModel):
    background: str
    icon: str


class ArticleOut(BaseModel):
    id: str
    source_name: Optional[str]
    title: str
    url: str
    summary: str
    published_at: Optional[datetime]
    created_at: Optional[datetime]
    insight: Optional[str]
    example: Optional[str]
    explanation_terms: List[str]
    is_favorite: bool
    style: SourceStyleOut


class FavoriteIn(BaseModel):
    is_favorite: bool


class FavoriteOut(BaseModel):
    id: str
    is_favorite: bool


@lru_cache()
def get_settings() -> Settings:
    return load_settings()


def get_store(settings: Settings = Depends(get_settings)) -> Iterator[ArticleStore]:
    try:
        store = ArticleStore.from_settings(settings)
    except ValueError as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    try:
        yield store
    finally:
        store.close()


def get_zone(settings: Settings = Depends(get_settings)) -> ZoneInfo:
    return ZoneInfo(settings.display_timezone)


@app.on_event("startup")
def on_startup() -> None:
    settings = get_settings()
    logger.info(
        "[startup] store_configured=%s table=%s timezone=%s",
        bool(settings.supabase_url),
        settings.articles_table,
        settings.display_timezone,
    )


def _to_out(article: Article) -> ArticleOut:
    style = get_source_style(article.source_name)
    return ArticleOut(
        id=article.id,
        source_name=article.source_name,
        title=article.title,
        url=article.url,
        summary=article.summary,
        published_at=article.published_at,
        created_at=article.created_at,
        insight=article.insight,
        example=article.example,
        explanation_terms=article.glossary_chips(),
        is_favorite=article.is_favorite,
        style=SourceStyleOut(background=style.background, icon=style.icon),
    )


def _load_today(store: ArticleStore, settings: Settings, zone: ZoneInfo) -> List[Article]:
    articles = store.fetch_articles(limit=settings.feed_fetch_limit, order_by="created_at")
    return daily_feed(articles, zone=zone)


def _load_bookmarks(store: ArticleStore, settings: Settings) -> List[Article]:
    return store.fetch_articles(
        limit=settings.bookmarks_fetch_limit,
        order_by="published_at",
        favorites_only=True,
    )


def _bookmarks_page(articles: List[Article], zone: ZoneInfo, error: Optional[str] = None) -> str:
    cards = [
        render_card(
            article,
            zone,
            action=f"/bookmark/{article.id}/remove",
            action_label="Remove",
            date_only=True,
        )
        for article in articles
    ]
    return render_page(
        title="Bookmarks",
        active="/bookmarks",
        heading="Saved Articles",
        info=f"{len(articles)} Bookmarks",
        body=render_grid(cards, "No bookmarked articles yet. Save an article to keep it here."),
        error=error,
    )


def _home_page(articles: List[Article], zone: ZoneInfo, error: Optional[str] = None) -> str:
    cards = [
        render_card(
            article,
            zone,
            action=f"/bookmark/{article.id}",
            action_label="Saved" if article.is_favorite else "Save",
        )
        for article in articles
    ]
    today = datetime.now(zone).strftime("%Y-%m-%d")
    return render_page(
        title="Daily Tech Insights",
        active="/",
        heading="Daily Tech Insights",
        info=f"{today} | {len(articles)} Updates",
        body=render_grid(cards, "No articles registered today yet."),
        error=error,
    )


@app.get("/", response_class=HTMLResponse)
def home(
    store: ArticleStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
    zone: ZoneInfo = Depends(get_zone),
) -> str:
    try:
        articles = _load_today(store, settings, zone)
    except StoreError as exc:
        logger.warning("[home_fetch_failed] error=%s", exc.detail)
        return _home_page([], zone, FETCH_FAILED_MESSAGE)
    return _home_page(articles, zone)


@app.get("/bookmarks", response_class=HTMLResponse)
def bookmarks(
    store: ArticleStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
    zone: ZoneInfo = Depends(get_zone),
) -> str:
    try:
        articles = _load_bookmarks(store, settings)
    except StoreError as exc:
        logger.warning("[bookmarks_fetch_failed] error=%s", exc.detail)
        return _bookmarks_page([], zone, FETCH_FAILED_MESSAGE)
    return _bookmarks_page(articles, zone)


@app.get("/articles/{article_id}", response_class=HTMLResponse)
def article_detail(
    article_id: str,
    store: ArticleStore = Depends(get_store),
    zone: ZoneInfo = Depends(get_zone),
) -> str:
    try:
        article = store.get_article(article_id)
    except StoreError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return render_page(
        title=article.title,
        active="",
        heading=article.source_name or "Article",
        info="",
        body=render_detail(article, zone),
    )


@app.post("/bookmark/{article_id}", response_class=HTMLResponse)
def add_bookmark(
    article_id: str,
    store: ArticleStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
    zone: ZoneInfo = Depends(get_zone),
):
    try:
        articles = _load_today(store, settings, zone)
    except StoreError as exc:
        logger.warning("[home_fetch_failed] error=%s", exc.detail)
        return HTMLResponse(_home_page([], zone, FETCH_FAILED_MESSAGE), status_code=502)

    board = FavoriteBoard(store, articles)
    if board.save(article_id):
        return RedirectResponse(url="/bookmarks", status_code=303)
    if board.error:
        return HTMLResponse(_home_page(board.articles, zone, board.error), status_code=502)

    # Not part of today's feed; save it directly.
    try:
        store.set_favorite(article_id, True)
    except StoreError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    return RedirectResponse(url="/bookmarks", status_code=303)


@app.post("/bookmark/{article_id}/remove", response_class=HTMLResponse)
def remove_bookmark(
    article_id: str,
    store: ArticleStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
    zone: ZoneInfo = Depends(get_zone),
) -> str:
    try:
        articles = _load_bookmarks(store, settings)
    except StoreError as exc:
        logger.warning("[bookmarks_fetch_failed] error=%s", exc.detail)
        return _bookmarks_page([], zone, FETCH_FAILED_MESSAGE)

    board = FavoriteBoard(store, articles)
    board.remove(article_id)
    return _bookmarks_page(board.articles, zone, board.error)


@app.get("/api/articles", response_model=List[ArticleOut])
def list_today(
    store: ArticleStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
    zone: ZoneInfo = Depends(get_zone),
) -> List[ArticleOut]:
    try:
        articles = _load_today(store, settings, zone)
    except StoreError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    return [_to_out(article) for article in articles]


@app.get("/api/bookmarks", response_model=List[ArticleOut])
def list_bookmarks(
    store: ArticleStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> List[ArticleOut]:
    try:
        articles = _load_bookmarks(store, settings)
    except StoreError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    return [_to_out(article) for article in articles]


@app.post("/api/articles/{article_id}/favorite", response_model=FavoriteOut)
def set_favorite(
    article_id: str,
    payload: FavoriteIn,
    store: ArticleStore = Depends(get_store),
) -> FavoriteOut:
    try:
        store.set_favorite(article_id, payload.is_favorite)
    except StoreError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    return FavoriteOut(id=article_id, is_favorite=payload.is_favorite)
