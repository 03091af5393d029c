from __future__ import annotations

from datetime import datetime, tzinfo
from html import escape
from typing import List, Optional
from urllib.parse import urlparse

from .models import Article
from .styles import get_source_style


def format_timestamp(value: Optional[datetime], zone: tzinfo, *, date_only: bool = False) -> str:
    if value is None:
        return ""
    local = value.astimezone(zone)
    return local.strftime("%Y-%m-%d" if date_only else "%Y-%m-%d %H:%M")


def safe_href(url: str) -> str:
    if urlparse(url.strip()).scheme.lower() in ("http", "https"):
        return url.strip()
    return "#"


def _icon_html(source_name: Optional[str], css_class: str) -> str:
    style = get_source_style(source_name)
    return (
        f'<div class="{css_class}" style="background: {escape(style.background)}">'
        f"{escape(style.icon)}</div>"
    )


def render_card(
    article: Article,
    zone: tzinfo,
    *,
    action: str,
    action_label: str,
    date_only: bool = False,
) -> str:
    source_label = escape(article.source_name or "")
    published = format_timestamp(article.published_at, zone, date_only=date_only)
    saved = " is-saved" if article.is_favorite else ""
    return f"""
            <article class="card">
              <header class="card__header">
                {_icon_html(article.source_name, "card-icon")}
                <div class="meta">
                  <div class="source">{source_label}</div>
                  <div class="date">{published}</div>
                </div>
                <form class="bookmark{saved}" method="post" action="{escape(action)}">
                  <button type="submit">{escape(action_label)}</button>
                </form>
              </header>
              <h2 class="title">
                <a href="/articles/{escape(article.id)}">{escape(article.title)}</a>
              </h2>
              <p class="summary">{escape(article.summary)}</p>
              <a class="read-more" href="/articles/{escape(article.id)}">Read more &rarr;</a>
            </article>
            """


def render_grid(cards: List[str], empty_message: str) -> str:
    if not cards:
        return f'<p class="empty">{escape(empty_message)}</p>'
    return '<div class="grid">' + "\n".join(cards) + "</div>"


def render_page(
    *,
    title: str,
    active: str,
    heading: str,
    info: str,
    body: str,
    error: Optional[str] = None,
) -> str:
    menu = []
    for path, label in (("/", "Today"), ("/bookmarks", "Bookmarks")):
        if path == active:
            menu.append(f'<li class="active">{label}</li>')
        else:
            menu.append(f'<li><a href="{path}">{label}</a></li>')
    error_html = f'<div class="error" role="alert">{escape(error)}</div>' if error else ""
    return f"""
    <html>
      <head>
        <title>{escape(title)}</title>
        <style>
          { _inline_shared_styles() }
        </style>
      </head>
      <body>
        <div class="topbar">
          <ul class="menu">{"".join(menu)}</ul>
        </div>
        <div class="container">
          <header class="page-header">
            <h1>{escape(heading)}</h1>
            <span class="date-info">{escape(info)}</span>
          </header>
          {error_html}
          {body}
        </div>
      </body>
    </html>
    """


def render_detail(article: Article, zone: tzinfo) -> str:
    source_label = escape(article.source_name or "")
    sections = []
    if article.insight:
        sections.append(
            '<section class="insight-section">'
            '<div class="section-title">Insight and business impact</div>'
            f'<div class="prose">{escape(article.insight)}</div>'
            "</section>"
        )
    if article.example:
        sections.append(
            '<section class="example-section">'
            '<div class="section-title">Examples and use cases</div>'
            f'<div class="prose">{escape(article.example)}</div>'
            "</section>"
        )
    chips = article.glossary_chips()
    if chips:
        chip_html = "".join(f'<span class="glossary-chip">{escape(c)}</span>' for c in chips)
        sections.append(f'<div class="glossary-wrap">{chip_html}</div>')

    return f"""
          <div class="detail">
            <a class="close-btn" href="javascript:history.back()" aria-label="Close">&times;</a>
            <div class="detail__header">
              {_icon_html(article.source_name, "detail-icon")}
              <div>
                <h2>{escape(article.title)}</h2>
                <div class="meta">{source_label} | {format_timestamp(article.published_at, zone)}</div>
              </div>
            </div>
            <p class="detail__summary">{escape(article.summary)}</p>
            <a class="original-link" href="{escape(safe_href(article.url))}" target="_blank" rel="noopener noreferrer">
              Open original article ({source_label}) &#8599;
            </a>
            {"".join(sections)}
          </div>
    """


def _inline_shared_styles() -> str:
    return """
          :root {
            --bg: #f9fafb;
            --card: #ffffff;
            --text: #191f28;
            --muted: #6b7684;
            --border: #e5e8eb;
            --accent: #3182f6;
            --accent-soft: #e8f3ff;
          }
          * { box-sizing: border-box; }
          body {
            margin: 0;
            font-family: "Noto Sans JP", "Segoe UI", sans-serif;
            color: var(--text);
            background: var(--bg);
          }
          .topbar {
            background: #ffffff;
            border-bottom: 1px solid var(--border);
            padding: 12px 24px;
            position: sticky;
            top: 0;
            z-index: 10;
          }
          .menu {
            display: flex;
            gap: 16px;
            list-style: none;
            margin: 0;
            padding: 0;
            font-weight: 600;
          }
          .menu li {
            padding: 8px 12px;
            border-radius: 8px;
            color: var(--muted);
          }
          .menu li.active {
            color: var(--accent);
            background: var(--accent-soft);
          }
          .menu a {
            color: inherit;
            text-decoration: none;
          }
          .container {
            max-width: 1200px;
            margin: 24px auto 64px;
            padding: 0 24px;
          }
          .page-header {
            display: flex;
            align-items: baseline;
            justify-content: space-between;
            margin-bottom: 16px;
          }
          .date-info, .meta, .empty {
            color: var(--muted);
            font-size: 13px;
          }
          .error {
            background: #fff0f0;
            border: 1px solid #ffc9c9;
            color: #c92a2a;
            border-radius: 8px;
            padding: 10px 14px;
            margin-bottom: 16px;
          }
          .grid {
            display: grid;
            grid-template-columns: repeat(3, minmax(0, 1fr));
            gap: 16px;
          }
          .card {
            background: var(--card);
            border: 1px solid var(--border);
            border-radius: 12px;
            padding: 16px;
            box-shadow: 0 1px 2px rgba(0,0,0,0.05);
            display: flex;
            flex-direction: column;
            gap: 10px;
          }
          .card__header, .detail__header {
            display: flex;
            gap: 10px;
            align-items: center;
          }
          .card-icon, .detail-icon {
            width: 40px;
            height: 40px;
            border-radius: 10px;
            color: #ffffff;
            display: grid;
            place-items: center;
            font-weight: 700;
          }
          .detail-icon {
            width: 56px;
            height: 56px;
            font-size: 20px;
          }
          .bookmark {
            margin-left: auto;
          }
          .bookmark button {
            border: 1px solid var(--border);
            background: #ffffff;
            color: var(--accent);
            padding: 6px 10px;
            border-radius: 999px;
            font-weight: 600;
            cursor: pointer;
          }
          .bookmark.is-saved button {
            background: #fff9db;
            border-color: #ffe066;
            color: #e67700;
          }
          .meta .source {
            font-weight: 700;
            color: var(--text);
          }
          .title {
            margin: 0;
            font-size: 16px;
            line-height: 1.4;
          }
          .title a {
            color: var(--text);
            text-decoration: none;
          }
          .summary {
            margin: 0;
            font-size: 14px;
            line-height: 1.5;
          }
          .read-more {
            color: var(--accent);
            font-size: 13px;
            font-weight: 600;
            text-decoration: none;
          }
          .detail {
            position: relative;
            background: var(--card);
            border: 1px solid var(--border);
            border-radius: 12px;
            padding: 28px;
          }
          .close-btn {
            position: absolute;
            top: 12px;
            right: 16px;
            font-size: 24px;
            color: var(--muted);
            text-decoration: none;
          }
          .detail__summary {
            font-size: 1.1em;
            line-height: 1.8;
          }
          .original-link {
            color: var(--accent);
            font-weight: 600;
          }
          .insight-section, .example-section {
            margin-top: 20px;
            padding: 16px;
            border-radius: 8px;
            background: var(--accent-soft);
          }
          .example-section {
            background: #f4fce3;
          }
          .section-title {
            font-weight: 700;
            margin-bottom: 8px;
          }
          .prose {
            white-space: pre-wrap;
            line-height: 1.7;
          }
          .glossary-wrap {
            display: flex;
            flex-wrap: wrap;
            gap: 6px;
            margin-top: 20px;
          }
          .glossary-chip {
            padding: 4px 10px;
            border-radius: 999px;
            background: var(--accent-soft);
            color: var(--accent);
            font-size: 12px;
            font-weight: 600;
          }
          @media (max-width: 1024px) {
            .grid {
              grid-template-columns: repeat(2, minmax(0, 1fr));
            }
          }
          @media (max-width: 640px) {
            .grid {
              grid-template-columns: 1fr;
            }
          }
    """
