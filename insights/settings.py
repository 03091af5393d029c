from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml


_ROOT = Path(__file__).resolve().parent.parent
_DEFAULT_SETTINGS_PATH = _ROOT / "insights.yaml"


@dataclass(frozen=True)
class Settings:
    supabase_url: str = ""
    supabase_key: str = ""
    articles_table: str = "articles"
    feed_fetch_limit: int = 100
    bookmarks_fetch_limit: int = 100
    display_timezone: str = "Asia/Tokyo"
    store_timeout: float = 10.0

    def __post_init__(self) -> None:
        try:
            ZoneInfo(self.display_timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(
                f"invalid value for DISPLAY_TIMEZONE: {self.display_timezone!r}"
            )


_KEYS = {
    "SUPABASE_URL": ("supabase_url", str),
    "SUPABASE_KEY": ("supabase_key", str),
    "ARTICLES_TABLE": ("articles_table", str),
    "FEED_FETCH_LIMIT": ("feed_fetch_limit", int),
    "BOOKMARKS_FETCH_LIMIT": ("bookmarks_fetch_limit", int),
    "DISPLAY_TIMEZONE": ("display_timezone", str),
    "STORE_TIMEOUT": ("store_timeout", float),
}


def load_file(path: Path | None = None) -> Dict[str, Any]:
    settings_path = path or Path(
        os.environ.get("INSIGHTS_SETTINGS_PATH", str(_DEFAULT_SETTINGS_PATH))
    )
    if not settings_path.exists():
        return {}

    with settings_path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{settings_path.name}: top level must be a mapping")
    return data


def load_settings(
    path: Path | None = None, environ: Optional[Mapping[str, str]] = None
) -> Settings:
    env = os.environ if environ is None else environ
    raw = load_file(path)

    values: Dict[str, Any] = {}
    for key, (field, cast) in _KEYS.items():
        value = env.get(key)
        if value is None or value == "":
            value = raw.get(key.lower())
        if value is None or value == "":
            continue
        try:
            values[field] = cast(value)
        except (TypeError, ValueError):
            raise ValueError(f"invalid value for {key}: {value!r}")
    return Settings(**values)
