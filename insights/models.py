from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional


logger = logging.getLogger(__name__)

_BULLET_PREFIX = re.compile(r"^[\s・\-\*]+")
_FRACTION = re.compile(r"\.(\d+)")


@dataclass
class Article:
    id: str
    title: str
    url: str
    summary: str
    published_at: Optional[datetime]
    created_at: Optional[datetime]
    source_name: Optional[str] = None
    insight: Optional[str] = None
    example: Optional[str] = None
    explanation_terms: List[str] = field(default_factory=list)
    is_favorite: bool = False

    @classmethod
    def from_row(cls, row: dict) -> "Article":
        article_id = str(row.get("id") or "")
        source = row.get("source")
        source_name = source.get("name") if isinstance(source, dict) else None
        terms = row.get("gemini_explanation") or []
        if isinstance(terms, str):
            terms = [terms]
        return cls(
            id=article_id,
            title=str(row.get("title") or ""),
            url=str(row.get("url") or ""),
            summary=str(row.get("summary") or ""),
            published_at=parse_timestamp(row.get("published_at"), article_id, "published_at"),
            created_at=parse_timestamp(row.get("created_at"), article_id, "created_at"),
            source_name=source_name,
            insight=row.get("gemini_insight") or None,
            example=row.get("gemini_example") or None,
            explanation_terms=[str(t) for t in terms if t is not None],
            is_favorite=bool(row.get("is_favorite")),
        )

    def glossary_chips(self) -> List[str]:
        chips = []
        for term in self.explanation_terms:
            chip = _BULLET_PREFIX.sub("", term).strip()
            if chip:
                chips.append(chip)
        return chips


def parse_timestamp(value, article_id: str = "", field_name: str = "") -> Optional[datetime]:
    """Parse a store timestamp into an aware UTC datetime.

    Naive values are taken as UTC. Anything unparseable is logged and
    returned as None so callers can skip or sort it last.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        # fromisoformat before 3.11 only takes 3 or 6 fractional digits.
        text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            logger.warning(
                "[malformed_timestamp] article_id=%s field=%s value=%r",
                article_id,
                field_name,
                value,
            )
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
