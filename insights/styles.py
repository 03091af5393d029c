from __future__ import annotations

from typing import Callable, List, NamedTuple, Optional, Tuple


class SourceStyle(NamedTuple):
    background: str
    icon: str


_FALLBACK_BACKGROUND = "linear-gradient(135deg, #6c757d, #adb5bd)"

# First match wins.
_STYLE_RULES: List[Tuple[Callable[[str], bool], SourceStyle]] = [
    (
        lambda name: "google" in name,
        SourceStyle(
            "linear-gradient(135deg, #4285F4 0% 25%, #EA4335 25% 50%, "
            "#FBBC05 50% 75%, #34A853 75% 100%)",
            "G",
        ),
    ),
    (
        lambda name: "openai" in name,
        SourceStyle("linear-gradient(135deg, #10a37f, #007c66)", "O"),
    ),
    (
        lambda name: "github" in name,
        SourceStyle("linear-gradient(135deg, #24292e, #6e7681)", "GH"),
    ),
    (
        lambda name: "zenn" in name,
        SourceStyle("linear-gradient(135deg, #3ea8ff, #007bb6)", "Zn"),
    ),
    (
        lambda name: "qiita" in name,
        SourceStyle("linear-gradient(135deg, #55c500, #2da600)", "Qi"),
    ),
]


def get_source_style(source_name: Optional[str]) -> SourceStyle:
    name = (source_name or "").lower()
    for matches, style in _STYLE_RULES:
        if matches(name):
            return style
    initial = (source_name or "")[:1].upper()
    return SourceStyle(_FALLBACK_BACKGROUND, initial or "?")
