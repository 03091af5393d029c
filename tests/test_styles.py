import pytest

from insights.styles import get_source_style


@pytest.mark.parametrize("name", ["OpenAI Blog", "openai", "OPENAI News", "The OpenAI changelog"])
def test_openai_names_get_o_icon(name):
    assert get_source_style(name).icon == "O"


@pytest.mark.parametrize(
    "name, icon",
    [
        ("Google News", "G"),
        ("GitHub Changelog", "GH"),
        ("Zenn Trends", "Zn"),
        ("Zenn Weekly", "Zn"),
        ("Qiita (Copilot)", "Qi"),
    ],
)
def test_known_sources(name, icon):
    assert get_source_style(name).icon == icon


def test_unknown_source_uses_first_letter():
    style = get_source_style("Hacker News")
    assert style.icon == "H"
    assert style.background == "linear-gradient(135deg, #6c757d, #adb5bd)"


def test_lowercase_unknown_source_is_uppercased():
    assert get_source_style("lobsters").icon == "L"


@pytest.mark.parametrize("name", [None, ""])
def test_missing_name_falls_back_to_question_mark(name):
    assert get_source_style(name).icon == "?"


def test_google_has_multicolor_gradient():
    background = get_source_style("google blog").background
    for color in ("#4285F4", "#EA4335", "#FBBC05", "#34A853"):
        assert color in background
