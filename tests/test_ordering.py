from datetime import datetime, timedelta, timezone

import pytest

from insights.ordering import daily_feed, is_today, sort_by_priority, source_priority

from conftest import make_article


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


# 2024-06-02 12:00 in Tokyo
NOW = utc(2024, 6, 2, 3, 0)


class TestIsToday:
    def test_just_after_local_midnight_is_today(self):
        assert is_today(utc(2024, 6, 1, 15, 30), NOW)

    def test_just_before_local_midnight_is_yesterday(self):
        assert not is_today(utc(2024, 6, 1, 14, 59), NOW)

    def test_end_of_local_day(self):
        assert is_today(utc(2024, 6, 2, 14, 59), NOW)
        assert not is_today(utc(2024, 6, 2, 15, 0), NOW)

    def test_missing_timestamp_is_never_today(self):
        assert not is_today(None, NOW)

    def test_naive_values_are_treated_as_utc(self):
        assert is_today(datetime(2024, 6, 1, 15, 30), datetime(2024, 6, 2, 3, 0))


class TestSourcePriority:
    @pytest.mark.parametrize(
        "name, priority",
        [
            ("Google News", 1),
            ("OpenAI Blog", 2),
            ("GitHub Blog", 3),
            ("Zenn Trends", 4),
            ("zenn (copilot)", 5),
            ("QIITA TRENDS", 6),
            ("Qiita (Copilot)", 7),
            ("Hacker News", 8),
        ],
    )
    def test_table(self, name, priority):
        assert source_priority(name) == priority

    def test_zenn_requires_exact_name(self):
        assert source_priority("Zenn Weekly") == 8

    def test_qiita_requires_exact_name(self):
        assert source_priority("Qiita Trends Daily") == 8

    @pytest.mark.parametrize("name", [None, ""])
    def test_missing_name_is_lowest(self, name):
        assert source_priority(name) == 8


class TestSortByPriority:
    def test_priority_before_recency(self):
        articles = [
            make_article("q", "Qiita Trends", published_at=utc(2024, 6, 2, 1)),
            make_article("g", "Google News", published_at=utc(2024, 6, 1, 1)),
            make_article("o", "OpenAI Blog", published_at=utc(2024, 6, 1, 23)),
        ]
        ordered = sort_by_priority(articles)
        assert [a.source_name for a in ordered] == ["Google News", "OpenAI Blog", "Qiita Trends"]

    def test_newest_first_within_priority(self):
        articles = [
            make_article("old", "Google News", published_at=utc(2024, 6, 1, 1)),
            make_article("new", "Google Cloud Blog", published_at=utc(2024, 6, 1, 9)),
        ]
        assert [a.id for a in sort_by_priority(articles)] == ["new", "old"]

    def test_missing_publish_time_sorts_last_in_group(self):
        undated = make_article("undated", "Google News")
        undated.published_at = None
        articles = [
            undated,
            make_article("dated", "Google News", published_at=utc(2024, 6, 1, 1)),
            make_article("other", "Hacker News", published_at=utc(2024, 6, 1, 2)),
        ]
        assert [a.id for a in sort_by_priority(articles)] == ["dated", "undated", "other"]


def test_daily_feed_filters_then_sorts(caplog):
    articles = [
        make_article("hn", "Hacker News", created_at=utc(2024, 6, 1, 16)),
        make_article("gh", "GitHub Blog", created_at=utc(2024, 6, 1, 15, 30)),
        make_article("stale", "Google News", created_at=utc(2024, 6, 1, 14, 59)),
        make_article("broken", "Google News", created_at=None),
    ]
    feed = daily_feed(articles, now=NOW)
    assert [a.id for a in feed] == ["gh", "hn"]
    assert "skipped=1" in caplog.text


def test_daily_feed_empty():
    assert daily_feed([], now=NOW) == []


def test_daily_feed_defaults_to_current_time(frozen_clock):
    fresh = make_article("fresh", created_at=frozen_clock - timedelta(hours=1))
    old = make_article("old", created_at=frozen_clock - timedelta(days=2))
    assert [a.id for a in daily_feed([fresh, old])] == ["fresh"]
