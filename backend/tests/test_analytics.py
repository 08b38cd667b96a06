"""Dashboard aggregation helpers."""

from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from medtracker.services import analytics

WEDNESDAY = date(2024, 1, 17)
NOW = datetime(2024, 1, 17, 18, 0, tzinfo=timezone.utc)


def _session(started_at: datetime, duration: int = 30, answered: int = 0, correct: int = 0, topic=None):
    return SimpleNamespace(
        id=f"s-{started_at.isoformat()}",
        topic=topic,
        duration=duration,
        questions_answered=answered,
        correct_answers=correct,
        started_at=started_at,
    )


class TestAccuracy:
    def test_no_questions_is_zero(self):
        assert analytics.accuracy_percentage(0, 0) == 0.0
        assert analytics.accuracy_percentage(None, None) == 0.0

    def test_percentage(self):
        assert analytics.accuracy_percentage(7, 10) == 70.0


class TestBarHeight:
    @pytest.mark.parametrize(
        ("hours", "height"),
        [(0, 20), (0.5, 20), (2, 40), (4, 80), (5, 90), (10, 90)],
    )
    def test_clamped_scale(self, hours, height):
        assert analytics.bar_height(hours) == height


class TestWeeklyBreakdown:
    def test_wednesday_session_lands_in_wednesday(self):
        sessions = [_session(datetime(2024, 1, 17, 9, 0, tzinfo=timezone.utc), duration=120)]

        days = analytics.weekly_breakdown(sessions, WEDNESDAY)

        assert [d.day for d in days] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
        assert days[0].date == date(2024, 1, 15)
        assert days[2].hours == 2.0
        assert days[2].height == 40
        assert all(d.hours == 0 for i, d in enumerate(days) if i != 2)

    def test_sessions_outside_week_ignored(self):
        sessions = [
            _session(datetime(2024, 1, 14, 23, 0, tzinfo=timezone.utc), duration=60),  # previous Sunday
            _session(datetime(2024, 1, 15, 0, 30, tzinfo=timezone.utc), duration=90),
        ]

        days = analytics.weekly_breakdown(sessions, WEDNESDAY)

        assert sum(d.hours for d in days) == 1.5
        assert days[0].hours == 1.5

    def test_naive_datetimes_read_as_utc(self):
        sessions = [_session(datetime(2024, 1, 16, 23, 30), duration=60)]

        days = analytics.weekly_breakdown(sessions, WEDNESDAY)

        assert days[1].hours == 1.0

    def test_offset_datetimes_bucketed_by_utc_day(self):
        # 01:00 on Thursday at +05:00 is still Wednesday in UTC
        plus_five = timezone(timedelta(hours=5))
        sessions = [_session(datetime(2024, 1, 18, 1, 0, tzinfo=plus_five), duration=60)]

        days = analytics.weekly_breakdown(sessions, WEDNESDAY)

        assert days[2].hours == 1.0
        assert days[3].hours == 0


def test_summarize_week_totals():
    sessions = [
        _session(datetime(2024, 1, 15, 8, tzinfo=timezone.utc), duration=60, answered=10, correct=7),
        _session(datetime(2024, 1, 16, 8, tzinfo=timezone.utc), duration=180, answered=10, correct=9),
    ]

    summary = analytics.summarize_week(sessions, WEDNESDAY)

    assert summary.total_hours == 4.0
    assert summary.average_daily_hours == pytest.approx(4 / 7)
    assert summary.total_questions == 20
    assert summary.total_correct == 16
    assert summary.accuracy == 80.0


class TestTimeAgo:
    @pytest.mark.parametrize(
        ("elapsed", "expected"),
        [
            (timedelta(minutes=10), "Just now"),
            (timedelta(hours=1, minutes=5), "1 hour ago"),
            (timedelta(hours=3), "3 hours ago"),
            (timedelta(hours=26), "1 day ago"),
            (timedelta(days=2, hours=1), "2 days ago"),
        ],
    )
    def test_format(self, elapsed, expected):
        assert analytics.format_time_ago(NOW - elapsed, NOW) == expected


class TestRecentActivity:
    def test_empty_history_gives_welcome_item(self):
        items = analytics.recent_activity([], NOW)

        assert len(items) == 1
        assert items[0].type == "insight"
        assert items[0].id == "welcome"

    def test_quiz_and_study_items(self):
        sessions = [
            _session(NOW - timedelta(hours=2), answered=10, correct=7),
            _session(NOW - timedelta(days=1, hours=1), duration=45, topic="Pharmacokinetics"),
            _session(NOW - timedelta(days=3), duration=20),
            _session(NOW - timedelta(days=4), duration=20),
        ]

        items = analytics.recent_activity(sessions, NOW)

        assert len(items) == 3
        assert items[0].type == "quiz"
        assert items[0].description == "Scored 7/10 questions correctly"
        assert items[0].time == "2 hours ago"
        assert items[1].type == "study"
        assert items[1].title == "Studied Pharmacokinetics"
        assert items[1].description == "Studied for 45 minutes"
        assert items[1].time == "1 day ago"
        assert items[2].title == "Studied General Topics"
