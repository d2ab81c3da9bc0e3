"""Property-based tests for the chart time series.

**Feature: discipline-tracking**
"""

from datetime import date, datetime, timedelta

from hypothesis import given, settings
from hypothesis import strategies as st

from disciplog.analytics import (
    TimeWindow,
    filter_pnl_window,
    journal_day_stats,
    period_pnl,
    pnl_trend,
    score_trend,
)
from disciplog.models import (
    EmotionTag,
    JournalEntry,
    Session,
    SessionStatus,
    Trade,
    TradeResult,
)

BASE_DATE = date(2026, 1, 1)


def make_session(session_id: str, day: date, score=None, completed: bool = True) -> Session:
    return Session(
        id=session_id,
        user_id="u1",
        date=day,
        started_at=datetime(day.year, day.month, day.day, 9, 0),
        status=SessionStatus.COMPLETED if completed else SessionStatus.ACTIVE,
        discipline_score=score if completed else None,
    )


def make_trade(number: int, session_id: str, result=TradeResult.WIN, pnl=10.0) -> Trade:
    return Trade(
        id=f"{session_id}-t{number}",
        session_id=session_id,
        user_id="u1",
        trade_number=number,
        result=result,
        pnl=pnl,
        emotion_tag=EmotionTag.CALM,
        logged_at=datetime(2026, 1, 1, 10, 0),
    )


daily_pnl_strategy = st.dictionaries(
    keys=st.integers(min_value=0, max_value=400).map(lambda d: BASE_DATE + timedelta(days=d)),
    values=st.floats(min_value=-5000, max_value=5000, allow_nan=False),
    max_size=40,
)


class TestPnlTrend:
    """
    **Feature: discipline-tracking, Property 9: Cumulative P&L**

    *For any* daily P&L mapping the trend is sorted by date and each
    cumulative value is the previous one plus that day's P&L.
    """

    @given(daily=daily_pnl_strategy)
    @settings(max_examples=100)
    def test_cumulative_invariant(self, daily):
        points = pnl_trend(daily)

        assert [p.date for p in points] == sorted(daily)
        previous = 0.0
        for point in points:
            assert point.pnl == daily[point.date]
            assert point.cumulative_pnl == previous + point.pnl
            previous = point.cumulative_pnl

    def test_sparse_days_not_filled(self):
        points = pnl_trend({date(2026, 10, 5): -20.0, date(2026, 10, 1): 50.0})

        assert [(p.display_date, p.pnl, p.cumulative_pnl) for p in points] == [
            ("Oct 1", 50.0, 50.0),
            ("Oct 5", -20.0, 30.0),
        ]

    def test_empty(self):
        assert pnl_trend({}) == []


class TestPnlWindow:
    """
    **Feature: discipline-tracking, Property 10: Window Filtering**

    *For any* window, filtering drops old points but keeps the
    cumulative values computed over the full history.
    """

    @given(daily=daily_pnl_strategy, window=st.sampled_from(list(TimeWindow)))
    @settings(max_examples=100)
    def test_filter_keeps_cumulative(self, daily, window):
        today = BASE_DATE + timedelta(days=400)
        points = pnl_trend(daily)
        full = {p.date: p.cumulative_pnl for p in points}

        visible = filter_pnl_window(points, window, today)

        for point in visible:
            assert point.cumulative_pnl == full[point.date]
            if window.days is not None:
                assert point.date >= today - timedelta(days=window.days)
        if window == TimeWindow.ALL:
            assert visible == points

    def test_period_pnl(self):
        points = pnl_trend({
            date(2026, 10, 1): 100.0,
            date(2026, 10, 10): -30.0,
            date(2026, 10, 15): 50.0,
        })

        visible = filter_pnl_window(points, TimeWindow.WEEK, date(2026, 10, 16))
        period = period_pnl(visible)

        assert [p.date for p in visible] == [date(2026, 10, 10), date(2026, 10, 15)]
        assert period.total == 20.0
        assert period.change == 20.0

    def test_period_pnl_empty(self):
        period = period_pnl([])

        assert period.total == 0
        assert period.change == 0

    def test_window_days(self):
        assert TimeWindow("7d").days == 7
        assert TimeWindow("1y").days == 365
        assert TimeWindow("all").days is None


class TestScoreTrend:
    """
    **Feature: discipline-tracking, Property 11: Score Trend**

    *For any* sessions the trend holds at most the limit of the most recent
    completed sessions, in ascending date order.
    """

    @given(
        offsets=st.lists(st.integers(min_value=0, max_value=100), unique=True, max_size=30),
        limit=st.integers(min_value=1, max_value=20),
    )
    @settings(max_examples=100)
    def test_ascending_and_bounded(self, offsets, limit):
        sessions = [
            make_session(f"s{i}", BASE_DATE + timedelta(days=o), score=o % 101)
            for i, o in enumerate(offsets)
        ]

        points = list(score_trend(sessions, limit=limit))

        assert len(points) == min(limit, len(offsets))
        assert [p.date for p in points] == sorted(p.date for p in points)
        if points:
            assert points[-1].date == max(BASE_DATE + timedelta(days=o) for o in offsets)

    def test_active_sessions_excluded(self):
        sessions = [
            make_session("a", date(2026, 10, 3), completed=False),
            make_session("b", date(2026, 10, 2), score=70),
            make_session("c", date(2026, 10, 1), score=None),
        ]

        points = list(score_trend(sessions))

        assert [(p.display_date, p.score) for p in points] == [("Oct 1", 0), ("Oct 2", 70)]

    def test_default_length_is_fourteen(self):
        sessions = [
            make_session(f"s{i}", BASE_DATE + timedelta(days=i), score=50) for i in range(20)
        ]

        assert len(score_trend(sessions)) == 14

    def test_can_iterate_twice(self):
        trend = score_trend([make_session("s1", BASE_DATE, score=90)])

        assert list(trend) == list(trend)


class TestJournalDayStats:
    """
    **Feature: discipline-tracking, Property 12: Journal Day Stats**

    Journal dates get the trading stats of their sessions; dates without a
    session are absent.
    """

    def _entry(self, entry_id: str, day: date) -> JournalEntry:
        return JournalEntry(id=entry_id, user_id="u1", date=day, title="Notes")

    def test_stats_for_journal_dates(self):
        day1 = date(2026, 10, 1)
        day2 = date(2026, 10, 2)
        day3 = date(2026, 10, 3)
        entries = [self._entry("j1", day1), self._entry("j2", day2), self._entry("j3", day1)]
        sessions = [make_session("s1", day1, 80), make_session("s3", day3, 60)]
        trades = [
            make_trade(1, "s1", pnl=40.0),
            make_trade(2, "s1", result=TradeResult.LOSS, pnl=-15.0),
            make_trade(1, "s3", pnl=99.0),
        ]

        stats = journal_day_stats(entries, sessions, trades)

        assert set(stats) == {day1}
        assert stats[day1].total_pnl == 25.0
        assert stats[day1].trade_count == 2
        assert stats[day1].wins == 1
        assert stats[day1].losses == 1

    def test_session_without_trades(self):
        day = date(2026, 10, 1)

        stats = journal_day_stats([self._entry("j1", day)], [make_session("s1", day, 80)], [])

        assert stats[day].trade_count == 0
        assert stats[day].total_pnl == 0.0

    def test_no_entries(self):
        assert journal_day_stats([], [make_session("s1", BASE_DATE, 80)], []) == {}
