"""Chart-ready time series.

Builds the discipline score trend, the daily P&L trend with its running
total, and the per-day trading stats shown next to journal entries.
"""

from datetime import date, timedelta
from enum import Enum
from typing import Iterable, Iterator, Mapping, Optional, Sequence

from disciplog.analytics.aggregate import session_date_map
from disciplog.analytics.common import short_date
from disciplog.models import JournalEntry, Session, Trade, TradeResult
from disciplog.models.stats import DayStats, PeriodPnl, PnlPoint, ScorePoint


SCORE_TREND_LENGTH = 14


class TimeWindow(str, Enum):
    """Trailing window for the P&L chart."""

    WEEK = "7d"
    MONTH = "30d"
    QUARTER = "90d"
    YEAR = "1y"
    ALL = "all"

    @property
    def days(self) -> Optional[int]:
        return WINDOW_DAYS[self]


WINDOW_DAYS = {
    TimeWindow.WEEK: 7,
    TimeWindow.MONTH: 30,
    TimeWindow.QUARTER: 90,
    TimeWindow.YEAR: 365,
    TimeWindow.ALL: None,
}


class ScoreTrend:
    """The most recent completed sessions as score points, oldest first.

    Points are produced on iteration, and the trend can be iterated any
    number of times.
    """

    def __init__(self, sessions: Iterable[Session], limit: int = SCORE_TREND_LENGTH):
        completed = [s for s in sessions if s.is_completed]
        completed.sort(key=lambda s: s.date, reverse=True)
        self._sessions = completed[:limit]

    def __iter__(self) -> Iterator[ScorePoint]:
        for session in reversed(self._sessions):
            yield ScorePoint(
                display_date=short_date(session.date),
                score=session.discipline_score or 0,
                date=session.date,
            )

    def __len__(self) -> int:
        return len(self._sessions)


def score_trend(sessions: Iterable[Session], limit: int = SCORE_TREND_LENGTH) -> ScoreTrend:
    """Score trend over the last ``limit`` completed sessions."""
    return ScoreTrend(sessions, limit=limit)


def pnl_trend(daily_pnl: Mapping[date, float]) -> list[PnlPoint]:
    """Turn a date -> P&L mapping into a chronological cumulative series.

    Days without trading are not filled in.

    Args:
        daily_pnl: Output of ``pnl_by_day``.

    Returns:
        PnlPoints sorted by date where each cumulative value is the
        previous cumulative value plus that day's P&L.
    """
    points = []
    cumulative = 0.0
    for day in sorted(daily_pnl):
        pnl = daily_pnl[day]
        cumulative += pnl
        points.append(PnlPoint(
            date=day,
            display_date=short_date(day),
            pnl=pnl,
            cumulative_pnl=cumulative,
        ))
    return points


def filter_pnl_window(
    points: Sequence[PnlPoint],
    window: TimeWindow,
    today: date,
) -> list[PnlPoint]:
    """Keep the points inside a trailing window.

    Cumulative values are left untouched, so they still reflect the full
    history.

    Args:
        points: Output of ``pnl_trend``.
        window: Trailing window; ``TimeWindow.ALL`` keeps everything.
        today: Reference date for the window.

    Returns:
        Points dated on or after ``today - window.days``.
    """
    if window.days is None:
        return list(points)
    cutoff = today - timedelta(days=window.days)
    return [p for p in points if p.date >= cutoff]


def period_pnl(points: Sequence[PnlPoint]) -> PeriodPnl:
    """Sum of the visible daily P&L and the cumulative change over them."""
    if not points:
        return PeriodPnl()
    total = sum(p.pnl for p in points)
    start = points[0].cumulative_pnl - points[0].pnl
    return PeriodPnl(total=total, change=points[-1].cumulative_pnl - start)


def journal_day_stats(
    entries: Iterable[JournalEntry],
    sessions: Iterable[Session],
    trades: Iterable[Trade],
) -> dict[date, DayStats]:
    """Trading stats for each date that has a journal entry.

    Dates without any session are absent from the result.
    """
    journal_dates = {entry.date for entry in entries}
    if not journal_dates:
        return {}

    dates = {
        session_id: day
        for session_id, day in session_date_map(sessions).items()
        if day in journal_dates
    }

    acc: dict[date, dict] = {
        day: {"total_pnl": 0.0, "trade_count": 0, "wins": 0, "losses": 0}
        for day in set(dates.values())
    }
    for trade in trades:
        day = dates.get(trade.session_id)
        if day is None:
            continue
        stats = acc[day]
        stats["total_pnl"] += trade.pnl or 0.0
        stats["trade_count"] += 1
        if trade.result == TradeResult.WIN:
            stats["wins"] += 1
        elif trade.result == TradeResult.LOSS:
            stats["losses"] += 1

    return {day: DayStats(**stats) for day, stats in acc.items()}
