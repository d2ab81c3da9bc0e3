"""Discipline scoring and trading statistics."""

from disciplog.analytics.score import calculate_discipline_score, score_breakdown
from disciplog.analytics.aggregate import (
    broken_rule_counts,
    emotion_distribution,
    emotion_win_rate,
    pnl_by_day,
    rule_name_map,
    session_date_map,
    session_trade_stats,
    summarize_trades,
)
from disciplog.analytics.timeseries import (
    TimeWindow,
    filter_pnl_window,
    journal_day_stats,
    period_pnl,
    pnl_trend,
    score_trend,
)
from disciplog.analytics.streak import calculate_streak
from disciplog.analytics.dashboard import (
    build_dashboard,
    build_history,
    load_dashboard,
    load_history,
)

__all__ = [
    "calculate_discipline_score",
    "score_breakdown",
    "broken_rule_counts",
    "emotion_distribution",
    "emotion_win_rate",
    "pnl_by_day",
    "rule_name_map",
    "session_date_map",
    "session_trade_stats",
    "summarize_trades",
    "TimeWindow",
    "filter_pnl_window",
    "journal_day_stats",
    "period_pnl",
    "pnl_trend",
    "score_trend",
    "calculate_streak",
    "build_dashboard",
    "build_history",
    "load_dashboard",
    "load_history",
]
