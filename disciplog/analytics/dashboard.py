"""Dashboard and history composition.

``build_dashboard`` and ``build_history`` are pure and work on loaded
records. ``load_dashboard`` and ``load_history`` fetch those records from
a DataStore and report store failures as an error message instead of
raising.
"""

import logging
import sqlite3
from datetime import date
from typing import Optional, Sequence

from pydantic import ValidationError

from disciplog.analytics.aggregate import (
    broken_rule_counts,
    emotion_distribution,
    emotion_win_rate,
    pnl_by_day,
    rule_name_map,
    session_trade_stats,
    summarize_trades,
)
from disciplog.analytics.common import round_half_up
from disciplog.analytics.streak import calculate_streak
from disciplog.analytics.timeseries import SCORE_TREND_LENGTH, pnl_trend, score_trend
from disciplog.models import Rule, Session, SessionStatus, Trade
from disciplog.models.stats import (
    Dashboard,
    MonthGroup,
    SessionTradeStats,
    SessionWithStats,
)

logger = logging.getLogger(__name__)

RECENT_SESSIONS = 5


def _newest_first(sessions: Sequence[Session]) -> list[Session]:
    return sorted(sessions, key=lambda s: s.date, reverse=True)


def build_dashboard(
    sessions: Sequence[Session],
    trades: Sequence[Trade],
    rules_count: int,
    today: date,
    active_session_id: Optional[str] = None,
    trend_length: int = SCORE_TREND_LENGTH,
    recent_count: int = RECENT_SESSIONS,
    rules: Sequence[Rule] = (),
) -> Dashboard:
    """Compose the dashboard from a user's sessions and trades.

    Only completed sessions count towards scores, streak and the P&L
    trend; the trade totals use every trade.

    Args:
        sessions: The user's sessions, any status.
        trades: All of the user's trades.
        rules_count: Number of active rules.
        today: Reference date for the streak.
        active_session_id: ID of the session in progress, if any.
        trend_length: Number of sessions in the score trend.
        recent_count: Number of recent sessions to list.
        rules: The user's rules, used to name the broken ones.

    Returns:
        Dashboard model.
    """
    completed = _newest_first([s for s in sessions if s.status == SessionStatus.COMPLETED])
    summary = summarize_trades(trades)
    broken = broken_rule_counts(trades)
    names = rule_name_map(rules)

    scores = [s.discipline_score for s in completed if s.discipline_score is not None]
    avg_score = round_half_up(sum(scores) / len(scores)) if scores else None
    latest_score = completed[0].discipline_score if completed else None

    return Dashboard(
        total_sessions=len(completed),
        total_trades=summary.total,
        wins=summary.wins,
        losses=summary.losses,
        total_pnl=summary.total_pnl,
        win_rate=summary.win_rate,
        rules_followed_percentage=summary.rules_followed_percentage,
        avg_discipline_score=avg_score,
        latest_score=latest_score,
        streak=calculate_streak((s.date for s in completed), today),
        rules_count=rules_count,
        active_session_id=active_session_id,
        score_trend=list(score_trend(completed, limit=trend_length)),
        pnl_trend=pnl_trend(pnl_by_day(completed, trades)),
        emotion_distribution=emotion_distribution(trades),
        emotion_win_rate=emotion_win_rate(trades),
        recent_sessions=completed[:recent_count],
        broken_rules=broken,
        rule_names={rule_id: names[rule_id] for rule_id in broken if rule_id in names},
    )


def build_history(sessions: Sequence[Session], trades: Sequence[Trade]) -> list[MonthGroup]:
    """Group sessions by calendar month with per-month summaries.

    Months are newest first and sessions inside a month are ordered by
    date, newest first.
    """
    stats = session_trade_stats(trades)
    empty = SessionTradeStats()

    months: dict[str, list[SessionWithStats]] = {}
    for session in _newest_first(sessions):
        key = f"{session.date.year}-{session.date.month:02d}"
        months.setdefault(key, []).append(
            SessionWithStats(session=session, trade_stats=stats.get(session.id, empty))
        )

    groups = []
    for key in sorted(months, reverse=True):
        rows = months[key]
        completed = [r.session for r in rows if r.session.status == SessionStatus.COMPLETED]
        avg_score = (
            round_half_up(sum(s.discipline_score or 0 for s in completed) / len(completed))
            if completed
            else None
        )
        groups.append(MonthGroup(
            key=key,
            label=f"{rows[0].session.date:%B %Y}",
            sessions=rows,
            avg_score=avg_score,
            total_pnl=sum(r.trade_stats.pnl for r in rows),
        ))
    return groups


def load_dashboard(
    store,
    user_id: str,
    today: date,
    trend_length: int = SCORE_TREND_LENGTH,
    recent_count: int = RECENT_SESSIONS,
) -> dict:
    """Load a user's records and build the dashboard.

    Args:
        store: DataStore to read from.
        user_id: User whose dashboard to build.
        today: Reference date for the streak.
        trend_length: Number of sessions in the score trend.
        recent_count: Number of recent sessions to list.

    Returns:
        Dictionary containing:
        - data: Dashboard, or None if loading failed
        - error: Error message if loading failed (None if successful)
    """
    try:
        sessions = store.get_sessions(user_id, status=SessionStatus.COMPLETED)
        trades = store.get_user_trades(user_id)
        rules_count = store.count_active_rules(user_id)
        active = store.get_active_session(user_id)
        rules = store.get_rules(user_id)
    except (sqlite3.Error, ValidationError) as e:
        logger.error("Failed to load dashboard for %s: %s", user_id, e)
        return {"data": None, "error": str(e)}

    dashboard = build_dashboard(
        sessions,
        trades,
        rules_count=rules_count,
        today=today,
        active_session_id=active.id if active else None,
        trend_length=trend_length,
        recent_count=recent_count,
        rules=rules,
    )
    return {"data": dashboard, "error": None}


def load_history(store, user_id: str) -> dict:
    """Load a user's sessions and trades and group them by month.

    Returns:
        Dictionary containing:
        - data: List of MonthGroup, or None if loading failed
        - error: Error message if loading failed (None if successful)
    """
    try:
        sessions = store.get_sessions(user_id)
        trades = store.get_trades_for_sessions([s.id for s in sessions])
    except (sqlite3.Error, ValidationError) as e:
        logger.error("Failed to load history for %s: %s", user_id, e)
        return {"data": None, "error": str(e)}

    return {"data": build_history(sessions, trades), "error": None}
