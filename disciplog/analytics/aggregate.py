"""Trade and session aggregation.

Every function here is a single pass over already loaded records.
Lookups by id are built as dicts before folding so the work stays linear
in the number of trades.
"""

from datetime import date
from typing import Iterable

from disciplog.analytics.common import percentage
from disciplog.models import EmotionTag, Rule, Session, Trade, TradeResult
from disciplog.models.stats import EmotionWinRate, SessionTradeStats, TradeSummary


def summarize_trades(trades: Iterable[Trade]) -> TradeSummary:
    """Count results and total the P&L of a list of trades.

    Args:
        trades: Trades of one session or of a whole account.

    Returns:
        TradeSummary. With no trades the rules-followed percentage is 100
        and the win rate is 0.
    """
    total = 0
    wins = 0
    losses = 0
    breakeven = 0
    total_pnl = 0.0
    rules_followed = 0

    for trade in trades:
        total += 1
        if trade.result == TradeResult.WIN:
            wins += 1
        elif trade.result == TradeResult.LOSS:
            losses += 1
        elif trade.result == TradeResult.BREAKEVEN:
            breakeven += 1
        total_pnl += trade.pnl or 0.0
        if trade.rules_followed:
            rules_followed += 1

    return TradeSummary(
        total=total,
        wins=wins,
        losses=losses,
        breakeven=breakeven,
        total_pnl=total_pnl,
        rules_followed_count=rules_followed,
        rules_followed_percentage=percentage(rules_followed, total, empty=100),
        win_rate=percentage(wins, total),
    )


def emotion_distribution(trades: Iterable[Trade]) -> dict[EmotionTag, int]:
    """Count trades per emotion tag, in order of first appearance."""
    counts: dict[EmotionTag, int] = {}
    for trade in trades:
        counts[trade.emotion_tag] = counts.get(trade.emotion_tag, 0) + 1
    return counts


def emotion_win_rate(trades: Iterable[Trade]) -> list[EmotionWinRate]:
    """Win rate for every emotion tag that appears in the trades.

    Tags without trades are left out. The list is sorted by win rate,
    highest first; ties keep the order of first appearance.
    """
    totals: dict[EmotionTag, int] = {}
    wins: dict[EmotionTag, int] = {}
    for trade in trades:
        totals[trade.emotion_tag] = totals.get(trade.emotion_tag, 0) + 1
        if trade.result == TradeResult.WIN:
            wins[trade.emotion_tag] = wins.get(trade.emotion_tag, 0) + 1

    rates = [
        EmotionWinRate(
            emotion=emotion,
            win_rate=percentage(wins.get(emotion, 0), count),
            total=count,
        )
        for emotion, count in totals.items()
    ]
    return sorted(rates, key=lambda r: r.win_rate, reverse=True)


def session_date_map(sessions: Iterable[Session]) -> dict[str, date]:
    """Build a session id -> session date lookup."""
    return {session.id: session.date for session in sessions}


def rule_name_map(rules: Iterable[Rule]) -> dict[str, str]:
    """Build a rule id -> rule name lookup."""
    return {rule.id: rule.name for rule in rules}


def broken_rule_counts(trades: Iterable[Trade]) -> dict[str, int]:
    """Count how often each rule was broken, most broken first."""
    counts: dict[str, int] = {}
    for trade in trades:
        for rule_id in trade.broken_rule_ids:
            counts[rule_id] = counts.get(rule_id, 0) + 1
    return dict(sorted(counts.items(), key=lambda item: item[1], reverse=True))


def pnl_by_day(sessions: Iterable[Session], trades: Iterable[Trade]) -> dict[date, float]:
    """Total the P&L of the trades per session date.

    Trades whose session is not among ``sessions`` are skipped.
    """
    dates = session_date_map(sessions)
    totals: dict[date, float] = {}
    for trade in trades:
        session_date = dates.get(trade.session_id)
        if session_date is None:
            continue
        totals[session_date] = totals.get(session_date, 0.0) + (trade.pnl or 0.0)
    return totals


def session_trade_stats(trades: Iterable[Trade]) -> dict[str, SessionTradeStats]:
    """Per-session trade counters keyed by session id."""
    acc: dict[str, dict] = {}
    for trade in trades:
        stats = acc.setdefault(
            trade.session_id,
            {"count": 0, "wins": 0, "losses": 0, "pnl": 0.0, "rules_followed": 0},
        )
        stats["count"] += 1
        if trade.result == TradeResult.WIN:
            stats["wins"] += 1
        elif trade.result == TradeResult.LOSS:
            stats["losses"] += 1
        stats["pnl"] += trade.pnl or 0.0
        if trade.rules_followed:
            stats["rules_followed"] += 1

    return {session_id: SessionTradeStats(**stats) for session_id, stats in acc.items()}
