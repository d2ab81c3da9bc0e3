"""Data models for disciplog."""

from disciplog.models.rule import Rule, RuleCategory
from disciplog.models.session import (
    PostSessionData,
    PreSessionData,
    Session,
    SessionStatus,
)
from disciplog.models.trade import EmotionTag, Trade, TradeResult
from disciplog.models.journal import JournalEntry

__all__ = [
    "Rule",
    "RuleCategory",
    "Session",
    "SessionStatus",
    "PreSessionData",
    "PostSessionData",
    "Trade",
    "TradeResult",
    "EmotionTag",
    "JournalEntry",
]
