"""Computed statistics models returned by the analytics layer."""

from datetime import date as date_type
from typing import Optional
from pydantic import BaseModel, Field

from disciplog.models.session import Session
from disciplog.models.trade import EmotionTag


class ScoreBreakdown(BaseModel):
    """Sub-scores behind a discipline score."""

    rules_score: float = Field(..., description="Share of trades that followed the rules, 0-100")
    pre_session_score: float = Field(..., description="100 if rules were reviewed, else 0")
    post_session_score: float = Field(..., description="100 if the reflection was filled, else 0")
    emotional_score: float = Field(..., description="Emotional control 0-100, 50 when unknown")
    weighted_total: float = Field(..., description="Weighted sum before rounding")
    score: int = Field(..., description="Final rounded score")

    model_config = {"frozen": True}


class TradeSummary(BaseModel):
    """Counts and totals over a list of trades."""

    total: int = Field(default=0, ge=0)
    wins: int = Field(default=0, ge=0)
    losses: int = Field(default=0, ge=0)
    breakeven: int = Field(default=0, ge=0)
    total_pnl: float = Field(default=0.0)
    rules_followed_count: int = Field(default=0, ge=0)
    rules_followed_percentage: int = Field(default=100, ge=0, le=100)
    win_rate: int = Field(default=0, ge=0, le=100)

    model_config = {"frozen": True}


class EmotionWinRate(BaseModel):
    """Win rate of the trades tagged with one emotion."""

    emotion: EmotionTag
    win_rate: int = Field(..., ge=0, le=100)
    total: int = Field(..., ge=1)

    model_config = {"frozen": True}


class SessionTradeStats(BaseModel):
    """Per-session trade counters shown in history rows."""

    count: int = 0
    wins: int = 0
    losses: int = 0
    pnl: float = 0.0
    rules_followed: int = 0

    model_config = {"frozen": True}


class DayStats(BaseModel):
    """Trading results of one calendar day."""

    total_pnl: float = 0.0
    trade_count: int = 0
    wins: int = 0
    losses: int = 0

    model_config = {"frozen": True}


class ScorePoint(BaseModel):
    """One point of the discipline score chart."""

    display_date: str
    score: int
    date: date_type

    model_config = {"frozen": True}


class PnlPoint(BaseModel):
    """One day of the P&L chart with its running total."""

    date: date_type
    display_date: str
    pnl: float
    cumulative_pnl: float

    model_config = {"frozen": True}


class PeriodPnl(BaseModel):
    """P&L summary of the visible chart window."""

    total: float = 0.0
    change: float = 0.0

    model_config = {"frozen": True}


class Dashboard(BaseModel):
    """Everything the dashboard view renders."""

    total_sessions: int
    total_trades: int
    wins: int
    losses: int
    total_pnl: float
    win_rate: int
    rules_followed_percentage: int
    avg_discipline_score: Optional[int]
    latest_score: Optional[int]
    streak: int
    rules_count: int
    active_session_id: Optional[str] = None
    score_trend: list[ScorePoint] = Field(default_factory=list)
    pnl_trend: list[PnlPoint] = Field(default_factory=list)
    emotion_distribution: dict[EmotionTag, int] = Field(default_factory=dict)
    emotion_win_rate: list[EmotionWinRate] = Field(default_factory=list)
    recent_sessions: list[Session] = Field(default_factory=list)
    broken_rules: dict[str, int] = Field(
        default_factory=dict, description="Rule id -> times broken, most broken first"
    )
    rule_names: dict[str, str] = Field(
        default_factory=dict, description="Names of the broken rules that still exist"
    )

    model_config = {"frozen": True}


class SessionWithStats(BaseModel):
    """A session together with its trade counters."""

    session: Session
    trade_stats: SessionTradeStats

    model_config = {"frozen": True}


class MonthGroup(BaseModel):
    """Sessions of one calendar month in the history view."""

    key: str = Field(..., description="Year-month key, e.g. 2024-05")
    label: str = Field(..., description="Display label, e.g. May 2024")
    sessions: list[SessionWithStats]
    avg_score: Optional[int]
    total_pnl: float

    model_config = {"frozen": True}
