"""Input validation for user-entered records.

These models enforce the form limits before anything reaches the store.
Stored payloads are read back through the lenient models in
``disciplog.models`` instead.
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from disciplog.models import (
    EmotionTag,
    PostSessionData,
    PreSessionData,
    RuleCategory,
    TradeResult,
)


# (upper bound in hours, rating); the last bucket is open ended
SLEEP_BUCKETS = [
    (5.0, 1),
    (6.0, 2),
    (7.0, 3),
    (8.0, 4),
]


def sleep_rating_from_hours(hours: float) -> int:
    """Map hours of sleep onto the 1-5 sleep rating.

    Args:
        hours: Hours slept last night.

    Returns:
        Sleep rating between 1 (under 5 hours) and 5 (8 hours or more).
    """
    for upper, rating in SLEEP_BUCKETS:
        if hours < upper:
            return rating
    return 5


def normalize_pnl(result: TradeResult, pnl: Optional[float]) -> Optional[float]:
    """Apply the P&L sign convention for a trade result.

    Breakeven is always 0, losses are stored negative and wins positive.
    """
    if result == TradeResult.BREAKEVEN:
        return 0.0
    if pnl is None:
        return None
    if result == TradeResult.LOSS:
        return -abs(pnl)
    return abs(pnl)


class RuleInput(BaseModel):
    """Fields accepted when creating or editing a rule."""

    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    category: RuleCategory
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Rule name is required")
        return value


class PreSessionInput(BaseModel):
    """Wellness check and plan entered when starting a session."""

    sleep_rating: int = Field(..., ge=1, le=5)
    stress_level: int = Field(..., ge=1, le=5)
    focus_rating: int = Field(..., ge=1, le=5)
    wellness_notes: Optional[str] = Field(default=None, max_length=500)
    planned_setups: Optional[str] = Field(default=None, max_length=1000)
    max_trades: int = Field(..., ge=1, le=100)
    max_loss: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    rules_confirmed: bool

    def to_payload(self) -> PreSessionData:
        return PreSessionData(**self.model_dump())


class PostSessionInput(BaseModel):
    """Reflection entered when ending a session."""

    plan_followed_rating: int = Field(..., ge=1, le=5)
    emotional_control_rating: int = Field(..., ge=1, le=5)
    what_went_well: Optional[str] = Field(default=None, max_length=1000)
    what_to_improve: Optional[str] = Field(default=None, max_length=1000)
    tomorrow_focus: Optional[str] = Field(default=None, max_length=500)

    def to_payload(self) -> PostSessionData:
        return PostSessionData(**self.model_dump())


class TradeInput(BaseModel):
    """A trade as entered by the user, before numbering."""

    result: TradeResult
    pnl: Optional[float] = Field(default=None, allow_inf_nan=False)
    broken_rule_ids: list[str] = Field(default_factory=list)
    emotion_tag: EmotionTag
    notes: Optional[str] = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def _require_pnl(self) -> "TradeInput":
        if self.result != TradeResult.BREAKEVEN and self.pnl is None:
            raise ValueError("P&L is required unless the trade is breakeven")
        return self

    @property
    def rules_followed(self) -> bool:
        return not self.broken_rule_ids

    @property
    def normalized_pnl(self) -> Optional[float]:
        return normalize_pnl(self.result, self.pnl)


class JournalInput(BaseModel):
    """Fields accepted for a journal entry."""

    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(default="", max_length=10000)
    image_url: Optional[str] = None
