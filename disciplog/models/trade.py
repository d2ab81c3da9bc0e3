"""Trade data model."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, model_validator


class TradeResult(str, Enum):
    """Outcome of a self-reported trade."""

    WIN = "win"
    LOSS = "loss"
    BREAKEVEN = "breakeven"


class EmotionTag(str, Enum):
    """Dominant emotion while taking a trade."""

    CONFIDENT = "confident"
    CALM = "calm"
    FOMO = "fomo"
    REVENGE = "revenge"
    FEARFUL = "fearful"
    FRUSTRATED = "frustrated"

    @property
    def label(self) -> str:
        return EMOTION_LABELS[self]

    @property
    def color(self) -> str:
        return EMOTION_COLORS[self]


EMOTION_LABELS = {
    EmotionTag.CONFIDENT: "Confident",
    EmotionTag.CALM: "Calm",
    EmotionTag.FOMO: "FOMO",
    EmotionTag.REVENGE: "Revenge",
    EmotionTag.FEARFUL: "Fearful",
    EmotionTag.FRUSTRATED: "Frustrated",
}

# rich colour names
EMOTION_COLORS = {
    EmotionTag.CONFIDENT: "green",
    EmotionTag.CALM: "blue",
    EmotionTag.FOMO: "yellow",
    EmotionTag.REVENGE: "red",
    EmotionTag.FEARFUL: "magenta",
    EmotionTag.FRUSTRATED: "dark_orange",
}


class Trade(BaseModel):
    """Represents a trade logged during a session.

    Breakeven trades always carry a P&L of exactly 0, and
    ``rules_followed`` is derived from ``broken_rule_ids`` when omitted.
    """

    id: str = Field(..., min_length=1, description="Trade ID")
    session_id: str = Field(..., min_length=1, description="Owning session")
    user_id: str = Field(..., min_length=1, description="Owning user")
    trade_number: int = Field(..., ge=1, description="1-based number within the session")
    result: TradeResult = Field(..., description="Trade result")
    pnl: Optional[float] = Field(default=None, description="Profit/loss, losses negative")
    rules_followed: bool = Field(default=True, description="No rule was broken")
    broken_rule_ids: list[str] = Field(default_factory=list, description="IDs of broken rules")
    emotion_tag: EmotionTag = Field(..., description="Emotion while trading")
    notes: Optional[str] = Field(default=None, description="User notes")
    logged_at: datetime = Field(default_factory=datetime.now, description="Log timestamp")

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def _normalise(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("result") in (TradeResult.BREAKEVEN, TradeResult.BREAKEVEN.value):
            data["pnl"] = 0.0
        if "rules_followed" not in data:
            data["rules_followed"] = not data.get("broken_rule_ids")
        return data

    @model_validator(mode="after")
    def _check_rules_followed(self) -> "Trade":
        if self.rules_followed == bool(self.broken_rule_ids):
            raise ValueError("rules_followed must be true exactly when no rule ids are broken")
        return self
