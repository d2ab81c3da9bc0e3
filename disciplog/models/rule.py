"""Rule data model."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class RuleCategory(str, Enum):
    """Category a trading rule belongs to."""

    RISK = "risk"
    ENTRY = "entry"
    EXIT = "exit"
    TIMING = "timing"
    MINDSET = "mindset"

    @property
    def label(self) -> str:
        return RULE_CATEGORY_LABELS[self]


RULE_CATEGORY_LABELS = {
    RuleCategory.RISK: "Risk Management",
    RuleCategory.ENTRY: "Entry",
    RuleCategory.EXIT: "Exit",
    RuleCategory.TIMING: "Timing",
    RuleCategory.MINDSET: "Mindset",
}

RULE_CATEGORY_COLORS = {
    RuleCategory.RISK: "red",
    RuleCategory.ENTRY: "green",
    RuleCategory.EXIT: "blue",
    RuleCategory.TIMING: "yellow",
    RuleCategory.MINDSET: "magenta",
}


class Rule(BaseModel):
    """Represents a personal trading rule."""

    id: str = Field(..., min_length=1, description="Rule ID")
    user_id: str = Field(..., min_length=1, description="Owning user")
    name: str = Field(..., min_length=1, description="Rule name")
    description: Optional[str] = Field(default=None, description="Rule description")
    category: RuleCategory = Field(..., description="Rule category")
    is_active: bool = Field(default=True, description="Whether the rule is active")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=datetime.now, description="Last update timestamp")

    model_config = {"frozen": True}
