"""Session data models.

The pre-session and post-session payloads are stored as open JSON
documents. Every documented key is optional when reading, unknown keys
are kept, and keys are persisted under their camelCase names.
"""

from datetime import date as date_type, datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, model_validator


PAYLOAD_CONFIG = {"frozen": True, "extra": "allow", "populate_by_name": True}


class SessionStatus(str, Enum):
    """Lifecycle state of a trading session."""

    ACTIVE = "active"
    COMPLETED = "completed"


class PreSessionData(BaseModel):
    """Wellness check and plan captured before trading."""

    sleep_rating: Optional[int] = Field(default=None, alias="sleepRating", description="Sleep quality 1-5")
    stress_level: Optional[int] = Field(default=None, alias="stressLevel", description="Stress level 1-5")
    focus_rating: Optional[int] = Field(default=None, alias="focusRating", description="Focus 1-5")
    wellness_notes: Optional[str] = Field(default=None, alias="wellnessNotes")
    planned_setups: Optional[str] = Field(default=None, alias="plannedSetups")
    max_trades: Optional[int] = Field(default=None, alias="maxTrades", description="Planned trade limit")
    max_loss: Optional[float] = Field(default=None, alias="maxLoss", description="Maximum acceptable loss")
    rules_confirmed: Optional[bool] = Field(
        default=None, alias="rulesConfirmed", description="Active rules were reviewed"
    )

    model_config = PAYLOAD_CONFIG


class PostSessionData(BaseModel):
    """Reflection captured when a session ends."""

    plan_followed_rating: Optional[int] = Field(default=None, alias="planFollowedRating")
    emotional_control_rating: Optional[int] = Field(default=None, alias="emotionalControlRating")
    what_went_well: Optional[str] = Field(default=None, alias="whatWentWell")
    what_to_improve: Optional[str] = Field(default=None, alias="whatToImprove")
    tomorrow_focus: Optional[str] = Field(default=None, alias="tomorrowFocus")

    model_config = PAYLOAD_CONFIG


class Session(BaseModel):
    """Represents one trading session (normally one per day)."""

    id: str = Field(..., min_length=1, description="Session ID")
    user_id: str = Field(..., min_length=1, description="Owning user")
    date: date_type = Field(..., description="Calendar date of the session")
    started_at: datetime = Field(..., description="Session start timestamp")
    ended_at: Optional[datetime] = Field(default=None, description="Session end timestamp")
    status: SessionStatus = Field(default=SessionStatus.ACTIVE, description="Session status")
    pre_session: PreSessionData = Field(default_factory=PreSessionData)
    post_session: Optional[PostSessionData] = Field(default=None)
    discipline_score: Optional[int] = Field(
        default=None, ge=0, le=100, description="Discipline score, set on completion"
    )
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _score_only_when_completed(self) -> "Session":
        if self.status == SessionStatus.ACTIVE and self.discipline_score is not None:
            raise ValueError("an active session cannot carry a discipline score")
        return self

    @property
    def is_completed(self) -> bool:
        return self.status == SessionStatus.COMPLETED
