"""JournalEntry data model."""

from datetime import date as date_type, datetime
from typing import Optional
from pydantic import BaseModel, Field


class JournalEntry(BaseModel):
    """Represents a free-form trading journal entry for a day."""

    id: str = Field(..., min_length=1, description="Journal entry ID")
    user_id: str = Field(..., min_length=1, description="Owning user")
    date: date_type = Field(..., description="Journal entry date")
    title: str = Field(..., min_length=1, description="Entry title")
    content: str = Field(default="", description="Entry body")
    image_url: Optional[str] = Field(default=None, description="Attached chart or screenshot")
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    model_config = {"frozen": True}
