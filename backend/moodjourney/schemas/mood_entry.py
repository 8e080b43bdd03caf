"""
MoodJourney Backend — Mood Entry Schemas
=========================================

`MoodEntryPayload` is shared by create and update. All fields are optional
and null is accepted; for updates, null, 0 and "" all mean "leave the stored
value alone". Unknown keys are ignored and `user_id` in the body never wins
over the owner in the URL path.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

MOOD_RATING_MIN = 1
MOOD_RATING_MAX = 10

# Sleep times are stored in 32-bit INTEGER columns
SLEEP_TIME_MIN = -(2**31)
SLEEP_TIME_MAX = 2**31 - 1


class MoodEntryPayload(BaseModel):
    """Body of POST /moods/user/{userId} and PUT /moods/{id}."""
    user_id: Optional[str] = Field(default=None, description="Ignored; the path owner is used")
    mood_rating: Optional[int] = Field(default=None, description="Mood on a 1-10 scale")
    day_highlight: Optional[str] = Field(default=None)
    dream_type: Optional[str] = Field(default=None)
    dream_notes: Optional[str] = Field(default=None)
    sleep_start_time: Optional[int] = Field(
        default=None, ge=SLEEP_TIME_MIN, le=SLEEP_TIME_MAX, description="Opaque integer"
    )
    sleep_end_time: Optional[int] = Field(
        default=None, ge=SLEEP_TIME_MIN, le=SLEEP_TIME_MAX, description="Opaque integer"
    )

    model_config = {"extra": "ignore"}


class MoodEntryResponse(BaseModel):
    """Full mood entry record as stored."""
    id: int
    user_id: str
    mood_rating: int
    day_highlight: str
    dream_type: str
    dream_notes: str
    sleep_start_time: int
    sleep_end_time: int
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MoodEntryResult(BaseModel):
    """Success envelope around a single mood entry."""
    success: bool = Field(default=True)
    data: MoodEntryResponse


class MoodEntryListResult(BaseModel):
    """Success envelope around a (possibly empty) list of mood entries."""
    success: bool = Field(default=True)
    data: List[MoodEntryResponse]
