"""Event schema definitions.

Request models for creating and updating events, and the read-side models
materialized for display.
"""

from datetime import date as date_type
from datetime import datetime
from datetime import time as time_type
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from models.event import EventType


class EventCreate(BaseModel):
    name: str = Field(min_length=1, description="The event name.")
    description: Optional[str] = Field(default=None, description="Free text.")
    date: date_type = Field(description="The day the event takes place.")
    time: time_type = Field(description="The start time.")
    location_id: int = Field(description="The location the event is held at.")
    college_id: int = Field(description="The college that owns the event.")
    event_type: EventType = Field(description="PUBLIC, PRIVATE or RSO.")
    rso_id: Optional[int] = Field(
        default=None,
        description="The hosting RSO; required for RSO events, ignored otherwise.",
    )
    contact_phone: Optional[str] = Field(default=None, max_length=20)
    contact_email: Optional[str] = Field(default=None)

    @model_validator(mode="after")
    def check_rso_reference(self) -> "EventCreate":
        if self.event_type == EventType.RSO and self.rso_id is None:
            raise ValueError("rso_id is required for RSO events")
        return self


class EventUpdate(BaseModel):
    """Partial update; fields left as None are not changed."""

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    date: Optional[date_type] = None
    time: Optional[time_type] = None
    location_id: Optional[int] = None
    contact_phone: Optional[str] = Field(default=None, max_length=20)
    contact_email: Optional[str] = None


class RatingSummary(BaseModel):
    event_id: int
    average_rating: float = Field(
        default=0.0, description="Mean rating value, 0.0 when unrated."
    )
    total_ratings: int = Field(
        default=0, description="Number of ratings stored for this event."
    )


class CommentInfo(BaseModel):
    comment_id: int
    event_id: int
    user_id: int
    content: str
    timestamp: datetime


class EventDetails(BaseModel):
    event_id: int
    name: str
    description: Optional[str] = None
    date: date_type
    time: time_type
    location_id: int
    college_id: int
    created_by: int
    event_type: EventType
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    rso_id: Optional[int] = None
    approved: Optional[bool] = Field(
        default=None, description="Approval flag; only set for PUBLIC events."
    )
    average_rating: float = 0.0
    total_ratings: int = 0
    comment_count: int = 0
