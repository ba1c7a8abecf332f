"""
Pydantic schemas for event-related request/response validation.

Inputs accept both the camelCase names used by the form layer
(eventName, sportType, dateTime) and snake_case.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class EventInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    event_name: str = Field(..., alias="eventName", min_length=1, max_length=255)
    sport_type: str = Field(..., alias="sportType", min_length=1, max_length=100)
    date_time: datetime = Field(..., alias="dateTime")
    description: str = Field(..., max_length=5000)
    venues: list[str] = Field(default_factory=list, max_length=50)


class SportRead(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class VenueRead(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class EventRead(BaseModel):
    id: int
    name: str
    date_time: datetime
    description: str
    sport_id: int
    sport: SportRead
    venue_ids: list[int]
    venues: list[VenueRead]
    created_by: int
    created_at: datetime
    updated_at: Optional[datetime] = None
