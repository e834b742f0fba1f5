from __future__ import annotations

import uuid
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from realm_roster.models.realm import _now

MIN_VALUE = 1
MAX_VALUE = 20


class DisplayMode(str, Enum):
    NUMBER = "number"
    GRADE = "grade"


class Trait(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    realm_id: str
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=2000)
    display_mode: DisplayMode = DisplayMode.GRADE
    created_by: Optional[str] = None
    created_at: str = Field(default_factory=_now)


class Rating(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    character_id: str
    trait_id: str
    value: int = Field(ge=MIN_VALUE, le=MAX_VALUE)


class RatingSummaryEntry(BaseModel):
    """One row per trait of the character's realm, rated or not."""

    model_config = ConfigDict(from_attributes=True)

    trait_id: str
    trait_name: str
    description: Optional[str] = None
    display_mode: DisplayMode = DisplayMode.GRADE
    rating_id: Optional[str] = None
    value: Optional[int] = None
