from __future__ import annotations

import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from realm_roster.models.realm import _now
from realm_roster.models.trait import RatingSummaryEntry


class Character(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    realm_id: str
    user_id: str
    name: str = Field(min_length=1, max_length=200)
    gender: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = Field(default=None, max_length=10000)
    created_at: str = Field(default_factory=_now)
    updated_at: str = Field(default_factory=_now)


class CharacterUpdate(BaseModel):
    """Partial update; fields not passed are not touched."""

    id: str
    realm_id: Optional[str] = None
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    gender: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = Field(default=None, max_length=10000)

    def field_updates(self) -> dict:
        """Return the non-realm columns to write.

        Only fields passed explicitly are included, so ``gender=None`` clears
        the column. ``name`` cannot be cleared.
        """
        fields = self.model_dump(exclude={"id", "realm_id"}, exclude_unset=True)
        if fields.get("name", "") is None:
            del fields["name"]
        return fields


class CharacterListItem(Character):
    user_name: Optional[str] = None
    ratings_summary: list[RatingSummaryEntry] = Field(default_factory=list)
