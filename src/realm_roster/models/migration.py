from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ExistingRating(BaseModel):
    """A rating joined with the name of the trait it points at."""

    model_config = ConfigDict(from_attributes=True)

    rating_id: str
    trait_id: str
    trait_name: str
    value: int | None


class CatalogTrait(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str


class RatingCreation(BaseModel):
    character_id: str
    trait_id: str
    value: int


class MigrationPlan(BaseModel):
    """Staged writes for moving one character's ratings between realms."""

    character_id: str
    creations: list[RatingCreation] = Field(default_factory=list)
    deletions: list[str] = Field(default_factory=list)
    unmapped_traits: list[str] = Field(default_factory=list)


class MigrationResult(BaseModel):
    """Outcome of a character update.

    A non-empty ``unmapped_traits`` is a partial success: ratings for those
    trait names no longer exist.
    """

    success: bool = True
    moved: bool = False
    unmapped_traits: list[str] = Field(default_factory=list)
    affected_cache_keys: list[tuple[str, ...]] = Field(default_factory=list)

    @property
    def partial_loss(self) -> bool:
        return bool(self.unmapped_traits)
