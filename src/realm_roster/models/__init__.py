from __future__ import annotations

from realm_roster.models.character import Character, CharacterListItem, CharacterUpdate
from realm_roster.models.filters import (
    CharacterQuery,
    Classification,
    Comparison,
    FilterResult,
    TraitFilter,
)
from realm_roster.models.migration import (
    CatalogTrait,
    ExistingRating,
    MigrationPlan,
    MigrationResult,
    RatingCreation,
)
from realm_roster.models.realm import Realm, RealmMember
from realm_roster.models.trait import DisplayMode, Rating, RatingSummaryEntry, Trait

__all__ = [
    "CatalogTrait",
    "Character",
    "CharacterListItem",
    "CharacterQuery",
    "CharacterUpdate",
    "Classification",
    "Comparison",
    "DisplayMode",
    "ExistingRating",
    "FilterResult",
    "MigrationPlan",
    "MigrationResult",
    "Rating",
    "RatingCreation",
    "RatingSummaryEntry",
    "Realm",
    "RealmMember",
    "Trait",
    "TraitFilter",
]
