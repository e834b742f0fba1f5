from __future__ import annotations

from realm_roster.storage.repos.character_repo import CharacterRepo
from realm_roster.storage.repos.rating_repo import RatingRepo
from realm_roster.storage.repos.realm_repo import RealmRepo
from realm_roster.storage.repos.trait_repo import TraitRepo

__all__ = [
    "CharacterRepo",
    "RatingRepo",
    "RealmRepo",
    "TraitRepo",
]
