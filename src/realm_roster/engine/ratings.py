"""Rating service: membership-gated reads and the rating upsert."""
from __future__ import annotations

import logging
from typing import Any

from realm_roster.engine.access import require_member
from realm_roster.errors import CharacterNotFound, MismatchedRealms, RatingNotFound, TraitNotFound
from realm_roster.mechanics import cache_keys
from realm_roster.mechanics.grades import normalize_rating_value
from realm_roster.models.trait import Rating

logger = logging.getLogger(__name__)


class RatingService:
    def __init__(self, repos: dict[str, Any]):
        self.repos = repos

    def upsert_rating(
        self, user_id: str, character_id: str, trait_id: str, value: int | str,
    ) -> tuple[Rating, list[tuple[str, ...]]]:
        """Create or update a rating. ``value`` may be a number or a grade label.

        Returns the stored rating and the cache keys it invalidates.
        """
        character = self.repos["character"].get(character_id)
        if character is None:
            raise CharacterNotFound(f"Character {character_id} not found")
        trait = self.repos["trait"].get(trait_id)
        if trait is None:
            raise TraitNotFound(f"Trait {trait_id} not found")
        if trait["realm_id"] != character["realm_id"]:
            raise MismatchedRealms(
                f"Trait {trait_id} and character {character_id} are in different realms"
            )
        require_member(self.repos["realm"], trait["realm_id"], user_id)

        numeric = normalize_rating_value(value)
        rating_id = self.repos["rating"].upsert(character_id, trait_id, numeric)
        logger.debug(f"Rated {character_id} on {trait['name']!r}: {numeric}")
        rating = Rating(id=rating_id, character_id=character_id, trait_id=trait_id, value=numeric)
        return rating, cache_keys.for_rating_upsert(character_id, trait_id, trait["realm_id"])

    def delete_rating(self, user_id: str, rating_id: str) -> list[tuple[str, ...]]:
        row = self.repos["rating"].get(rating_id)
        if row is None:
            raise RatingNotFound(f"Rating {rating_id} not found")
        character = self.repos["character"].get(row["character_id"])
        if character is None:
            raise CharacterNotFound(f"Character {row['character_id']} not found")
        require_member(self.repos["realm"], character["realm_id"], user_id)
        self.repos["rating"].delete(rating_id)
        return cache_keys.for_rating_delete(row["character_id"], row["trait_id"], character["realm_id"])

    def _visible(self, row: dict | None, user_id: str) -> Rating | None:
        if row is None:
            return None
        character = self.repos["character"].get(row["character_id"])
        if character is None or not self.repos["realm"].is_member(character["realm_id"], user_id):
            return None
        return Rating(**row)

    def get_rating(self, user_id: str, rating_id: str) -> Rating | None:
        return self._visible(self.repos["rating"].get(rating_id), user_id)

    def get_by_pair(self, user_id: str, character_id: str, trait_id: str) -> Rating | None:
        return self._visible(self.repos["rating"].get_by_pair(character_id, trait_id), user_id)

    def list_for_character(self, user_id: str, character_id: str) -> list[Rating]:
        character = self.repos["character"].get(character_id)
        if character is None:
            raise CharacterNotFound(f"Character {character_id} not found")
        require_member(self.repos["realm"], character["realm_id"], user_id)
        return [Rating(**r) for r in self.repos["rating"].list_by_character(character_id)]
