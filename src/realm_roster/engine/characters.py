"""Character service: create, read, list with rating summaries, update and move."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from realm_roster.engine.access import require_member, require_target_member
from realm_roster.errors import CharacterNotFound, NotRealmMember
from realm_roster.mechanics import cache_keys
from realm_roster.mechanics.migration import plan_migration
from realm_roster.models.character import Character, CharacterListItem, CharacterUpdate
from realm_roster.models.migration import CatalogTrait, ExistingRating, MigrationPlan, MigrationResult
from realm_roster.models.trait import RatingSummaryEntry

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class CharacterService:
    def __init__(self, repos: dict[str, Any]):
        self.repos = repos

    @property
    def db(self):
        return self.repos["character"].db

    def _load(self, character_id: str) -> dict:
        row = self.repos["character"].get(character_id)
        if row is None:
            raise CharacterNotFound(f"Character {character_id} not found")
        return row

    def create_character(
        self, user_id: str, realm_id: str, name: str,
        gender: str | None = None, notes: str | None = None,
    ) -> tuple[Character, list[tuple[str, ...]]]:
        require_member(self.repos["realm"], realm_id, user_id)
        character = Character(realm_id=realm_id, user_id=user_id, name=name, gender=gender, notes=notes)
        self.repos["character"].save(character.model_dump())
        return character, cache_keys.for_character_create(realm_id)

    def get_character(self, user_id: str, character_id: str) -> Character | None:
        """Fetch a character, or None if it is missing or outside the user's realms."""
        row = self.repos["character"].get(character_id)
        if row is None or not self.repos["realm"].is_member(row["realm_id"], user_id):
            return None
        return Character(**row)

    def get_with_ratings(self, user_id: str, character_id: str) -> CharacterListItem | None:
        character = self.get_character(user_id, character_id)
        if character is None:
            return None
        summaries = self.repos["rating"].summaries_for_realm(character.realm_id, [character.id])
        return CharacterListItem(
            **character.model_dump(),
            ratings_summary=[RatingSummaryEntry(**e) for e in summaries.get(character.id, [])],
        )

    def list_characters(self, user_id: str, realm_id: str) -> list[CharacterListItem]:
        """Every character of a realm with one summary entry per realm trait."""
        require_member(self.repos["realm"], realm_id, user_id)
        rows = self.repos["character"].list_by_realm(realm_id)
        summaries = self.repos["rating"].summaries_for_realm(realm_id, [r["id"] for r in rows])
        return [
            CharacterListItem(
                **row,
                ratings_summary=[RatingSummaryEntry(**e) for e in summaries.get(row["id"], [])],
            )
            for row in rows
        ]

    def list_across_realms(self, user_id: str, realm_ids: list[str] | None = None) -> list[CharacterListItem]:
        """Characters from several realms; all of the user's realms when none are given.

        Realms the user does not belong to are skipped.
        """
        if realm_ids is None:
            realm_ids = [r["id"] for r in self.repos["realm"].list_for_user(user_id)]
        out: list[CharacterListItem] = []
        for realm_id in realm_ids:
            try:
                out.extend(self.list_characters(user_id, realm_id))
            except NotRealmMember:
                continue
        return out

    def delete_character(self, user_id: str, character_id: str) -> list[tuple[str, ...]]:
        """Delete a character and its ratings. Returns the invalidated cache keys."""
        row = self._load(character_id)
        require_member(self.repos["realm"], row["realm_id"], user_id)
        self.repos["character"].delete(character_id)
        return cache_keys.for_character_delete(character_id, row["realm_id"])

    def update_character(self, user_id: str, update: CharacterUpdate) -> MigrationResult:
        """Apply a character update, re-homing ratings if the realm changes.

        A non-empty ``unmapped_traits`` in the result names ratings that were
        lost because the target realm has no trait of that name.
        """
        row = self._load(update.id)
        old_realm_id = row["realm_id"]
        require_member(self.repos["realm"], old_realm_id, user_id)

        fields = update.field_updates()
        moving = update.realm_id is not None and update.realm_id != old_realm_id
        if not moving:
            if fields:
                self.repos["character"].update_fields(update.id, {**fields, "updated_at": _now()})
            return MigrationResult(
                affected_cache_keys=cache_keys.for_character_update(update.id, old_realm_id),
            )

        require_target_member(self.repos["realm"], update.realm_id, user_id)
        plan = self.plan_move(update.id, update.realm_id)
        self._apply_move(plan, update.realm_id, fields)

        if plan.unmapped_traits:
            logger.warning(
                f"Character {update.id} moved to realm {update.realm_id}; "
                f"ratings lost for: {', '.join(plan.unmapped_traits)}"
            )
        return MigrationResult(
            moved=True,
            unmapped_traits=plan.unmapped_traits,
            affected_cache_keys=cache_keys.for_character_update(update.id, old_realm_id, update.realm_id),
        )

    def plan_move(self, character_id: str, target_realm_id: str) -> MigrationPlan:
        existing = [ExistingRating(**r) for r in self.repos["rating"].list_with_trait_names(character_id)]
        catalog = [CatalogTrait(**t) for t in self.repos["trait"].catalog(target_realm_id)]
        return plan_migration(character_id, existing, catalog)

    def _apply_move(self, plan: MigrationPlan, target_realm_id: str, fields: dict) -> None:
        """Deletes, inserts and the realm switch commit or roll back together."""
        with self.db.get_connection():
            deleted = self.repos["rating"].delete_many(plan.deletions)
            inserted = self.repos["rating"].insert_ignore_conflicts(c.model_dump() for c in plan.creations)
            self.repos["character"].update_fields(
                plan.character_id, {**fields, "realm_id": target_realm_id, "updated_at": _now()},
            )
        logger.info(
            f"Moved character {plan.character_id} to realm {target_realm_id}: "
            f"{deleted} ratings removed, {inserted} carried over"
        )
