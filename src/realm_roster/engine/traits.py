from __future__ import annotations

from typing import Any

from realm_roster.engine.access import require_member
from realm_roster.errors import TraitNotFound
from realm_roster.mechanics import cache_keys
from realm_roster.models.trait import DisplayMode, Trait


class TraitService:
    """Realm-member CRUD over trait definitions."""

    def __init__(self, repos: dict[str, Any]):
        self.repos = repos

    def _load(self, trait_id: str) -> dict:
        row = self.repos["trait"].get(trait_id)
        if row is None:
            raise TraitNotFound(f"Trait {trait_id} not found")
        return row

    def create_trait(
        self, user_id: str, realm_id: str, name: str,
        display_mode: DisplayMode | str = DisplayMode.GRADE, description: str | None = None,
    ) -> tuple[Trait, list[tuple[str, ...]]]:
        require_member(self.repos["realm"], realm_id, user_id)
        trait = Trait(
            realm_id=realm_id, name=name.strip(), description=description,
            display_mode=DisplayMode(display_mode), created_by=user_id,
        )
        self.repos["trait"].save_trait(trait.model_dump(mode="json"))
        return trait, cache_keys.for_trait_create(realm_id)

    def list_traits(self, user_id: str, realm_id: str) -> list[Trait]:
        require_member(self.repos["realm"], realm_id, user_id)
        return [Trait(**t) for t in self.repos["trait"].list_by_realm(realm_id)]

    def update_trait(
        self, user_id: str, trait_id: str, *, name: str | None = None,
        display_mode: DisplayMode | str | None = None, description: str | None = None,
    ) -> list[tuple[str, ...]]:
        row = self._load(trait_id)
        require_member(self.repos["realm"], row["realm_id"], user_id)
        fields: dict[str, Any] = {}
        if name is not None:
            fields["name"] = name.strip()
        if display_mode is not None:
            fields["display_mode"] = DisplayMode(display_mode).value
        if description is not None:
            fields["description"] = description
        self.repos["trait"].update_fields(trait_id, fields)
        return cache_keys.for_trait_change(trait_id, row["realm_id"])

    def delete_trait(self, user_id: str, trait_id: str) -> list[tuple[str, ...]]:
        """Delete a trait along with every rating given for it."""
        row = self._load(trait_id)
        require_member(self.repos["realm"], row["realm_id"], user_id)
        self.repos["trait"].delete(trait_id)
        return cache_keys.for_trait_change(trait_id, row["realm_id"])
