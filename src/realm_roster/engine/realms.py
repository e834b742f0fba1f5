from __future__ import annotations

import logging
from typing import Any

from realm_roster.engine.access import require_member
from realm_roster.errors import NotRealmOwner, OwnerCannotLeave, RealmNotFound
from realm_roster.mechanics import cache_keys
from realm_roster.models.realm import Realm, RealmMember

logger = logging.getLogger(__name__)


class RealmService:
    def __init__(self, repos: dict[str, Any]):
        self.repos = repos

    def _load(self, realm_id: str) -> dict:
        row = self.repos["realm"].get(realm_id)
        if row is None:
            raise RealmNotFound(f"Realm {realm_id} not found")
        return row

    def create_realm(self, user_id: str, name: str) -> tuple[Realm, list[tuple[str, ...]]]:
        """Create a realm owned by ``user_id``; the owner is its first member."""
        realm = Realm(name=name, owner_id=user_id)
        with self.repos["realm"].db.get_connection():
            self.repos["realm"].ensure_user(user_id)
            self.repos["realm"].save(realm.model_dump())
            self.repos["realm"].add_member(
                RealmMember(realm_id=realm.id, user_id=user_id, role="owner").model_dump()
            )
        return realm, cache_keys.for_realm_create()

    def join_realm(self, user_id: str, realm_id: str) -> tuple[RealmMember, list[tuple[str, ...]]]:
        self._load(realm_id)
        member = RealmMember(realm_id=realm_id, user_id=user_id)
        with self.repos["realm"].db.get_connection():
            self.repos["realm"].ensure_user(user_id)
            self.repos["realm"].add_member(member.model_dump())
        return member, cache_keys.for_realm_membership(realm_id)

    def leave_realm(self, user_id: str, realm_id: str) -> list[tuple[str, ...]]:
        """Drop the user's membership. Owners must delete the realm instead."""
        realm = self._load(realm_id)
        require_member(self.repos["realm"], realm_id, user_id)
        if realm["owner_id"] == user_id:
            raise OwnerCannotLeave(f"The owner cannot leave realm {realm_id}; delete it instead")
        self.repos["realm"].remove_member(realm_id, user_id)
        return cache_keys.for_realm_membership(realm_id)

    def delete_realm(self, user_id: str, realm_id: str) -> list[tuple[str, ...]]:
        """Owner-only. Characters, traits, ratings and memberships go with it."""
        realm = self._load(realm_id)
        if realm["owner_id"] != user_id:
            logger.info(f"User {user_id} rejected: not the owner of realm {realm_id}")
            raise NotRealmOwner(f"Only the owner can delete realm {realm_id}")
        self.repos["realm"].delete(realm_id)
        logger.info(f"Deleted realm {realm_id}")
        return cache_keys.for_realm_delete(realm_id)

    def list_realms(self, user_id: str) -> list[Realm]:
        return [Realm(**r) for r in self.repos["realm"].list_for_user(user_id)]
