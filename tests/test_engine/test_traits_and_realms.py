"""Tests for TraitService and RealmService."""
from __future__ import annotations

import pytest

from realm_roster.errors import (
    DuplicateTraitName,
    NotRealmMember,
    NotRealmOwner,
    OwnerCannotLeave,
    RealmNotFound,
    TraitNotFound,
)
from realm_roster.mechanics import cache_keys
from realm_roster.models.trait import DisplayMode


class TestRealmService:
    def test_owner_is_member(self, services, repos):
        realm, _ = services["realms"].create_realm("u1", "Ashen Vale")
        members = repos["realm"].get_members(realm.id)
        assert [(m["user_id"], m["role"]) for m in members] == [("u1", "owner")]

    def test_join(self, services):
        realm, _ = services["realms"].create_realm("u1", "Ashen Vale")
        services["realms"].join_realm("u2", realm.id)
        assert [r.name for r in services["realms"].list_realms("u2")] == ["Ashen Vale"]

    def test_join_missing_realm(self, services):
        with pytest.raises(RealmNotFound):
            services["realms"].join_realm("u2", "nope")

    def test_create_and_join_keys(self, services):
        realm, keys = services["realms"].create_realm("u1", "Ashen Vale")
        assert keys == [cache_keys.realm_list()]
        _, keys = services["realms"].join_realm("u2", realm.id)
        assert cache_keys.realm_members(realm.id) in keys
        assert cache_keys.realm_list() in keys

    def test_leave(self, services, repos):
        realm, _ = services["realms"].create_realm("u1", "Ashen Vale")
        services["realms"].join_realm("u2", realm.id)
        keys = services["realms"].leave_realm("u2", realm.id)
        assert not repos["realm"].is_member(realm.id, "u2")
        assert cache_keys.realm_members(realm.id) in keys

    def test_owner_cannot_leave(self, services, repos):
        realm, _ = services["realms"].create_realm("u1", "Ashen Vale")
        with pytest.raises(OwnerCannotLeave):
            services["realms"].leave_realm("u1", realm.id)
        assert repos["realm"].is_member(realm.id, "u1")

    def test_leave_requires_membership(self, services):
        realm, _ = services["realms"].create_realm("u1", "Ashen Vale")
        with pytest.raises(NotRealmMember):
            services["realms"].leave_realm("u2", realm.id)

    def test_delete_cascades(self, services, repos, two_realms):
        realm_id = two_realms["a"].id
        ada, _ = services["characters"].create_character("u1", realm_id, "Ada")
        services["ratings"].upsert_rating("u1", ada.id, two_realms["traits_a"]["Strength"].id, 9)
        keys = services["realms"].delete_realm("u1", realm_id)
        assert repos["realm"].get(realm_id) is None
        assert repos["character"].get(ada.id) is None
        assert repos["trait"].list_by_realm(realm_id) == []
        assert repos["rating"].list_by_character(ada.id) == []
        assert cache_keys.realm_by_id(realm_id) in keys
        assert cache_keys.character_list(realm_id) in keys
        assert [r.name for r in services["realms"].list_realms("u1")] == ["Brightmoor"]

    def test_only_owner_deletes(self, services, repos, two_realms):
        services["realms"].join_realm("u2", two_realms["a"].id)
        with pytest.raises(NotRealmOwner):
            services["realms"].delete_realm("u2", two_realms["a"].id)
        assert repos["realm"].get(two_realms["a"].id) is not None

    def test_delete_missing_realm(self, services):
        with pytest.raises(RealmNotFound):
            services["realms"].delete_realm("u1", "nope")


class TestTraitService:
    def test_create_and_list(self, services, two_realms):
        traits = services["traits"].list_traits("u1", two_realms["a"].id)
        assert [t.name for t in traits] == ["Strength", "Agility"]
        assert traits[0].display_mode is DisplayMode.GRADE

    def test_create_keys(self, services, two_realms):
        realm_id = two_realms["a"].id
        _, keys = services["traits"].create_trait("u1", realm_id, "Wisdom")
        assert cache_keys.trait_list(realm_id) in keys
        assert cache_keys.character_list(realm_id) in keys

    def test_name_is_trimmed(self, services, two_realms):
        trait, _ = services["traits"].create_trait("u1", two_realms["a"].id, "  Wisdom ")
        assert trait.name == "Wisdom"

    def test_duplicate_name(self, services, two_realms):
        with pytest.raises(DuplicateTraitName):
            services["traits"].create_trait("u1", two_realms["a"].id, "Strength")

    def test_unknown_display_mode(self, services, two_realms):
        with pytest.raises(ValueError):
            services["traits"].create_trait("u1", two_realms["a"].id, "Wit", display_mode="stars")

    def test_non_member(self, services, two_realms):
        with pytest.raises(NotRealmMember):
            services["traits"].create_trait("stranger", two_realms["a"].id, "Wit")
        with pytest.raises(NotRealmMember):
            services["traits"].list_traits("stranger", two_realms["a"].id)

    def test_update(self, services, repos, two_realms):
        trait = two_realms["traits_a"]["Agility"]
        keys = services["traits"].update_trait("u1", trait.id, name="Dexterity", display_mode="number")
        row = repos["trait"].get(trait.id)
        assert (row["name"], row["display_mode"]) == ("Dexterity", "number")
        assert ("rating",) in keys

    def test_delete_removes_ratings(self, services, repos, two_realms):
        ada, _ = services["characters"].create_character("u1", two_realms["a"].id, "Ada")
        trait = two_realms["traits_a"]["Strength"]
        services["ratings"].upsert_rating("u1", ada.id, trait.id, 5)
        services["traits"].delete_trait("u1", trait.id)
        assert repos["rating"].list_by_character(ada.id) == []
        with pytest.raises(TraitNotFound):
            services["traits"].delete_trait("u1", trait.id)
