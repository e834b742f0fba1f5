"""Tests for CharacterService, centred on moving characters between realms."""
from __future__ import annotations

import pytest

from realm_roster.errors import CharacterNotFound, NotRealmMember, TargetRealmMembershipRequired
from realm_roster.mechanics import cache_keys
from realm_roster.models.character import CharacterUpdate


@pytest.fixture
def rated(services, two_realms):
    """A character in realm A rated Strength 15 and Agility 8."""
    character, _ = services["characters"].create_character("u1", two_realms["a"].id, "Ada", gender="f")
    for name, value in (("Strength", 15), ("Agility", 8)):
        services["ratings"].upsert_rating("u1", character.id, two_realms["traits_a"][name].id, value)
    return character


class TestCreateAndRead:
    def test_create_returns_list_key(self, services, two_realms):
        character, keys = services["characters"].create_character("u1", two_realms["a"].id, "Bo")
        assert character.realm_id == two_realms["a"].id
        assert keys == [cache_keys.character_list(two_realms["a"].id)]

    def test_create_requires_membership(self, services, two_realms):
        with pytest.raises(NotRealmMember):
            services["characters"].create_character("stranger", two_realms["a"].id, "Bo")

    def test_get_hidden_from_non_members(self, services, rated):
        assert services["characters"].get_character("u1", rated.id).name == "Ada"
        assert services["characters"].get_character("stranger", rated.id) is None
        assert services["characters"].get_character("u1", "missing") is None

    def test_with_ratings_covers_every_realm_trait(self, services, two_realms):
        character, _ = services["characters"].create_character("u1", two_realms["a"].id, "Bo")
        services["ratings"].upsert_rating("u1", character.id, two_realms["traits_a"]["Agility"].id, 4)
        item = services["characters"].get_with_ratings("u1", character.id)
        values = {e.trait_name: e.value for e in item.ratings_summary}
        assert values == {"Strength": None, "Agility": 4}

    def test_list_sorted_with_creator_name(self, services, two_realms):
        for name in ("cyra", "Bram"):
            services["characters"].create_character("u1", two_realms["a"].id, name)
        items = services["characters"].list_characters("u1", two_realms["a"].id)
        assert [c.name for c in items] == ["Bram", "cyra"]
        assert items[0].user_name == "u1"

    def test_list_across_realms_skips_foreign_realms(self, services, two_realms):
        services["characters"].create_character("u1", two_realms["a"].id, "Ada")
        services["characters"].create_character("u1", two_realms["b"].id, "Bo")
        services["realms"].join_realm("u2", two_realms["a"].id)
        assert [c.name for c in services["characters"].list_across_realms("u2")] == ["Ada"]
        mixed = services["characters"].list_across_realms("u2", [two_realms["a"].id, two_realms["b"].id])
        assert [c.name for c in mixed] == ["Ada"]

    def test_delete(self, services, repos, rated):
        keys = services["characters"].delete_character("u1", rated.id)
        assert repos["character"].get(rated.id) is None
        assert repos["rating"].list_by_character(rated.id) == []
        assert cache_keys.character_list(rated.realm_id) in keys


class TestUpdateInPlace:
    def test_field_update(self, services, repos, rated):
        result = services["characters"].update_character(
            "u1", CharacterUpdate(id=rated.id, name="Adah", notes="tall"),
        )
        row = repos["character"].get(rated.id)
        assert (row["name"], row["notes"], row["gender"]) == ("Adah", "tall", "f")
        assert result.success
        assert not result.partial_loss

    def test_explicit_none_clears_optional_fields(self, services, repos, rated):
        services["characters"].update_character("u1", CharacterUpdate(id=rated.id, notes="scarred"))
        services["characters"].update_character("u1", CharacterUpdate(id=rated.id, gender=None, notes=None))
        row = repos["character"].get(rated.id)
        assert (row["gender"], row["notes"]) == (None, None)
        assert row["name"] == "Ada"

    def test_name_cannot_be_cleared(self, services, repos, rated):
        services["characters"].update_character("u1", CharacterUpdate(id=rated.id, name=None, notes="x"))
        row = repos["character"].get(rated.id)
        assert (row["name"], row["notes"]) == ("Ada", "x")

    def test_same_realm_is_not_a_move(self, services, repos, rated):
        before = repos["rating"].list_by_character(rated.id)
        result = services["characters"].update_character(
            "u1", CharacterUpdate(id=rated.id, realm_id=rated.realm_id),
        )
        assert repos["rating"].list_by_character(rated.id) == before
        assert result.unmapped_traits == []
        assert not result.moved

    def test_missing_character(self, services, two_realms):
        with pytest.raises(CharacterNotFound):
            services["characters"].update_character("u1", CharacterUpdate(id="missing", name="x"))

    def test_non_member_cannot_update(self, services, rated):
        with pytest.raises(NotRealmMember):
            services["characters"].update_character("stranger", CharacterUpdate(id=rated.id, name="x"))


class TestMove:
    def test_ratings_carried_by_name(self, services, repos, two_realms, rated):
        result = services["characters"].update_character(
            "u1", CharacterUpdate(id=rated.id, realm_id=two_realms["b"].id),
        )
        assert result.success
        assert result.unmapped_traits == ["Agility"]
        assert result.partial_loss
        assert result.moved

        ratings = repos["rating"].list_by_character(rated.id)
        assert [(r["trait_id"], r["value"]) for r in ratings] == [
            (two_realms["traits_b"]["strength"].id, 15),
        ]
        assert repos["character"].get(rated.id)["realm_id"] == two_realms["b"].id

    def test_no_rating_left_on_source_traits(self, services, repos, two_realms, rated):
        services["characters"].update_character("u1", CharacterUpdate(id=rated.id, realm_id=two_realms["b"].id))
        source_ids = {t.id for t in two_realms["traits_a"].values()}
        assert not any(r["trait_id"] in source_ids for r in repos["rating"].list_by_character(rated.id))

    def test_summary_after_move_uses_target_traits(self, services, two_realms, rated):
        services["characters"].update_character("u1", CharacterUpdate(id=rated.id, realm_id=two_realms["b"].id))
        item = services["characters"].get_with_ratings("u1", rated.id)
        assert {e.trait_name: e.value for e in item.ratings_summary} == {"strength": 15, "luck": None}

    def test_unrated_character_moves_cleanly(self, services, repos, two_realms):
        character, _ = services["characters"].create_character("u1", two_realms["a"].id, "Bo")
        result = services["characters"].update_character(
            "u1", CharacterUpdate(id=character.id, realm_id=two_realms["b"].id),
        )
        assert result.unmapped_traits == []
        assert repos["rating"].list_by_character(character.id) == []
        assert repos["character"].get(character.id)["realm_id"] == two_realms["b"].id

    def test_move_with_field_changes(self, services, repos, two_realms, rated):
        services["characters"].update_character(
            "u1", CharacterUpdate(id=rated.id, realm_id=two_realms["b"].id, name="Ada II"),
        )
        row = repos["character"].get(rated.id)
        assert (row["realm_id"], row["name"]) == (two_realms["b"].id, "Ada II")

    def test_target_membership_required(self, services, repos, two_realms):
        services["realms"].join_realm("u2", two_realms["a"].id)
        character, _ = services["characters"].create_character("u2", two_realms["a"].id, "Bo")
        with pytest.raises(TargetRealmMembershipRequired):
            services["characters"].update_character(
                "u2", CharacterUpdate(id=character.id, realm_id=two_realms["b"].id),
            )
        assert repos["character"].get(character.id)["realm_id"] == two_realms["a"].id

    def test_failure_rolls_back_every_write(self, services, repos, two_realms, rated, monkeypatch):
        before = repos["rating"].list_by_character(rated.id)

        def boom(*args, **kwargs):
            raise RuntimeError("disk full")

        monkeypatch.setattr(repos["character"], "update_fields", boom)
        with pytest.raises(RuntimeError):
            services["characters"].update_character(
                "u1", CharacterUpdate(id=rated.id, realm_id=two_realms["b"].id),
            )
        assert repos["rating"].list_by_character(rated.id) == before
        assert repos["character"].get(rated.id)["realm_id"] == two_realms["a"].id
        assert not repos["character"].db.in_transaction

    def test_cache_keys_cover_both_realms(self, services, two_realms, rated):
        result = services["characters"].update_character(
            "u1", CharacterUpdate(id=rated.id, realm_id=two_realms["b"].id),
        )
        keys = result.affected_cache_keys
        assert cache_keys.character_list(two_realms["a"].id) in keys
        assert cache_keys.character_list(two_realms["b"].id) in keys
        assert cache_keys.character_by_id(rated.id) in keys

    def test_loss_is_logged(self, services, two_realms, rated, caplog):
        with caplog.at_level("WARNING", logger="realm_roster.engine.characters"):
            services["characters"].update_character(
                "u1", CharacterUpdate(id=rated.id, realm_id=two_realms["b"].id),
            )
        assert "Agility" in caplog.text
