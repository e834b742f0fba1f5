"""Tests for src/realm_roster/mechanics/migration.py."""
from __future__ import annotations

from realm_roster.mechanics.migration import build_trait_lookup, plan_migration
from realm_roster.models.migration import CatalogTrait, ExistingRating


def _rating(rid, name, value, trait_id=None):
    return ExistingRating(rating_id=rid, trait_id=trait_id or f"a-{name}", trait_name=name, value=value)


def _catalog(*names):
    return [CatalogTrait(id=f"b-{n}", name=n) for n in names]


class TestBuildTraitLookup:
    def test_lowercased_keys(self):
        assert build_trait_lookup(_catalog("Strength", "Luck")) == {"strength": "b-Strength", "luck": "b-Luck"}

    def test_collision_last_wins(self):
        catalog = [CatalogTrait(id="first", name="Wit"), CatalogTrait(id="second", name="WIT")]
        assert build_trait_lookup(catalog) == {"wit": "second"}


class TestPlanMigration:
    def test_scenario_strength_carries_agility_lost(self):
        existing = [_rating("r1", "Strength", 15), _rating("r2", "Agility", 8)]
        plan = plan_migration("c1", existing, _catalog("strength", "luck"))

        assert [(c.trait_id, c.value) for c in plan.creations] == [("b-strength", 15)]
        assert plan.unmapped_traits == ["Agility"]
        assert plan.deletions == ["r1", "r2"]
        assert all(c.character_id == "c1" for c in plan.creations)

    def test_conservation(self):
        existing = [
            _rating("r1", "Strength", 3),
            _rating("r2", "LUCK", 4),
            _rating("r3", "Agility", 5),
            _rating("r4", "Charm", 6),
            _rating("r5", "Wit", 7),
        ]
        plan = plan_migration("c1", existing, _catalog("strength", "Luck", "wit"))
        n, m = len(existing), 3
        assert len(plan.creations) == m
        assert len(plan.unmapped_traits) == n - m
        assert len(plan.deletions) == n

    def test_no_ratings(self):
        plan = plan_migration("c1", [], _catalog("strength"))
        assert plan.creations == []
        assert plan.deletions == []
        assert plan.unmapped_traits == []

    def test_empty_target_catalog_loses_everything(self):
        plan = plan_migration("c1", [_rating("r1", "Strength", 9)], [])
        assert plan.creations == []
        assert plan.unmapped_traits == ["Strength"]
        assert plan.deletions == ["r1"]

    def test_null_value_deleted_but_not_reported(self):
        plan = plan_migration("c1", [_rating("r1", "Strength", None), _rating("r2", "Agility", None)],
                              _catalog("strength"))
        assert plan.creations == []
        assert plan.unmapped_traits == []
        assert plan.deletions == ["r1", "r2"]

    def test_values_are_carried_unchanged(self):
        existing = [_rating(f"r{v}", f"T{v}", v) for v in (1, 10, 20)]
        plan = plan_migration("c1", existing, _catalog("t1", "t10", "t20"))
        assert [c.value for c in plan.creations] == [1, 10, 20]

    def test_unmapped_keep_original_casing(self):
        plan = plan_migration("c1", [_rating("r1", "Quick Wit", 4)], _catalog("Luck"))
        assert plan.unmapped_traits == ["Quick Wit"]
