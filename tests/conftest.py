"""Shared fixtures for the realm-roster test suite."""
from __future__ import annotations

from typing import Any

import pytest

from realm_roster.models.character import CharacterListItem
from realm_roster.models.trait import DisplayMode, RatingSummaryEntry


def summary(**ratings: int | None) -> list[RatingSummaryEntry]:
    """Build a rating summary from trait_name=value pairs."""
    return [
        RatingSummaryEntry(
            trait_id=f"t-{name.lower()}",
            trait_name=name,
            display_mode=DisplayMode.NUMBER,
            rating_id=None if value is None else f"r-{name.lower()}",
            value=value,
        )
        for name, value in ratings.items()
    ]


def list_item(name: str, realm_id: str = "realm-a", **ratings: int | None) -> CharacterListItem:
    return CharacterListItem(
        id=f"c-{name.lower()}",
        realm_id=realm_id,
        user_id="u1",
        name=name,
        ratings_summary=summary(**ratings),
    )


@pytest.fixture
def make_summary():
    return summary


@pytest.fixture
def make_item():
    return list_item


@pytest.fixture
def in_memory_db(tmp_path):
    from realm_roster.storage.database import Database

    db = Database(str(tmp_path / "test.db"))
    db.initialize()
    yield db
    db.close()


@pytest.fixture
def repos(in_memory_db) -> dict[str, Any]:
    from realm_roster.engine import build_repos

    return build_repos(in_memory_db)


@pytest.fixture
def services(repos) -> dict[str, Any]:
    from realm_roster.engine.characters import CharacterService
    from realm_roster.engine.ratings import RatingService
    from realm_roster.engine.realms import RealmService
    from realm_roster.engine.traits import TraitService

    return {
        "characters": CharacterService(repos),
        "ratings": RatingService(repos),
        "realms": RealmService(repos),
        "traits": TraitService(repos),
    }


@pytest.fixture
def two_realms(services) -> dict[str, Any]:
    """Realm A {Strength, Agility} and realm B {strength, luck}, both joined by u1."""
    realm_a, _ = services["realms"].create_realm("u1", "Ashen Vale")
    realm_b, _ = services["realms"].create_realm("u1", "Brightmoor")
    traits_a = {
        name: services["traits"].create_trait("u1", realm_a.id, name)[0]
        for name in ("Strength", "Agility")
    }
    traits_b = {
        name: services["traits"].create_trait("u1", realm_b.id, name, display_mode="number")[0]
        for name in ("strength", "luck")
    }
    return {"a": realm_a, "b": realm_b, "traits_a": traits_a, "traits_b": traits_b}
