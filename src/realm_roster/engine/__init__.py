from __future__ import annotations

from typing import Any

from realm_roster.storage.database import Database


def build_repos(db: Database) -> dict[str, Any]:
    """Repository set shared by the services of one process."""
    from realm_roster.storage.repos import CharacterRepo, RatingRepo, RealmRepo, TraitRepo

    return {
        "realm": RealmRepo(db),
        "character": CharacterRepo(db),
        "trait": TraitRepo(db),
        "rating": RatingRepo(db),
    }
